"""
Audit trail - append-only event log.
"""

from sce_archive.kernel.events.event_store import EventStore

__all__ = ["EventStore"]
