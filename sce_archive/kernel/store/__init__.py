"""
Record Store - persistence boundary for the archive collections.
"""

from sce_archive.kernel.store.record_store import RecordStore

__all__ = ["RecordStore"]
