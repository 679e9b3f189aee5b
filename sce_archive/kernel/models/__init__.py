"""
Kernel Data Models

SQLAlchemy models for the three archive collections plus identity and audit
support tables.
"""

from sce_archive.kernel.models.base import Base, TimestampMixin, generate_uuid, utcnow
from sce_archive.kernel.models.account import (
    Account,
    AccountRole,
    ClearanceLevel,
    Department,
    RefreshToken,
    DEFAULT_POSITION,
)
from sce_archive.kernel.models.content_record import ContentRecord, ObjectClass
from sce_archive.kernel.models.post import Post, PostCategory
from sce_archive.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "utcnow",
    # Accounts
    "Account",
    "AccountRole",
    "ClearanceLevel",
    "Department",
    "RefreshToken",
    "DEFAULT_POSITION",
    # Content
    "ContentRecord",
    "ObjectClass",
    "Post",
    "PostCategory",
    # Event Log
    "EventLog",
    "EventType",
]
