"""
Append-only audit log of archive mutations.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sce_archive.kernel.models.base import Base, UTCDateTime, generate_uuid, utcnow


class EventType(str, Enum):
    """All event types for the audit log."""

    # Account events
    ACCOUNT_REGISTERED = "account.registered"
    ACCOUNT_PROVISIONED = "account.provisioned"
    ACCOUNT_VERIFIED = "account.verified"
    ACCOUNT_LOGGED_IN = "account.logged_in"
    ACCOUNT_LOGGED_OUT = "account.logged_out"
    ACCOUNT_UPDATED = "account.updated"
    ACCOUNT_PASSWORD_CHANGED = "account.password_changed"
    ACCOUNT_ROLE_CHANGED = "account.role_changed"
    ACCOUNT_CLEARANCE_CHANGED = "account.clearance_changed"
    ACCOUNT_POSITION_CHANGED = "account.position_changed"

    # Content record events
    RECORD_CREATED = "record.created"
    RECORD_UPDATED = "record.updated"
    RECORD_DELETED = "record.deleted"

    # Post events
    POST_CREATED = "post.created"
    POST_UPDATED = "post.updated"
    POST_DELETED = "post.deleted"

    # Admin events
    CONTENT_RESET = "admin.content_reset"


class EventLog(Base):
    """
    Immutable audit entry.

    Rows are only ever inserted; no code path updates or deletes them.
    """

    __tablename__ = "event_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    event_type: Mapped[EventType] = mapped_column(String(100), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(), nullable=True, index=True)
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(), nullable=True, index=True)
    payload: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return f"<EventLog {self.event_type} {self.entity_type}:{self.entity_id}>"
