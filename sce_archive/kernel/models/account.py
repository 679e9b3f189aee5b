"""
Account model for identity management.
"""

import uuid
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text, func, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sce_archive.kernel.models.base import Base, TimestampMixin, UTCDateTime, generate_uuid


class AccountRole(str, Enum):
    """Account roles. Only ADMIN carries write privileges."""
    ADMIN = "admin"
    RESEARCHER = "researcher"
    SECURITY = "security"
    EXPLORER = "explorer"
    READER = "reader"


class ClearanceLevel(IntEnum):
    """Ordered clearance ranks; a higher level sees everything a lower one does."""
    LEVEL_1 = 1
    LEVEL_2 = 2
    LEVEL_3 = 3
    LEVEL_4 = 4
    LEVEL_5 = 5


class Department(str, Enum):
    RESEARCH = "research"
    SECURITY = "security"
    OPERATIONS = "operations"
    ADMINISTRATION = "administration"
    ETHICS = "ethics"
    CONTAINMENT = "containment"
    EXPLORATION = "exploration"


DEFAULT_POSITION = "New staff member"


class Account(Base, TimestampMixin):
    """Registered account."""

    __tablename__ = "accounts"
    __entity_name__ = "account"
    __unique_fields__ = ("email", "username")

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[AccountRole] = mapped_column(
        String(50),
        default=AccountRole.READER,
        nullable=False,
    )
    clearance: Mapped[int] = mapped_column(
        Integer,
        default=ClearanceLevel.LEVEL_1,
        nullable=False,
    )
    email_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Staff profile
    position: Mapped[Optional[str]] = mapped_column(String(255), default=DEFAULT_POSITION)
    department: Mapped[Optional[Department]] = mapped_column(String(50), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    def __repr__(self) -> str:
        return f"<Account {self.username} role={self.role} clearance={self.clearance}>"


class RefreshToken(Base):
    """Refresh token for JWT authentication."""

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        nullable=False,
    )
    revoked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
