"""
Archival object records.
"""

import uuid
from enum import Enum
from typing import List, Optional

from sqlalchemy import Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sce_archive.kernel.models.account import ClearanceLevel
from sce_archive.kernel.models.base import Base, TimestampMixin, generate_uuid


class ObjectClass(str, Enum):
    """
    Handling taxonomy of an object.

    Descriptive metadata only; visibility is governed by required_clearance.
    """
    SAFE = "safe"
    EUCLID = "euclid"
    KETER = "keter"
    THAUMIEL = "thaumiel"
    NEUTRALIZED = "neutralized"
    EXPLAINED = "explained"


class ContentRecord(Base, TimestampMixin):
    """An anomalous-object entry in the archive."""

    __tablename__ = "content_records"
    __entity_name__ = "content_record"
    __unique_fields__ = ("external_number",)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    external_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    classification: Mapped[ObjectClass] = mapped_column(String(50), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    procedures_text: Mapped[str] = mapped_column(Text, nullable=False)
    required_clearance: Mapped[int] = mapped_column(
        Integer,
        default=ClearanceLevel.LEVEL_1,
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    images: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    discovery_location: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    discovery_date: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    discovered_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    associated_threats: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    related_objects: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)

    created_by: Mapped[uuid.UUID] = mapped_column(Uuid(), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<ContentRecord SCE-{self.external_number} clearance={self.required_clearance}>"
