"""
Content record schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sce_archive.kernel.models.content_record import ObjectClass


class RecordCreate(BaseModel):
    """Content record creation request."""

    external_number: Optional[str] = Field(None, max_length=50)
    title: Optional[str] = Field(None, max_length=500)
    classification: Optional[ObjectClass] = None
    body: Optional[str] = None
    procedures_text: Optional[str] = None
    required_clearance: int = Field(1, ge=1, le=5)
    notes: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    discovery_location: Optional[str] = None
    discovery_date: Optional[str] = None
    discovered_by: Optional[str] = None
    associated_threats: List[str] = Field(default_factory=list)
    related_objects: List[str] = Field(default_factory=list)


class RecordUpdate(BaseModel):
    """Partial update; unsent fields are left as they are."""

    external_number: Optional[str] = Field(None, max_length=50)
    title: Optional[str] = Field(None, max_length=500)
    classification: Optional[ObjectClass] = None
    body: Optional[str] = None
    procedures_text: Optional[str] = None
    required_clearance: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    images: Optional[List[str]] = None
    discovery_location: Optional[str] = None
    discovery_date: Optional[str] = None
    discovered_by: Optional[str] = None
    associated_threats: Optional[List[str]] = None
    related_objects: Optional[List[str]] = None


class RecordResponse(BaseModel):
    """Content record response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    external_number: str
    title: str
    classification: ObjectClass
    body: str
    procedures_text: str
    required_clearance: int
    notes: Optional[str] = None
    images: List[str] = []
    discovery_location: Optional[str] = None
    discovery_date: Optional[str] = None
    discovered_by: Optional[str] = None
    associated_threats: List[str] = []
    related_objects: List[str] = []
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime
