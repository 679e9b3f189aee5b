"""
Post schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sce_archive.kernel.models.post import PostCategory


class PostCreate(BaseModel):
    """Post creation request. Omit required_clearance for a public post."""

    title: Optional[str] = Field(None, max_length=500)
    body: Optional[str] = None
    category: Optional[PostCategory] = None
    required_clearance: Optional[int] = Field(None, ge=1, le=5)
    summary: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    related_objects: List[str] = Field(default_factory=list)
    related_posts: List[str] = Field(default_factory=list)
    featured_image: Optional[str] = Field(None, max_length=1000)


class PostUpdate(BaseModel):
    """Partial update; sending required_clearance as null makes a post public."""

    title: Optional[str] = Field(None, max_length=500)
    body: Optional[str] = None
    category: Optional[PostCategory] = None
    required_clearance: Optional[int] = Field(None, ge=1, le=5)
    summary: Optional[str] = None
    tags: Optional[List[str]] = None
    related_objects: Optional[List[str]] = None
    related_posts: Optional[List[str]] = None
    featured_image: Optional[str] = Field(None, max_length=1000)


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    body: str
    category: PostCategory
    author_id: uuid.UUID
    author_name: str
    required_clearance: Optional[int] = None
    summary: Optional[str] = None
    tags: List[str] = []
    related_objects: List[str] = []
    related_posts: List[str] = []
    featured_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime
