"""
Editorial posts.
"""

import uuid
from enum import Enum
from typing import List, Optional

from sqlalchemy import Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sce_archive.kernel.models.base import Base, TimestampMixin, generate_uuid


class PostCategory(str, Enum):
    NEWS = "news"
    ARTICLE = "article"
    REPORT = "report"
    MEMO = "memo"
    BRIEFING = "briefing"
    EVENT = "event"
    INTERVIEW = "interview"


class Post(Base, TimestampMixin):
    """News/editorial entry. A NULL required_clearance means public."""

    __tablename__ = "posts"
    __entity_name__ = "post"
    __unique_fields__ = ()

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[PostCategory] = mapped_column(String(50), nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(Uuid(), nullable=False, index=True)
    # Copied from the author's username at creation; not kept in sync
    author_name: Mapped[str] = mapped_column(String(100), nullable=False)

    required_clearance: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    related_objects: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    related_posts: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    featured_image: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return f"<Post {self.title!r} category={self.category}>"
