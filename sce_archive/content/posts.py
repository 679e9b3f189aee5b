"""
Editorial posts.
"""

from typing import Any, Dict

from sce_archive.content.base import ContentService
from sce_archive.kernel.models.account import Account
from sce_archive.kernel.models.event_log import EventType
from sce_archive.kernel.models.post import Post


class PostService(ContentService[Post]):
    """Posts; a post without required_clearance is public."""

    model = Post
    entity_type = "post"
    required_fields = ("title", "body", "category")
    not_null_fields = ("tags", "related_objects", "related_posts")
    owner_fields = ("author_id", "author_name")
    created_event = EventType.POST_CREATED
    updated_event = EventType.POST_UPDATED
    deleted_event = EventType.POST_DELETED

    def _owner_values(self, requester: Account) -> Dict[str, Any]:
        return {"author_id": requester.id, "author_name": requester.username}

    def _audit_payload(self, entity: Post) -> Dict[str, Any]:
        return {
            "title": entity.title,
            "category": entity.category,
            "required_clearance": entity.required_clearance,
        }
