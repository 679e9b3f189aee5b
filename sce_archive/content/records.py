"""
Anomalous-object records.
"""

from typing import Any, Dict

from sce_archive.content.base import ContentService
from sce_archive.kernel.models.account import Account
from sce_archive.kernel.models.content_record import ContentRecord
from sce_archive.kernel.models.event_log import EventType


class RecordService(ContentService[ContentRecord]):
    """Object records; always gated by required_clearance (default level 1)."""

    model = ContentRecord
    entity_type = "content_record"
    required_fields = ("external_number", "title", "classification", "body", "procedures_text")
    not_null_fields = ("required_clearance", "images", "associated_threats", "related_objects")
    owner_fields = ("created_by",)
    created_event = EventType.RECORD_CREATED
    updated_event = EventType.RECORD_UPDATED
    deleted_event = EventType.RECORD_DELETED

    def _owner_values(self, requester: Account) -> Dict[str, Any]:
        return {"created_by": requester.id}

    def _audit_payload(self, entity: ContentRecord) -> Dict[str, Any]:
        return {
            "external_number": entity.external_number,
            "title": entity.title,
            "required_clearance": entity.required_clearance,
        }
