"""
Shared read/write path for clearance-gated content collections.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from sce_archive.errors import NotFoundError, ValidationError
from sce_archive.kernel.events.event_store import EventStore
from sce_archive.kernel.models.account import Account
from sce_archive.kernel.models.base import Base
from sce_archive.kernel.models.event_log import EventType
from sce_archive.kernel.policy import Action, filter_visible, require_mutation, require_view
from sce_archive.kernel.store import RecordStore
from sce_archive.kernel.store.record_store import PROTECTED_FIELDS
from sce_archive.logging_config import get_logger

logger = get_logger(__name__)

ContentT = TypeVar("ContentT", bound=Base)


class ContentService(ABC, Generic[ContentT]):
    """
    Policy-enforcing CRUD over one content model.

    Subclasses name the model, the fields a create must carry, the fields
    set by the service rather than the caller, and the audit event types.
    """

    model: Type[ContentT]
    entity_type: str
    required_fields: tuple = ()
    # Optional on create, but never settable to null
    not_null_fields: tuple = ()
    # Set from the requester at creation; callers can never write them
    owner_fields: tuple = ()
    created_event: EventType
    updated_event: EventType
    deleted_event: EventType

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store: RecordStore[ContentT] = RecordStore(session, self.model)
        self.event_store = EventStore(session)

    @staticmethod
    def clearance_of(entity: ContentT) -> Optional[int]:
        return entity.required_clearance

    @abstractmethod
    def _owner_values(self, requester: Account) -> Dict[str, Any]:
        """Owner fields stamped on a new entity."""

    def _audit_payload(self, entity: ContentT) -> Dict[str, Any]:
        return {"title": entity.title}

    def _check_writable(self, fields: Mapping[str, Any]) -> None:
        for name in fields:
            if name in self.owner_fields or name in PROTECTED_FIELDS or name not in self.store.columns:
                raise ValidationError("validation.unknown_field", field=name)

    @staticmethod
    def _check_not_null(fields: Mapping[str, Any], names: tuple) -> None:
        for name in names:
            if name in fields and fields[name] is None:
                raise ValidationError.required(name)

    @staticmethod
    def _check_not_blank(fields: Mapping[str, Any], names: tuple) -> None:
        for name in names:
            value = fields.get(name)
            if isinstance(value, str) and not value.strip():
                raise ValidationError.required(name)

    # -- Reads ---------------------------------------------------------------

    async def list(self, requester: Optional[Account]) -> List[ContentT]:
        """Everything the requester may see, in insertion order."""
        return filter_visible(requester, await self.store.find_all(), self.clearance_of)

    async def get(self, requester: Optional[Account], entity_id: uuid.UUID) -> ContentT:
        entity = await self.store.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_type, entity_id)
        require_view(requester, self.clearance_of(entity))
        return entity

    # -- Writes --------------------------------------------------------------

    async def create(
        self,
        requester: Optional[Account],
        data: Mapping[str, Any],
        ip_address: Optional[str] = None,
    ) -> ContentT:
        require_mutation(requester, Action.CREATE_CONTENT)
        self._check_writable(data)
        for field in self.required_fields:
            if data.get(field) is None:
                raise ValidationError.required(field)
        self._check_not_blank(data, self.required_fields)
        self._check_not_null(data, self.not_null_fields)

        entity = self.model(**dict(data), **self._owner_values(requester))
        await self.store.insert(entity)

        await self.event_store.log(
            event_type=self.created_event,
            entity_type=self.entity_type,
            entity_id=entity.id,
            actor_id=requester.id,
            payload=self._audit_payload(entity),
            ip_address=ip_address,
        )
        logger.info(
            "%s created", self.entity_type,
            extra={"entity_id": str(entity.id), "account_id": str(requester.id)},
        )
        return entity

    async def update(
        self,
        requester: Optional[Account],
        entity_id: uuid.UUID,
        fields: Mapping[str, Any],
        ip_address: Optional[str] = None,
    ) -> ContentT:
        require_mutation(requester, Action.UPDATE_CONTENT)
        self._check_writable(fields)
        self._check_not_null(fields, self.required_fields + self.not_null_fields)
        self._check_not_blank(fields, self.required_fields)

        entity = await self.store.update(entity_id, fields)
        await self.event_store.log(
            event_type=self.updated_event,
            entity_type=self.entity_type,
            entity_id=entity.id,
            actor_id=requester.id,
            payload={"fields": sorted(fields)},
            ip_address=ip_address,
        )
        return entity

    async def delete(
        self,
        requester: Optional[Account],
        entity_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> None:
        require_mutation(requester, Action.DELETE_CONTENT)
        await self.store.delete(entity_id)
        await self.event_store.log(
            event_type=self.deleted_event,
            entity_type=self.entity_type,
            entity_id=entity_id if isinstance(entity_id, uuid.UUID) else uuid.UUID(str(entity_id)),
            actor_id=requester.id,
            ip_address=ip_address,
        )
        logger.info(
            "%s deleted", self.entity_type,
            extra={"entity_id": str(entity_id), "account_id": str(requester.id)},
        )
