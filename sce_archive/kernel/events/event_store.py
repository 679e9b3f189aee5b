"""
Event Store service for append-only audit logging.

Every archive mutation is recorded here in the same transaction as the
change itself, so an event exists iff its change was committed.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from sce_archive.kernel.models.event_log import EventLog, EventType


class EventStore:
    """
    Service for managing the immutable event log.

    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.RECORD_CREATED,
            entity_type="content_record",
            entity_id=record.id,
            actor_id=admin.id,
            payload={"external_number": record.external_number},
        )
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: Optional[uuid.UUID] = None,
        actor_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> EventLog:
        """
        Append an event to the audit log.

        Args:
            event_type: The type of event
            entity_type: The type of entity (account, content_record, post)
            entity_id: The ID of the entity, if the event concerns one
            actor_id: The account that triggered the event (None for system events)
            payload: Additional event data
            ip_address: Client IP address

        Returns:
            The created EventLog record
        """
        event = EventLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            payload=self._serialize_payload(payload or {}),
            ip_address=ip_address,
        )
        self.session.add(event)
        # Caller's session commits the event together with the change
        return event

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: uuid.UUID,
        limit: int = 100,
    ) -> List[EventLog]:
        """Events for one entity, newest first."""
        await self.session.flush()
        query = (
            select(EventLog)
            .where(
                and_(
                    EventLog.entity_type == entity_type,
                    EventLog.entity_id == entity_id,
                )
            )
            .order_by(desc(EventLog.created_at))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @staticmethod
    def _serialize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make payload values JSON-serializable."""
        def convert(value: Any) -> Any:
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, uuid.UUID):
                return str(value)
            if isinstance(value, (datetime, date)):
                return value.isoformat()
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            if isinstance(value, (list, tuple, set)):
                return [convert(v) for v in value]
            return value

        return {k: convert(v) for k, v in payload.items()}
