"""
Administrative maintenance of the content collections.
"""

from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sce_archive.kernel.events.event_store import EventStore
from sce_archive.kernel.models.account import Account
from sce_archive.kernel.models.content_record import ContentRecord
from sce_archive.kernel.models.event_log import EventType
from sce_archive.kernel.models.post import Post
from sce_archive.kernel.policy import Action, require_mutation
from sce_archive.kernel.store import RecordStore
from sce_archive.logging_config import get_logger

logger = get_logger(__name__)


async def reset_content(
    session: AsyncSession,
    requester: Optional[Account],
    ip_address: Optional[str] = None,
) -> Dict[str, int]:
    """
    Delete every content record and post. Accounts are kept.

    Returns the number of removed entities per collection.
    """
    require_mutation(requester, Action.DELETE_CONTENT)

    removed = {
        "content_records": await RecordStore(session, ContentRecord).delete_all(),
        "posts": await RecordStore(session, Post).delete_all(),
    }
    await EventStore(session).log(
        event_type=EventType.CONTENT_RESET,
        entity_type="archive",
        actor_id=requester.id,
        payload=removed,
        ip_address=ip_address,
    )
    logger.warning("Content collections reset", extra=removed)
    return removed
