"""
Administrative maintenance endpoints.
"""

from typing import Dict

from fastapi import APIRouter, Request

from sce_archive.api.deps import CurrentAccount, DbSession, get_client_ip
from sce_archive.content.maintenance import reset_content
from sce_archive.schemas.common import SuccessResponse

router = APIRouter()


@router.post("/reset-content", response_model=SuccessResponse)
async def reset_archive_content(
    request: Request,
    account: CurrentAccount,
    db: DbSession,
):
    """Delete every content record and post. Accounts are kept."""
    removed: Dict[str, int] = await reset_content(db, account, ip_address=get_client_ip(request))
    return SuccessResponse(message="Content reset", data=removed)
