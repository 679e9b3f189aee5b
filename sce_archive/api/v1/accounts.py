"""
Account profile and administration endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request

from sce_archive.api.deps import CurrentAccount, DbSession, get_client_ip
from sce_archive.kernel.identity.identity_service import IdentityService
from sce_archive.schemas.account import (
    AccountResponse,
    ClearanceChangeRequest,
    PositionChangeRequest,
    ProfileUpdateRequest,
    RoleChangeRequest,
)

router = APIRouter()


@router.get("", response_model=List[AccountResponse])
async def list_accounts(
    account: CurrentAccount,
    db: DbSession,
):
    """List every account (Admin only)."""
    accounts = await IdentityService(db).list_accounts(account)
    return [AccountResponse.model_validate(a) for a in accounts]


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_profile(
    request: Request,
    account_id: uuid.UUID,
    data: ProfileUpdateRequest,
    account: CurrentAccount,
    db: DbSession,
):
    """Update a profile: your own, or anyone's as an Admin."""
    updated = await IdentityService(db).update_profile(
        requester=account,
        target_account_id=account_id,
        fields=data.model_dump(exclude_unset=True, mode="json"),
        ip_address=get_client_ip(request),
    )
    return AccountResponse.model_validate(updated)


@router.put("/{account_id}/role", response_model=AccountResponse)
async def change_role(
    request: Request,
    account_id: uuid.UUID,
    data: RoleChangeRequest,
    account: CurrentAccount,
    db: DbSession,
):
    updated = await IdentityService(db).change_role(
        account, account_id, data.role, ip_address=get_client_ip(request)
    )
    return AccountResponse.model_validate(updated)


@router.put("/{account_id}/clearance", response_model=AccountResponse)
async def change_clearance(
    request: Request,
    account_id: uuid.UUID,
    data: ClearanceChangeRequest,
    account: CurrentAccount,
    db: DbSession,
):
    updated = await IdentityService(db).change_clearance(
        account, account_id, data.clearance, ip_address=get_client_ip(request)
    )
    return AccountResponse.model_validate(updated)


@router.put("/{account_id}/position", response_model=AccountResponse)
async def change_position(
    request: Request,
    account_id: uuid.UUID,
    data: PositionChangeRequest,
    account: CurrentAccount,
    db: DbSession,
):
    updated = await IdentityService(db).change_position(
        account,
        account_id,
        data.position,
        department=data.department,
        ip_address=get_client_ip(request),
    )
    return AccountResponse.model_validate(updated)
