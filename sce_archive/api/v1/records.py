"""
Content record endpoints.

Reads are open to anonymous requesters; the access policy filters lists and
gates single reads by clearance. Writes are Admin-only.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, Response, status

from sce_archive.api.deps import DbSession, OptionalAccount, get_client_ip
from sce_archive.content.records import RecordService
from sce_archive.schemas.record import RecordCreate, RecordResponse, RecordUpdate

router = APIRouter()


@router.get("", response_model=List[RecordResponse])
async def list_records(
    account: OptionalAccount,
    db: DbSession,
):
    """Records visible at the requester's clearance, in creation order."""
    records = await RecordService(db).list(account)
    return [RecordResponse.model_validate(r) for r in records]


@router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    request: Request,
    data: RecordCreate,
    account: OptionalAccount,
    db: DbSession,
):
    record = await RecordService(db).create(
        account, data.model_dump(mode="json"), ip_address=get_client_ip(request)
    )
    return RecordResponse.model_validate(record)


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: uuid.UUID,
    account: OptionalAccount,
    db: DbSession,
):
    record = await RecordService(db).get(account, record_id)
    return RecordResponse.model_validate(record)


@router.patch("/{record_id}", response_model=RecordResponse)
async def update_record(
    request: Request,
    record_id: uuid.UUID,
    data: RecordUpdate,
    account: OptionalAccount,
    db: DbSession,
):
    record = await RecordService(db).update(
        account,
        record_id,
        data.model_dump(exclude_unset=True, mode="json"),
        ip_address=get_client_ip(request),
    )
    return RecordResponse.model_validate(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    request: Request,
    record_id: uuid.UUID,
    account: OptionalAccount,
    db: DbSession,
):
    await RecordService(db).delete(account, record_id, ip_address=get_client_ip(request))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
