"""
Post endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, Response, status

from sce_archive.api.deps import DbSession, OptionalAccount, get_client_ip
from sce_archive.content.posts import PostService
from sce_archive.schemas.post import PostCreate, PostResponse, PostUpdate

router = APIRouter()


@router.get("", response_model=List[PostResponse])
async def list_posts(
    account: OptionalAccount,
    db: DbSession,
):
    """Public posts plus those within the requester's clearance, oldest first."""
    posts = await PostService(db).list(account)
    return [PostResponse.model_validate(p) for p in posts]


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: Request,
    data: PostCreate,
    account: OptionalAccount,
    db: DbSession,
):
    post = await PostService(db).create(
        account, data.model_dump(mode="json"), ip_address=get_client_ip(request)
    )
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: uuid.UUID,
    account: OptionalAccount,
    db: DbSession,
):
    post = await PostService(db).get(account, post_id)
    return PostResponse.model_validate(post)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    request: Request,
    post_id: uuid.UUID,
    data: PostUpdate,
    account: OptionalAccount,
    db: DbSession,
):
    post = await PostService(db).update(
        account,
        post_id,
        data.model_dump(exclude_unset=True, mode="json"),
        ip_address=get_client_ip(request),
    )
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    request: Request,
    post_id: uuid.UUID,
    account: OptionalAccount,
    db: DbSession,
):
    await PostService(db).delete(account, post_id, ip_address=get_client_ip(request))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
