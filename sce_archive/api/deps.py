"""
FastAPI dependencies for the requester and database sessions.

The requester is resolved from the bearer access token on every request.
An absent token means an anonymous requester; the access policy decides
what an anonymous requester may do, so only CurrentAccount rejects it
outright.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sce_archive.database import get_db
from sce_archive.errors import CredentialError, ForbiddenError
from sce_archive.kernel.identity.identity_service import IdentityService
from sce_archive.kernel.identity.jwt import verify_access_token
from sce_archive.kernel.models.account import Account
from sce_archive.kernel.policy import DenialReason
from sce_archive.logging_config import actor_id_var


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_account_optional(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> Optional[Account]:
    """
    Resolve the requester, or None when no token was sent.

    A token that was sent but is invalid, expired or names a disabled
    account is rejected rather than silently downgraded to anonymous.
    """
    if not credentials:
        return None

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise CredentialError("credential.invalid_token")

    account = await IdentityService(db).get_account(payload.sub)
    if account is None or not account.is_active:
        raise CredentialError("credential.invalid_token")

    actor_id_var.set(str(account.id))
    return account


async def get_current_account(
    account: Annotated[Optional[Account], Depends(get_current_account_optional)],
) -> Account:
    """Resolve the requester or fail with not_authenticated."""
    if account is None:
        raise ForbiddenError(DenialReason.NOT_AUTHENTICATED)
    return account


CurrentAccount = Annotated[Account, Depends(get_current_account)]
OptionalAccount = Annotated[Optional[Account], Depends(get_current_account_optional)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
