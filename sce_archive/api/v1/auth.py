"""
Authentication endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Request, status

from sce_archive.api.deps import CurrentAccount, DbSession, get_client_ip
from sce_archive.config import get_settings
from sce_archive.kernel.identity.identity_service import IdentityService
from sce_archive.schemas.account import AccountResponse
from sce_archive.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LogoutRequest,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    VerifyEmailRequest,
)
from sce_archive.schemas.common import SuccessResponse

router = APIRouter()


def _token_response(account, token_pair) -> TokenResponse:
    return TokenResponse(
        access_token=token_pair.access_token,
        refresh_token=token_pair.refresh_token,
        token_type=token_pair.token_type,
        expires_in=token_pair.expires_in,
        account=AccountResponse.model_validate(account),
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    data: RegisterRequest,
    db: DbSession,
):
    """
    Register a new reader account.

    The account starts unverified and cannot log in until the email
    verification token is redeemed.
    """
    account, token = await IdentityService(db).register(
        email=data.email,
        username=data.username,
        password=data.password,
        confirm_password=data.confirm_password,
        ip_address=get_client_ip(request),
    )
    return RegisterResponse(
        account=AccountResponse.model_validate(account),
        verification_token=token if get_settings().expose_verification_token else None,
    )


@router.post("/verify-email", response_model=AccountResponse)
async def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    db: DbSession,
):
    """Redeem an email verification token."""
    account = await IdentityService(db).verify_email(data.token, ip_address=get_client_ip(request))
    return AccountResponse.model_validate(account)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    data: LoginRequest,
    db: DbSession,
):
    """Authenticate and return a token pair."""
    account, token_pair = await IdentityService(db).authenticate(
        email=data.email,
        password=data.password,
        ip_address=get_client_ip(request),
    )
    return _token_response(account, token_pair)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshTokenRequest,
    db: DbSession,
):
    """
    Refresh access token using refresh token.

    Implements refresh token rotation - old refresh token is invalidated.
    """
    account, token_pair = await IdentityService(db).refresh_tokens(data.refresh_token)
    return _token_response(account, token_pair)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    account: CurrentAccount,
    db: DbSession,
    data: Optional[LogoutRequest] = None,
):
    """
    Log out by revoking refresh token(s).

    If refresh_token is provided, only that token is revoked.
    Otherwise, all of the account's refresh tokens are revoked.
    """
    revoked = await IdentityService(db).logout(
        account_id=account.id,
        refresh_token=data.refresh_token if data else None,
        ip_address=get_client_ip(request),
    )
    return SuccessResponse(message="Logged out successfully", data={"revoked": revoked})


@router.get("/me", response_model=AccountResponse)
async def get_current_account_profile(account: CurrentAccount):
    """Get the requester's own account."""
    return AccountResponse.model_validate(account)


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    account: CurrentAccount,
    db: DbSession,
):
    """Change password. Every session of the account is logged out."""
    await IdentityService(db).change_password(
        account_id=account.id,
        current_password=data.current_password,
        new_password=data.new_password,
        ip_address=get_client_ip(request),
    )
    return SuccessResponse(message="Password changed")
