"""
Authentication schemas.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr

from sce_archive.schemas.account import AccountResponse


class RegisterRequest(BaseModel):
    """
    Registration request.

    Fields are optional here so that a missing value is reported by the
    identity service as a required-field error naming the field.
    """

    email: Optional[EmailStr] = None
    username: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class RegisterResponse(BaseModel):
    """Registration result; the account must verify its email before login."""

    account: AccountResponse
    verification_token: Optional[str] = None


class VerifyEmailRequest(BaseModel):
    token: str


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    account: AccountResponse


class RefreshTokenRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str


class LogoutRequest(BaseModel):
    """Revoke one refresh token; omit it to revoke every session."""

    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """Password change request."""

    current_password: str
    new_password: str
