"""
Pydantic schemas for API request/response validation.
"""

from sce_archive.schemas.account import (
    AccountResponse,
    ProfileUpdateRequest,
    RoleChangeRequest,
    ClearanceChangeRequest,
    PositionChangeRequest,
)
from sce_archive.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    VerifyEmailRequest,
    LoginRequest,
    TokenResponse,
    RefreshTokenRequest,
    LogoutRequest,
    ChangePasswordRequest,
)
from sce_archive.schemas.record import RecordCreate, RecordUpdate, RecordResponse
from sce_archive.schemas.post import PostCreate, PostUpdate, PostResponse
from sce_archive.schemas.common import ErrorResponse, SuccessResponse, HealthResponse

__all__ = [
    # Account
    "AccountResponse",
    "ProfileUpdateRequest",
    "RoleChangeRequest",
    "ClearanceChangeRequest",
    "PositionChangeRequest",
    # Auth
    "RegisterRequest",
    "RegisterResponse",
    "VerifyEmailRequest",
    "LoginRequest",
    "TokenResponse",
    "RefreshTokenRequest",
    "LogoutRequest",
    "ChangePasswordRequest",
    # Content
    "RecordCreate",
    "RecordUpdate",
    "RecordResponse",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    # Common
    "ErrorResponse",
    "SuccessResponse",
    "HealthResponse",
]
