"""
Account schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from sce_archive.kernel.models.account import AccountRole, Department


class AccountResponse(BaseModel):
    """Public view of an account. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    username: str
    role: AccountRole
    clearance: int
    email_verified: bool
    is_active: bool
    position: Optional[str] = None
    department: Optional[Department] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdateRequest(BaseModel):
    """
    Profile update. Only the fields actually sent are applied.

    role and clearance are accepted so the access policy can judge them;
    only an Admin editing someone else may set them.
    """

    username: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    position: Optional[str] = Field(None, max_length=255)
    department: Optional[Department] = None
    avatar_url: Optional[str] = Field(None, max_length=1000)
    bio: Optional[str] = None
    role: Optional[AccountRole] = None
    clearance: Optional[int] = Field(None, ge=1, le=5)


class RoleChangeRequest(BaseModel):
    role: AccountRole


class ClearanceChangeRequest(BaseModel):
    clearance: int = Field(..., ge=1, le=5)


class PositionChangeRequest(BaseModel):
    position: str = Field(..., min_length=1, max_length=255)
    department: Optional[Department] = None
