"""
Identity Core - Authentication and account management.
"""

from sce_archive.kernel.identity.password import PasswordHasher, verify_password, hash_password
from sce_archive.kernel.identity.jwt import (
    JWTManager,
    TokenPair,
    AccessTokenPayload,
    get_jwt_manager,
    verify_access_token,
)
from sce_archive.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "TokenPair",
    "AccessTokenPayload",
    "get_jwt_manager",
    "verify_access_token",
    "IdentityService",
]
