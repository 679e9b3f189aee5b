"""
JWT token management.

Three token types share one signing key and are told apart by their
``type`` claim:
- access: bearer credential for API calls (the session slot)
- refresh: exchanges for a new token pair; its hash is stored server-side
- email_verify: proves control of the registration email address
"""

import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from sce_archive.config import get_settings

ACCESS = "access"
REFRESH = "refresh"
EMAIL_VERIFY = "email_verify"


class AccessTokenPayload(BaseModel):
    """Decoded access token."""

    sub: str  # Account ID
    username: str
    role: str
    exp: datetime
    iat: datetime
    jti: str


class TokenPayload(BaseModel):
    """Decoded refresh or email-verification token."""

    sub: str
    exp: datetime
    iat: datetime
    jti: str
    type: str
    email: Optional[str] = None


class TokenPair(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until access token expires


class JWTManager:
    """JWT creation and verification."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
        refresh_token_expire_days: Optional[int] = None,
        email_verification_expire_hours: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.access_token_expire_minutes = (
            access_token_expire_minutes or settings.access_token_expire_minutes
        )
        self.refresh_token_expire_days = (
            refresh_token_expire_days or settings.refresh_token_expire_days
        )
        self.email_verification_expire_hours = (
            email_verification_expire_hours or settings.email_verification_expire_hours
        )

    def _encode(self, token_type: str, subject: uuid.UUID, lifetime: timedelta, **claims: Any) -> tuple[str, datetime, str]:
        now = datetime.now(timezone.utc)
        expire = now + lifetime
        jti = str(uuid.uuid4())
        payload = {
            "sub": str(subject),
            "exp": expire,
            "iat": now,
            "jti": jti,
            "type": token_type,
            **claims,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm), expire, jti

    def _decode(self, token: str, token_type: str) -> Optional[Dict[str, Any]]:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type:
            return None
        return payload

    def create_access_token(
        self,
        account_id: uuid.UUID,
        username: str,
        role: str,
        expires_delta: Optional[timedelta] = None,
    ) -> tuple[str, datetime, str]:
        """Returns (token, expiration, token_id)."""
        return self._encode(
            ACCESS,
            account_id,
            expires_delta or timedelta(minutes=self.access_token_expire_minutes),
            username=username,
            role=role,
        )

    def create_refresh_token(
        self,
        account_id: uuid.UUID,
        expires_delta: Optional[timedelta] = None,
    ) -> tuple[str, datetime, str]:
        return self._encode(
            REFRESH,
            account_id,
            expires_delta or timedelta(days=self.refresh_token_expire_days),
        )

    def create_email_verification_token(
        self,
        account_id: uuid.UUID,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        token, _, _ = self._encode(
            EMAIL_VERIFY,
            account_id,
            expires_delta or timedelta(hours=self.email_verification_expire_hours),
            email=email,
        )
        return token

    def create_token_pair(self, account_id: uuid.UUID, username: str, role: str) -> tuple[TokenPair, datetime]:
        """Returns the pair and the refresh token's expiration."""
        access_token, access_exp, _ = self.create_access_token(account_id, username, role)
        refresh_token, refresh_exp, _ = self.create_refresh_token(account_id)
        expires_in = int((access_exp - datetime.now(timezone.utc)).total_seconds())
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=expires_in,
        ), refresh_exp

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        payload = self._decode(token, ACCESS)
        if payload is None:
            return None
        return AccessTokenPayload(
            sub=payload["sub"],
            username=payload.get("username", ""),
            role=payload.get("role", ""),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            jti=payload["jti"],
        )

    def _verify_typed(self, token: str, token_type: str) -> Optional[TokenPayload]:
        payload = self._decode(token, token_type)
        if payload is None:
            return None
        return TokenPayload(
            sub=payload["sub"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            jti=payload["jti"],
            type=token_type,
            email=payload.get("email"),
        )

    def verify_refresh_token(self, token: str) -> Optional[TokenPayload]:
        return self._verify_typed(token, REFRESH)

    def verify_email_verification_token(self, token: str) -> Optional[TokenPayload]:
        return self._verify_typed(token, EMAIL_VERIFY)

    @staticmethod
    def hash_token(token: str) -> str:
        """SHA-256 of a token, for server-side storage of refresh tokens."""
        return hashlib.sha256(token.encode()).hexdigest()


_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager() -> JWTManager:
    """Get or create the default JWT manager."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager


def verify_access_token(token: str) -> Optional[AccessTokenPayload]:
    """Verify an access token with the default manager."""
    return get_jwt_manager().verify_access_token(token)
