"""
Identity service for account operations.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from sce_archive.errors import CredentialError, ForbiddenError, NotFoundError, ValidationError
from sce_archive.kernel.events.event_store import EventStore
from sce_archive.kernel.identity.jwt import JWTManager, TokenPair, get_jwt_manager
from sce_archive.kernel.identity.password import PasswordHasher
from sce_archive.kernel.models.account import (
    Account,
    AccountRole,
    ClearanceLevel,
    DEFAULT_POSITION,
    Department,
    RefreshToken,
)
from sce_archive.kernel.models.event_log import EventType
from sce_archive.kernel.policy import (
    Action,
    DenialReason,
    require_mutation,
    require_profile_update,
)
from sce_archive.kernel.store import RecordStore
from sce_archive.logging_config import get_logger

logger = get_logger(__name__)

# Fields update_profile() accepts; role/clearance are further gated by policy
PROFILE_FIELDS = frozenset({
    "username",
    "email",
    "position",
    "department",
    "avatar_url",
    "bio",
    "role",
    "clearance",
})

ADMIN_POSITION = "Foundation Director"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _require_text(**values: Optional[str]) -> None:
    for field, value in values.items():
        if value is None or not str(value).strip():
            raise ValidationError.required(field)


def _coerce_enum(field: str, kind: type, value: Any) -> Any:
    try:
        return kind(value)
    except ValueError:
        raise ValidationError("validation.invalid_value", field=field) from None


def _coerce_clearance(value: Any) -> ClearanceLevel:
    try:
        return ClearanceLevel(int(value))
    except (TypeError, ValueError):
        raise ValidationError("validation.invalid_value", field="clearance") from None


class IdentityService:
    """
    Account registration, authentication and administration.

    Every method that acts on behalf of someone takes the requester
    explicitly; there is no ambient "current user".
    """

    def __init__(
        self,
        session: AsyncSession,
        jwt_manager: Optional[JWTManager] = None,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.session = session
        self.accounts: RecordStore[Account] = RecordStore(session, Account)
        self.jwt_manager = jwt_manager or get_jwt_manager()
        self.hasher = hasher or PasswordHasher()
        self.event_store = EventStore(session)

    # -- Registration --------------------------------------------------------

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        confirm_password: str,
        ip_address: Optional[str] = None,
    ) -> Tuple[Account, str]:
        """
        Create an unverified reader account.

        Returns:
            The account and an email-verification token.

        Raises:
            ValidationError: missing field or password confirmation mismatch
            DuplicateKeyError: email or username already registered
        """
        _require_text(
            email=email,
            username=username,
            password=password,
            confirm_password=confirm_password,
        )
        if password != confirm_password:
            raise ValidationError.password_mismatch()

        account = Account(
            email=_normalize_email(email),
            username=username.strip(),
            password_hash=self.hasher.hash(password),
            role=AccountRole.READER,
            clearance=ClearanceLevel.LEVEL_1,
            email_verified=False,
            is_active=True,
            position=DEFAULT_POSITION,
        )
        await self.accounts.insert(account)

        await self.event_store.log(
            event_type=EventType.ACCOUNT_REGISTERED,
            entity_type="account",
            entity_id=account.id,
            actor_id=account.id,
            payload={"email": account.email, "username": account.username},
            ip_address=ip_address,
        )
        logger.info("Account registered", extra={"account_id": str(account.id)})

        token = self.jwt_manager.create_email_verification_token(account.id, account.email)
        return account, token

    async def provision_admin(
        self,
        email: str,
        username: str,
        password: str,
    ) -> Account:
        """
        Create a verified Admin at the highest clearance.

        This is the only way an Admin comes into existence without another
        Admin; it is meant for deployment scripts, not the public API.
        """
        _require_text(email=email, username=username, password=password)
        account = Account(
            email=_normalize_email(email),
            username=username.strip(),
            password_hash=self.hasher.hash(password),
            role=AccountRole.ADMIN,
            clearance=ClearanceLevel.LEVEL_5,
            email_verified=True,
            is_active=True,
            position=ADMIN_POSITION,
            department=Department.ADMINISTRATION,
        )
        await self.accounts.insert(account)
        await self.event_store.log(
            event_type=EventType.ACCOUNT_PROVISIONED,
            entity_type="account",
            entity_id=account.id,
            payload={"email": account.email, "role": account.role},
        )
        logger.info("Admin provisioned", extra={"account_id": str(account.id)})
        return account

    async def verify_email(self, token: str, ip_address: Optional[str] = None) -> Account:
        """Mark the account named by a verification token as verified."""
        payload = self.jwt_manager.verify_email_verification_token(token or "")
        if payload is None:
            raise ValidationError("validation.invalid_token")
        account = await self.accounts.find_by_id(payload.sub)
        # Bound to the address it was issued for
        if account is None or payload.email != account.email:
            raise ValidationError("validation.invalid_token")

        if not account.email_verified:
            account = await self.accounts.update(account.id, {"email_verified": True})
            await self.event_store.log(
                event_type=EventType.ACCOUNT_VERIFIED,
                entity_type="account",
                entity_id=account.id,
                actor_id=account.id,
                ip_address=ip_address,
            )
        return account

    # -- Sessions ------------------------------------------------------------

    async def _issue_tokens(self, account: Account) -> TokenPair:
        token_pair, refresh_exp = self.jwt_manager.create_token_pair(
            account_id=account.id,
            username=account.username,
            role=str(getattr(account.role, "value", account.role)),
        )
        self.session.add(RefreshToken(
            account_id=account.id,
            token_hash=JWTManager.hash_token(token_pair.refresh_token),
            expires_at=refresh_exp,
        ))
        await self.session.flush()
        return token_pair

    async def authenticate(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
    ) -> Tuple[Account, TokenPair]:
        """
        Log in with email and password.

        Raises:
            CredentialError: unknown email, wrong password or disabled
                account (one message for all three)
            ForbiddenError: correct password but email not yet verified
        """
        account = await self.accounts.find_one_by(email=_normalize_email(email or ""))
        if account is None or not self.hasher.verify(password or "", account.password_hash):
            logger.info("Login failed")
            raise CredentialError()
        if not account.is_active:
            raise CredentialError()
        if not account.email_verified:
            raise ForbiddenError(DenialReason.EMAIL_NOT_VERIFIED)

        if self.hasher.needs_rehash(account.password_hash):
            account.password_hash = self.hasher.hash(password)

        token_pair = await self._issue_tokens(account)
        await self.event_store.log(
            event_type=EventType.ACCOUNT_LOGGED_IN,
            entity_type="account",
            entity_id=account.id,
            actor_id=account.id,
            payload={"method": "password"},
            ip_address=ip_address,
        )
        return account, token_pair

    async def _find_refresh_token(self, refresh_token: str) -> Optional[RefreshToken]:
        query = select(RefreshToken).where(
            and_(
                RefreshToken.token_hash == JWTManager.hash_token(refresh_token),
                RefreshToken.revoked == False,  # noqa: E712
                RefreshToken.expires_at > datetime.now(timezone.utc),
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def refresh_tokens(self, refresh_token: str) -> Tuple[Account, TokenPair]:
        """Exchange a refresh token for a new pair; the old one is revoked."""
        payload = self.jwt_manager.verify_refresh_token(refresh_token)
        if payload is None:
            raise CredentialError("credential.invalid_refresh")

        record = await self._find_refresh_token(refresh_token)
        if record is None:
            raise CredentialError("credential.invalid_refresh")

        account = await self.accounts.find_by_id(payload.sub)
        if account is None or not account.is_active:
            raise CredentialError("credential.invalid_refresh")

        record.revoked = True
        return account, await self._issue_tokens(account)

    async def logout(
        self,
        account_id: uuid.UUID,
        refresh_token: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> int:
        """
        Revoke one refresh token, or all of the account's when none is given.

        Returns the number of tokens revoked.
        """
        conditions = [RefreshToken.account_id == account_id, RefreshToken.revoked == False]  # noqa: E712
        if refresh_token:
            conditions.append(RefreshToken.token_hash == JWTManager.hash_token(refresh_token))
        result = await self.session.execute(select(RefreshToken).where(and_(*conditions)))
        tokens = result.scalars().all()
        for token in tokens:
            token.revoked = True
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.ACCOUNT_LOGGED_OUT,
            entity_type="account",
            entity_id=account_id,
            actor_id=account_id,
            payload={"revoked": len(tokens), "revoke_all": refresh_token is None},
            ip_address=ip_address,
        )
        return len(tokens)

    # -- Lookup --------------------------------------------------------------

    async def get_account(self, account_id: uuid.UUID) -> Optional[Account]:
        return await self.accounts.find_by_id(account_id)

    # -- Profile -------------------------------------------------------------

    async def update_profile(
        self,
        requester: Optional[Account],
        target_account_id: uuid.UUID,
        fields: Mapping[str, Any],
        ip_address: Optional[str] = None,
    ) -> Account:
        """
        Update profile fields of an account.

        Owners edit their own profile; Admins edit anyone's. role and
        clearance are Admin-only, and never on the Admin's own account.
        """
        changes: Dict[str, Any] = dict(fields)
        require_profile_update(requester, target_account_id, changes.keys())

        for name in changes:
            if name not in PROFILE_FIELDS:
                raise ValidationError("validation.unknown_field", field=name)
        if "email" in changes:
            _require_text(email=changes["email"])
            changes["email"] = _normalize_email(changes["email"])
        if "username" in changes:
            _require_text(username=changes["username"])
            changes["username"] = changes["username"].strip()
        if "role" in changes:
            changes["role"] = _coerce_enum("role", AccountRole, changes["role"])
        if "clearance" in changes:
            changes["clearance"] = int(_coerce_clearance(changes["clearance"]))
        if changes.get("department") is not None:
            changes["department"] = _coerce_enum("department", Department, changes["department"])

        account = await self.accounts.update(target_account_id, changes)

        await self.event_store.log(
            event_type=EventType.ACCOUNT_UPDATED,
            entity_type="account",
            entity_id=account.id,
            actor_id=requester.id,
            payload=changes,
            ip_address=ip_address,
        )
        return account

    async def change_password(
        self,
        account_id: uuid.UUID,
        current_password: str,
        new_password: str,
        ip_address: Optional[str] = None,
    ) -> None:
        """Replace the password and revoke every refresh token of the account."""
        account = await self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFoundError("account", account_id)
        if not self.hasher.verify(current_password, account.password_hash):
            raise ValidationError("validation.wrong_current_password")
        _require_text(new_password=new_password)

        await self.accounts.update(account_id, {"password_hash": self.hasher.hash(new_password)})
        await self.logout(account_id, ip_address=ip_address)
        await self.event_store.log(
            event_type=EventType.ACCOUNT_PASSWORD_CHANGED,
            entity_type="account",
            entity_id=account_id,
            actor_id=account_id,
            ip_address=ip_address,
        )

    # -- Administration ------------------------------------------------------

    async def list_accounts(self, requester: Optional[Account]) -> List[Account]:
        require_mutation(requester, Action.VIEW_ALL_ACCOUNTS)
        return await self.accounts.find_all()

    async def change_role(
        self,
        requester: Optional[Account],
        target_account_id: uuid.UUID,
        role: AccountRole,
        ip_address: Optional[str] = None,
    ) -> Account:
        require_mutation(requester, Action.CHANGE_ACCOUNT_ROLE, target_account_id)
        target = await self.accounts.find_by_id(target_account_id)
        if target is None:
            raise NotFoundError("account", target_account_id)
        previous = target.role

        role = _coerce_enum("role", AccountRole, role)
        account = await self.accounts.update(target_account_id, {"role": role})
        await self.event_store.log(
            event_type=EventType.ACCOUNT_ROLE_CHANGED,
            entity_type="account",
            entity_id=account.id,
            actor_id=requester.id,
            payload={"previous_role": previous, "new_role": role},
            ip_address=ip_address,
        )
        logger.info(
            "Role changed",
            extra={"account_id": str(account.id), "new_role": role.value},
        )
        return account

    async def change_clearance(
        self,
        requester: Optional[Account],
        target_account_id: uuid.UUID,
        clearance: ClearanceLevel,
        ip_address: Optional[str] = None,
    ) -> Account:
        require_mutation(requester, Action.CHANGE_ACCOUNT_CLEARANCE, target_account_id)
        target = await self.accounts.find_by_id(target_account_id)
        if target is None:
            raise NotFoundError("account", target_account_id)
        previous = target.clearance

        clearance = _coerce_clearance(clearance)
        account = await self.accounts.update(target_account_id, {"clearance": int(clearance)})
        await self.event_store.log(
            event_type=EventType.ACCOUNT_CLEARANCE_CHANGED,
            entity_type="account",
            entity_id=account.id,
            actor_id=requester.id,
            payload={"previous_clearance": previous, "new_clearance": int(clearance)},
            ip_address=ip_address,
        )
        logger.info(
            "Clearance changed",
            extra={"account_id": str(account.id), "new_clearance": int(clearance)},
        )
        return account

    async def change_position(
        self,
        requester: Optional[Account],
        target_account_id: uuid.UUID,
        position: str,
        department: Optional[Department] = None,
        ip_address: Optional[str] = None,
    ) -> Account:
        """Set position, and department when given (otherwise it is kept)."""
        require_mutation(requester, Action.CHANGE_ACCOUNT_POSITION, target_account_id)
        _require_text(position=position)

        changes: Dict[str, Any] = {"position": position.strip()}
        if department is not None:
            changes["department"] = _coerce_enum("department", Department, department)
        account = await self.accounts.update(target_account_id, changes)
        await self.event_store.log(
            event_type=EventType.ACCOUNT_POSITION_CHANGED,
            entity_type="account",
            entity_id=account.id,
            actor_id=requester.id,
            payload=changes,
            ip_address=ip_address,
        )
        return account
