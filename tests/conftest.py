"""
Pytest fixtures for archive tests.

Every test gets a fresh in-memory SQLite database. StaticPool keeps the
single connection alive so all sessions of a test see the same data.
"""

from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sce_archive.database import get_db
from sce_archive.kernel.identity.identity_service import IdentityService
from sce_archive.kernel.identity.jwt import JWTManager, get_jwt_manager
from sce_archive.kernel.identity.password import PasswordHasher
from sce_archive.kernel.models import Base
from sce_archive.kernel.models.account import (
    Account,
    AccountRole,
    ClearanceLevel,
    DEFAULT_POSITION,
)
from sce_archive.kernel.store import RecordStore


TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "TestPassword123"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def hasher() -> PasswordHasher:
    """Low-cost bcrypt so fixtures stay fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
        refresh_token_expire_days=7,
        email_verification_expire_hours=1,
    )


@pytest.fixture
def identity_service(db_session, jwt_manager, hasher) -> IdentityService:
    return IdentityService(db_session, jwt_manager=jwt_manager, hasher=hasher)


@pytest.fixture
def make_account(db_session: AsyncSession, hasher: PasswordHasher) -> Callable:
    """Factory inserting a verified, active account and committing it."""

    async def _make(
        username: str,
        role: AccountRole = AccountRole.READER,
        clearance: int = ClearanceLevel.LEVEL_1,
        email_verified: bool = True,
    ) -> Account:
        account = Account(
            email=f"{username}@scefoundation.org",
            username=username,
            password_hash=hasher.hash(TEST_PASSWORD),
            role=role,
            clearance=int(clearance),
            email_verified=email_verified,
            is_active=True,
            position=DEFAULT_POSITION,
        )
        await RecordStore(db_session, Account).insert(account)
        await db_session.commit()
        return account

    return _make


@pytest_asyncio.fixture
async def admin(make_account) -> Account:
    return await make_account("director", AccountRole.ADMIN, ClearanceLevel.LEVEL_5)


@pytest_asyncio.fixture
async def second_admin(make_account) -> Account:
    return await make_account("deputy", AccountRole.ADMIN, ClearanceLevel.LEVEL_4)


@pytest_asyncio.fixture
async def researcher(make_account) -> Account:
    return await make_account("researcher", AccountRole.RESEARCHER, ClearanceLevel.LEVEL_3)


@pytest_asyncio.fixture
async def reader(make_account) -> Account:
    """Reader at clearance 2."""
    return await make_account("reader", AccountRole.READER, ClearanceLevel.LEVEL_2)


@pytest.fixture
def auth_headers() -> Callable[[Account], Dict[str, str]]:
    """Authorization header accepted by the running app for an account."""

    def _headers(account: Account) -> Dict[str, str]:
        token, _, _ = get_jwt_manager().create_access_token(
            account_id=account.id,
            username=account.username,
            role=str(getattr(account.role, "value", account.role)),
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with sessions bound to the test database."""
    from sce_archive.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# Sample payloads

@pytest.fixture
def record_data() -> dict:
    return {
        "external_number": "173",
        "title": "The Sculpture",
        "classification": "euclid",
        "body": "Concrete and rebar construct with traces of spray paint.",
        "procedures_text": "Keep in a locked container; three staff at all times.",
        "required_clearance": 2,
    }


@pytest.fixture
def post_data() -> dict:
    return {
        "title": "Site-19 open day",
        "body": "The site will be closed to visitors.",
        "category": "news",
    }
