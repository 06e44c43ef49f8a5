"""Pytest configuration and fixtures."""

import os

# Tests run against in-memory SQLite unless TEST_DATABASE_URL points at Postgres
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from formaflow.core.db import Base, get_db  # noqa: E402
from formaflow.main import create_app  # noqa: E402

# Import all models
from formaflow.models import (  # noqa: E402, F401
    Attendance,
    SessionAuditLog,
    Site,
    TrainingSession,
    User,
)
from formaflow.models.enums import AppRole  # noqa: E402
from tests.factories import UserFactory  # noqa: E402


def _engine_kwargs(url: str) -> dict:
    """One shared connection keeps an in-memory SQLite database alive."""
    if url.startswith("sqlite"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Fresh schema for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine):
    """Create fresh DB session for each test."""
    async_session_maker = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


async def _client_as(db_session: AsyncSession, user: User | None):
    """Build a test client bound to ``db_session``, authenticated as ``user``."""
    from formaflow.api.auth import get_current_user

    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    if user is not None:

        async def override_get_current_user():
            return user

        app.dependency_overrides[get_current_user] = override_get_current_user

    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def _role_client(db_session: AsyncSession, role: AppRole, email: str):
    user = await UserFactory.create(
        db_session,
        email=email,
        first_name=role.value.capitalize(),
        last_name="User",
        role=role.value,
    )
    ac = await _client_as(db_session, user)
    ac.test_user = user
    ac.db_session = db_session
    return ac


@pytest_asyncio.fixture
async def client(db_session):
    """Create async test client authenticated as an HR officer."""
    async with await _role_client(db_session, AppRole.HR, "hr@example.com") as ac:
        yield ac


@pytest_asyncio.fixture
async def drh_client(db_session):
    async with await _role_client(db_session, AppRole.DRH, "drh@example.com") as ac:
        yield ac


@pytest_asyncio.fixture
async def hse_client(db_session):
    async with await _role_client(db_session, AppRole.HSE, "hse@example.com") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_client(db_session):
    async with await _role_client(db_session, AppRole.SUPER_ADMIN, "admin@example.com") as ac:
        yield ac


@pytest_asyncio.fixture
async def manager_client(db_session):
    async with await _role_client(db_session, AppRole.MANAGER, "manager@example.com") as ac:
        yield ac


@pytest_asyncio.fixture
async def formateur_client(db_session):
    async with await _role_client(db_session, AppRole.FORMATEUR, "formateur@example.com") as ac:
        yield ac


@pytest_asyncio.fixture
async def apprenant_client(db_session):
    async with await _role_client(db_session, AppRole.APPRENANT, "apprenant@example.com") as ac:
        yield ac


@pytest.fixture
async def unauthenticated_client(db_session: AsyncSession) -> AsyncClient:
    """AsyncClient without authentication overrides (for testing auth failures)."""
    async with await _client_as(db_session, None) as ac:
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def client_for_health_checks(db_engine):
    """
    Test client whose requests each get their own session from the test engine,
    like the production ``get_db`` dependency.
    """
    app = create_app()

    async_session_maker = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_db():
        async with async_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
