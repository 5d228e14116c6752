"""Test config and shared fixtures."""
import os

# Settings are read at import time; point them at throwaway resources first
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NOTIFICATION_DRIVER", "mock")
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from typing import AsyncGenerator, Callable
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
import apps.models  # noqa: F401  registers every table in the metadata
from apps.accreditation.models import Accreditation
from apps.facilities.models import FacilityType
from apps.identity.models import SystemRole, User
from framework.dependencies import get_uow
from framework.repository.unit_of_work import UnitOfWork
from framework.security import (
    ADMIN_ROLE_ID, EXPLORE_ROLE_ID, FACILITY_ROLE_ID, STAFF_ROLE_ID,
    create_access_token, get_password_hash, token_claims,
)


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "admin-pass"


@pytest.fixture(scope="function")
async def engine():
    """Fresh in-memory database per test; StaticPool keeps it alive across sessions."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> Callable[[], AsyncSession]:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding data in tests."""
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
async def uow(session_factory) -> AsyncGenerator[UnitOfWork, None]:
    """UnitOfWork over its own session."""
    unit = UnitOfWork(session=session_factory())
    try:
        yield unit
    finally:
        await unit.dispose()


@pytest.fixture
def uow_factory(session_factory) -> Callable[[], UnitOfWork]:
    """New UnitOfWork per call, e.g. to read back what a request committed."""
    return lambda: UnitOfWork(session=session_factory())


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client; every request gets its own UnitOfWork on the test database."""
    async def _get_uow():
        unit = UnitOfWork(session=session_factory())
        try:
            yield unit
        finally:
            await unit.dispose()

    app.dependency_overrides[get_uow] = _get_uow

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def roles(async_session: AsyncSession):
    """Built-in system roles."""
    seeded = [
        SystemRole(id=ADMIN_ROLE_ID, name="Admin"),
        SystemRole(id=FACILITY_ROLE_ID, name="Facility"),
        SystemRole(id=STAFF_ROLE_ID, name="Staff"),
        SystemRole(id=EXPLORE_ROLE_ID, name="Explore"),
    ]
    async_session.add_all(seeded)
    await async_session.commit()
    return seeded


@pytest.fixture
async def admin_user(async_session: AsyncSession, roles) -> User:
    user = User(
        id="admin-1",
        name="Admin",
        email="admin@accredigo.com",
        password=get_password_hash(ADMIN_PASSWORD),
        system_role_id=ADMIN_ROLE_ID,
        is_email_verified=True,
    )
    async_session.add(user)
    await async_session.commit()
    return user


def bearer(user_id: str, email: str, name: str, role_id: int) -> dict:
    token = create_access_token(token_claims(user_id, email, name, role_id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return bearer(admin_user.id, admin_user.email, admin_user.name, ADMIN_ROLE_ID)


@pytest.fixture
def staff_headers(roles) -> dict:
    """Signed-in non-admin caller."""
    return bearer("staff-1", "staff@accredigo.com", "Staff", STAFF_ROLE_ID)


@pytest.fixture
async def accreditation(async_session: AsyncSession) -> Accreditation:
    item = Accreditation(id="acc-1", name="CBAHI", description="National hospital standards")
    async_session.add(item)
    await async_session.commit()
    return item


@pytest.fixture
async def facility_type(async_session: AsyncSession) -> FacilityType:
    item = FacilityType(id=1, type_name="Hospital")
    async_session.add(item)
    await async_session.commit()
    return item
