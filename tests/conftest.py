"""Shared test fixtures — async SQLite in-memory DB, test client, tenants and members."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import app.models  # noqa: E402, F401
from app.core.database import get_session  # noqa: E402
from app.core.security import create_jwt, hash_password  # noqa: E402
from app.main import app  # noqa: E402
from app.models.profile import Profile, ProfileRole  # noqa: E402
from app.models.tenant import SubscriptionPlan, Tenant  # noqa: E402
from app.models.user import User  # noqa: E402

TEST_PASSWORD = "password"


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Data helpers ──────────────────────────────────────────────

class Member:
    """A provisioned user: account + profile + ready-to-use auth headers."""

    def __init__(self, user: User, profile: Profile) -> None:
        self.user = user
        self.profile = profile
        self.headers = {"Authorization": f"Bearer {create_jwt(str(user.id))}"}

    @property
    def user_id(self):
        return self.user.id

    @property
    def tenant_id(self):
        return self.profile.tenant_id


@pytest.fixture
def make_tenant(session) -> Callable[..., Awaitable[Tenant]]:
    async def _make(slug: str, plan: SubscriptionPlan = SubscriptionPlan.FREE) -> Tenant:
        tenant = Tenant(name=f"{slug.capitalize()} Corporation", slug=slug, plan=plan)
        session.add(tenant)
        await session.commit()
        await session.refresh(tenant)
        return tenant

    return _make


@pytest.fixture
def make_user(session) -> Callable[..., Awaitable[User]]:
    async def _make(email: str, password: str = TEST_PASSWORD, is_active: bool = True) -> User:
        user = User(email=email, password_hash=hash_password(password), is_active=is_active)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_member(session, make_user) -> Callable[..., Awaitable[Member]]:
    async def _make(tenant: Tenant, email: str, role: ProfileRole = ProfileRole.MEMBER) -> Member:
        user = await make_user(email)
        profile = Profile(user_id=user.id, tenant_id=tenant.id, email=email, role=role)
        session.add(profile)
        await session.commit()
        await session.refresh(profile)
        return Member(user, profile)

    return _make


@pytest.fixture
async def acme(make_tenant) -> Tenant:
    return await make_tenant("acme")


@pytest.fixture
async def globex(make_tenant) -> Tenant:
    return await make_tenant("globex")


@pytest.fixture
async def acme_admin(make_member, acme) -> Member:
    return await make_member(acme, "admin@acme.com", ProfileRole.ADMIN)


@pytest.fixture
async def acme_user(make_member, acme) -> Member:
    return await make_member(acme, "user@acme.com")


@pytest.fixture
async def globex_user(make_member, globex) -> Member:
    return await make_member(globex, "user@globex.com")
