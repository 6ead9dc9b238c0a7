"""
Pytest configuration and shared fixtures.

- Environment setup for a throwaway SQLite database
- In-memory organization lookup for resolver and engine tests
- API client over a freshly created and seeded database
"""
import os
import tempfile
from dataclasses import dataclass, field

import pytest
import pytest_asyncio

# Environment setup before any app imports
_tmpdir = tempfile.mkdtemp(prefix="task-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmpdir}/test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["SEED_ON_STARTUP"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests-only"

from app.core.database.base import Base  # noqa: E402
from app.core.database.engine import AsyncSessionLocal, engine, init_db  # noqa: E402
from app.features.permissions.engine import AccessContext, AccessDecisionEngine  # noqa: E402
from app.features.permissions.hierarchy import OrganizationHierarchy  # noqa: E402
from app.features.permissions.roles import RoleType  # noqa: E402


# ============================================================================
# In-memory hierarchy
# ============================================================================

@dataclass
class FakeOrg:
    id: int
    parent_id: int | None = None
    children: list["FakeOrg"] = field(default_factory=list)


class InMemoryOrganizationLookup:
    """Organization lookup over a dict, counting every call."""

    def __init__(self, orgs: list[FakeOrg]):
        self.orgs = {org.id: org for org in orgs}
        self.calls = 0

    async def get_org_with_children(self, org_id):
        self.calls += 1
        return self.orgs.get(org_id)

    async def get_org_by_id(self, org_id):
        self.calls += 1
        return self.orgs.get(org_id)


# Org ids used by the unit tests:
#   ROOT (1) with children CHILD_B (2) and CHILD_C (3); LONE (4) has no relatives
ROOT, CHILD_B, CHILD_C, LONE = 1, 2, 3, 4


def build_orgs() -> list[FakeOrg]:
    root = FakeOrg(id=ROOT)
    child_b = FakeOrg(id=CHILD_B, parent_id=ROOT)
    child_c = FakeOrg(id=CHILD_C, parent_id=ROOT)
    root.children = [child_b, child_c]
    return [root, child_b, child_c, FakeOrg(id=LONE)]


@dataclass
class FakeTask:
    organization_id: int
    created_by: int


@pytest.fixture
def lookup() -> InMemoryOrganizationLookup:
    return InMemoryOrganizationLookup(build_orgs())


@pytest.fixture
def hierarchy(lookup) -> OrganizationHierarchy:
    return OrganizationHierarchy(lookup)


@pytest.fixture
def access_engine(hierarchy) -> AccessDecisionEngine:
    return AccessDecisionEngine(hierarchy)


@pytest.fixture
def make_ctx():
    """Build an AccessContext; role may be a RoleType, a string, or None."""
    def _make(role=RoleType.ADMIN, organization_id=ROOT, user_id=100):
        return AccessContext.build(user_id, role, organization_id)
    return _make


# ============================================================================
# Database and API client
# ============================================================================

@pytest_asyncio.fixture
async def database():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_db()
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(database):
    """
    Seed the demo data and return its ids.

    Returns a dict with "parent_org", "child_org" and one entry per seeded
    user email mapping to that user's id.
    """
    from sqlalchemy import select
    from app.core.database.seed import seed_database
    from app.features.organizations.models import Organization
    from app.features.users.models import User

    async with AsyncSessionLocal() as session:
        await seed_database(session)
        orgs = (await session.execute(select(Organization).order_by(Organization.id))).scalars().all()
        users = (await session.execute(select(User))).scalars().all()

        ids = {"parent_org": orgs[0].id, "child_org": orgs[1].id}
        ids.update({user.email: user.id for user in users})
        return ids


@pytest_asyncio.fixture
async def client(seeded):
    """Async API client over the seeded database."""
    from httpx import ASGITransport, AsyncClient
    from app.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


SEED_PASSWORD = "password123"


async def login(client, email: str, password: str = SEED_PASSWORD) -> dict:
    """Log in and return Authorization headers."""
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    """Return a coroutine function that logs in a seeded user by email."""
    async def _headers(email: str, password: str = SEED_PASSWORD) -> dict:
        return await login(client, email, password)
    return _headers
