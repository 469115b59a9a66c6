"""Service test fixtures — async DB, seeded catalogue, service registry, API client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The 8 blood types, every permission and the admin role are seeded
    - Services run on a frozen clock (FIXED_NOW) so date checks are deterministic
    - get_db and get_identity are overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service tests
      (PostgreSQL-specific features are not exercised here)
    - Factories go through the services, so every fixture row passes the same
      checks production rows do
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from bloodbank.api.dependencies import get_identity
from bloodbank.core.access import Identity
from bloodbank.core.domain_types import BLOOD_TYPES, UserId
from bloodbank.core.permissions import ALL_PERMISSIONS
from bloodbank.db.base import Base
from bloodbank.infrastructure.database import get_db
from bloodbank.main import app
from bloodbank.models.blood import Blood
from bloodbank.models.permission import Permission
from bloodbank.models.role import Role, role_permissions
from bloodbank.schemas.auth import UserCreate
from bloodbank.schemas.donations import (
    BloodBagCreate, DonorCreate, HealthEntityCreate, RequestCreate,
)
from bloodbank.services.registry import LifecycleServices

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def blood_ids(test_db) -> dict[str, int]:
    """Seed the 8 blood types. Returns label ("O+") → id."""
    ids = {}
    for group, rh in BLOOD_TYPES:
        blood = Blood(type=group.value, rh=rh.value)
        test_db.add(blood)
        await test_db.flush()
        ids[f"{group.value}{rh.value}"] = blood.id
    await test_db.commit()
    return ids


@pytest.fixture
async def admin_role(test_db) -> int:
    """Seed every permission and an 'admin' role holding all of them."""
    role = Role(name="admin")
    test_db.add(role)
    await test_db.flush()
    for name in sorted(ALL_PERMISSIONS):
        permission = Permission(name=name)
        test_db.add(permission)
        await test_db.flush()
        await test_db.execute(
            insert(role_permissions).values(role_id=role.id, permission_id=permission.id),
        )
    await test_db.commit()
    return role.id


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
async def services(test_db, blood_ids, admin_role) -> LifecycleServices:
    return LifecycleServices(test_db, clock=lambda: FIXED_NOW)


# ─── Factories ───────────────────────────────────────────────────

@pytest.fixture
def make_user(services):
    counter = {"n": 0}

    async def _make(email: str | None = None):
        counter["n"] += 1
        return await services.users.create(UserCreate(
            email=email or f"user{counter['n']}@bank.test",
            password_hash="hashed",
            role_name="admin",
        ))

    return _make


@pytest.fixture
def make_health_entity(services, make_user):
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        user = await make_user()
        fields = {
            "nit": f"NIT-{counter['n']}",
            "name": f"Hospital {counter['n']}",
            "address": "Street 1",
            "city": "Bogota",
            "phone": "555-0100",
            "email": f"he{counter['n']}@bank.test",
            "institution_type": "hospital",
            "user_id": user.id,
        }
        fields.update(overrides)
        return await services.health_entities.create(HealthEntityCreate(**fields))

    return _make


@pytest.fixture
def make_donor(services, make_user, blood_ids):
    counter = {"n": 0}

    async def _make(blood: str = "O+"):
        counter["n"] += 1
        user = await make_user()
        return await services.donors.create(DonorCreate(
            document=f"DOC-{counter['n']}",
            name="Ana",
            lastname="Gomez",
            birth_date=datetime(1990, 5, 17, tzinfo=timezone.utc),
            user_id=user.id,
            blood_id=blood_ids[blood],
        ))

    return _make


@pytest.fixture
def make_request(services, blood_ids):
    async def _make(health_entity_id: int, blood: str = "O+", quantity: int = 10):
        return await services.requests.create(RequestCreate(
            quantity_needed=quantity,
            due_date=FIXED_NOW + timedelta(days=7),
            blood_id=blood_ids[blood],
            health_entity_id=health_entity_id,
        ))

    return _make


@pytest.fixture
def make_bag(services, blood_ids):
    async def _make(
        request_id: int, donor_id: int, blood: str = "O+", quantity: int = 450,
        donation_date: datetime | None = None,
    ):
        return await services.blood_bags.create(BloodBagCreate(
            quantity=quantity,
            donation_date=donation_date,
            expiration_date=FIXED_NOW + timedelta(days=30),
            request_id=request_id,
            blood_id=blood_ids[blood],
            donor_id=donor_id,
        ))

    return _make


# ─── API client ──────────────────────────────────────────────────

@pytest.fixture
async def client(test_session_factory, blood_ids, admin_role):
    """FastAPI test client with DB dependency overridden; caller is unauthenticated."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity] = lambda: None

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def act_as():
    """Switch the identity every guarded route sees."""
    def _act(*permissions: str, user_id: int = 1) -> Identity:
        identity = Identity(
            user_id=UserId(user_id), email="caller@bank.test", role="tester",
            permissions=frozenset(permissions),
        )
        app.dependency_overrides[get_identity] = lambda: identity
        return identity

    return _act
