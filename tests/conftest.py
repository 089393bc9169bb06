import os

# Settings are chosen at import time; select the test profile before the app loads.
os.environ.setdefault("MODE", "test")

from types import SimpleNamespace

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from main import app as fastapi_app
import db as project_db
import db_models  # noqa: F401  ensure models are registered
from db_base import Base
from db_models.department import Department
from db_models.location import Location
from db_models.status_value import StatusValue
from db_models.user import User, UserRole
from core.catalog import status_catalog
from core.security import create_access_token


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database file per test."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        future=True,
        echo=False,
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


@pytest.fixture(autouse=True)
def reset_status_catalog():
    status_catalog.invalidate()
    yield
    status_catalog.invalidate()


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seed(session_factory):
    """
    Two departments, one location, a three-entry status catalog and one user
    per role/department combination.
    """
    async with session_factory() as session:
        finance = Department(name_native="Finance", name_alt="Finanzen")
        lab = Department(name_native="Laboratory", name_alt="Labor")
        session.add_all([finance, lab])
        await session.flush()

        store = Location(name="Main Store", address="Building A")
        session.add(store)

        session.add_all([
            StatusValue(value="available", label="Available", color="#28a745"),
            StatusValue(value="damaged", label="Damaged", color="#dc3545"),
            StatusValue(value="repair", label="In Repair", color="#ffc107"),
        ])

        def user(email, name, role, department=None):
            return User(
                email=email,
                full_name=name,
                role=role.value,
                department_id=department.id if department else None,
                is_active=True,
            )

        users = {
            "super": user("super@test.com", "Super Admin", UserRole.SUPER_ADMIN),
            "finance_admin": user("fadmin@test.com", "Finance Admin", UserRole.ADMIN, finance),
            "finance_user": user("fuser@test.com", "Finance User", UserRole.USER, finance),
            "lab_admin": user("ladmin@test.com", "Lab Admin", UserRole.ADMIN, lab),
            "lab_user": user("luser@test.com", "Lab User", UserRole.USER, lab),
            "drifter": user("drifter@test.com", "No Department", UserRole.USER),
        }
        session.add_all(users.values())
        await session.commit()

        return SimpleNamespace(
            finance_id=finance.id,
            lab_id=lab.id,
            location_id=store.id,
            user_ids={key: u.id for key, u in users.items()},
        )


@pytest.fixture
async def async_client(session_factory):
    # Override the get_session dependency to create a fresh session for each request
    async def override_get_session():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[project_db.get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://testserver") as ac:
        yield ac

    # Clean up
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def headers(seed):
    """Authorization headers keyed by seeded user name."""
    return {
        key: {"Authorization": f"Bearer {create_access_token(data={'sub': str(user_id)})}"}
        for key, user_id in seed.user_ids.items()
    }


@pytest.fixture
def make_asset(async_client, headers, seed):
    """Create an asset through the API as a given user (SuperAdmin by default)."""
    counter = {"n": 0}

    async def _make(as_user: str = "super", **fields):
        counter["n"] += 1
        payload = {
            "code": f"AST-{counter['n']:03d}",
            "name": f"Asset {counter['n']}",
            "department_id": seed.finance_id,
            "status": "available",
        }
        payload.update(fields)
        resp = await async_client.post("/api/v1/assets", json=payload, headers=headers[as_user])
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
