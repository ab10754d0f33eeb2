"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from famtivity.backend import DataBackend, RestBackend, SqlBackend, eq
from famtivity.core.database import Base, create_engine, init_db
from famtivity.core.exceptions import BackendUnavailableError
from famtivity.models import *  # noqa: F403 - Import all models

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FaultyBackend(DataBackend):
    """Delegating backend that fails chosen ``(method, table)`` calls."""

    def __init__(self, delegate: DataBackend, fail_on, error_factory=None):
        self.delegate = delegate
        self.fail_on = set(fail_on)
        self.error_factory = error_factory or (
            lambda: BackendUnavailableError(detail="simulated outage")
        )
        self.calls = []

    def _check(self, method: str, table: str) -> None:
        self.calls.append((method, table))
        if (method, table) in self.fail_on:
            raise self.error_factory()

    async def select(self, query):
        self._check("select", query.table)
        return await self.delegate.select(query)

    async def insert(self, table, rows):
        self._check("insert", table)
        return await self.delegate.insert(table, rows)

    async def update(self, table, values, filters):
        self._check("update", table)
        return await self.delegate.update(table, values, filters)

    async def delete(self, table, filters):
        self._check("delete", table)
        return await self.delegate.delete(table, filters)

    async def rpc(self, call):
        self._check("rpc", call.name)
        return await self.delegate.rpc(call)


class RecordingBackend(DataBackend):
    """Backend returning canned rows and recording every call."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.calls = []

    async def select(self, query):
        self.calls.append(("select", query))
        return list(self.rows)

    async def insert(self, table, rows):
        self.calls.append(("insert", table, list(rows)))
        return [dict(row, id=f"{table}-{i}") for i, row in enumerate(rows)]

    async def update(self, table, values, filters):
        self.calls.append(("update", table, values, filters))
        return [dict(values)]

    async def delete(self, table, filters):
        self.calls.append(("delete", table, filters))
        return []

    async def rpc(self, call):
        self.calls.append(("rpc", call))
        return list(self.rows)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_engine(TEST_DATABASE_URL)
    await init_db(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def backend(test_engine):
    """SQL backend over the in-memory test database."""
    yield SqlBackend(test_engine)


@pytest.fixture
def faulty_backend(backend):
    """Factory wrapping the test backend so chosen calls fail."""
    def factory(*fail_on, error_factory=None):
        return FaultyBackend(backend, fail_on, error_factory)
    return factory


@pytest.fixture
def recording_backend():
    """Factory for a backend that records calls and returns canned rows."""
    return RecordingBackend


@pytest.fixture
def rest_backend_factory():
    """Build a hosted backend whose HTTP traffic goes to ``handler``."""
    def factory(handler, url="https://project.example.co", api_key="anon-key"):
        return RestBackend(
            url=url,
            api_key=api_key,
            transport=httpx.MockTransport(handler),
        )
    return factory


@pytest_asyncio.fixture(scope="function")
async def test_app(backend):
    """Create a test FastAPI application bound to the test backend."""
    from famtivity.main import create_app

    app = create_app(backend=backend, instrument=False)

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_signup_data():
    """Sample waitlist form data as the website submits it."""
    return {
        "email": "Jamie.Rivera@Example.com ",
        "first_name": "Jamie",
        "zip_code": "94110",
        "family_size": "4",
    }


@pytest.fixture
def sample_family_data():
    """Sample family profile data for onboarding."""
    return {
        "monthly_budget": "100-250",
        "max_travel": "15",
        "preferred_times": ["weekday_afternoon", "weekend_morning"],
    }


@pytest.fixture
def sample_children_data():
    """Sample children for onboarding."""
    return [
        {"name": "Ava", "age": "7", "interests": ["swimming", "art"], "energy_level": "high"},
        {"name": "", "age": 4, "interests": ["music"], "energy_level": "medium"},
        {"age": "10", "interests": ["coding"], "energy_level": "low"},
    ]


@pytest_asyncio.fixture
async def waitlist_entry(backend):
    """A waitlist row that has not been onboarded."""
    rows = await backend.insert("waitlist", [{
        "email": "jamie.rivera@example.com",
        "first_name": "Jamie",
        "zip_code": "94110",
        "family_size": 4,
        "source": "website",
    }])
    return rows[0]


@pytest_asyncio.fixture
async def activities(backend):
    """A small activity catalogue, including one inactive activity."""
    return await backend.insert("activities", [
        {"name": "Junior Swim", "category": "sports", "min_age": 5, "max_age": 10,
         "price_per_month": 80.0, "latitude": 37.76, "longitude": -122.42, "is_active": True},
        {"name": "Little Painters", "category": "arts", "min_age": 3, "max_age": 6,
         "price_per_month": 40.0, "latitude": 37.77, "longitude": -122.41, "is_active": True},
        {"name": "Robotics Club", "category": "stem", "min_age": 8, "max_age": 14,
         "price_per_month": 150.0, "latitude": 37.78, "longitude": -122.40, "is_active": True},
        {"name": "Teen Soccer", "category": "sports", "min_age": 12, "max_age": 17,
         "price_per_month": 60.0, "latitude": 37.75, "longitude": -122.43, "is_active": True},
        {"name": "Closed Gymnastics", "category": "sports", "min_age": 5, "max_age": 12,
         "price_per_month": 50.0, "latitude": 37.74, "longitude": -122.44, "is_active": False},
    ])


@pytest_asyncio.fixture
async def onboarded_family(backend, waitlist_entry):
    """A family profile with two children, written directly."""
    family = (await backend.insert("family_profiles", [{
        "waitlist_id": waitlist_entry["id"],
        "monthly_budget": "100-250",
        "max_travel_distance": 15,
        "preferred_times": ["weekend_morning"],
    }]))[0]
    children = await backend.insert("children", [
        {"family_id": family["id"], "name": "Ava", "age": 7,
         "interests": ["swimming"], "energy_level": "high"},
        {"family_id": family["id"], "name": "Leo", "age": 4,
         "interests": ["art"], "energy_level": "medium"},
    ])
    await backend.update(
        "waitlist",
        {"user_role": "family", "completed_onboarding": True},
        [eq("id", waitlist_entry["id"])],
    )
    return {"waitlist": waitlist_entry, "family": family, "children": children}


@pytest.fixture
def future():
    """Return a UTC time ``days`` from now."""
    def at(days: float) -> datetime:
        return datetime.now(timezone.utc) + timedelta(days=days)
    return at
