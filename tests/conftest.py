"""
Pytest configuration and fixtures
"""

import itertools
import os
from typing import AsyncGenerator, Any, Callable, Dict

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from core.database import build_engine, build_session_maker
from ingestion.loaders.profile_store import ProfileStore
from models import Base
from schemas.profile import ProfileData, UpstreamUser


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine (per-test SQLite file unless TEST_DATABASE_URL is set)"""
    database_url = os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    )
    engine = build_engine(database_url)

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables after test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine) -> async_sessionmaker:
    return build_session_maker(test_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def profile_store(session_maker) -> ProfileStore:
    return ProfileStore(session_maker)


@pytest.fixture
def upstream_user_factory() -> Callable[..., Dict[str, Any]]:
    """
    Build one randomuser.me "results" entry.

    Each call gets a unique email and username unless they are given.
    """
    sequence = itertools.count(1)

    def factory(
        first: str = "Louise",
        last: str = "Martin",
        gender: str = "female",
        city: str = "Paris",
        state: str = "Ile-de-France",
        country: str = "France",
        email: str = None,
        username: str = None,
    ) -> Dict[str, Any]:
        n = next(sequence)
        return {
            "gender": gender,
            "name": {"title": "Ms", "first": first, "last": last},
            "location": {
                "street": {"number": 4021 + n, "name": "Rue de la Paix"},
                "city": city,
                "state": state,
                "country": country,
                "postcode": 75002,
                "coordinates": {"latitude": "48.8698", "longitude": "2.3311"},
                "timezone": {"offset": "+1:00", "description": "Brussels, Copenhagen, Madrid, Paris"}
            },
            "email": email or f"{first.lower()}.{last.lower()}.{n}@example.com",
            "login": {
                "uuid": f"7a0eed16-9430-4d68-901f-c0d4c1c3bf{n:02d}",
                "username": username or f"{first.lower()}{n}",
                "password": "secret"
            },
            "dob": {"date": "1990-05-14T08:30:00.000Z", "age": 35},
            "registered": {"date": "2015-06-01T10:00:00.000Z", "age": 10},
            "phone": "01-23-45-67-89",
            "cell": "06-12-34-56-78",
            "id": {"name": "INSEE", "value": "2900514123456"},
            "picture": {
                "large": "https://randomuser.me/api/portraits/women/1.jpg",
                "medium": "https://randomuser.me/api/portraits/med/women/1.jpg",
                "thumbnail": "https://randomuser.me/api/portraits/thumb/women/1.jpg"
            },
            "nat": "FR"
        }

    return factory


@pytest.fixture
def profile_factory(upstream_user_factory) -> Callable[..., ProfileData]:
    """Same options as upstream_user_factory, flattened into ProfileData"""

    def factory(**overrides) -> ProfileData:
        return ProfileData.from_upstream(
            UpstreamUser.parse_obj(upstream_user_factory(**overrides))
        )

    return factory
