"""
ProfileStore against a real database: atomic writes and filtered reads
"""

import pytest
from unittest.mock import patch
from sqlalchemy import select, func, delete
from ingestion.loaders.profile_store import ProfileStore
from models import UserRecord, UserDetailRecord, LocationRecord, Gender
from core.exceptions import PersistenceError


async def count_rows(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_save_writes_linked_triple(profile_store, profile_factory, db_session):
    profile = profile_factory(city="Paris")

    result = await profile_store.save(profile)

    assert result.ok
    user = (await db_session.execute(
        select(UserRecord).where(UserRecord.id == result.value)
    )).scalar_one()
    detail = (await db_session.execute(
        select(UserDetailRecord).where(UserDetailRecord.user_id == user.id)
    )).scalar_one()
    location = (await db_session.execute(
        select(LocationRecord).where(LocationRecord.user_id == user.id)
    )).scalar_one()

    assert user.email == profile.email
    assert user.full_name == f"{profile.first_name} {profile.last_name}"
    assert detail.gender == Gender.FEMALE
    assert detail.date_of_birth == profile.date_of_birth
    assert location.city == "Paris"
    assert location.full_street == f"{profile.street_number} Rue de la Paix"


@pytest.mark.asyncio
async def test_failure_on_third_insert_rolls_back_everything(profile_store, profile_factory, db_session):
    """Neither the user nor the detail row survives a failed location insert"""
    profile = profile_factory()

    with patch.object(
        ProfileStore, "_insert_location", side_effect=RuntimeError("location insert failed")
    ):
        result = await profile_store.save(profile)

    assert not result.ok
    assert isinstance(result.error, PersistenceError)
    assert isinstance(result.error.original_exception, RuntimeError)
    assert result.error.context["payload"]["email"] == profile.email

    assert await count_rows(db_session, UserRecord) == 0
    assert await count_rows(db_session, UserDetailRecord) == 0
    assert await count_rows(db_session, LocationRecord) == 0


@pytest.mark.asyncio
async def test_invalid_gender_rejects_whole_profile(profile_store, profile_factory, db_session):
    profile = profile_factory(gender="unknown")

    result = await profile_store.save(profile)

    assert isinstance(result.error, PersistenceError)
    assert result.error.context["payload"]["gender"] == "unknown"
    assert await count_rows(db_session, UserRecord) == 0
    assert await count_rows(db_session, UserDetailRecord) == 0


@pytest.mark.asyncio
async def test_duplicate_email_is_unique_violation(profile_store, profile_factory, db_session):
    first = profile_factory(email="dup@example.com")
    second = profile_factory(email="dup@example.com")

    assert (await profile_store.save(first)).ok
    result = await profile_store.save(second)

    assert isinstance(result.error, PersistenceError)
    assert result.error.context["constraint"] == "unique"
    assert await count_rows(db_session, UserRecord) == 1
    assert await count_rows(db_session, LocationRecord) == 1


@pytest.mark.asyncio
async def test_duplicate_username_is_unique_violation(profile_store, profile_factory):
    assert (await profile_store.save(profile_factory(username="bluefrog"))).ok

    result = await profile_store.save(profile_factory(username="bluefrog"))

    assert result.error.context["constraint"] == "unique"


@pytest.mark.asyncio
async def test_deleting_user_cascades(profile_store, profile_factory, db_session):
    user_id = (await profile_store.save(profile_factory())).value

    await db_session.execute(delete(UserRecord).where(UserRecord.id == user_id))
    await db_session.commit()

    assert await count_rows(db_session, UserDetailRecord) == 0
    assert await count_rows(db_session, LocationRecord) == 0


class TestFindUsers:
    """Filtered, paginated reads"""

    @pytest.mark.asyncio
    async def test_city_is_case_insensitive_substring(self, profile_store, profile_factory):
        await profile_store.save(profile_factory(city="Los Angeles", country="United States"))
        await profile_store.save(profile_factory(city="Paris"))

        for term in ("angeles", "Los Angeles", "los angeles", "ANGELES"):
            total, users = await profile_store.find_users(city=term)
            assert total == 1, term
            assert users[0].location.city == "Los Angeles"

    @pytest.mark.asyncio
    async def test_city_non_substring_does_not_match(self, profile_store, profile_factory):
        await profile_store.save(profile_factory(city="Los Angeles", country="United States"))

        total, users = await profile_store.find_users(city="engeles")

        assert total == 0
        assert users == []

    @pytest.mark.asyncio
    async def test_filters_are_combined(self, profile_store, profile_factory):
        await profile_store.save(profile_factory(gender="male", city="Lyon", country="France"))
        await profile_store.save(profile_factory(gender="female", city="Lyon", country="France"))
        await profile_store.save(profile_factory(gender="male", city="Leeds", country="United Kingdom"))

        total, users = await profile_store.find_users(gender="male", country="fran")

        assert total == 1
        assert users[0].location.city == "Lyon"
        assert users[0].detail.gender == Gender.MALE

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, profile_store, profile_factory):
        await profile_store.save(profile_factory(city="Paris"))

        total, _ = await profile_store.find_users(city="%")

        assert total == 0

    @pytest.mark.asyncio
    async def test_no_match(self, profile_store, profile_factory):
        await profile_store.save(profile_factory(city="Paris"))

        total, users = await profile_store.find_users(city="Atlantis")

        assert total == 0
        assert users == []

    @pytest.mark.asyncio
    async def test_pagination(self, profile_store, profile_factory):
        for _ in range(5):
            await profile_store.save(profile_factory())

        total, first_page = await profile_store.find_users(page=1, per_page=2)
        _, last_page = await profile_store.find_users(page=3, per_page=2)

        assert total == 5
        assert len(first_page) == 2
        assert len(last_page) == 1
        assert first_page[0].id < first_page[1].id < last_page[0].id

    @pytest.mark.asyncio
    async def test_read_failure_raises_persistence_error(self, session_maker, test_engine):
        store = ProfileStore(session_maker)
        async with test_engine.begin() as conn:
            await conn.run_sync(LocationRecord.__table__.drop)

        with pytest.raises(PersistenceError):
            await store.find_users(city="Paris")

        async with test_engine.begin() as conn:
            await conn.run_sync(LocationRecord.__table__.create)
