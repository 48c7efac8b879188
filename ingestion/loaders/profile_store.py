"""
Transactional repository for profiles stored across users, user_details and locations
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, func, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from models import UserRecord, UserDetailRecord, LocationRecord
from schemas.profile import ProfileData
from core.result import Result
from core.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)


def _is_unique_violation(error: IntegrityError) -> bool:
    reason = str(error.orig).lower()
    return "unique" in reason or "duplicate" in reason


class ProfileStore:
    """
    Persist and read profiles.

    Ensures:
    - The user, detail and location rows are written in one transaction
    - Any failure rolls back all three inserts
    - The offending payload travels with the error for logging

    Every call opens its own session, so one store can serve concurrent
    ingestion attempts and API requests.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def save(self, profile: ProfileData) -> Result[int]:
        """
        Insert a user with its detail and location.

        Args:
            profile: Flattened profile from a ProfileSource

        Returns:
            Result holding the new user id or a PersistenceError
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    user = await self._insert_user(session, profile)
                    await self._insert_detail(session, user, profile)
                    await self._insert_location(session, user, profile)
                    user_id = user.id
        except IntegrityError as e:
            context = {"operation": "save", "payload": profile.dict()}
            if _is_unique_violation(e):
                context["constraint"] = "unique"
            return Result.failure(PersistenceError(
                f"Constraint violation while storing {profile.username}",
                context=context,
                original_exception=e
            ))
        except Exception as e:
            return Result.failure(PersistenceError(
                f"Failed to store {profile.username}",
                context={"operation": "save", "payload": profile.dict()},
                original_exception=e
            ))

        logger.debug(f"Stored profile {profile.username} as user_id={user_id}")
        return Result.success(user_id)

    async def _insert_user(self, session: AsyncSession, profile: ProfileData) -> UserRecord:
        user = UserRecord(**profile.user_fields())
        session.add(user)
        await session.flush()
        return user

    async def _insert_detail(
        self, session: AsyncSession, user: UserRecord, profile: ProfileData
    ) -> UserDetailRecord:
        detail = UserDetailRecord(user_id=user.id, **profile.detail_fields())
        session.add(detail)
        await session.flush()
        return detail

    async def _insert_location(
        self, session: AsyncSession, user: UserRecord, profile: ProfileData
    ) -> LocationRecord:
        location = LocationRecord(user_id=user.id, **profile.location_fields())
        session.add(location)
        await session.flush()
        return location

    async def find_users(
        self,
        gender: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[int, List[UserRecord]]:
        """
        Return the total match count and one page of users.

        Filters are AND-combined; city and country are case-insensitive
        substring matches. Detail and location are eager-loaded.

        Raises:
            PersistenceError: If the store cannot be queried
        """
        filters = []

        if gender:
            filters.append(UserRecord.detail.has(UserDetailRecord.gender == gender))

        if city:
            filters.append(UserRecord.location.has(
                LocationRecord.city.icontains(city, autoescape=True)
            ))

        if country:
            filters.append(UserRecord.location.has(
                LocationRecord.country.icontains(country, autoescape=True)
            ))

        count_query = select(func.count()).select_from(UserRecord)
        query = (
            select(UserRecord)
            .options(selectinload(UserRecord.detail), selectinload(UserRecord.location))
            .order_by(UserRecord.id)
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        if filters:
            count_query = count_query.where(and_(*filters))
            query = query.where(and_(*filters))

        try:
            async with self.session_factory() as session:
                total = (await session.execute(count_query)).scalar_one()
                users = (await session.execute(query)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to query users",
                context={
                    "operation": "find_users",
                    "filters": {"gender": gender, "city": city, "country": country},
                    "page": page,
                    "per_page": per_page
                },
                original_exception=e
            )

        return total, list(users)
