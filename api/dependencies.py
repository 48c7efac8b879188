"""
FastAPI dependencies wiring the request path to the store
"""

from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import async_session_maker
from ingestion.loaders.profile_store import ProfileStore
from queries.user_query import UserQueryEngine


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session for the current request"""
    async with async_session_maker() as session:
        yield session


def get_profile_store() -> ProfileStore:
    return ProfileStore(async_session_maker)


def get_query_engine(store: ProfileStore = Depends(get_profile_store)) -> UserQueryEngine:
    return UserQueryEngine(store)
