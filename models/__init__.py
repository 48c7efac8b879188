"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and the Gender enum
    user: UserRecord (identity, unique email and username)
    user_detail: UserDetailRecord (demographics, contact, pictures)
    location: LocationRecord (address and coordinates)

Relationships:
    - UserRecord → UserDetailRecord (one-to-one, cascade delete)
    - UserRecord → LocationRecord (one-to-one, cascade delete)

A profile is always written as the full triple inside one transaction,
see ingestion.loaders.profile_store.ProfileStore.

Importing this package registers every table on Base.metadata.
"""

from models.base import Base, Gender
from models.user import UserRecord
from models.user_detail import UserDetailRecord
from models.location import LocationRecord

__all__ = [
    "Base",
    "Gender",
    "UserRecord",
    "UserDetailRecord",
    "LocationRecord",
]
