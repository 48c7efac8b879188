from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base, IdType


class UserRecord(Base):
    """
    Identity part of an ingested profile.

    Owns exactly one UserDetailRecord and one LocationRecord; both are
    removed with the user (ON DELETE CASCADE plus ORM delete-orphan).
    """
    __tablename__ = "users"

    id = Column(IdType, primary_key=True, autoincrement=True)

    # Identity
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    detail = relationship(
        "UserDetailRecord",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    location = relationship(
        "LocationRecord",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
