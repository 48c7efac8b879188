from typing import Optional
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base, IdType


class LocationRecord(Base):
    """
    Postal address and coordinates for a user (1:1).

    Coordinates and postcode are kept as text exactly as received.
    """
    __tablename__ = "locations"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(
        IdType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    street_number = Column(String(50), nullable=True)
    street_name = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True, index=True)
    state = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True, index=True)
    postcode = Column(String(50), nullable=True)
    latitude = Column(String(50), nullable=True)
    longitude = Column(String(50), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserRecord", back_populates="location")

    @property
    def full_street(self) -> Optional[str]:
        parts = [p for p in (self.street_number, self.street_name) if p is not None]
        return " ".join(parts) if parts else None
