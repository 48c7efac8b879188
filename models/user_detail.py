from sqlalchemy import Column, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base, Gender, IdType


class UserDetailRecord(Base):
    """
    Demographic, contact and picture data for a user (1:1).

    gender is stored as a constrained string; values outside Gender are
    rejected when the row is flushed, which aborts the whole profile write.
    """
    __tablename__ = "user_details"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(
        IdType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    gender = Column(
        Enum(
            Gender,
            name="gender",
            native_enum=False,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        index=True,
    )
    date_of_birth = Column(DateTime, nullable=True)
    phone = Column(String(255), nullable=True)
    cell = Column(String(255), nullable=True)

    # Picture URLs are opaque strings
    picture_large = Column(String(2048), nullable=True)
    picture_medium = Column(String(2048), nullable=True)
    picture_thumbnail = Column(String(2048), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserRecord", back_populates="detail")
