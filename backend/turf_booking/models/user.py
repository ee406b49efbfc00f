"""
User model with secure password storage and a two-valued role.
"""

import enum

from sqlalchemy import Column, Integer, String, CheckConstraint
from sqlalchemy.orm import relationship

from turf_booking.db.base import Base, TimestampMixin


class Role(str, enum.Enum):
    USER = "user"
    OWNER = "owner"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(10), nullable=False, default=Role.USER.value)

    # Relationships
    turfs = relationship("Turf", back_populates="owner", lazy="selectin")

    __table_args__ = (
        CheckConstraint("role IN ('user', 'owner')", name="check_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
