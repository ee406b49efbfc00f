"""
Turf model: a bookable venue owned by exactly one owner.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from turf_booking.db.base import Base, TimestampMixin


class Turf(Base, TimestampMixin):
    __tablename__ = "turfs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    image_url = Column(String(1000), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    owner = relationship("User", back_populates="turfs", lazy="joined")

    def __repr__(self) -> str:
        return f"<Turf(id={self.id}, name={self.name}, owner={self.owner_id})>"
