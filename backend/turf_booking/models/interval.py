"""
Committed occupancy of a turf on a calendar date.

Key design decisions:
- Bookings and blocks share one table; `kind` tells them apart so a single
  overlap query covers both
- Hours are whole-hour, half-open [start_hour, end_hour) within one day
- `holder_id` is the owner of record: the booking user or the blocking owner
- TurfDay carries a version per (turf, date); every commit bumps it with a
  conditional UPDATE so two writers on the same day cannot both win
"""

import enum

from sqlalchemy import Column, Integer, String, Date, ForeignKey, Index, CheckConstraint

from turf_booking.db.base import Base, TimestampMixin


class IntervalKind(str, enum.Enum):
    BOOKING = "booking"
    BLOCK = "block"


class Interval(Base, TimestampMixin):
    __tablename__ = "intervals"

    id = Column(Integer, primary_key=True, index=True)
    turf_id = Column(Integer, ForeignKey("turfs.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_hour = Column(Integer, nullable=False)
    end_hour = Column(Integer, nullable=False)
    kind = Column(String(10), nullable=False)
    holder_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("start_hour >= 0 AND start_hour <= 23", name="check_interval_start_hour"),
        CheckConstraint("end_hour >= 1 AND end_hour <= 24", name="check_interval_end_hour"),
        CheckConstraint("start_hour < end_hour", name="check_interval_ordered"),
        CheckConstraint("kind IN ('booking', 'block')", name="check_interval_kind"),
        # Every overlap query filters on (turf, date) first
        Index("ix_intervals_turf_date", "turf_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Interval(id={self.id}, turf={self.turf_id}, date={self.date}, "
            f"[{self.start_hour},{self.end_hour}), kind={self.kind})>"
        )


class TurfDay(Base):
    __tablename__ = "turf_days"

    turf_id = Column(Integer, ForeignKey("turfs.id"), primary_key=True)
    date = Column(Date, primary_key=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<TurfDay(turf={self.turf_id}, date={self.date}, version={self.version})>"
