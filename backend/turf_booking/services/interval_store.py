"""
Interval store: the committed bookings and blocks of every turf and date.

CONCURRENCY STRATEGY: Slot Lock + Optimistic Version Guard
==========================================================

Problem:
  Two users ask for 18:00-20:00 on the same turf and date at the same time.
  Both query for overlaps, both see none, both insert.
  Result: Double booking.

Solution:
  Every (turf, date) has a guard row in `turf_days` with a `version` column.
  A commit runs in one transaction:

  1. Read the guard row's current version
  2. SELECT overlapping intervals -> any hit raises IntervalConflict
  3. UPDATE turf_days SET version = version + 1
     WHERE turf_id = :turf AND date = :date AND version = :read_version
  4. If rows_affected == 0, another writer committed in between -> roll back
     and run the attempt again (which re-checks overlaps)
  5. INSERT the interval and COMMIT

  The version bump makes the overlap check and the insert one atomic step
  per (turf, date): two transactions cannot both move the same version.
  On PostgreSQL the second UPDATE waits for the first transaction and then
  matches no row. An EXCLUDE constraint on the intervals table (see the
  initial migration) backs this up at the storage level.

  The configured SlotLock wraps the whole sequence so that writers in the
  same process (or, with Redis, the same cluster) queue up instead of
  burning retries. The lock is an optimization; the version guard is the
  correctness boundary and is never skipped.

Different turfs and different dates never contend with each other.
"""

import time
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from turf_booking.core.errors import IntervalConflict
from turf_booking.core.logging import get_logger
from turf_booking.core.metrics import record_commit, slot_lock_wait
from turf_booking.models.interval import Interval, IntervalKind, TurfDay
from turf_booking.services.interfaces.slot_lock import SlotLock

logger = get_logger(__name__)

DEFAULT_MAX_COMMIT_ATTEMPTS = 3

# Name of the PostgreSQL exclusion constraint created by the initial migration
OVERLAP_CONSTRAINT = "no_interval_overlap"


class StaleTurfDay(Exception):
    """The guard row moved between our read and our conditional update."""


def _overlap_query(turf_id: int, day: date, start_hour: int, end_hour: int):
    return (
        select(Interval)
        .where(
            Interval.turf_id == turf_id,
            Interval.date == day,
            Interval.start_hour < end_hour,
            Interval.end_hour > start_hour,
        )
        .order_by(Interval.id.asc())
    )


class IntervalStore:
    """
    Owns the committed interval set. Nothing else writes to `intervals`.

    Every operation opens its own session from `session_factory`, so reads
    see only committed data and a commit is exactly one transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        slot_lock: SlotLock,
        max_commit_attempts: int = DEFAULT_MAX_COMMIT_ATTEMPTS,
    ):
        if max_commit_attempts < 1:
            raise ValueError("max_commit_attempts must be at least 1")
        self.session_factory = session_factory
        self.slot_lock = slot_lock
        self.max_commit_attempts = max_commit_attempts

    async def find_conflicts(
        self, turf_id: int, day: date, start_hour: int, end_hour: int
    ) -> list[Interval]:
        """Bookings and blocks on turf/day overlapping [start_hour, end_hour), oldest first."""
        async with self.session_factory() as session:
            result = await session.execute(_overlap_query(turf_id, day, start_hour, end_hour))
            return list(result.scalars().all())

    async def commit(
        self,
        turf_id: int,
        day: date,
        start_hour: int,
        end_hour: int,
        kind: IntervalKind,
        holder_id: int,
    ) -> Interval:
        """
        Insert the interval only if nothing overlaps it at commit time.
        Raises IntervalConflict otherwise; storage errors propagate as-is.
        """
        wait_started = time.perf_counter()
        async with self.slot_lock.hold(turf_id, day):
            slot_lock_wait.observe(time.perf_counter() - wait_started)
            await self._ensure_turf_day(turf_id, day)

            for attempt in range(1, self.max_commit_attempts + 1):
                try:
                    interval = await self._attempt_commit(
                        turf_id, day, start_hour, end_hour, kind, holder_id
                    )
                except StaleTurfDay:
                    record_commit("retry")
                    logger.info(
                        "commit_retry",
                        turf_id=turf_id,
                        date=str(day),
                        attempt=attempt,
                        reason="version_conflict",
                    )
                    continue

                record_commit("committed")
                logger.info(
                    "interval_committed",
                    interval_id=interval.id,
                    turf_id=turf_id,
                    date=str(day),
                    start_hour=start_hour,
                    end_hour=end_hour,
                    kind=interval.kind,
                    holder_id=holder_id,
                    attempt=attempt,
                )
                return interval

        record_commit("exhausted")
        logger.warning(
            "commit_attempts_exhausted",
            turf_id=turf_id,
            date=str(day),
            attempts=self.max_commit_attempts,
        )
        raise IntervalConflict()

    async def list_for_turf(self, turf_id: int, day: date) -> list[Interval]:
        """Occupied view of one turf and date, ordered by start hour."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Interval)
                .where(Interval.turf_id == turf_id, Interval.date == day)
                .order_by(Interval.start_hour.asc(), Interval.id.asc())
            )
            return list(result.scalars().all())

    async def list_for_user(self, user_id: int) -> list[Interval]:
        """A user's bookings, newest first. Blocks are never listed here."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Interval)
                .where(
                    Interval.holder_id == user_id,
                    Interval.kind == IntervalKind.BOOKING.value,
                )
                .order_by(Interval.date.desc(), Interval.start_hour.desc(), Interval.id.desc())
            )
            return list(result.scalars().all())

    async def _ensure_turf_day(self, turf_id: int, day: date) -> None:
        """Create the guard row for (turf, day) unless it already exists."""
        async with self.session_factory() as session:
            existing = await session.scalar(
                select(TurfDay.version).where(TurfDay.turf_id == turf_id, TurfDay.date == day)
            )
            if existing is not None:
                return

            session.add(TurfDay(turf_id=turf_id, date=day, version=0))
            try:
                await session.commit()
            except IntegrityError:
                # Another writer created it first; that row serves us too
                await session.rollback()

    async def _attempt_commit(
        self,
        turf_id: int,
        day: date,
        start_hour: int,
        end_hour: int,
        kind: IntervalKind,
        holder_id: int,
    ) -> Interval:
        async with self.session_factory() as session:
            try:
                # Step 1: Read the guard version
                version = await session.scalar(
                    select(TurfDay.version).where(TurfDay.turf_id == turf_id, TurfDay.date == day)
                )

                # Step 2: Overlap check inside the same transaction
                result = await session.execute(_overlap_query(turf_id, day, start_hour, end_hour))
                conflicts = list(result.scalars().all())
                if conflicts:
                    # Keep loaded values readable once the session is gone
                    session.expunge_all()
                    await session.rollback()
                    record_commit("conflict")
                    raise IntervalConflict(conflicts)

                # Step 3: Optimistic lock - bump only if nobody else did
                bumped = await session.execute(
                    update(TurfDay)
                    .where(
                        TurfDay.turf_id == turf_id,
                        TurfDay.date == day,
                        TurfDay.version == version,
                    )
                    .values(version=TurfDay.version + 1)
                    .execution_options(synchronize_session=False)
                )
                if bumped.rowcount == 0:
                    await session.rollback()
                    raise StaleTurfDay()

                # Step 4: Insert and commit
                interval = Interval(
                    turf_id=turf_id,
                    date=day,
                    start_hour=start_hour,
                    end_hour=end_hour,
                    kind=IntervalKind(kind).value,
                    holder_id=holder_id,
                )
                session.add(interval)
                await session.flush()
                await session.commit()
                await session.refresh(interval)
                return interval
            except IntegrityError as e:
                await session.rollback()
                if OVERLAP_CONSTRAINT in str(e.orig):
                    record_commit("conflict")
                    logger.warning("overlap_constraint_rejected", turf_id=turf_id, date=str(day))
                    raise IntervalConflict() from e
                raise
