"""
Distributed per-(turf, date) slot lock backed by Redis.

Circuit Breaker Pattern:
  On Redis failure or lock timeout the lock "fails open" and the commit
  proceeds unserialized. The database version guard in the interval store
  remains authoritative, so correctness holds; only the fast path is lost.
"""

from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

from redis.exceptions import LockError, RedisError

from turf_booking.core.logging import get_logger
from turf_booking.core.metrics import redis_connection_errors
from turf_booking.infrastructure.redis_client import get_redis
from turf_booking.services.interfaces.slot_lock import SlotLock

logger = get_logger(__name__)


class RedisSlotLock(SlotLock):
    """
    Redis lock per (turf, date), shared by every API process.

    Use when:
    - Several API workers or hosts serve the same turfs
    - Popular turfs see bursts of requests for the same evening slots
    """

    def __init__(self, timeout: int = 10, blocking_timeout: float = 5.0):
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    @staticmethod
    def key(turf_id: int, day: date) -> str:
        return f"slot-lock:{turf_id}:{day.isoformat()}"

    @asynccontextmanager
    async def hold(self, turf_id: int, day: date) -> AsyncIterator[None]:
        client = await get_redis()
        if client is None:
            yield
            return

        lock = client.lock(
            self.key(turf_id, day),
            timeout=self.timeout,
            blocking_timeout=self.blocking_timeout,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            redis_connection_errors.inc()
            logger.warning("slot_lock_unavailable", turf_id=turf_id, date=str(day), error=str(e))
            acquired = False
        else:
            if not acquired:
                logger.warning("slot_lock_timeout", turf_id=turf_id, date=str(day))

        try:
            yield
        finally:
            if acquired:
                try:
                    await lock.release()
                except (LockError, RedisError) as e:
                    # Expired or Redis went away; the DB guard already decided
                    logger.warning("slot_lock_release_failed", turf_id=turf_id, error=str(e))
