"""
Optimistic slot lock - no mutual exclusion.
Relies entirely on the database version guard.
"""

from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

from turf_booking.services.interfaces.slot_lock import SlotLock


class OptimisticSlotLock(SlotLock):
    """
    No lock - concurrent writers race to the conditional version update.

    Use when:
    - Low contention per turf and date
    - The database is shared by many processes and Redis is unavailable
    """

    @asynccontextmanager
    async def hold(self, turf_id: int, day: date) -> AsyncIterator[None]:
        yield
