"""
In-process slot lock: one asyncio.Lock per (turf, date).
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

from turf_booking.services.interfaces.slot_lock import SlotLock


class LocalSlotLock(SlotLock):
    """
    Serialize commits for the same turf and date within this process.

    Use when:
    - A single API process owns the database
    - Local development and tests

    Locks are reference counted and dropped once no coroutine holds or waits
    on them, so the table does not grow with every date ever booked.
    """

    def __init__(self):
        self._locks: dict[tuple[int, date], asyncio.Lock] = {}
        self._waiters: dict[tuple[int, date], int] = {}

    @asynccontextmanager
    async def hold(self, turf_id: int, day: date) -> AsyncIterator[None]:
        key = (turf_id, day)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
