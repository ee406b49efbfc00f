"""
Slot lock strategy interface.
Allows swapping between different concurrency control approaches.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import AsyncContextManager


class SlotLock(ABC):
    """
    Interface for per-(turf, date) mutual exclusion around a commit.

    Implementations:
    - LocalSlotLock: asyncio locks, serializes writers inside one process
    - RedisSlotLock: distributed lock shared by every API process
    - OptimisticSlotLock: no lock, rely on the DB version guard alone

    A lock only narrows the race window. The interval store's conditional
    version update decides every commit whichever lock is configured.
    """

    @abstractmethod
    def hold(self, turf_id: int, day: date) -> AsyncContextManager[None]:
        """
        Hold exclusivity for one turf and date for the duration of the block.

        Args:
            turf_id: Turf being written
            day: Calendar date being written
        """
        pass
