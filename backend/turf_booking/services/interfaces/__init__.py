"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .slot_lock import SlotLock
from .local_slot_lock import LocalSlotLock
from .optimistic_slot_lock import OptimisticSlotLock

__all__ = ['SlotLock', 'LocalSlotLock', 'OptimisticSlotLock']
