"""
Slot lock strategy factory.
Configures which lock guards interval commits.
"""

from turf_booking.core.config import Settings
from turf_booking.core.logging import get_logger
from turf_booking.services.interfaces.slot_lock import SlotLock
from turf_booking.services.interfaces.local_slot_lock import LocalSlotLock
from turf_booking.services.interfaces.optimistic_slot_lock import OptimisticSlotLock
from turf_booking.infrastructure.redis_lock import RedisSlotLock

logger = get_logger(__name__)


def get_slot_lock(settings: Settings) -> SlotLock:
    """
    Build the configured slot lock.

    Strategy selection via SLOT_LOCK_STRATEGY:
    - local (default): single-process deployments
    - redis: several API processes sharing one database
    - optimistic: no lock, database guard only
    """
    strategy = settings.SLOT_LOCK_STRATEGY.lower()

    if strategy == "redis":
        lock: SlotLock = RedisSlotLock(
            timeout=settings.SLOT_LOCK_TIMEOUT,
            blocking_timeout=settings.SLOT_LOCK_BLOCKING_TIMEOUT,
        )
    elif strategy == "optimistic":
        lock = OptimisticSlotLock()
    else:
        if strategy != "local":
            logger.warning("unknown_slot_lock_strategy", strategy=strategy, fallback="local")
        lock = LocalSlotLock()

    logger.info("slot_lock_configured", strategy=type(lock).__name__)
    return lock
