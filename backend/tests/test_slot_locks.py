"""
Tests for slot lock strategies and the strategy factory.
"""

import asyncio
from datetime import date

import pytest

from turf_booking.core.config import Settings
from turf_booking.infrastructure.redis_lock import RedisSlotLock
from turf_booking.services.interfaces.local_slot_lock import LocalSlotLock
from turf_booking.services.interfaces.optimistic_slot_lock import OptimisticSlotLock
from turf_booking.services.strategy_factory import get_slot_lock

DAY = date(2024, 6, 1)


@pytest.mark.asyncio
async def test_local_lock_serializes_same_key():
    lock = LocalSlotLock()
    events = []

    async def writer(name: str):
        async with lock.hold(1, DAY):
            events.append(f"{name}:enter")
            await asyncio.sleep(0.01)
            events.append(f"{name}:exit")

    await asyncio.gather(writer("a"), writer("b"))

    assert events in (
        ["a:enter", "a:exit", "b:enter", "b:exit"],
        ["b:enter", "b:exit", "a:enter", "a:exit"],
    )


@pytest.mark.asyncio
async def test_local_lock_does_not_serialize_different_keys():
    lock = LocalSlotLock()
    inside = asyncio.Event()

    async def first():
        async with lock.hold(1, DAY):
            await asyncio.wait_for(inside.wait(), timeout=1)

    async def second():
        async with lock.hold(1, date(2024, 6, 2)):
            inside.set()

    await asyncio.gather(first(), second())


@pytest.mark.asyncio
async def test_local_lock_forgets_released_keys():
    lock = LocalSlotLock()
    async with lock.hold(1, DAY):
        assert len(lock) == 1
    assert len(lock) == 0


@pytest.mark.asyncio
async def test_local_lock_releases_on_error():
    lock = LocalSlotLock()
    with pytest.raises(RuntimeError):
        async with lock.hold(1, DAY):
            raise RuntimeError("boom")

    async with lock.hold(1, DAY):
        pass
    assert len(lock) == 0


@pytest.mark.asyncio
async def test_redis_lock_fails_open_when_redis_disabled():
    lock = RedisSlotLock()
    entered = False
    async with lock.hold(1, DAY):
        entered = True
    assert entered


def test_redis_lock_key_is_per_turf_and_date():
    assert RedisSlotLock.key(7, DAY) == "slot-lock:7:2024-06-01"


@pytest.mark.parametrize(
    "strategy, expected",
    [
        ("local", LocalSlotLock),
        ("redis", RedisSlotLock),
        ("optimistic", OptimisticSlotLock),
        ("LOCAL", LocalSlotLock),
        ("bogus", LocalSlotLock),
    ],
)
def test_strategy_factory(strategy, expected):
    assert isinstance(get_slot_lock(Settings(SLOT_LOCK_STRATEGY=strategy)), expected)
