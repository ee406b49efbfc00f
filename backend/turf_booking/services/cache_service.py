"""
Redis caching service for the public turf listing.

CACHING STRATEGY
================

What we cache:
  - The full turf listing with owner details (JSON-serialized)
  - Cache key: "turfs:list"

Why:
  - The turf list is the landing page of every client session
  - Turfs change rarely (only when an owner publishes one)

Invalidation strategy:
  - On turf creation: delete the key
  - TTL-based expiry as safety net (5 minutes)

Why NOT cache occupied slots:
  - Clients render availability from it right before booking
  - A stale occupied view sends users into avoidable slot_occupied errors
  - The admission path never reads a cache; it always asks the database
"""

import json
from typing import Optional

from redis.exceptions import RedisError

from turf_booking.core.config import get_settings
from turf_booking.core.logging import get_logger
from turf_booking.core.metrics import record_cache_operation
from turf_booking.infrastructure.redis_client import get_redis

logger = get_logger(__name__)

TURF_LIST_KEY = "turfs:list"


async def get_cached_turfs() -> Optional[list[dict]]:
    """Retrieve the cached turf listing."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(TURF_LIST_KEY)
    except RedisError as e:
        logger.error("cache_get_error", key=TURF_LIST_KEY, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data:
        logger.debug("cache_hit", key=TURF_LIST_KEY)
        return json.loads(data)
    logger.debug("cache_miss", key=TURF_LIST_KEY)
    return None


async def set_cached_turfs(data: list[dict]) -> None:
    """Cache the turf listing with TTL."""
    client = await get_redis()
    if not client:
        return

    ttl = get_settings().REDIS_CACHE_TTL
    try:
        await client.setex(TURF_LIST_KEY, ttl, json.dumps(data, default=str))
        logger.debug("cache_set", key=TURF_LIST_KEY, ttl=ttl)
    except RedisError as e:
        logger.error("cache_set_error", key=TURF_LIST_KEY, error=str(e))


async def invalidate_turf_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        deleted = await client.delete(TURF_LIST_KEY)
        logger.info("cache_invalidated", keys_deleted=deleted)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except RedisError as e:
        return {"status": "error", "error": str(e)}
