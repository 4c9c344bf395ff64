"""
Redis response cache for product reads.

Every catalog read is cached under a ``products:`` key; any mutation flushes
all of them at once with :func:`invalidate_product_caches`.
"""

import json
import logging
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)

CACHE_PREFIX = 'products'

redis_client = None


def init_cache(app):
    """Create the Redis client, or leave caching disabled"""
    global redis_client

    if not app.config.get('CACHE_ENABLED'):
        redis_client = None
        app.logger.info("Response cache disabled")
        return None

    try:
        client = redis.Redis(
            host=app.config['REDIS_HOST'],
            port=app.config['REDIS_PORT'],
            db=app.config['REDIS_DB'],
            password=app.config['REDIS_PASSWORD'],
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        client.ping()
        redis_client = client
        app.logger.info("Redis connection established")
    except redis.RedisError as e:
        app.logger.warning(f"Redis connection failed: {e}. Caching will be disabled.")
        redis_client = None

    return redis_client


def get_redis():
    """Get Redis client instance"""
    return redis_client


def cache_key(*parts: Any) -> str:
    """Build a cache key under the products prefix"""
    return ':'.join([CACHE_PREFIX] + [str(part) for part in parts])


def get_from_cache(key: str, client) -> Optional[Any]:
    """Get data from Redis cache"""
    if not client:
        return None

    try:
        cached_data = client.get(key)
        if cached_data:
            return json.loads(cached_data)
    except (redis.RedisError, ValueError) as e:
        logger.warning(f"Error reading from cache key {key}: {e}")

    return None


def set_cache(key: str, data: Any, ttl: int, client) -> bool:
    """Set data in Redis cache with TTL"""
    if not client:
        return False

    try:
        client.setex(key, ttl, json.dumps(data, default=str))
        return True
    except redis.RedisError as e:
        logger.warning(f"Error setting cache key {key}: {e}")
        return False


def clear_cache_pattern(pattern: str, client) -> int:
    """Clear cache keys matching a pattern"""
    if not client:
        return 0

    try:
        keys = client.keys(pattern)
        if keys:
            return client.delete(*keys)
        return 0
    except redis.RedisError as e:
        logger.warning(f"Error clearing cache pattern {pattern}: {e}")
        return 0


def invalidate_product_caches() -> int:
    """Drop every cached product read"""
    cleared = clear_cache_pattern(f"{CACHE_PREFIX}:*", get_redis())
    if cleared:
        logger.debug(f"Cleared {cleared} cached product entries")
    return cleared
