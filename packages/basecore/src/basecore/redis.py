"""
Redis client utilities for basecore.

Provides a lazily created Redis client; nothing connects at import time.
Stream operations live in ``tracking_core.streams``.
"""

import functools

import redis

from basecore.settings import get_settings


@functools.lru_cache()
def get_redis_client() -> redis.Redis:
    """
    Get Redis client (cached).

    The client owns a connection pool and is safe to share between threads.
    """
    return redis.from_url(get_settings().REDIS_URL, decode_responses=True)
