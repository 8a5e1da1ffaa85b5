"""
Redis connection management module.
"""

from typing import Optional

import redis.asyncio as redis

from agrofinance.core.config import settings
from agrofinance.core.logging import get_logger

logger = get_logger(__name__)

# Global Redis client instance
_redis_client: Optional[redis.Redis] = None


async def get_redis_client() -> Optional[redis.Redis]:
    """
    Get the Redis client instance.

    Returns:
        Optional[redis.Redis]: Redis client instance or None if not available.
    """
    return _redis_client


async def init_redis() -> None:
    """
    Initialize Redis connection.

    A failed connection leaves the client unset; rate limiting then allows
    every request.
    """
    global _redis_client

    if not settings.redis_enabled:
        logger.info("redis_disabled")
        return

    try:
        _redis_client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        await _redis_client.ping()
        logger.info("redis_connected")
    except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
        logger.error("redis_connection_failed", error=str(e))
        _redis_client = None


async def close_redis() -> None:
    """
    Close Redis connection.
    """
    global _redis_client

    if _redis_client:
        try:
            await _redis_client.aclose()
            logger.info("redis_closed")
        finally:
            _redis_client = None


async def is_redis_healthy() -> Optional[bool]:
    """
    Check if Redis connection is healthy.

    Returns:
        Optional[bool]: None when Redis is disabled, otherwise whether it answers a ping.
    """
    if not settings.redis_enabled:
        return None
    if not _redis_client:
        return False

    try:
        await _redis_client.ping()
        return True
    except (redis.ConnectionError, redis.TimeoutError, OSError):
        return False
