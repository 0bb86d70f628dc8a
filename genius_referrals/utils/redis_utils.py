"""Redis connection utilities.

Provides helper functions for creating Redis connections with configuration
from settings. Callers own the returned client and pass it to the services
that need it.
"""

import redis.asyncio as redis

from genius_referrals.config.settings import Settings, settings as default_settings


def create_redis_client(settings: Settings | None = None) -> redis.Redis:
    """
    Create a Redis client with settings from config.

    Returns:
        redis.Redis: Configured Redis client with decode_responses=True

    Example:
        >>> redis_client = create_redis_client()
        >>> counter = RedisSubmissionCounter(redis_client)
    """
    settings = settings or default_settings
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        decode_responses=True,
    )


def get_redis_url_masked(settings: Settings | None = None) -> str:
    """
    Build Redis URL with masked password for safe logging.

    Returns:
        str: Redis connection URL with masked password
    """
    settings = settings or default_settings
    if settings.redis_password:
        return f"redis://:****@{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
    return f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
