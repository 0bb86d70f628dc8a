"""
Dramatiq broker configuration.

Redis-based message broker for notification delivery.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import (
    AgeLimit,
    Callbacks,
    CurrentMessage,
    Pipelines,
    Retries,
    ShutdownNotifications,
    TimeLimit,
)
from loguru import logger

from genius_referrals.config.logging import setup_logging
from genius_referrals.config.operational_constants import (
    NOTIFICATION_MAX_BACKOFF_MS,
    NOTIFICATION_MAX_RETRIES,
    NOTIFICATION_MIN_BACKOFF_MS,
)
from genius_referrals.config.settings import settings
from genius_referrals.utils.exceptions import ValidationError
from genius_referrals.utils.redis_utils import get_redis_url_masked


# Workers import the broker before any actor, so sinks are set up here
setup_logging()


def _should_retry(retries_so_far: int, exception: Exception) -> bool:
    # A bad template or missing data fails the same way every time
    if isinstance(exception, ValidationError):
        return False
    return retries_so_far < NOTIFICATION_MAX_RETRIES


# Middleware list replaces the defaults so only one Retries instance runs
# ShutdownNotifications: Allows workers to gracefully shutdown
# CurrentMessage: Provides access to current message in actors
# Retries: Exponential backoff for failed deliveries
redis_broker = RedisBroker(
    host=settings.redis_host,
    port=settings.redis_port,
    password=settings.redis_password if settings.redis_password else None,
    db=settings.redis_db,
    middleware=[
        AgeLimit(),
        TimeLimit(),
        ShutdownNotifications(),
        Callbacks(),
        Pipelines(),
        CurrentMessage(),
        Retries(
            max_retries=NOTIFICATION_MAX_RETRIES,
            min_backoff=NOTIFICATION_MIN_BACKOFF_MS,
            max_backoff=NOTIFICATION_MAX_BACKOFF_MS,
            retry_when=_should_retry,
        ),
    ],
)

# Set as default broker
dramatiq.set_broker(redis_broker)

# Export broker
broker = redis_broker

logger.info(
    f"Dramatiq broker initialized: {get_redis_url_masked(settings)}"
)
