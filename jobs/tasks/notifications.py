"""
Notification delivery task.

Sends templated payout emails from the worker. Provider failures are
retried by the broker's Retries middleware; bad templates are not.
"""

from typing import Any

import dramatiq
from loguru import logger

from genius_referrals.config.operational_constants import (
    DRAMATIQ_TIME_LIMIT_SHORT,
    NOTIFICATION_MAX_RETRIES,
)
from genius_referrals.config.settings import settings
from genius_referrals.services.notification.notifier import EmailNotifier
from genius_referrals.utils.exceptions import ValidationError
from jobs.async_runner import run_async
from jobs.broker import broker


@dramatiq.actor(
    broker=broker,
    max_retries=NOTIFICATION_MAX_RETRIES,
    time_limit=DRAMATIQ_TIME_LIMIT_SHORT,
)
def send_email_notification(to: str, template: str, data: dict[str, Any]) -> None:
    """
    Deliver one queued email.

    Args:
        to: Recipient address
        template: Template name
        data: Template variables
    """
    try:
        run_async(_send_email_async(to, template, data))
    except ValidationError as e:
        logger.error(
            f"Dropping notification with invalid template data: {e}",
            extra={"template": template},
        )


async def _send_email_async(to: str, template: str, data: dict[str, Any]) -> None:
    notifier = EmailNotifier(settings)
    try:
        await notifier.send(to, template, data)
    finally:
        await notifier.close()
