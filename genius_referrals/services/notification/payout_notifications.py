"""
Payout notifications.

Sent after a payout transition has been committed. Delivery is
best-effort: a failure is logged and reported as False, never raised, so it
cannot undo the transition it accompanies.
"""

from typing import Any

from loguru import logger

from genius_referrals.config.settings import Settings, settings as default_settings
from genius_referrals.models.payout_request import PayoutRequest
from genius_referrals.models.profile import Profile
from genius_referrals.services.notification.notifier import Notifier
from genius_referrals.services.notification.templates import (
    PAYOUT_PAID,
    PAYOUT_REJECTED,
    PAYOUT_REQUEST_ADMIN,
    PAYOUT_REQUESTED,
)


def _referrer_name(referrer: Profile) -> str:
    name = " ".join(p for p in (referrer.first_name, referrer.last_name) if p)
    return name or referrer.username


def _payout_data(
    payout: PayoutRequest, referrer: Profile, settings: Settings
) -> dict[str, Any]:
    return {
        "payout_id": payout.id,
        "amount": f"{payout.amount:.2f}",
        "payment_method": payout.payment_method,
        "commission_count": len(payout.commission_ids or []),
        "payment_ref": payout.payment_ref or "",
        "notes": payout.notes or "No reason given",
        "referrer_name": _referrer_name(referrer),
        "referrer_email": referrer.email or "",
        "app_url": settings.app_url,
    }


async def _deliver(
    notifier: Notifier, to: str | None, template: str, data: dict[str, Any]
) -> bool:
    if not to:
        logger.warning(
            "No recipient for payout notification",
            extra={"template": template, "payout_id": data["payout_id"]},
        )
        return False

    try:
        await notifier.send(to, template, data)
        logger.info(
            "Payout notification sent",
            extra={"template": template, "payout_id": data["payout_id"]},
        )
        return True

    except Exception as e:
        logger.warning(
            "Failed to send payout notification",
            extra={
                "template": template,
                "payout_id": data["payout_id"],
                "error": str(e),
            },
        )
        return False


async def notify_payout_requested(
    notifier: Notifier,
    payout: PayoutRequest,
    referrer: Profile,
    settings: Settings | None = None,
) -> bool:
    """
    Confirm a payout request to the referrer and alert the admin inbox.

    Returns:
        True if both messages were sent
    """
    settings = settings or default_settings
    data = _payout_data(payout, referrer, settings)
    to_referrer = await _deliver(notifier, referrer.email, PAYOUT_REQUESTED, data)
    to_admin = await _deliver(
        notifier, settings.admin_notification_email, PAYOUT_REQUEST_ADMIN, data
    )
    return to_referrer and to_admin


async def notify_payout_paid(
    notifier: Notifier,
    payout: PayoutRequest,
    referrer: Profile,
    settings: Settings | None = None,
) -> bool:
    """Tell the referrer their payout was sent, with the payment reference."""
    settings = settings or default_settings
    return await _deliver(
        notifier,
        referrer.email,
        PAYOUT_PAID,
        _payout_data(payout, referrer, settings),
    )


async def notify_payout_rejected(
    notifier: Notifier,
    payout: PayoutRequest,
    referrer: Profile,
    settings: Settings | None = None,
) -> bool:
    """Tell the referrer their payout was rejected and why."""
    settings = settings or default_settings
    return await _deliver(
        notifier,
        referrer.email,
        PAYOUT_REJECTED,
        _payout_data(payout, referrer, settings),
    )
