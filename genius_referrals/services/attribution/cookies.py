"""
Attribution cookie helpers.

The cookie value is a small JSON document holding the referrer's tracking
code and the time it was set. Cookies older than the attribution window are
treated as absent.
"""

import json
from datetime import datetime, timedelta

from loguru import logger

from genius_referrals.config.business_constants import ATTRIBUTION_COOKIE_NAME
from genius_referrals.utils.datetime_utils import ensure_utc, utc_now


__all__ = [
    "ATTRIBUTION_COOKIE_NAME",
    "cookie_max_age",
    "decode_attribution_cookie",
    "encode_attribution_cookie",
]


def cookie_max_age(window_days: int) -> int:
    """Max-Age in seconds for the attribution cookie."""
    return int(timedelta(days=window_days).total_seconds())


def encode_attribution_cookie(code: str, set_at: datetime | None = None) -> str:
    """Build the cookie value for a referral link visit."""
    set_at = ensure_utc(set_at or utc_now())
    return json.dumps(
        {"code": code, "set_at": set_at.isoformat()},
        separators=(",", ":"),
    )


def decode_attribution_cookie(
    raw: str | None, window_days: int, now: datetime | None = None
) -> str | None:
    """
    Extract the tracking code from a cookie value.

    Args:
        raw: Cookie value as received
        window_days: Attribution window
        now: Reference time (defaults to current UTC time)

    Returns:
        Tracking code, or None if missing, malformed or expired
    """
    if not raw:
        return None

    try:
        payload = json.loads(raw)
        code = str(payload["code"]).strip()
        set_at = ensure_utc(datetime.fromisoformat(payload["set_at"]))
    except (ValueError, KeyError, TypeError):
        logger.debug("Ignoring malformed attribution cookie")
        return None

    if not code:
        return None

    if ensure_utc(now or utc_now()) - set_at > timedelta(days=window_days):
        return None

    return code
