"""
Attribution services package.

Contains modular services for lead attribution:
- resolver: Cookie > email > phone > direct precedence and rate locking
- cookies: Attribution cookie encoding with the attribution window
- statistics: Per-referrer attribution breakdown
- tracking_codes: Referrer tracking code lifecycle
"""

from genius_referrals.services.attribution.cookies import (
    ATTRIBUTION_COOKIE_NAME,
    cookie_max_age,
    decode_attribution_cookie,
    encode_attribution_cookie,
)
from genius_referrals.services.attribution.resolver import (
    DIRECT_ATTRIBUTION,
    AttributionResolver,
    AttributionResult,
    lock_attribution,
    referrer_type_for_role,
)
from genius_referrals.services.attribution.statistics import AttributionStatistics
from genius_referrals.services.attribution.tracking_codes import (
    TrackingCodeInfo,
    TrackingCodeService,
    initials_from_name,
    validate_custom_code,
)


__all__ = [
    # Resolution
    "AttributionResolver",
    "AttributionResult",
    "DIRECT_ATTRIBUTION",
    "lock_attribution",
    "referrer_type_for_role",
    # Cookies
    "ATTRIBUTION_COOKIE_NAME",
    "cookie_max_age",
    "decode_attribution_cookie",
    "encode_attribution_cookie",
    # Statistics
    "AttributionStatistics",
    # Tracking codes
    "TrackingCodeInfo",
    "TrackingCodeService",
    "initials_from_name",
    "validate_custom_code",
]
