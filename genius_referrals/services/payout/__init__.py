"""
Payout services package.

- payout_request_handler: Request creation with atomic commission claim
- payout_lifecycle_handler: Approve (-> PAID) and reject (-> REJECTED)
- payout_query_service: Payout lookups
"""

from genius_referrals.services.payout.payout_lifecycle_handler import (
    PayoutLifecycleHandler,
)
from genius_referrals.services.payout.payout_query_service import (
    PayoutQueryService,
)
from genius_referrals.services.payout.payout_request_handler import (
    PayoutRequestHandler,
    parse_payout_amount,
)


__all__ = [
    "PayoutRequestHandler",
    "PayoutLifecycleHandler",
    "PayoutQueryService",
    "parse_payout_amount",
]
