"""
Commission services package.

- calculator: Amount x locked rate, rounded to cents
- commission_service: Idempotent ledger row creation
- query_service: Earnings summary and history
"""

from genius_referrals.services.commission.calculator import calculate_commission
from genius_referrals.services.commission.commission_service import (
    CommissionService,
)
from genius_referrals.services.commission.query_service import (
    CommissionQueryService,
    EarningsSummary,
)


__all__ = [
    "calculate_commission",
    "CommissionService",
    "CommissionQueryService",
    "EarningsSummary",
]
