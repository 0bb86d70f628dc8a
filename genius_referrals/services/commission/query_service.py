"""
Commission query service.

Read-only views of a referrer's earnings.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.commission import Commission
from genius_referrals.models.enums import CommissionStatus
from genius_referrals.repositories.commission_repository import CommissionRepository


@dataclass(frozen=True)
class EarningsSummary:
    """
    Earnings of one referrer.

    pending includes commissions already claimed by a pending payout;
    available is what a new payout request may still cover.
    """

    referrer_id: int
    pending: Decimal
    paid: Decimal
    available: Decimal
    commission_count: int

    @property
    def total(self) -> Decimal:
        return self.pending + self.paid

    @property
    def in_payout(self) -> Decimal:
        return self.pending - self.available


class CommissionQueryService:
    """Earnings lookups for referrer dashboards."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize query service."""
        self.session = session
        self.commission_repo = CommissionRepository(session)

    async def get_earnings_summary(self, referrer_id: int) -> EarningsSummary:
        """
        Summarize a referrer's commissions.

        Args:
            referrer_id: Referrer profile ID

        Returns:
            EarningsSummary (all zero for a referrer with no commissions)
        """
        totals = await self.commission_repo.get_totals_by_status(referrer_id)
        available = await self.commission_repo.get_available_total(referrer_id)
        count = await self.commission_repo.count(referrer_id=referrer_id)

        return EarningsSummary(
            referrer_id=referrer_id,
            pending=totals.get(CommissionStatus.PENDING.value, Decimal("0.00")),
            paid=totals.get(CommissionStatus.PAID.value, Decimal("0.00")),
            available=available,
            commission_count=count,
        )

    async def get_commission_history(
        self, referrer_id: int, limit: int = 50
    ) -> list[Commission]:
        """Most recent commissions of a referrer."""
        return await self.commission_repo.get_history(referrer_id, limit=limit)

    async def get_available_commissions(self, referrer_id: int) -> list[Commission]:
        """Commissions a new payout request may cover, oldest first."""
        return await self.commission_repo.get_available(referrer_id)
