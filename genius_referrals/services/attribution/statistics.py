"""
Attribution statistics module.

Per-referrer breakdown of how leads were attributed.
"""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.enums import AttributionMethod
from genius_referrals.repositories.lead_repository import LeadRepository


class AttributionStatistics:
    """Attribution analytics for referrer dashboards."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics manager."""
        self.session = session
        self.lead_repo = LeadRepository(session)

    async def get_referrer_stats(self, referrer_username: str) -> dict:
        """
        Get attribution statistics for a referrer.

        Args:
            referrer_username: Referrer username

        Returns:
            Dict with total leads, counts by method and the cross-device
            rate (email and phone matches as a percentage of all leads)
        """
        counts = await self.lead_repo.count_by_attribution_method(referrer_username)
        total_leads = sum(counts.values())

        by_method = {
            method.value: counts.get(method.value, 0)
            for method in (
                AttributionMethod.COOKIE,
                AttributionMethod.EMAIL,
                AttributionMethod.PHONE,
            )
        }
        cross_device = by_method[AttributionMethod.EMAIL] + by_method[AttributionMethod.PHONE]

        if total_leads:
            cross_device_rate = (
                Decimal(cross_device * 100) / Decimal(total_leads)
            ).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        else:
            cross_device_rate = Decimal("0")

        return {
            "total_leads": total_leads,
            "by_method": by_method,
            "cross_device_rate": cross_device_rate,
        }
