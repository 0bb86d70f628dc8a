"""
Payout query service.

Read-only access to payout requests.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.commission import Commission
from genius_referrals.models.payout_request import PayoutRequest
from genius_referrals.repositories.commission_repository import CommissionRepository
from genius_referrals.repositories.payout_request_repository import (
    PayoutRequestRepository,
)
from genius_referrals.utils.exceptions import NotFoundError


class PayoutQueryService:
    """Payout lookups for referrer and admin views."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payout query service."""
        self.session = session
        self.payout_repo = PayoutRequestRepository(session)
        self.commission_repo = CommissionRepository(session)

    async def get_payout(self, payout_id: int) -> PayoutRequest:
        """
        Get payout request by ID.

        Raises:
            NotFoundError: Unknown payout
        """
        payout = await self.payout_repo.get_by_id(payout_id)
        if not payout:
            raise NotFoundError("Payout request not found", payout_id=payout_id)
        return payout

    async def get_payout_commissions(self, payout_id: int) -> list[Commission]:
        """Commissions covered by a payout request."""
        payout = await self.get_payout(payout_id)
        return await self.commission_repo.get_by_ids(list(payout.commission_ids or []))

    async def get_payout_history(
        self, referrer_id: int, limit: int = 20
    ) -> list[PayoutRequest]:
        """Payout requests of a referrer, newest first."""
        return await self.payout_repo.get_history(referrer_id, limit=limit)

    async def list_pending_payouts(self, limit: int = 100) -> list[PayoutRequest]:
        """Admin review queue, oldest first."""
        return await self.payout_repo.get_pending(limit=limit)
