"""
Payout request repository.

Data access layer for PayoutRequest model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.enums import PayoutStatus
from genius_referrals.models.payout_request import PayoutRequest
from genius_referrals.repositories.base import BaseRepository


class PayoutRequestRepository(BaseRepository[PayoutRequest]):
    """Payout request repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payout request repository."""
        super().__init__(PayoutRequest, session)

    async def get_history(
        self, referrer_id: int, limit: int = 20
    ) -> list[PayoutRequest]:
        """Payout requests of a referrer, newest first."""
        stmt = (
            select(PayoutRequest)
            .where(PayoutRequest.referrer_id == referrer_id)
            .order_by(PayoutRequest.requested_at.desc(), PayoutRequest.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_pending(self, limit: int = 100) -> list[PayoutRequest]:
        """Pending payout requests, oldest first (admin review queue)."""
        stmt = (
            select(PayoutRequest)
            .where(PayoutRequest.status == PayoutStatus.PENDING.value)
            .order_by(PayoutRequest.requested_at.asc(), PayoutRequest.id.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
