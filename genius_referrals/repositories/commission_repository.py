"""
Commission repository.

Data access layer for Commission model. The claim/release/mark-paid
operations are single conditional UPDATE statements; callers compare the
returned row count with what they expected and roll back on a mismatch.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.commission import Commission
from genius_referrals.models.enums import CommissionStatus
from genius_referrals.repositories.base import BaseRepository


class CommissionRepository(BaseRepository[Commission]):
    """Commission repository with payout claim operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(Commission, session)

    async def get_by_transaction_id(self, transaction_id: str) -> Commission | None:
        """Get commission created for a source transaction."""
        return await self.get_by(transaction_id=transaction_id)

    async def get_by_ids(self, commission_ids: list[int]) -> list[Commission]:
        """Get commissions by IDs, ordered by ID."""
        if not commission_ids:
            return []
        stmt = (
            select(Commission)
            .where(Commission.id.in_(commission_ids))
            .order_by(Commission.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_available(self, referrer_id: int) -> list[Commission]:
        """
        Get commissions a referrer can still request a payout for.

        Available means PENDING and not claimed by an active payout.
        """
        stmt = (
            select(Commission)
            .where(
                Commission.referrer_id == referrer_id,
                Commission.status == CommissionStatus.PENDING.value,
                Commission.payout_request_id.is_(None),
            )
            .order_by(Commission.created_at, Commission.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def claim_for_payout(
        self, commission_ids: list[int], referrer_id: int, payout_request_id: int
    ) -> int:
        """
        Attach unclaimed PENDING commissions to a payout.

        Rows already claimed by another payout are left untouched, so a
        concurrent request for an overlapping set claims fewer rows than
        it asked for.

        Returns:
            Number of rows claimed
        """
        stmt = (
            update(Commission)
            .where(
                Commission.id.in_(commission_ids),
                Commission.referrer_id == referrer_id,
                Commission.status == CommissionStatus.PENDING.value,
                Commission.payout_request_id.is_(None),
            )
            .values(payout_request_id=payout_request_id)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def release_from_payout(
        self, payout_request_id: int, commission_ids: list[int]
    ) -> int:
        """
        Return a payout's commissions to PENDING and unclaimed.

        Returns:
            Number of rows released
        """
        stmt = (
            update(Commission)
            .where(
                Commission.id.in_(commission_ids),
                Commission.payout_request_id == payout_request_id,
            )
            .values(
                payout_request_id=None,
                status=CommissionStatus.PENDING.value,
            )
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def mark_paid(
        self,
        payout_request_id: int,
        commission_ids: list[int],
        payment_ref: str,
        paid_at: datetime,
    ) -> int:
        """
        Mark a payout's commissions PAID with the payment reference.

        Returns:
            Number of rows marked paid
        """
        stmt = (
            update(Commission)
            .where(
                Commission.id.in_(commission_ids),
                Commission.payout_request_id == payout_request_id,
                Commission.status == CommissionStatus.PENDING.value,
            )
            .values(
                status=CommissionStatus.PAID.value,
                payment_ref=payment_ref,
                paid_at=paid_at,
            )
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def get_totals_by_status(self, referrer_id: int) -> dict[str, Decimal]:
        """
        Sum of commission amounts per status for a referrer.

        Uses SQL aggregation to avoid loading every row.
        """
        stmt = (
            select(
                Commission.status,
                func.coalesce(func.sum(Commission.amount), 0).label("total"),
            )
            .where(Commission.referrer_id == referrer_id)
            .group_by(Commission.status)
        )
        result = await self.session.execute(stmt)
        return {row.status: Decimal(str(row.total)) for row in result.all()}

    async def get_available_total(self, referrer_id: int) -> Decimal:
        """Sum of commissions available for a new payout request."""
        stmt = select(func.coalesce(func.sum(Commission.amount), 0)).where(
            Commission.referrer_id == referrer_id,
            Commission.status == CommissionStatus.PENDING.value,
            Commission.payout_request_id.is_(None),
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    async def get_history(
        self, referrer_id: int, limit: int = 50
    ) -> list[Commission]:
        """Most recent commissions first."""
        stmt = (
            select(Commission)
            .where(Commission.referrer_id == referrer_id)
            .order_by(Commission.created_at.desc(), Commission.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
