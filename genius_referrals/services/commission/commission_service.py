"""
Commission recording.

Turns a completed transaction on an attributed lead into a PENDING ledger
row. Recording is idempotent per transaction id: a replay, or a concurrent
insert that loses the unique-constraint race, returns the row that exists.
"""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings
from genius_referrals.models.commission import Commission
from genius_referrals.models.enums import CommissionStatus
from genius_referrals.repositories.commission_repository import CommissionRepository
from genius_referrals.repositories.lead_repository import LeadRepository
from genius_referrals.repositories.profile_repository import ProfileRepository
from genius_referrals.services.base_service import BaseService
from genius_referrals.services.commission.calculator import calculate_commission
from genius_referrals.utils.db_decorators import with_rollback_on_error
from genius_referrals.utils.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from genius_referrals.utils.validation import to_money


class CommissionService(BaseService):
    """Creates commission ledger rows."""

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        super().__init__(session, settings)
        self.commission_repo = CommissionRepository(session)
        self.lead_repo = LeadRepository(session)
        self.profile_repo = ProfileRepository(session)

    @with_rollback_on_error
    async def record_commission(
        self,
        transaction_id: str,
        lead_id: int,
        transaction_amount: Decimal | int | str,
    ) -> Commission | None:
        """
        Record the commission for a completed transaction.

        The rate is the one locked on the lead at attribution time, never
        the referrer's current rate.

        Args:
            transaction_id: Source transaction id (idempotency key)
            lead_id: Lead the transaction belongs to
            transaction_amount: Transaction amount in dollars

        Returns:
            The commission (new or already recorded), or None if the lead
            has no referrer

        Raises:
            ValidationError: Empty transaction id or negative amount
            NotFoundError: Unknown lead or referrer
            ConflictError: Lead is attributed but its rate was never locked
        """
        if not transaction_id:
            raise ValidationError("Transaction id is required", lead_id=lead_id)

        existing = await self.commission_repo.get_by_transaction_id(transaction_id)
        if existing:
            self.logger.info(
                "Commission already recorded for transaction",
                extra={"transaction_id": transaction_id, "commission_id": existing.id},
            )
            return existing

        lead = await self.lead_repo.get_by_id(lead_id)
        if not lead or lead.is_deleted:
            raise NotFoundError("Lead not found", lead_id=lead_id)

        if not lead.referrer_username:
            self.logger.info(
                "Transaction on unattributed lead, no commission",
                extra={"transaction_id": transaction_id, "lead_id": lead_id},
            )
            return None

        if not lead.is_attribution_locked or lead.commission_rate is None:
            raise ConflictError(
                "Lead commission rate is not locked", lead_id=lead_id
            )

        referrer = await self.profile_repo.get_by_username(lead.referrer_username)
        if not referrer:
            raise NotFoundError(
                "Referrer not found",
                lead_id=lead_id,
                referrer_username=lead.referrer_username,
            )

        commission_amount = calculate_commission(
            transaction_amount, lead.commission_rate
        )
        amount = to_money(transaction_amount)

        try:
            commission = await self.commission_repo.create(
                referrer_id=referrer.id,
                lead_id=lead.id,
                transaction_id=transaction_id,
                transaction_amount=amount,
                rate=lead.commission_rate,
                amount=commission_amount,
                status=CommissionStatus.PENDING.value,
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.commission_repo.get_by_transaction_id(transaction_id)
            if existing:
                self.logger.info(
                    "Concurrent commission insert lost the race, using existing row",
                    extra={"transaction_id": transaction_id, "commission_id": existing.id},
                )
                return existing
            raise

        self.logger.info(
            "Commission recorded",
            extra={
                "commission_id": commission.id,
                "referrer_id": referrer.id,
                "lead_id": lead.id,
                "transaction_id": transaction_id,
                "amount": str(commission_amount),
                "rate": str(lead.commission_rate),
            },
        )
        return commission
