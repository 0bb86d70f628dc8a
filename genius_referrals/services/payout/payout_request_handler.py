"""
Payout request handling module.

Creates payout requests. Validation happens before any write; claiming the
commissions is a conditional UPDATE in the same transaction as the payout
insert, so two overlapping requests can never both succeed.
"""

from decimal import Decimal, InvalidOperation

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings
from genius_referrals.models.commission import Commission
from genius_referrals.models.enums import CommissionStatus, PaymentMethod, PayoutStatus
from genius_referrals.models.payout_request import PayoutRequest
from genius_referrals.models.profile import Profile
from genius_referrals.repositories.commission_repository import CommissionRepository
from genius_referrals.repositories.payout_request_repository import (
    PayoutRequestRepository,
)
from genius_referrals.repositories.profile_repository import ProfileRepository
from genius_referrals.services.authorization import (
    Actor,
    Capability,
    require_self_or_admin,
)
from genius_referrals.services.base_service import BaseService, transaction
from genius_referrals.services.notification.notifier import Notifier
from genius_referrals.services.notification.payout_notifications import (
    notify_payout_requested,
)
from genius_referrals.utils.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from genius_referrals.utils.validation import to_money


def parse_payout_amount(amount: Decimal | int | str) -> Decimal:
    """
    Parse a requested amount to cents.

    Raises:
        ValidationError: Float, non-numeric, or sub-cent precision
    """
    if isinstance(amount, float):
        raise ValidationError("Amount must be Decimal or str, not float")
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {amount!r}")
    if value != to_money(value):
        raise ValidationError(
            "Amount cannot have more than two decimal places", amount=str(value)
        )
    return to_money(value)


class PayoutRequestHandler(BaseService):
    """Handles payout request creation."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: Notifier,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize payout request handler.

        Args:
            session: Database session
            notifier: Delivery for the confirmation and admin emails
            settings: Application settings (minimum payout)
        """
        super().__init__(session, settings)
        self.notifier = notifier
        self.profile_repo = ProfileRepository(session)
        self.commission_repo = CommissionRepository(session)
        self.payout_repo = PayoutRequestRepository(session)

    async def request_payout(
        self,
        actor: Actor,
        referrer_id: int,
        amount: Decimal | int | str,
        method: str,
        details: str,
        commission_ids: list[int] | None = None,
    ) -> PayoutRequest:
        """
        Request a payout of PENDING commissions.

        Args:
            actor: Caller; referrers may only request for themselves
            referrer_id: Referrer profile ID
            amount: Requested amount, must equal the selected commissions' sum
            method: PaymentMethod value
            details: Where to send the money
            commission_ids: Commissions to cover; all available if None

        Returns:
            The PENDING payout request

        Raises:
            AuthorizationError: Actor may not request for this referrer
            ValidationError: Bad amount, method or details, or amount
                does not match the commissions
            NotFoundError: Unknown referrer or commission
            ConflictError: A commission is paid or claimed by another payout
        """
        require_self_or_admin(
            actor, referrer_id, Capability.REQUEST_PAYOUT, Capability.MANAGE_PAYOUTS
        )

        requested = parse_payout_amount(amount)
        if requested <= 0:
            raise ValidationError(
                "Amount must be greater than zero", referrer_id=referrer_id
            )
        if requested < self.settings.min_payout_amount:
            raise ValidationError(
                f"Minimum payout amount is ${self.settings.min_payout_amount:.2f}",
                referrer_id=referrer_id,
                amount=str(requested),
            )
        try:
            payment_method = PaymentMethod(method)
        except ValueError:
            raise ValidationError(
                f"Unsupported payment method: {method!r}", referrer_id=referrer_id
            ) from None
        details = (details or "").strip()
        if not details:
            raise ValidationError(
                "Payment details are required", referrer_id=referrer_id
            )

        payout, referrer = await self._create_payout(
            referrer_id, requested, payment_method, details, commission_ids
        )

        await notify_payout_requested(self.notifier, payout, referrer, self.settings)
        return payout

    @transaction
    async def _create_payout(
        self,
        referrer_id: int,
        amount: Decimal,
        method: PaymentMethod,
        details: str,
        commission_ids: list[int] | None,
    ) -> tuple[PayoutRequest, Profile]:
        referrer = await self.profile_repo.get_by_id(referrer_id)
        if not referrer:
            raise NotFoundError("Referrer not found", referrer_id=referrer_id)

        commissions = await self._select_commissions(referrer_id, commission_ids)
        ids = [c.id for c in commissions]

        total = sum((c.amount for c in commissions), Decimal("0.00"))
        if total != amount:
            raise ValidationError(
                f"Requested amount ${amount:.2f} does not match the selected "
                f"commissions (${total:.2f})",
                referrer_id=referrer_id,
                amount=str(amount),
                commissions_total=str(total),
            )

        payout = await self.payout_repo.create(
            referrer_id=referrer_id,
            amount=amount,
            payment_method=method.value,
            payment_details=details,
            status=PayoutStatus.PENDING.value,
            commission_ids=ids,
        )

        claimed = await self.commission_repo.claim_for_payout(
            ids, referrer_id, payout.id
        )
        if claimed != len(ids):
            raise ConflictError(
                "One or more commissions were claimed by another payout request",
                referrer_id=referrer_id,
                requested=len(ids),
                claimed=claimed,
            )

        self.logger.info(
            "Payout requested",
            extra={
                "payout_id": payout.id,
                "referrer_id": referrer_id,
                "amount": str(amount),
                "commission_count": len(ids),
                "payment_method": method.value,
            },
        )
        return payout, referrer

    async def _select_commissions(
        self, referrer_id: int, commission_ids: list[int] | None
    ) -> list[Commission]:
        if commission_ids is None:
            commissions = await self.commission_repo.get_available(referrer_id)
            if not commissions:
                raise ValidationError(
                    "No commissions available for payout", referrer_id=referrer_id
                )
            return commissions

        ids = sorted(set(commission_ids))
        if not ids:
            raise ValidationError(
                "At least one commission is required", referrer_id=referrer_id
            )

        commissions = await self.commission_repo.get_by_ids(ids)
        found = {c.id for c in commissions}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError(
                "Commission not found", referrer_id=referrer_id, commission_ids=missing
            )

        for commission in commissions:
            if commission.referrer_id != referrer_id:
                raise ValidationError(
                    "Commission belongs to another referrer",
                    referrer_id=referrer_id,
                    commission_id=commission.id,
                )
            if commission.status != CommissionStatus.PENDING.value:
                raise ConflictError(
                    "Commission has already been paid",
                    referrer_id=referrer_id,
                    commission_id=commission.id,
                )
            if commission.payout_request_id is not None:
                raise ConflictError(
                    "Commission is already included in another payout request",
                    referrer_id=referrer_id,
                    commission_id=commission.id,
                    payout_id=commission.payout_request_id,
                )
        return commissions
