"""
Payout lifecycle handling module.

Handles payout approval and rejection. The payout row is locked, then the
payout and every commission it covers are updated in one transaction; a
row-count mismatch on the commissions rolls the whole transition back.
The referrer is notified after commit.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings
from genius_referrals.models.enums import PayoutStatus
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
    require_capability,
)
from genius_referrals.services.base_service import BaseService, transaction
from genius_referrals.services.notification.notifier import Notifier
from genius_referrals.services.notification.payout_notifications import (
    notify_payout_paid,
    notify_payout_rejected,
)
from genius_referrals.utils.datetime_utils import utc_now
from genius_referrals.utils.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)


class PayoutLifecycleHandler(BaseService):
    """Handles payout lifecycle operations (admin only)."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: Notifier,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize payout lifecycle handler.

        Args:
            session: Database session
            notifier: Delivery for referrer emails
            settings: Application settings
        """
        super().__init__(session, settings)
        self.notifier = notifier
        self.payout_repo = PayoutRequestRepository(session)
        self.commission_repo = CommissionRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def _get_pending_for_update(self, payout_id: int) -> PayoutRequest:
        payout = await self.payout_repo.get_by_id(payout_id, for_update=True)
        if not payout:
            raise NotFoundError("Payout request not found", payout_id=payout_id)
        if not payout.is_pending:
            raise ConflictError(
                f"Payout request is {payout.status}, only PENDING requests "
                f"can be processed",
                payout_id=payout_id,
                status=payout.status,
            )
        return payout

    async def approve_payout(
        self, actor: Actor, payout_id: int, payment_ref: str
    ) -> PayoutRequest:
        """
        Approve a payout: PENDING -> PAID.

        Every covered commission is marked PAID with the payment reference.

        Args:
            actor: Admin approving the payout
            payout_id: Payout request ID
            payment_ref: Processor reference for the payment, non-empty

        Returns:
            The PAID payout request

        Raises:
            AuthorizationError: Actor is not an admin
            ValidationError: Empty payment reference
            NotFoundError: Unknown payout
            ConflictError: Payout is not PENDING or its commissions changed
        """
        require_capability(actor, Capability.MANAGE_PAYOUTS)

        payment_ref = (payment_ref or "").strip()
        if not payment_ref:
            raise ValidationError(
                "Payment reference is required to approve a payout",
                payout_id=payout_id,
            )

        payout, referrer = await self._approve(actor, payout_id, payment_ref)

        if referrer:
            await notify_payout_paid(self.notifier, payout, referrer, self.settings)
        return payout

    @transaction
    async def _approve(
        self, actor: Actor, payout_id: int, payment_ref: str
    ) -> tuple[PayoutRequest, Profile | None]:
        payout = await self._get_pending_for_update(payout_id)
        commission_ids = list(payout.commission_ids or [])
        now = utc_now()

        marked = await self.commission_repo.mark_paid(
            payout.id, commission_ids, payment_ref, now
        )
        if marked != len(commission_ids):
            raise ConflictError(
                "Payout commissions changed since the request was made",
                payout_id=payout_id,
                expected=len(commission_ids),
                updated=marked,
            )

        payout.status = PayoutStatus.PAID.value
        payout.payment_ref = payment_ref
        payout.processed_by = actor.profile_id
        payout.processed_at = now
        await self.session.flush()

        self.logger.info(
            "Payout approved and paid",
            extra={
                "payout_id": payout.id,
                "referrer_id": payout.referrer_id,
                "amount": str(payout.amount),
                "commission_count": marked,
                "admin_id": actor.profile_id,
            },
        )
        referrer = await self.profile_repo.get_by_id(payout.referrer_id)
        return payout, referrer

    async def reject_payout(
        self, actor: Actor, payout_id: int, notes: str | None = None
    ) -> PayoutRequest:
        """
        Reject a payout: PENDING -> REJECTED.

        Exactly the commissions the payout claimed return to PENDING and
        become available for a new request.

        Args:
            actor: Admin rejecting the payout
            payout_id: Payout request ID
            notes: Reason shown to the referrer

        Returns:
            The REJECTED payout request

        Raises:
            AuthorizationError: Actor is not an admin
            NotFoundError: Unknown payout
            ConflictError: Payout is not PENDING or its commissions changed
        """
        require_capability(actor, Capability.MANAGE_PAYOUTS)

        payout, referrer = await self._reject(actor, payout_id, notes)

        if referrer:
            await notify_payout_rejected(self.notifier, payout, referrer, self.settings)
        return payout

    @transaction
    async def _reject(
        self, actor: Actor, payout_id: int, notes: str | None
    ) -> tuple[PayoutRequest, Profile | None]:
        payout = await self._get_pending_for_update(payout_id)
        commission_ids = list(payout.commission_ids or [])

        released = await self.commission_repo.release_from_payout(
            payout.id, commission_ids
        )
        if released != len(commission_ids):
            raise ConflictError(
                "Payout commissions changed since the request was made",
                payout_id=payout_id,
                expected=len(commission_ids),
                updated=released,
            )

        payout.status = PayoutStatus.REJECTED.value
        payout.notes = notes.strip() if notes else None
        payout.processed_by = actor.profile_id
        payout.processed_at = utc_now()
        await self.session.flush()

        self.logger.info(
            "Payout rejected, commissions released",
            extra={
                "payout_id": payout.id,
                "referrer_id": payout.referrer_id,
                "commission_count": released,
                "admin_id": actor.profile_id,
            },
        )
        referrer = await self.profile_repo.get_by_id(payout.referrer_id)
        return payout, referrer
