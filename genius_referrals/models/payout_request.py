"""
PayoutRequest model.

A batch of commissions a referrer wants cashed out.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from genius_referrals.models.base import Base
from genius_referrals.models.enums import PayoutStatus
from genius_referrals.models.types import MoneyType
from genius_referrals.utils.datetime_utils import utc_now


if TYPE_CHECKING:
    from genius_referrals.models.profile import Profile


class PayoutRequest(Base):
    """
    PayoutRequest entity.

    Lifecycle: PENDING -> PAID (approved with a payment reference) or
    PENDING -> REJECTED (commissions released back to PENDING).

    Attributes:
        id: Primary key
        referrer_id: Profile requesting the payout
        amount: Requested amount, equal to the sum of its commissions
        payment_method: PaymentMethod value
        payment_details: Where to send the money (account handle, etc.)
        status: PayoutStatus value
        commission_ids: IDs of the commissions this payout covers
        payment_ref: Processor reference set on approval
        notes: Admin notes (rejection reason)
        processed_by: Admin profile id that approved or rejected
        requested_at / processed_at: Timestamps
    """

    __tablename__ = "payout_requests"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_payout_amount_positive"),
        Index("idx_payout_requests_referrer_status", "referrer_id", "status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    referrer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    payment_details: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PayoutStatus.PENDING.value, nullable=False, index=True
    )
    commission_ids: Mapped[list[int]] = mapped_column(
        JSON, default=list, nullable=False
    )
    payment_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=True
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    referrer: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="payout_requests",
        foreign_keys=[referrer_id],
        lazy="raise",
    )

    @property
    def is_pending(self) -> bool:
        return self.status == PayoutStatus.PENDING.value

    def __repr__(self) -> str:
        return (
            f"<PayoutRequest(id={self.id}, referrer_id={self.referrer_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
