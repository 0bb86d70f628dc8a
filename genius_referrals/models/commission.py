"""
Commission model.

One ledger row per attributable completed transaction.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from genius_referrals.models.base import Base
from genius_referrals.models.enums import CommissionStatus
from genius_referrals.models.types import MoneyType, RateType
from genius_referrals.utils.datetime_utils import utc_now


if TYPE_CHECKING:
    from genius_referrals.models.profile import Profile


class Commission(Base):
    """
    Commission entity.

    Attributes:
        id: Primary key
        referrer_id: Profile earning the commission
        lead_id: Lead the transaction came from
        transaction_id: Source transaction, unique (idempotency key)
        transaction_amount: Amount of the completed transaction
        rate: Rate locked on the lead at attribution time
        amount: Commission amount in dollars, rounded to cents
        status: PENDING until a payout covering it is paid
        payout_request_id: The one non-rejected payout claiming this row
        payment_ref: Payment reference stamped when paid
        paid_at: When the covering payout was paid
    """

    __tablename__ = "commissions"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_commission_amount_non_negative"),
        Index("idx_commissions_referrer_status", "referrer_id", "status"),
        Index("idx_commissions_payout", "payout_request_id"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    referrer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False
    )
    lead_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("leads.id"), nullable=False, index=True
    )
    transaction_id: Mapped[str] = mapped_column(
        String(128), unique=True, nullable=False
    )

    transaction_amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    rate: Mapped[Decimal] = mapped_column(RateType, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default=CommissionStatus.PENDING.value, nullable=False
    )
    payout_request_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("payout_requests.id", ondelete="SET NULL"), nullable=True
    )
    payment_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    referrer: Mapped["Profile"] = relationship(
        "Profile", back_populates="commissions", lazy="raise"
    )

    def __repr__(self) -> str:
        return (
            f"<Commission(id={self.id}, referrer_id={self.referrer_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
