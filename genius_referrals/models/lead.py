"""
Lead model.

A prospective customer captured by a form submission, with the referral
metadata frozen at the moment of attribution.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from genius_referrals.models.base import Base
from genius_referrals.models.enums import LeadStatus
from genius_referrals.models.types import RateType
from genius_referrals.utils.datetime_utils import utc_now


class CommissionRateLockedError(ValueError):
    """Raised on an attempt to change a locked commission rate."""


class Lead(Base):
    """
    Lead entity.

    The commission rate is locked when the lead is first attributed
    (commission_rate_locked_at). After that the rate is immutable, even if
    the referrer's configured rate changes.

    Leads are never hard-deleted; is_deleted hides them.
    """

    __tablename__ = "leads"
    __table_args__ = (
        Index("idx_leads_email_created", "email", "created_at"),
        Index("idx_leads_phone_created", "phone", "created_at"),
        Index("idx_leads_ip_created", "ip_address", "created_at"),
        Index("idx_leads_referrer_method", "referrer_username", "attribution_method"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Contact
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Submission metadata
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=LeadStatus.NEW.value, nullable=False
    )

    # Referral metadata
    referrer_username: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    referrer_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    attribution_method: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )
    attribution_confidence: Mapped[str | None] = mapped_column(
        String(10), nullable=True
    )
    commission_rate: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )
    commission_rate_locked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    @validates("commission_rate")
    def _guard_locked_rate(self, key: str, value: Decimal | None) -> Decimal | None:
        current = self.commission_rate
        if (
            self.commission_rate_locked_at is not None
            and current is not None
            and value != current
        ):
            raise CommissionRateLockedError(
                f"Commission rate for lead {self.id} is locked at {current}"
            )
        return value

    @property
    def is_attribution_locked(self) -> bool:
        return self.commission_rate_locked_at is not None

    def __repr__(self) -> str:
        return (
            f"<Lead(id={self.id}, referrer={self.referrer_username!r}, "
            f"rate={self.commission_rate})>"
        )
