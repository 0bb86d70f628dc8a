"""
Profile model.

A platform user who can act as a referrer (affiliate, tax preparer or client).
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from genius_referrals.models.base import Base
from genius_referrals.models.types import RateType
from genius_referrals.utils.datetime_utils import utc_now


if TYPE_CHECKING:
    from genius_referrals.models.commission import Commission
    from genius_referrals.models.payout_request import PayoutRequest


class Profile(Base):
    """
    Profile entity.

    Attributes:
        id: Primary key
        username: Short-link username, unique
        email: Contact email (normalized)
        phone: Contact phone (digits only)
        first_name / middle_name / last_name: Used for initials-based codes
        role: UserRole value
        tracking_code: Auto-assigned tracking code, unique
        custom_tracking_code: Vanity code chosen by the user, unique
        tracking_code_finalized: Vanity code can no longer be changed
        commission_rate: Custom rate; None means the configured default
        is_active: Inactive referrers are ignored by attribution
        created_at: Signup time
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    username: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    phone: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    role: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True
    )

    # Tracking
    tracking_code: Mapped[str | None] = mapped_column(
        String(32), unique=True, index=True, nullable=True
    )
    custom_tracking_code: Mapped[str | None] = mapped_column(
        String(32), unique=True, index=True, nullable=True
    )
    tracking_code_finalized: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    commission_rate: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    commissions: Mapped[list["Commission"]] = relationship(
        "Commission", back_populates="referrer", lazy="raise"
    )
    payout_requests: Mapped[list["PayoutRequest"]] = relationship(
        "PayoutRequest",
        back_populates="referrer",
        foreign_keys="PayoutRequest.referrer_id",
        lazy="raise",
    )

    @property
    def active_tracking_code(self) -> str | None:
        """Vanity code if set, otherwise the assigned code."""
        return self.custom_tracking_code or self.tracking_code

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username={self.username!r}, role={self.role})>"
