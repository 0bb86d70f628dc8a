"""
FraudCheckLog model.

Audit row for blocked or elevated-risk lead submissions.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from genius_referrals.models.base import Base
from genius_referrals.utils.datetime_utils import utc_now


class FraudCheckLog(Base):
    """Fraud check outcome kept for admin review."""

    __tablename__ = "fraud_check_logs"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    referrer_username: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    flags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    blocked_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
