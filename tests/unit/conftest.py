"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Model instances built without a database
- Fake submission counter
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from genius_referrals.models.commission import Commission
from genius_referrals.models.enums import CommissionStatus, PayoutStatus, UserRole
from genius_referrals.models.payout_request import PayoutRequest
from genius_referrals.models.profile import Profile
from genius_referrals.utils.datetime_utils import utc_now


class FakeSubmissionCounter:
    """In-memory SubmissionCounter."""

    def __init__(self, count: int = 0, error: Exception | None = None) -> None:
        self.count = count
        self.error = error
        self.recorded: list[str] = []

    async def count_recent_submissions(self, ip_address: str, window_seconds: int) -> int:
        if self.error:
            raise self.error
        return self.count

    async def record_submission(self, ip_address: str) -> None:
        if self.error:
            raise self.error
        self.recorded.append(ip_address)


@pytest.fixture
def make_counter():
    """Factory for counters with a fixed count or a raised error."""
    return FakeSubmissionCounter


@pytest.fixture
def submission_counter():
    """Counter reporting no recent submissions."""
    return FakeSubmissionCounter()


@pytest.fixture
def referrer_profile():
    """
    Active affiliate with code ray123 and no custom rate.

    Returns:
        Profile: Transient profile (not attached to a session)
    """
    return Profile(
        id=10,
        username="ray123",
        email="ray@example.com",
        phone="5551234567",
        first_name="Ray",
        last_name="Hamilton",
        role=UserRole.AFFILIATE.value,
        tracking_code="ray123",
        tracking_code_finalized=False,
        commission_rate=None,
        is_active=True,
    )


@pytest.fixture
def pending_payout():
    """PENDING $150 payout covering commissions 1-3."""
    return PayoutRequest(
        id=7,
        referrer_id=10,
        amount=Decimal("150.00"),
        payment_method="paypal",
        payment_details="ray@example.com",
        status=PayoutStatus.PENDING.value,
        commission_ids=[1, 2, 3],
        requested_at=utc_now() - timedelta(days=1),
    )


@pytest.fixture
def pending_commissions():
    """Three unclaimed $50 commissions of referrer 10."""
    return [
        Commission(
            id=i,
            referrer_id=10,
            lead_id=100 + i,
            transaction_id=f"txn-{i}",
            transaction_amount=Decimal("500.00"),
            rate=Decimal("0.10"),
            amount=Decimal("50.00"),
            status=CommissionStatus.PENDING.value,
            payout_request_id=None,
        )
        for i in (1, 2, 3)
    ]
