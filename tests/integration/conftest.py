"""
Fixtures for integration tests.

Each test gets a fresh SQLite database file with the full schema, so
services run their real queries and transactions.
"""

from decimal import Decimal

import pytest
import pytest_asyncio

from genius_referrals.config.database import create_engine, create_session_maker, get_session
from genius_referrals.models import Base, Lead, Profile
from genius_referrals.models.enums import (
    AttributionConfidence,
    AttributionMethod,
    ReferrerType,
    UserRole,
)
from genius_referrals.services.attribution.resolver import (
    AttributionResult,
    lock_attribution,
)


@pytest_asyncio.fixture
async def engine(tmp_path, test_settings):
    """Async engine on a throwaway SQLite file."""
    db_settings = test_settings.model_copy(
        update={"database_url": f"sqlite+aiosqlite:///{tmp_path / 'referrals.db'}"}
    )
    engine = create_engine(db_settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with get_session(session_maker) as session:
        yield session


@pytest_asyncio.fixture
async def admin_profile(session):
    """Admin with profile id 1."""
    profile = Profile(
        id=1,
        username="admin",
        email="admin@example.com",
        role=UserRole.ADMIN.value,
    )
    session.add(profile)
    await session.commit()
    return profile


@pytest_asyncio.fixture
async def referrer(session, admin_profile):
    """Affiliate ray123 with profile id 10 on the default rate."""
    profile = Profile(
        id=10,
        username="ray123",
        email="ray@example.com",
        phone="5551234567",
        first_name="Ray",
        last_name="Hamilton",
        role=UserRole.AFFILIATE.value,
        tracking_code="ray123",
    )
    session.add(profile)
    await session.commit()
    return profile


@pytest.fixture
def make_attributed_lead(session):
    """Factory storing a lead locked to ray123 at the given rate."""

    async def _make(
        email: str,
        rate: str = "0.10",
        created_at=None,
        phone: str | None = None,
    ) -> Lead:
        lead = Lead(email=email, phone=phone)
        if created_at is not None:
            lead.created_at = created_at
        lock_attribution(
            lead,
            AttributionResult(
                referrer_username="ray123",
                referrer_type=ReferrerType.AFFILIATE,
                commission_rate=Decimal(rate),
                attribution_method=AttributionMethod.COOKIE,
                confidence=AttributionConfidence.HIGH,
            ),
        )
        session.add(lead)
        await session.commit()
        return lead

    return _make
