"""Integration tests for lead intake, attribution and tracking codes."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import text

from genius_referrals.models import CommissionRateLockedError, FraudCheckLog, Profile
from genius_referrals.models.enums import AttributionMethod, UserRole
from genius_referrals.repositories.base import BaseRepository
from genius_referrals.repositories.lead_repository import LeadRepository
from genius_referrals.repositories.profile_repository import ProfileRepository
from genius_referrals.services.attribution.resolver import (
    DIRECT_ATTRIBUTION,
    AttributionResolver,
)
from genius_referrals.services.attribution.statistics import AttributionStatistics
from genius_referrals.services.attribution.tracking_codes import TrackingCodeService
from genius_referrals.services.authorization import Actor
from genius_referrals.services.fraud.lead_intake import LeadIntakeService, LeadSubmission
from genius_referrals.services.fraud.velocity import DatabaseSubmissionCounter
from genius_referrals.utils.datetime_utils import utc_now
from genius_referrals.utils.exceptions import ConflictError, ValidationError


BROWSER_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def intake(session, settings):
    return LeadIntakeService(session, DatabaseSubmissionCounter(session), settings)


class TestLeadAttribution:
    """End-to-end lead intake with attribution."""

    @pytest.mark.asyncio
    async def test_cookie_attribution(self, session, referrer, test_settings):
        """Test a visitor arriving through ray123's link is credited to ray123."""
        result = await intake(session, test_settings).submit(
            LeadSubmission(
                first_name="Jane",
                last_name="Doe",
                email="jane.doe@example.com",
                phone="555-987-6543",
                ip_address="203.0.113.5",
                user_agent=BROWSER_UA,
                tracking_code="ray123",
            )
        )

        assert result.accepted is True
        lead = result.lead
        assert lead.referrer_username == "ray123"
        assert lead.referrer_type == "affiliate"
        assert lead.attribution_method == "cookie"
        assert lead.attribution_confidence == "HIGH"
        assert lead.commission_rate == Decimal("0.1000")
        assert lead.commission_rate_locked_at is not None

    @pytest.mark.asyncio
    async def test_email_match_keeps_original_rate(
        self, session, referrer, test_settings, make_attributed_lead
    ):
        """Test a returning visitor on a new device keeps the rate locked earlier."""
        await make_attributed_lead(
            "jane.doe@example.com", rate="0.10", created_at=utc_now() - timedelta(days=3)
        )
        referrer.commission_rate = Decimal("0.25")
        await session.commit()

        result = await intake(session, test_settings).submit(
            LeadSubmission(
                first_name="Jane",
                last_name="Doe",
                email="Jane.Doe@example.com",
                phone="555-987-6543",
                ip_address="198.51.100.7",
                user_agent=BROWSER_UA,
            )
        )

        lead = result.lead
        assert lead.referrer_username == "ray123"
        assert lead.attribution_method == "email"
        assert lead.attribution_confidence == "MEDIUM"
        assert lead.commission_rate == Decimal("0.10")

    @pytest.mark.asyncio
    async def test_phone_fragment_stays_direct(
        self, session, referrer, make_attributed_lead, test_settings
    ):
        """Test a short phone does not suffix-match an earlier lead."""
        await make_attributed_lead("first@example.com", phone="2125550147")

        result = await AttributionResolver(session, test_settings).resolve(
            "stranger@example.com", "47", None
        )

        assert result == DIRECT_ATTRIBUTION

    @pytest.mark.asyncio
    async def test_full_phone_matches_earlier_lead(
        self, session, referrer, make_attributed_lead, test_settings
    ):
        await make_attributed_lead("first@example.com", phone="2125550147")

        result = await AttributionResolver(session, test_settings).resolve(
            "stranger@example.com", "+1 (212) 555-0147", None
        )

        assert result.referrer_username == "ray123"
        assert result.attribution_method == AttributionMethod.PHONE

    @pytest.mark.asyncio
    async def test_direct_lead(self, session, referrer, test_settings):
        result = await intake(session, test_settings).submit(
            LeadSubmission(
                first_name="Sam",
                last_name="Lee",
                email="sam.lee@example.com",
                phone="555-222-9876",
                user_agent=BROWSER_UA,
            )
        )

        assert result.lead.referrer_username is None
        assert result.lead.attribution_method == "direct"
        assert result.lead.commission_rate == Decimal("0")

    @pytest.mark.asyncio
    async def test_immediate_resubmission_blocked(self, session, referrer, test_settings):
        """Test the same contact submitted twice in a row is blocked and logged."""
        submission = LeadSubmission(
            first_name="Jane",
            last_name="Doe",
            email="jane.doe@example.com",
            phone="555-987-6543",
            user_agent=BROWSER_UA,
        )
        service = intake(session, test_settings)

        first = await service.submit(submission)
        second = await service.submit(submission)

        assert first.accepted is True
        assert second.accepted is False
        assert second.fraud_check.flags == ["DUPLICATE_SUBMISSION"]
        logs = await BaseRepository(FraudCheckLog, session).find_by(is_blocked=True)
        assert len(logs) == 1

    @pytest.mark.asyncio
    async def test_locked_rate_is_immutable(self, session, referrer, make_attributed_lead):
        lead = await make_attributed_lead("jane.doe@example.com", rate="0.10")

        with pytest.raises(CommissionRateLockedError):
            lead.commission_rate = Decimal("0.25")

    @pytest.mark.asyncio
    async def test_referrer_statistics(self, session, referrer, make_attributed_lead):
        await make_attributed_lead("a.one@example.com")
        await make_attributed_lead("b.two@example.com")
        email_lead = await make_attributed_lead("c.three@example.com")
        email_lead.attribution_method = "email"
        await session.commit()

        stats = await AttributionStatistics(session).get_referrer_stats("ray123")

        assert stats["total_leads"] == 3
        assert stats["by_method"] == {"cookie": 2, "email": 1, "phone": 0}
        assert stats["cross_device_rate"] == Decimal("33.33")


class TestTrackingCodes:
    """Tracking code lifecycle."""

    @pytest.mark.asyncio
    async def test_customize_then_finalize(self, session, referrer, test_settings):
        actor = Actor(profile_id=10, role=UserRole.AFFILIATE)
        service = TrackingCodeService(session, test_settings)

        info = await service.customize_tracking_code(actor, 10, "RayTaxPro")
        assert info.code == "RayTaxPro"
        assert info.is_custom is True
        assert info.tracking_url.endswith("?ref=RayTaxPro")

        final = await service.finalize_tracking_code(actor, 10)
        assert final.is_finalized is True

        with pytest.raises(ConflictError):
            await service.customize_tracking_code(actor, 10, "RayTaxPro2")

    @pytest.mark.asyncio
    async def test_code_taken_by_another_profile(
        self, session, referrer, admin_profile, test_settings
    ):
        service = TrackingCodeService(session, test_settings)

        with pytest.raises(ConflictError):
            await service.customize_tracking_code(
                Actor(profile_id=1, role=UserRole.ADMIN), 1, "ray123"
            )

    @pytest.mark.asyncio
    async def test_invalid_code_rejected(self, session, referrer, test_settings):
        service = TrackingCodeService(session, test_settings)

        with pytest.raises(ValidationError):
            await service.customize_tracking_code(
                Actor(profile_id=10, role=UserRole.AFFILIATE), 10, "admin"
            )

    @pytest.mark.asyncio
    async def test_backfill_assigns_missing_codes(
        self, session, referrer, admin_profile, test_settings
    ):
        """Test profiles without a code get one, existing codes are kept."""
        service = TrackingCodeService(session, test_settings)

        updated, errors = await service.backfill_tracking_codes(
            Actor(profile_id=1, role=UserRole.ADMIN)
        )

        assert (updated, errors) == (1, 0)
        assert admin_profile.tracking_code.startswith("TGP-")
        assert referrer.tracking_code == "ray123"

    @pytest.mark.asyncio
    async def test_code_equal_to_another_username_rejected(
        self, session, referrer, test_settings
    ):
        """Test a vanity code cannot shadow someone else's short link."""
        session.add_all(
            [
                Profile(id=20, username="bob", email="bob@example.com",
                        role=UserRole.AFFILIATE.value),
                Profile(id=30, username="alice99", email="alice@example.com",
                        role=UserRole.AFFILIATE.value),
            ]
        )
        await session.commit()
        service = TrackingCodeService(session, test_settings)

        with pytest.raises(ConflictError):
            await service.customize_tracking_code(
                Actor(profile_id=20, role=UserRole.AFFILIATE), 20, "alice99"
            )

    @pytest.mark.asyncio
    async def test_own_username_allowed_as_code(self, session, referrer, test_settings):
        session.add(
            Profile(id=20, username="bobtaxes", email="bob@example.com",
                    role=UserRole.AFFILIATE.value, tracking_code="TGP-200000")
        )
        await session.commit()
        service = TrackingCodeService(session, test_settings)

        info = await service.customize_tracking_code(
            Actor(profile_id=20, role=UserRole.AFFILIATE), 20, "bobtaxes"
        )

        assert info.code == "bobtaxes"

    @pytest.mark.asyncio
    async def test_code_match_wins_over_username(self, session, referrer):
        """Test a code that is also a username resolves to the code's owner."""
        session.add_all(
            [
                Profile(id=20, username="promo1", email="p@example.com",
                        role=UserRole.AFFILIATE.value),
                Profile(id=30, username="carol", email="carol@example.com",
                        role=UserRole.AFFILIATE.value, custom_tracking_code="promo1"),
            ]
        )
        await session.commit()

        profile = await ProfileRepository(session).get_by_tracking_code("promo1")

        assert profile.id == 30


class TestFraudCheckFailure:
    """A failing fraud query must not cost the lead."""

    @pytest.mark.asyncio
    async def test_lead_stored_after_checker_query_fails(
        self, session, session_maker, referrer, test_settings
    ):
        async def broken_lookup(*args, **kwargs):
            await session.execute(text("SELECT no_such_column FROM leads"))

        with patch.object(
            LeadRepository,
            "find_recent_by_contact",
            AsyncMock(side_effect=broken_lookup),
        ):
            result = await intake(session, test_settings).submit(
                LeadSubmission(
                    first_name="Jane",
                    last_name="Doe",
                    email="jane.doe@example.com",
                    phone="555-987-6543",
                    user_agent=BROWSER_UA,
                    tracking_code="ray123",
                )
            )

        assert result.accepted is True
        assert result.fraud_check.flags == ["FRAUD_CHECK_ERROR"]
        async with session_maker() as fresh:
            stored = await LeadRepository(fresh).find_first_attributed_by_email(
                "jane.doe@example.com"
            )
        assert stored is not None
        assert stored.referrer_username == "ray123"
