"""
Attribution resolver.

Decides which referrer gets credit for a lead. Strategies are tried in a
fixed order and the first match wins:

1. Tracking-code cookie from a prior visit to a referral link (HIGH)
2. Earlier attributed lead with the same email (MEDIUM)
3. Earlier attributed lead with the same phone number (MEDIUM)
4. Direct / organic, no referrer (NONE)
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings, settings as default_settings
from genius_referrals.models.enums import (
    AttributionConfidence,
    AttributionMethod,
    ReferrerType,
)
from genius_referrals.models.lead import Lead
from genius_referrals.models.profile import Profile
from genius_referrals.repositories.lead_repository import LeadRepository
from genius_referrals.repositories.profile_repository import ProfileRepository
from genius_referrals.utils.datetime_utils import utc_now
from genius_referrals.utils.validation import normalize_email, phone_match_key


@dataclass(frozen=True)
class AttributionResult:
    """Outcome of attribution for one lead submission."""

    referrer_username: str | None
    referrer_type: ReferrerType | None
    commission_rate: Decimal
    attribution_method: AttributionMethod
    confidence: AttributionConfidence

    @property
    def is_attributed(self) -> bool:
        return self.referrer_username is not None


DIRECT_ATTRIBUTION = AttributionResult(
    referrer_username=None,
    referrer_type=None,
    commission_rate=Decimal("0"),
    attribution_method=AttributionMethod.DIRECT,
    confidence=AttributionConfidence.NONE,
)


def referrer_type_for_role(role: str) -> ReferrerType:
    """Map a profile role to the referrer type recorded on leads."""
    try:
        return ReferrerType(role)
    except ValueError:
        return ReferrerType.AFFILIATE


class AttributionResolver:
    """
    Resolves and locks lead attribution.

    Only reads from the session; writing the lead is the caller's job.
    """

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        """
        Initialize resolver.

        Args:
            session: Database session
            settings: Application settings (default commission rate)
        """
        self.session = session
        self.settings = settings or default_settings
        self.profile_repo = ProfileRepository(session)
        self.lead_repo = LeadRepository(session)

    def commission_rate_for(self, profile: Profile) -> Decimal:
        """Current configured rate of a referrer."""
        if profile.commission_rate is not None:
            return profile.commission_rate
        return self.settings.default_commission_rate

    async def resolve(
        self,
        email: str | None,
        phone: str | None,
        cookie_tracking_code: str | None,
    ) -> AttributionResult:
        """
        Determine the referrer for a lead.

        Args:
            email: Submitted email (any case)
            phone: Submitted phone (any formatting)
            cookie_tracking_code: Code from an active attribution cookie

        Returns:
            AttributionResult, DIRECT_ATTRIBUTION when nothing matches
        """
        if cookie_tracking_code:
            result = await self._from_cookie(cookie_tracking_code)
            if result:
                return result

        normalized_email = normalize_email(email)
        if normalized_email:
            result = await self._from_lead(
                await self.lead_repo.find_first_attributed_by_email(normalized_email),
                AttributionMethod.EMAIL,
            )
            if result:
                return result

        phone_key = phone_match_key(phone)
        if phone_key:
            result = await self._from_lead(
                await self.lead_repo.find_first_attributed_by_phone(phone_key),
                AttributionMethod.PHONE,
            )
            if result:
                return result

        return DIRECT_ATTRIBUTION

    async def _from_cookie(self, code: str) -> AttributionResult | None:
        profile = await self.profile_repo.get_by_tracking_code(code.strip())
        if not profile:
            logger.warning(
                "Attribution cookie references unknown or inactive referrer",
                extra={"tracking_code": code},
            )
            return None

        return AttributionResult(
            referrer_username=profile.username,
            referrer_type=referrer_type_for_role(profile.role),
            commission_rate=self.commission_rate_for(profile),
            attribution_method=AttributionMethod.COOKIE,
            confidence=AttributionConfidence.HIGH,
        )

    async def _from_lead(
        self, lead: Lead | None, method: AttributionMethod
    ) -> AttributionResult | None:
        if not lead:
            return None

        # Cross-device match keeps the rate the earlier lead was locked at
        return AttributionResult(
            referrer_username=lead.referrer_username,
            referrer_type=(
                ReferrerType(lead.referrer_type)
                if lead.referrer_type else ReferrerType.AFFILIATE
            ),
            commission_rate=(
                lead.commission_rate
                if lead.commission_rate is not None else Decimal("0")
            ),
            attribution_method=method,
            confidence=AttributionConfidence.MEDIUM,
        )


def lock_attribution(
    lead: Lead, result: AttributionResult, now: datetime | None = None
) -> bool:
    """
    Write an attribution onto a lead and freeze its commission rate.

    A lead that is already locked is left untouched, so a later rate change
    on the referrer never reaches an existing lead.

    Args:
        lead: Lead to attribute
        result: Resolved attribution
        now: Lock timestamp (defaults to current UTC time)

    Returns:
        True if the lead was locked by this call
    """
    if lead.is_attribution_locked:
        logger.debug(
            "Attribution already locked",
            extra={"lead_id": lead.id, "locked_at": str(lead.commission_rate_locked_at)},
        )
        return False

    lead.referrer_username = result.referrer_username
    lead.referrer_type = result.referrer_type.value if result.referrer_type else None
    lead.attribution_method = result.attribution_method.value
    lead.attribution_confidence = result.confidence.value
    lead.commission_rate = result.commission_rate
    lead.commission_rate_locked_at = now or utc_now()
    return True
