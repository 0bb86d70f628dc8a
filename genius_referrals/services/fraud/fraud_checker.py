"""
Fraud checker.

Scores a lead submission from 0 to 100 and decides whether to block it.
Duplicate submissions within the block window and IP velocity above the
limit block outright; everything else adds to the score, which blocks above
the configured threshold.

Any unexpected error fails open: the submission is allowed with the
FRAUD_CHECK_ERROR flag so a broken dependency never turns away real leads.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.business_constants import (
    HIGH_FRAUD_REFERRER_RATE,
    IP_HISTORY_LOOKBACK_DAYS,
    MAX_RISK_SCORE,
    REFERRER_FRAUD_LOOKBACK_DAYS,
    RISK_DUPLICATE_SUBMISSION,
    RISK_HIGH_FRAUD_REFERRER,
    RISK_INVALID_REFERRER,
    RISK_SELF_REFERRAL,
    RISK_SUSPICIOUS_IP_HISTORY,
    SUSPICIOUS_IP_DISQUALIFIED_COUNT,
)
from genius_referrals.config.settings import Settings, settings as default_settings
from genius_referrals.models.enums import LeadStatus
from genius_referrals.models.profile import Profile
from genius_referrals.repositories.lead_repository import LeadRepository
from genius_referrals.repositories.profile_repository import ProfileRepository
from genius_referrals.services.fraud.heuristics import (
    FraudFlag,
    RiskSignal,
    contact_signals,
)
from genius_referrals.services.fraud.velocity import SubmissionCounter
from genius_referrals.utils.datetime_utils import ensure_utc, utc_now
from genius_referrals.utils.validation import (
    normalize_email,
    normalize_phone,
    phone_match_key,
)


DUPLICATE_BLOCK_REASON = "Duplicate submission detected. Please try again later."
SUSPICIOUS_BLOCK_REASON = "Submission flagged as suspicious. Please contact support."


@dataclass
class FraudCheckResult:
    """Outcome of a fraud check, consumed by lead creation."""

    is_valid: bool
    risk_score: int
    flags: list[str] = field(default_factory=list)
    blocked_reason: str | None = None

    @classmethod
    def fail_open(cls) -> "FraudCheckResult":
        return cls(
            is_valid=True,
            risk_score=0,
            flags=[FraudFlag.FRAUD_CHECK_ERROR.value],
        )


class FraudChecker:
    """Risk scoring for lead submissions."""

    def __init__(
        self,
        session: AsyncSession,
        submission_counter: SubmissionCounter,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize fraud checker.

        Args:
            session: Database session (duplicate and referrer lookups)
            submission_counter: Velocity counter by IP
            settings: Application settings (thresholds and windows)
        """
        self.session = session
        self.submission_counter = submission_counter
        self.settings = settings or default_settings
        self.lead_repo = LeadRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def check(
        self,
        email: str | None,
        phone: str | None,
        ip_address: str | None,
        user_agent: str | None,
        referrer_username: str | None = None,
    ) -> FraudCheckResult:
        """
        Score a submission.

        Args:
            email: Submitted email
            phone: Submitted phone (any formatting)
            ip_address: Client IP
            user_agent: Client user agent
            referrer_username: Referrer the submission is attributed to

        Returns:
            FraudCheckResult; never raises
        """
        try:
            # Savepoint: a failed query must not abort the caller's transaction
            async with self.session.begin_nested():
                return await self._check(
                    normalize_email(email),
                    normalize_phone(phone),
                    ip_address,
                    user_agent,
                    referrer_username,
                )
        except Exception as e:
            logger.error(
                "Error performing fraud check, allowing submission",
                extra={
                    "ip_address": ip_address,
                    "referrer_username": referrer_username,
                    "error": str(e),
                },
                exc_info=True,
            )
            return FraudCheckResult.fail_open()

    async def _check(
        self,
        email: str | None,
        phone: str | None,
        ip_address: str | None,
        user_agent: str | None,
        referrer_username: str | None,
    ) -> FraudCheckResult:
        now = utc_now()
        flags: list[str] = []
        risk_score = 0

        # Duplicate detection
        existing = await self.lead_repo.find_recent_by_contact(
            email, phone, now - timedelta(hours=self.settings.duplicate_window_hours)
        )
        if existing:
            flags.append(FraudFlag.DUPLICATE_SUBMISSION.value)
            risk_score += RISK_DUPLICATE_SUBMISSION
            age = now - ensure_utc(existing.created_at)
            logger.warning(
                "Duplicate lead detected",
                extra={
                    "existing_lead_id": existing.id,
                    "minutes_ago": int(age.total_seconds() // 60),
                },
            )
            if age < timedelta(minutes=self.settings.duplicate_block_minutes):
                return FraudCheckResult(
                    is_valid=False,
                    risk_score=MAX_RISK_SCORE,
                    flags=flags,
                    blocked_reason=DUPLICATE_BLOCK_REASON,
                )

        # Velocity
        if ip_address:
            window = self.settings.fraud_velocity_window_seconds
            recent = await self.submission_counter.count_recent_submissions(
                ip_address, window
            )
            if recent >= self.settings.fraud_velocity_limit:
                logger.warning(
                    "IP rate limit exceeded",
                    extra={
                        "ip_address": ip_address,
                        "submissions": recent,
                        "limit": self.settings.fraud_velocity_limit,
                    },
                )
                flags.append(FraudFlag.RATE_LIMIT_EXCEEDED.value)
                return FraudCheckResult(
                    is_valid=False,
                    risk_score=MAX_RISK_SCORE,
                    flags=flags,
                    blocked_reason=(
                        "Too many submissions. Please try again in "
                        f"{window // 60} minutes."
                    ),
                )

        signals: list[RiskSignal] = []
        if referrer_username:
            signals.extend(
                await self._referrer_signals(referrer_username, email, phone, now)
            )
        signals.extend(contact_signals(email, phone, user_agent))
        if ip_address:
            signals.extend(await self._ip_history_signals(ip_address, now))

        for signal in signals:
            flags.append(signal.flag.value)
            risk_score += signal.weight

        risk_score = min(MAX_RISK_SCORE, risk_score)

        if risk_score > self.settings.fraud_block_threshold:
            logger.warning(
                "Lead submission blocked",
                extra={"ip_address": ip_address, "risk_score": risk_score, "flags": flags},
            )
            return FraudCheckResult(
                is_valid=False,
                risk_score=risk_score,
                flags=flags,
                blocked_reason=SUSPICIOUS_BLOCK_REASON,
            )

        if risk_score > self.settings.fraud_warn_threshold:
            logger.warning(
                "High-risk lead submission allowed",
                extra={"ip_address": ip_address, "risk_score": risk_score, "flags": flags},
            )

        return FraudCheckResult(is_valid=True, risk_score=risk_score, flags=flags)

    async def _referrer_signals(
        self,
        referrer_username: str,
        email: str | None,
        phone: str | None,
        now: datetime,
    ) -> list[RiskSignal]:
        profile = await self.profile_repo.get_by_tracking_code(referrer_username)
        if not profile:
            return [RiskSignal(FraudFlag.INVALID_REFERRER, RISK_INVALID_REFERRER)]

        signals = []
        if self._is_self_referral(profile, email, phone):
            logger.warning(
                "Self-referral detected",
                extra={"referrer_username": profile.username},
            )
            signals.append(RiskSignal(FraudFlag.SELF_REFERRAL, RISK_SELF_REFERRAL))

        counts = await self.lead_repo.count_by_status_for_referrer(
            profile.username, now - timedelta(days=REFERRER_FRAUD_LOOKBACK_DAYS)
        )
        total = sum(counts.values())
        if total:
            disqualified = counts.get(LeadStatus.DISQUALIFIED.value, 0)
            if disqualified / total > HIGH_FRAUD_REFERRER_RATE:
                signals.append(
                    RiskSignal(FraudFlag.HIGH_FRAUD_REFERRER, RISK_HIGH_FRAUD_REFERRER)
                )
        return signals

    @staticmethod
    def _is_self_referral(
        profile: Profile, email: str | None, phone: str | None
    ) -> bool:
        if email and normalize_email(profile.email) == email:
            return True
        phone_key = phone_match_key(phone)
        return bool(phone_key and phone_match_key(profile.phone) == phone_key)

    async def _ip_history_signals(
        self, ip_address: str, now: datetime
    ) -> list[RiskSignal]:
        disqualified = await self.lead_repo.count_disqualified_by_ip_since(
            ip_address, now - timedelta(days=IP_HISTORY_LOOKBACK_DAYS)
        )
        if disqualified > SUSPICIOUS_IP_DISQUALIFIED_COUNT:
            return [RiskSignal(FraudFlag.SUSPICIOUS_IP_HISTORY, RISK_SUSPICIOUS_IP_HISTORY)]
        return []
