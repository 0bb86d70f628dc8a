"""
Lead intake flow.

Screens a form submission, attributes it and stores the lead with its
commission rate locked. Blocked and elevated-risk submissions leave a
FraudCheckLog row for admin review.
"""

from dataclasses import dataclass

from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings
from genius_referrals.models.enums import LeadStatus
from genius_referrals.models.lead import Lead
from genius_referrals.repositories.fraud_check_log_repository import (
    FraudCheckLogRepository,
)
from genius_referrals.services.attribution.resolver import (
    AttributionResolver,
    AttributionResult,
    lock_attribution,
)
from genius_referrals.services.base_service import BaseService, transaction
from genius_referrals.services.fraud.fraud_checker import (
    FraudChecker,
    FraudCheckResult,
)
from genius_referrals.services.fraud.velocity import SubmissionCounter
from genius_referrals.utils.validation import normalize_email, normalize_phone


@dataclass(frozen=True)
class LeadSubmission:
    """Lead form submission as received from the web layer."""

    first_name: str | None
    last_name: str | None
    email: str | None
    phone: str | None
    ip_address: str | None = None
    user_agent: str | None = None
    # Decoded from the attribution cookie, None if absent or expired
    tracking_code: str | None = None


@dataclass(frozen=True)
class LeadIntakeResult:
    """Outcome of a submission; lead is None when it was blocked."""

    fraud_check: FraudCheckResult
    lead: Lead | None = None
    attribution: AttributionResult | None = None

    @property
    def accepted(self) -> bool:
        return self.lead is not None


class LeadIntakeService(BaseService):
    """Creates leads from form submissions."""

    def __init__(
        self,
        session: AsyncSession,
        submission_counter: SubmissionCounter,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(session, settings)
        self.submission_counter = submission_counter
        self.fraud_checker = FraudChecker(session, submission_counter, self.settings)
        self.resolver = AttributionResolver(session, self.settings)
        self.fraud_log_repo = FraudCheckLogRepository(session)

    async def submit(self, submission: LeadSubmission) -> LeadIntakeResult:
        """
        Run fraud check and attribution, then store the lead.

        Returns:
            LeadIntakeResult with the created lead, or without one if the
            submission was blocked (see fraud_check.blocked_reason)
        """
        result = await self._create_lead(submission)

        if result.accepted and submission.ip_address:
            try:
                await self.submission_counter.record_submission(submission.ip_address)
            except (RedisError, ConnectionError, TimeoutError) as e:
                # Velocity limiting degrades, the lead is already stored
                self.logger.warning(
                    f"Failed to record submission for velocity limiting: {e}",
                    extra={"lead_id": result.lead.id},
                )

        return result

    @transaction
    async def _create_lead(self, submission: LeadSubmission) -> LeadIntakeResult:
        email = normalize_email(submission.email)
        phone = normalize_phone(submission.phone)

        fraud_check = await self.fraud_checker.check(
            email,
            phone,
            submission.ip_address,
            submission.user_agent,
            submission.tracking_code,
        )

        if not fraud_check.is_valid:
            await self._log_fraud(submission, email, fraud_check)
            self.logger.warning(
                "Lead submission blocked",
                extra={
                    "ip_address": submission.ip_address,
                    "risk_score": fraud_check.risk_score,
                    "flags": fraud_check.flags,
                },
            )
            return LeadIntakeResult(fraud_check=fraud_check)

        attribution = await self.resolver.resolve(
            email, phone, submission.tracking_code
        )

        lead = Lead(
            first_name=submission.first_name,
            last_name=submission.last_name,
            email=email,
            phone=phone,
            ip_address=submission.ip_address,
            user_agent=submission.user_agent,
            status=LeadStatus.NEW.value,
        )
        lock_attribution(lead, attribution)
        self.session.add(lead)
        await self.session.flush()

        if fraud_check.risk_score > self.settings.fraud_warn_threshold:
            await self._log_fraud(submission, email, fraud_check)

        self.logger.info(
            "Lead created",
            extra={
                "lead_id": lead.id,
                "referrer_username": attribution.referrer_username,
                "attribution_method": attribution.attribution_method.value,
                "risk_score": fraud_check.risk_score,
            },
        )
        return LeadIntakeResult(
            fraud_check=fraud_check, lead=lead, attribution=attribution
        )

    async def _log_fraud(
        self,
        submission: LeadSubmission,
        email: str | None,
        fraud_check: FraudCheckResult,
    ) -> None:
        await self.fraud_log_repo.create(
            email=email,
            ip_address=submission.ip_address,
            referrer_username=submission.tracking_code,
            risk_score=fraud_check.risk_score,
            flags=list(fraud_check.flags),
            blocked_reason=fraud_check.blocked_reason,
            is_blocked=not fraud_check.is_valid,
        )
