"""
Fraud prevention services package.

Contains modular services for lead screening:
- heuristics: Pure contact-detail checks and their risk weights
- velocity: Submission counters by IP (Redis and database)
- fraud_checker: Risk scoring with fail-open error handling
- lead_intake: Lead creation flow (fraud check, attribution, lock)
"""

from genius_referrals.services.fraud.fraud_checker import (
    FraudChecker,
    FraudCheckResult,
)
from genius_referrals.services.fraud.heuristics import (
    FraudFlag,
    RiskSignal,
    contact_signals,
    has_sequential_run,
)
from genius_referrals.services.fraud.lead_intake import (
    LeadIntakeResult,
    LeadIntakeService,
    LeadSubmission,
)
from genius_referrals.services.fraud.velocity import (
    DatabaseSubmissionCounter,
    RedisSubmissionCounter,
    SubmissionCounter,
)


__all__ = [
    # Checking
    "FraudChecker",
    "FraudCheckResult",
    "FraudFlag",
    "RiskSignal",
    "contact_signals",
    "has_sequential_run",
    # Velocity
    "SubmissionCounter",
    "RedisSubmissionCounter",
    "DatabaseSubmissionCounter",
    # Intake
    "LeadIntakeService",
    "LeadSubmission",
    "LeadIntakeResult",
]
