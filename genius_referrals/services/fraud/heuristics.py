"""
Fraud heuristics.

Pure checks over the submitted contact details. Each check returns the
risk signals it raised; the fraud checker adds up their weights.
"""

import re
from enum import StrEnum
from typing import NamedTuple

from genius_referrals.config.business_constants import (
    DISPOSABLE_EMAIL_DOMAINS,
    MAX_PHONE_DIGITS,
    MIN_PHONE_DIGITS,
    MIN_USER_AGENT_LENGTH,
    RISK_DISPOSABLE_EMAIL,
    RISK_INVALID_PHONE_FORMAT,
    RISK_MISSING_USER_AGENT,
    RISK_SUSPICIOUS_EMAIL_PATTERN,
    RISK_SUSPICIOUS_PHONE_PATTERN,
    SEQUENTIAL_PHONE_RUN,
)
from genius_referrals.utils.validation import email_domain


class FraudFlag(StrEnum):
    """Flags a fraud check can raise."""

    DUPLICATE_SUBMISSION = "DUPLICATE_SUBMISSION"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INVALID_REFERRER = "INVALID_REFERRER"
    SELF_REFERRAL = "SELF_REFERRAL"
    DISPOSABLE_EMAIL = "DISPOSABLE_EMAIL"
    INVALID_PHONE_FORMAT = "INVALID_PHONE_FORMAT"
    SUSPICIOUS_PHONE_PATTERN = "SUSPICIOUS_PHONE_PATTERN"
    MISSING_USER_AGENT = "MISSING_USER_AGENT"
    SUSPICIOUS_EMAIL_PATTERN = "SUSPICIOUS_EMAIL_PATTERN"
    HIGH_FRAUD_REFERRER = "HIGH_FRAUD_REFERRER"
    SUSPICIOUS_IP_HISTORY = "SUSPICIOUS_IP_HISTORY"
    FRAUD_CHECK_ERROR = "FRAUD_CHECK_ERROR"


class RiskSignal(NamedTuple):
    """A raised flag and the risk it adds."""

    flag: FraudFlag
    weight: int


_REPEATED_DIGITS = re.compile(r"(\d)\1{4,}")
_SUSPICIOUS_EMAIL_PATTERNS = (
    re.compile(r"test@", re.IGNORECASE),
    re.compile(r"fake@", re.IGNORECASE),
    re.compile(r"spam@", re.IGNORECASE),
    re.compile(r"\d{8,}@"),
    re.compile(r"^[a-z]{1,2}@", re.IGNORECASE),
)


def has_sequential_run(digits: str, run_length: int = SEQUENTIAL_PHONE_RUN) -> bool:
    """
    Check for a run of ascending or descending digits.

    Wraps around, so "1234567890" and "0987654321" both count.
    """
    if len(digits) < run_length:
        return False

    for step in (1, -1):
        run = 1
        for prev, cur in zip(digits, digits[1:]):
            if (int(prev) + step) % 10 == int(cur):
                run += 1
                if run >= run_length:
                    return True
            else:
                run = 1
    return False


def check_email(email: str | None) -> list[RiskSignal]:
    """Disposable domain and throwaway-looking local parts."""
    if not email:
        return []

    signals = []
    if email_domain(email) in DISPOSABLE_EMAIL_DOMAINS:
        signals.append(RiskSignal(FraudFlag.DISPOSABLE_EMAIL, RISK_DISPOSABLE_EMAIL))
    if any(p.search(email) for p in _SUSPICIOUS_EMAIL_PATTERNS):
        signals.append(
            RiskSignal(FraudFlag.SUSPICIOUS_EMAIL_PATTERN, RISK_SUSPICIOUS_EMAIL_PATTERN)
        )
    return signals


def check_phone(phone_digits: str | None) -> list[RiskSignal]:
    """
    Phone length and fake-looking digit patterns.

    Args:
        phone_digits: Phone with every non-digit stripped
    """
    digits = phone_digits or ""
    signals = []
    if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        signals.append(
            RiskSignal(FraudFlag.INVALID_PHONE_FORMAT, RISK_INVALID_PHONE_FORMAT)
        )
    if _REPEATED_DIGITS.search(digits) or has_sequential_run(digits):
        signals.append(
            RiskSignal(FraudFlag.SUSPICIOUS_PHONE_PATTERN, RISK_SUSPICIOUS_PHONE_PATTERN)
        )
    return signals


def check_user_agent(user_agent: str | None) -> list[RiskSignal]:
    """Missing or truncated browser user agent."""
    if not user_agent or len(user_agent) < MIN_USER_AGENT_LENGTH:
        return [RiskSignal(FraudFlag.MISSING_USER_AGENT, RISK_MISSING_USER_AGENT)]
    return []


def contact_signals(
    email: str | None, phone_digits: str | None, user_agent: str | None
) -> list[RiskSignal]:
    """All storage-independent signals for one submission."""
    return [
        *check_email(email),
        *check_phone(phone_digits),
        *check_user_agent(user_agent),
    ]
