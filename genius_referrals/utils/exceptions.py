"""
Exception types for the referral core.

Every service failure the caller can act on is one of these. Each carries a
human readable message and the entity IDs needed to diagnose it.
"""

from typing import Any


class ReferralError(Exception):
    """Base class for all referral core errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ValidationError(ReferralError):
    """Malformed input: amount <= 0, missing payment details, bad codes."""


class NotFoundError(ReferralError):
    """Unknown payout, commission, lead or referrer id."""


class ConflictError(ReferralError):
    """Wrong-state transition or a commission already claimed elsewhere."""


class AuthorizationError(ReferralError):
    """Actor lacks the capability required for the operation."""


class DependencyError(ReferralError):
    """An external collaborator (email provider, queue) failed."""
