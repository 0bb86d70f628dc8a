"""Input normalization and validation helpers."""

import re
from decimal import Decimal

from genius_referrals.config.business_constants import CENTS, PHONE_MATCH_DIGITS


_NON_DIGITS = re.compile(r"\D")
_DOMAIN_RE = re.compile(
    r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)*\.[a-z]{2,}$",
    re.IGNORECASE,
)


def normalize_email(email: str | None) -> str | None:
    """Lowercase and trim an email address; blank becomes None."""
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


def normalize_phone(phone: str | None) -> str | None:
    """
    Strip a phone number down to digits.

    US numbers with a leading country code 1 lose it, so
    "+1 (555) 123-4567" and "555.123.4567" normalize to the same value.
    """
    if phone is None:
        return None
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    return digits or None


def phone_match_key(phone: str | None) -> str | None:
    """
    Trailing digits used when matching phones across records.

    Numbers shorter than a full local number have no key, so a fragment
    like "47" never suffix-matches someone else's phone.
    """
    digits = normalize_phone(phone)
    if not digits or len(digits) < PHONE_MATCH_DIGITS:
        return None
    return digits[-PHONE_MATCH_DIGITS:]


def email_domain(email: str | None) -> str | None:
    """Domain part of an email address, lowercased."""
    if not email or "@" not in email:
        return None
    return email.rsplit("@", 1)[1].lower()


def is_valid_email_domain(email: str) -> bool:
    """Check the domain part of an email has a plausible format."""
    domain = email_domain(email)
    return bool(domain and _DOMAIN_RE.match(domain))


def to_money(value: Decimal | int | str) -> Decimal:
    """Convert to Decimal with cent precision (no rounding surprises from float)."""
    if isinstance(value, float):
        raise TypeError("Use Decimal or str for money, not float")
    return Decimal(value).quantize(CENTS)
