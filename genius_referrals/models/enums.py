"""
Enumerations shared by models and services.

Values are stored as plain strings in the database.
"""

from enum import StrEnum


class UserRole(StrEnum):
    """Closed set of platform roles."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    TAX_PREPARER = "tax_preparer"
    AFFILIATE = "affiliate"
    LEAD = "lead"
    CLIENT = "client"


class ReferrerType(StrEnum):
    """Kind of referrer credited for a lead."""

    AFFILIATE = "affiliate"
    TAX_PREPARER = "tax_preparer"
    CLIENT = "client"


class AttributionMethod(StrEnum):
    """How the referrer for a lead was determined."""

    COOKIE = "cookie"
    EMAIL = "email"
    PHONE = "phone"
    DIRECT = "direct"


class AttributionConfidence(StrEnum):
    """Categorical confidence of an attribution."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    NONE = "NONE"


class LeadStatus(StrEnum):
    """Lead pipeline status."""

    NEW = "NEW"
    CONTACTED = "CONTACTED"
    CONVERTED = "CONVERTED"
    DISQUALIFIED = "DISQUALIFIED"


class CommissionStatus(StrEnum):
    """Commission ledger status."""

    PENDING = "PENDING"
    PAID = "PAID"


class PayoutStatus(StrEnum):
    """Payout request status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    REJECTED = "REJECTED"


class PaymentMethod(StrEnum):
    """Supported payout methods."""

    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    CASH_APP = "cash_app"
    VENMO = "venmo"
    CHECK = "check"
