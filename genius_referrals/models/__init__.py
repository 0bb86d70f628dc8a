"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from genius_referrals.models.base import Base
from genius_referrals.models.commission import Commission
from genius_referrals.models.document import Document, DocumentFolder
from genius_referrals.models.enums import (
    AttributionConfidence,
    AttributionMethod,
    CommissionStatus,
    LeadStatus,
    PaymentMethod,
    PayoutStatus,
    ReferrerType,
    UserRole,
)
from genius_referrals.models.fraud_check_log import FraudCheckLog
from genius_referrals.models.lead import CommissionRateLockedError, Lead
from genius_referrals.models.payout_request import PayoutRequest
from genius_referrals.models.profile import Profile

__all__ = [
    # Base
    "Base",
    # Enums
    "AttributionConfidence",
    "AttributionMethod",
    "CommissionStatus",
    "LeadStatus",
    "PaymentMethod",
    "PayoutStatus",
    "ReferrerType",
    "UserRole",
    # Core Models
    "Profile",
    "Lead",
    "CommissionRateLockedError",
    "Commission",
    "PayoutRequest",
    # Security Models
    "FraudCheckLog",
    # Documents
    "DocumentFolder",
    "Document",
]
