"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from genius_referrals.services.base_service import BaseService, transaction

# Authorization
from genius_referrals.services.authorization import (
    ROLE_CAPABILITIES,
    Actor,
    Capability,
    require_capability,
)

# Attribution Services
from genius_referrals.services.attribution import (
    AttributionResolver,
    AttributionResult,
    AttributionStatistics,
    TrackingCodeService,
    lock_attribution,
)

# Commission Services
from genius_referrals.services.commission import (
    CommissionQueryService,
    CommissionService,
    calculate_commission,
)

# Document Services
from genius_referrals.services.documents import DocumentFolderService, collect_subtree

# Fraud Services
from genius_referrals.services.fraud import (
    FraudChecker,
    FraudCheckResult,
    LeadIntakeService,
    LeadSubmission,
)

# Notification Services
from genius_referrals.services.notification import (
    EmailNotifier,
    Notifier,
    QueuedNotifier,
    create_notifier,
)

# Payout Services
from genius_referrals.services.payout import (
    PayoutLifecycleHandler,
    PayoutQueryService,
    PayoutRequestHandler,
)


__all__ = [
    # Base
    "BaseService",
    "transaction",
    # Authorization
    "Actor",
    "Capability",
    "ROLE_CAPABILITIES",
    "require_capability",
    # Attribution
    "AttributionResolver",
    "AttributionResult",
    "AttributionStatistics",
    "TrackingCodeService",
    "lock_attribution",
    # Fraud
    "FraudChecker",
    "FraudCheckResult",
    "LeadIntakeService",
    "LeadSubmission",
    # Commission
    "calculate_commission",
    "CommissionService",
    "CommissionQueryService",
    # Payout
    "PayoutRequestHandler",
    "PayoutLifecycleHandler",
    "PayoutQueryService",
    # Notification
    "Notifier",
    "EmailNotifier",
    "QueuedNotifier",
    "create_notifier",
    # Documents
    "DocumentFolderService",
    "collect_subtree",
]
