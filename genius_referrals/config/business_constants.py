"""
Business logic constants for the referral core.

Central location for business rules that do not vary per deployment.
"""

from decimal import Decimal

# Money is stored with two decimal places
CENTS = Decimal("0.01")

# Attribution cookie
ATTRIBUTION_COOKIE_NAME = "tg_attribution"

# Phone numbers are matched on their trailing digits
PHONE_MATCH_DIGITS = 10

# Fraud risk weights (score is capped at 100)
RISK_DUPLICATE_SUBMISSION = 50
RISK_INVALID_REFERRER = 30
RISK_SELF_REFERRAL = 50
RISK_DISPOSABLE_EMAIL = 30
RISK_INVALID_PHONE_FORMAT = 20
RISK_SUSPICIOUS_PHONE_PATTERN = 25
RISK_MISSING_USER_AGENT = 15
RISK_SUSPICIOUS_EMAIL_PATTERN = 25
RISK_HIGH_FRAUD_REFERRER = 40
RISK_SUSPICIOUS_IP_HISTORY = 35
MAX_RISK_SCORE = 100

MIN_USER_AGENT_LENGTH = 10
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15
SEQUENTIAL_PHONE_RUN = 10

# Referrer whose leads are disqualified above this share is suspicious
HIGH_FRAUD_REFERRER_RATE = 0.3
REFERRER_FRAUD_LOOKBACK_DAYS = 90
# IP with more than this many disqualified leads is suspicious
SUSPICIOUS_IP_DISQUALIFIED_COUNT = 3
IP_HISTORY_LOOKBACK_DAYS = 30

DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "tempmail.com",
    "guerrillamail.com",
    "mailinator.com",
    "10minutemail.com",
    "throwaway.email",
    "temp-mail.org",
})

# Tracking codes
TRACKING_CODE_PREFIX = "TGP-"
TRACKING_CODE_MAX_ATTEMPTS = 20
CUSTOM_CODE_MIN_LENGTH = 3
CUSTOM_CODE_MAX_LENGTH = 20
RESERVED_TRACKING_CODES = frozenset({
    "admin",
    "api",
    "dashboard",
    "auth",
    "test",
    "demo",
    "support",
    "help",
})
