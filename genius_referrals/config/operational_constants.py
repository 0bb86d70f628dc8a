"""
Operational constants for genius-referrals.

Technical constants for background delivery: retries and task time limits.
"""

# =============================================================================
# RETRY CONFIGURATIONS
# =============================================================================

# Notification delivery through the task queue
NOTIFICATION_MAX_RETRIES = 3
NOTIFICATION_MIN_BACKOFF_MS = 1_000
NOTIFICATION_MAX_BACKOFF_MS = 60_000


# =============================================================================
# DRAMATIQ TASK TIME LIMITS (milliseconds)
# =============================================================================

# Short tasks (1 minute) - single email delivery
DRAMATIQ_TIME_LIMIT_SHORT = 60_000
