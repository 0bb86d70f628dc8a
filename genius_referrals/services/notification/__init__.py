"""
Notification services package.

- notifier: Notifier protocol, HTTP email and queued delivery
- templates: Payout email templates
- payout_notifications: Best-effort payout lifecycle messages
"""

from genius_referrals.services.notification.notifier import (
    EmailNotifier,
    Notifier,
    QueuedNotifier,
    create_notifier,
)
from genius_referrals.services.notification.payout_notifications import (
    notify_payout_paid,
    notify_payout_rejected,
    notify_payout_requested,
)
from genius_referrals.services.notification.templates import (
    TEMPLATES,
    RenderedEmail,
    render_template,
)


__all__ = [
    "Notifier",
    "EmailNotifier",
    "QueuedNotifier",
    "create_notifier",
    "notify_payout_requested",
    "notify_payout_paid",
    "notify_payout_rejected",
    "TEMPLATES",
    "RenderedEmail",
    "render_template",
]
