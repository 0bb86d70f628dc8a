"""
Email templates for payout notifications.

Plain-text templates rendered with str.format from the notification data.
"""

from typing import Any, NamedTuple

from genius_referrals.utils.exceptions import ValidationError


class RenderedEmail(NamedTuple):
    subject: str
    text: str


PAYOUT_REQUESTED = "payout_requested"
PAYOUT_REQUEST_ADMIN = "payout_request_admin"
PAYOUT_PAID = "payout_paid"
PAYOUT_REJECTED = "payout_rejected"

TEMPLATES: dict[str, tuple[str, str]] = {
    PAYOUT_REQUESTED: (
        "Your ${amount} Payout is On the Way!",
        "Hi {referrer_name},\n\n"
        "Your payout request #{payout_id} has been submitted and is being "
        "processed.\n\n"
        "Amount: ${amount}\n"
        "Payment method: {payment_method}\n"
        "Commissions covered: {commission_count}\n\n"
        "We will email you again once the payment has been sent.\n\n"
        "{app_url}/dashboard/earnings\n",
    ),
    PAYOUT_REQUEST_ADMIN: (
        "[ACTION REQUIRED] Payout Request: ${amount} - {referrer_name}",
        "New payout request #{payout_id}\n\n"
        "Referrer: {referrer_name} ({referrer_email})\n"
        "Amount: ${amount}\n"
        "Payment method: {payment_method}\n"
        "Commissions covered: {commission_count}\n\n"
        "Review it at {app_url}/admin/payouts\n",
    ),
    PAYOUT_PAID: (
        "Your ${amount} Payout Has Been Sent!",
        "Hi {referrer_name},\n\n"
        "Your payout #{payout_id} of ${amount} has been sent via "
        "{payment_method}.\n\n"
        "Payment reference: {payment_ref}\n\n"
        "Thank you for referring clients to us.\n",
    ),
    PAYOUT_REJECTED: (
        "Payout Request Update - Action Required",
        "Hi {referrer_name},\n\n"
        "Your payout request #{payout_id} of ${amount} could not be "
        "processed.\n\n"
        "Reason: {notes}\n\n"
        "The commissions it covered are available again and can be "
        "included in a new payout request.\n\n"
        "{app_url}/dashboard/earnings\n",
    ),
}


def render_template(template: str, data: dict[str, Any]) -> RenderedEmail:
    """
    Render a named template.

    Raises:
        ValidationError: Unknown template or missing placeholder value
    """
    try:
        subject, body = TEMPLATES[template]
    except KeyError:
        raise ValidationError(
            f"Unknown email template: {template}", template=template
        ) from None

    try:
        return RenderedEmail(subject.format(**data), body.format(**data))
    except KeyError as e:
        raise ValidationError(
            f"Missing template value {e.args[0]!r} for {template}",
            template=template,
        ) from e
