"""
Unit tests for payout notifications.

Tests cover:
- Template rendering and its errors
- Email provider calls through aiohttp (mocked)
- Best-effort delivery that never raises
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from genius_referrals.services.notification.notifier import (
    EmailNotifier,
    QueuedNotifier,
    create_notifier,
)
from genius_referrals.services.notification.payout_notifications import (
    notify_payout_paid,
    notify_payout_rejected,
    notify_payout_requested,
)
from genius_referrals.services.notification.templates import (
    PAYOUT_PAID,
    PAYOUT_REQUEST_ADMIN,
    PAYOUT_REQUESTED,
    render_template,
)
from genius_referrals.utils.exceptions import DependencyError, ValidationError


PAID_DATA = {
    "payout_id": 7,
    "amount": "150.00",
    "payment_method": "paypal",
    "payment_ref": "PAYPAL-001",
    "referrer_name": "Ray Hamilton",
}


def mock_http_session(status: int = 200, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.closed = False
    session.post = MagicMock(return_value=context)
    return session


class TestTemplates:
    """Test render_template."""

    def test_render_paid(self):
        email = render_template(PAYOUT_PAID, PAID_DATA)

        assert email.subject == "Your $150.00 Payout Has Been Sent!"
        assert "PAYPAL-001" in email.text

    def test_unknown_template(self):
        with pytest.raises(ValidationError):
            render_template("welcome", PAID_DATA)

    def test_missing_value(self):
        with pytest.raises(ValidationError) as exc_info:
            render_template(PAYOUT_PAID, {"amount": "1.00"})
        assert "Missing template value" in exc_info.value.message


class TestEmailNotifier:
    """Test EmailNotifier against a mocked HTTP session."""

    @pytest.mark.asyncio
    async def test_sends_with_api_key(self, test_settings):
        settings = test_settings.model_copy(update={"email_api_key": "re_test"})
        http = mock_http_session(200)
        notifier = EmailNotifier(settings, http)

        await notifier.send("ray@example.com", PAYOUT_PAID, PAID_DATA)

        url = http.post.call_args.args[0]
        payload = http.post.call_args.kwargs["json"]
        headers = http.post.call_args.kwargs["headers"]
        assert url == settings.email_api_url
        assert payload["to"] == ["ray@example.com"]
        assert payload["subject"] == "Your $150.00 Payout Has Been Sent!"
        assert headers["Authorization"] == "Bearer re_test"

    @pytest.mark.asyncio
    async def test_provider_error_raises(self, test_settings):
        settings = test_settings.model_copy(update={"email_api_key": "re_test"})
        notifier = EmailNotifier(settings, mock_http_session(500, "boom"))

        with pytest.raises(DependencyError) as exc_info:
            await notifier.send("ray@example.com", PAYOUT_PAID, PAID_DATA)
        assert exc_info.value.context["status"] == 500

    @pytest.mark.asyncio
    async def test_connection_error_raises(self, test_settings):
        settings = test_settings.model_copy(update={"email_api_key": "re_test"})
        http = mock_http_session()
        http.post.side_effect = aiohttp.ClientConnectionError("refused")
        notifier = EmailNotifier(settings, http)

        with pytest.raises(DependencyError):
            await notifier.send("ray@example.com", PAYOUT_PAID, PAID_DATA)

    @pytest.mark.asyncio
    async def test_dev_mode_without_key(self, test_settings):
        """Test nothing is sent without an API key outside production."""
        http = mock_http_session()
        notifier = EmailNotifier(test_settings, http)

        await notifier.send("ray@example.com", PAYOUT_PAID, PAID_DATA)

        http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_keeps_shared_session(self, test_settings):
        http = mock_http_session()
        http.close = AsyncMock()
        notifier = EmailNotifier(test_settings, http)

        await notifier.close()

        http.close.assert_not_awaited()


class TestQueuedNotifier:
    """Test QueuedNotifier."""

    @pytest.mark.asyncio
    async def test_bad_template_fails_before_enqueue(self):
        with pytest.raises(ValidationError):
            await QueuedNotifier().send("ray@example.com", "welcome", {})

    @pytest.mark.asyncio
    async def test_enqueues_message(self):
        with patch("jobs.tasks.notifications.send_email_notification") as actor:
            await QueuedNotifier().send("ray@example.com", PAYOUT_PAID, PAID_DATA)

        actor.send.assert_called_once_with("ray@example.com", PAYOUT_PAID, PAID_DATA)

    def test_factory_selects_by_setting(self, test_settings):
        assert isinstance(create_notifier(test_settings), EmailNotifier)
        queued = test_settings.model_copy(update={"notifications_async": True})
        assert isinstance(create_notifier(queued), QueuedNotifier)


class TestPayoutNotifications:
    """Best-effort payout notifications."""

    @pytest.mark.asyncio
    async def test_request_notifies_referrer_and_admin(
        self, mock_notifier, pending_payout, referrer_profile, test_settings
    ):
        sent = await notify_payout_requested(
            mock_notifier, pending_payout, referrer_profile, test_settings
        )

        assert sent is True
        calls = mock_notifier.send.await_args_list
        assert [c.args[:2] for c in calls] == [
            ("ray@example.com", PAYOUT_REQUESTED),
            (test_settings.admin_notification_email, PAYOUT_REQUEST_ADMIN),
        ]
        assert calls[0].args[2]["amount"] == "150.00"
        assert calls[0].args[2]["commission_count"] == 3

    @pytest.mark.asyncio
    async def test_paid_includes_payment_ref(
        self, mock_notifier, pending_payout, referrer_profile, test_settings
    ):
        pending_payout.payment_ref = "PAYPAL-001"

        await notify_payout_paid(mock_notifier, pending_payout, referrer_profile, test_settings)

        data = mock_notifier.send.await_args.args[2]
        assert data["payment_ref"] == "PAYPAL-001"
        assert data["referrer_name"] == "Ray Hamilton"

    @pytest.mark.asyncio
    async def test_failure_is_reported_not_raised(
        self, failing_notifier, pending_payout, referrer_profile, test_settings
    ):
        sent = await notify_payout_rejected(
            failing_notifier, pending_payout, referrer_profile, test_settings
        )

        assert sent is False

    @pytest.mark.asyncio
    async def test_missing_email_skips_send(
        self, mock_notifier, pending_payout, referrer_profile, test_settings
    ):
        referrer_profile.email = None

        sent = await notify_payout_paid(
            mock_notifier, pending_payout, referrer_profile, test_settings
        )

        assert sent is False
        mock_notifier.send.assert_not_awaited()
        assert pending_payout.amount == Decimal("150.00")
