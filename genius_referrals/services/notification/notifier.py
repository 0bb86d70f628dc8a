"""
Notification delivery.

A Notifier sends one templated message to one recipient. Delivery failures
raise DependencyError; callers that treat notifications as best-effort
catch and log it.
"""

import asyncio
from typing import Any, Protocol

import aiohttp
from loguru import logger

from genius_referrals.config.settings import Settings, settings as default_settings
from genius_referrals.services.notification.templates import render_template
from genius_referrals.utils.exceptions import DependencyError


class Notifier(Protocol):
    """send(to, template, data) capability."""

    async def send(self, to: str, template: str, data: dict[str, Any]) -> None:
        ...


class EmailNotifier:
    """
    Sends email through the provider's HTTP API.

    Without an API key outside production, messages are logged instead of
    sent.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize email notifier.

        Args:
            settings: Application settings (provider URL, key, sender)
            http_session: Shared aiohttp session; created lazily if None
        """
        self.settings = settings or default_settings
        self._session = http_session
        self._owns_session = http_session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this notifier created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def send(self, to: str, template: str, data: dict[str, Any]) -> None:
        """
        Render and send an email.

        Raises:
            ValidationError: Unknown template or missing template data
            DependencyError: Provider rejected the message or is unreachable
        """
        email = render_template(template, data)

        if not self.settings.email_api_key:
            if self.settings.environment != "production":
                logger.info(
                    f"Email (dev mode, not sent): {email.subject}",
                    extra={"to": to, "template": template},
                )
                return
            raise DependencyError(
                "Email provider API key is not configured", template=template
            )

        payload = {
            "from": self.settings.email_from,
            "to": [to],
            "subject": email.subject,
            "text": email.text,
        }

        try:
            session = await self._get_session()
            async with session.post(
                self.settings.email_api_url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.settings.email_timeout_seconds),
                headers={
                    "Authorization": f"Bearer {self.settings.email_api_key}",
                    "Content-Type": "application/json",
                },
            ) as response:
                if not 200 <= response.status < 300:
                    body = await response.text()
                    raise DependencyError(
                        f"Email provider error: HTTP {response.status}",
                        template=template,
                        status=response.status,
                        response=body[:200],
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DependencyError(
                f"Email provider unreachable: {type(e).__name__}",
                template=template,
            ) from e

        logger.info("Email sent", extra={"template": template})


class QueuedNotifier:
    """Hands notifications to the Dramatiq worker instead of sending inline."""

    async def send(self, to: str, template: str, data: dict[str, Any]) -> None:
        """
        Enqueue an email.

        Raises:
            ValidationError: Unknown template or missing template data
            DependencyError: Broker unavailable
        """
        # Fail fast on bad templates instead of in the worker
        render_template(template, data)

        from jobs.tasks.notifications import send_email_notification

        try:
            send_email_notification.send(to, template, data)
        except Exception as e:
            raise DependencyError(
                f"Failed to enqueue notification: {type(e).__name__}",
                template=template,
            ) from e

        logger.debug("Email queued", extra={"template": template})


def create_notifier(settings: Settings | None = None) -> Notifier:
    """Notifier selected by settings.notifications_async."""
    settings = settings or default_settings
    if settings.notifications_async:
        return QueuedNotifier()
    return EmailNotifier(settings)
