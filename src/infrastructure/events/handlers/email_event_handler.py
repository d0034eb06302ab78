"""Email event handler for domain events.

Turns SUCCEEDED events into transactional emails through NotificationProtocol.
Delivery is fire-and-forget: a failure is logged and never reaches the
operation that published the event.

Emails:
    - UserRegistrationSucceeded → verification link
    - PasswordResetRequestSucceeded → reset link
    - UserPasswordChangeSucceeded / PasswordResetConfirmSucceeded → security notice
    - MfaEnabled → security notice

Usage:
    >>> email_handler = EmailEventHandler(
    ...     notifications=get_notification_service(),
    ...     logger=get_logger(),
    ...     settings=get_settings(),
    ... )
    >>> email_handler.subscribe_all(event_bus)
"""

from collections.abc import Awaitable
from urllib.parse import urlencode

from src.core.config import Settings
from src.domain.events.auth_events import (
    MfaEnabled,
    PasswordResetConfirmSucceeded,
    PasswordResetRequestSucceeded,
    UserPasswordChangeSucceeded,
    UserRegistrationSucceeded,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_protocol import NotificationProtocol


class EmailEventHandler:
    """Event handler for email sending.

    Subscribes to SUCCEEDED events only (don't email on ATTEMPT or FAILURE).

    Attributes:
        _notifications: Notification adapter.
        _logger: Logger protocol implementation (from container).
        _settings: Application settings (link base URL).
    """

    def __init__(
        self,
        notifications: NotificationProtocol,
        logger: LoggerProtocol,
        settings: Settings,
    ) -> None:
        self._notifications = notifications
        self._logger = logger
        self._settings = settings

    def subscribe_all(self, event_bus: EventBusProtocol) -> None:
        event_bus.subscribe(
            UserRegistrationSucceeded, self.handle_user_registration_succeeded
        )
        event_bus.subscribe(
            PasswordResetRequestSucceeded, self.handle_password_reset_request_succeeded
        )
        event_bus.subscribe(
            UserPasswordChangeSucceeded, self.handle_password_changed
        )
        event_bus.subscribe(
            PasswordResetConfirmSucceeded, self.handle_password_changed
        )
        event_bus.subscribe(MfaEnabled, self.handle_mfa_enabled)

    async def handle_user_registration_succeeded(
        self, event: UserRegistrationSucceeded
    ) -> None:
        """Send the email verification link."""
        url = self._link("verify-email", event.verification_token)
        await self._deliver(
            "verification_email",
            self._notifications.send_verification_email(event.email, url),
        )

    async def handle_password_reset_request_succeeded(
        self, event: PasswordResetRequestSucceeded
    ) -> None:
        """Send the password reset link."""
        url = self._link("reset-password", event.reset_token)
        await self._deliver(
            "password_reset_email",
            self._notifications.send_password_reset_email(event.email, url),
        )

    async def handle_password_changed(
        self, event: UserPasswordChangeSucceeded | PasswordResetConfirmSucceeded
    ) -> None:
        await self._deliver(
            "password_changed_notification",
            self._notifications.send_password_changed_notification(event.email),
        )

    async def handle_mfa_enabled(self, event: MfaEnabled) -> None:
        await self._deliver(
            "mfa_enabled_notification",
            self._notifications.send_mfa_enabled_notification(event.email),
        )

    def _link(self, path: str, token: str) -> str:
        return f"{self._settings.verification_url_base}/{path}?{urlencode({'token': token})}"

    async def _deliver(self, kind: str, send: Awaitable[None]) -> None:
        try:
            await send
        except Exception as e:  # noqa: BLE001
            self._logger.warning("email_delivery_failed", kind=kind, error=str(e))
