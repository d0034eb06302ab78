"""NotificationProtocol - Port for transactional email delivery.

Transport and templating are out of scope for the engine; adapters decide
how a message is rendered and sent. Calls come from EmailEventHandler and
are fire-and-forget: a delivery failure is logged, never surfaced.
"""

from typing import Protocol


class NotificationProtocol(Protocol):
    """Email notification protocol (port).

    This is a Protocol (not ABC) for structural typing.

    Example Implementation:
        >>> class StubNotificationService:
        ...     async def send_verification_email(
        ...         self, to_email: str, verification_url: str
        ...     ) -> None:
        ...         logger.info("verification_email_stubbed")
    """

    async def send_verification_email(
        self,
        to_email: str,
        verification_url: str,
    ) -> None:
        """Send email verification link.

        Args:
            to_email: Recipient email address.
            verification_url: Full URL with verification token.
        """
        ...

    async def send_password_reset_email(
        self,
        to_email: str,
        reset_url: str,
    ) -> None:
        """Send password reset link.

        Args:
            to_email: Recipient email address.
            reset_url: Full URL with password reset token.
        """
        ...

    async def send_password_changed_notification(
        self,
        to_email: str,
    ) -> None:
        """Security notice that the password was changed."""
        ...

    async def send_mfa_enabled_notification(
        self,
        to_email: str,
    ) -> None:
        """Security notice that two-factor authentication was turned on."""
        ...
