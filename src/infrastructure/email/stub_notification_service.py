"""Stub notification service (development/testing).

Logs instead of sending. Addresses and links are never logged in full: the
link carries a one-time secret and the redaction processor only catches
known key names, so only the domain part of the address is emitted.
"""

from src.domain.protocols.logger_protocol import LoggerProtocol


def _mask(email: str) -> str:
    _, _, domain = email.partition("@")
    return f"***@{domain}" if domain else "***"


class StubNotificationService:
    """NotificationProtocol implementation that only logs.

    Attributes:
        sent: (kind, recipient) pairs in send order, for inspection in tests.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger
        self.sent: list[tuple[str, str]] = []

    async def send_verification_email(self, to_email: str, verification_url: str) -> None:
        self._record("verification", to_email)

    async def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        self._record("password_reset", to_email)

    async def send_password_changed_notification(self, to_email: str) -> None:
        self._record("password_changed", to_email)

    async def send_mfa_enabled_notification(self, to_email: str) -> None:
        self._record("mfa_enabled", to_email)

    def _record(self, kind: str, to_email: str) -> None:
        self.sent.append((kind, to_email))
        self._logger.info("email_stubbed", kind=kind, recipient=_mask(to_email))
