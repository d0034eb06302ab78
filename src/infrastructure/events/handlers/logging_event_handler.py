"""Logging event handler for domain events.

Structured log line for every authentication event.

Log Levels:
    - INFO: attempts and successes
    - WARNING: failures, lockouts and replayed refresh tokens

Structured Fields:
    - event_type, event_id
    - user_id (when available)
    - reason (failures)
    - client_ip (from request metadata)

Email addresses and one-time secrets are never logged.
"""

from src.domain.events import (
    AccountLockedOut,
    DomainEvent,
    RefreshTokenReplayDetected,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol

WARNING_EVENTS: frozenset[type[DomainEvent]] = frozenset(
    {AccountLockedOut, RefreshTokenReplayDetected}
)


def _snake_case(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name).lstrip("_")


class LoggingEventHandler:
    """Event handler for structured logging of domain events.

    Example:
        >>> handler = LoggingEventHandler(logger=get_logger(), event_bus=bus)
        >>> bus.subscribe(UserLoginFailed, handler.handle)
        >>> # Log output: {"event": "user_login_failed", "reason": "...", ...}
    """

    def __init__(self, logger: LoggerProtocol, event_bus: EventBusProtocol) -> None:
        """Initialize logging handler.

        Args:
            logger: Logger protocol implementation.
            event_bus: Source of request metadata.
        """
        self._logger = logger
        self._event_bus = event_bus

    async def handle(self, event: DomainEvent) -> None:
        """Log the event at INFO or WARNING."""
        event_type = type(event)
        fields: dict[str, str] = {
            "event_type": event_type.__name__,
            "event_id": str(event.event_id),
        }

        user_id = getattr(event, "user_id", None)
        if user_id is not None:
            fields["user_id"] = str(user_id)
        reason = getattr(event, "reason", None)
        if reason:
            fields["reason"] = reason
        client_ip = self._event_bus.get_metadata().get("ip_address")
        if client_ip:
            fields["client_ip"] = client_ip

        message = _snake_case(event_type.__name__)
        if event_type in WARNING_EVENTS or event_type.__name__.endswith("Failed"):
            self._logger.warning(message, **fields)
        else:
            self._logger.info(message, **fields)
