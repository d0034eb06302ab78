"""Event bus protocol (port) for domain events.

Architecture:
    - Protocol (structural typing, NOT ABC inheritance)
    - Domain layer defines the interface (port)
    - Infrastructure layer implements adapters (InMemoryEventBus)
    - Container (src/core/container.py) provides factory function

Usage:
    >>> event_bus = get_event_bus()
    >>> await event_bus.publish(
    ...     UserLoginFailed(email=email, reason="invalid_credentials"),
    ...     metadata={"ip_address": "203.0.113.7"},
    ... )
    >>>
    >>> async def log_login_failed(event: UserLoginFailed) -> None:
    ...     logger.warning("user_login_failed", reason=event.reason)
    >>>
    >>> event_bus.subscribe(UserLoginFailed, log_login_failed)
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from src.domain.events.base_event import DomainEvent

# Type alias for event handler functions
EventHandler = Callable[[DomainEvent], Awaitable[None]]
"""Type alias for async event handler functions.

Event handlers must:
    - Accept single DomainEvent parameter (or specific event subclass)
    - Return None (side-effects only)
    - Be async (async def)
"""


class EventBusProtocol(Protocol):
    """Protocol for publishing domain events to subscribed handlers.

    Design Decisions:
        - **Fail-open**: One handler failure doesn't break others, and never
          fails the authentication operation that published the event
        - **Type-based routing**: Handlers registered per exact event type
        - **Request metadata**: IP address and user agent travel beside the
          event, readable by handlers through ``get_metadata()``
    """

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register event handler for specific event type.

        Args:
            event_type: Class of event to handle. Exact type match only.
            handler: Async function called with the event.
        """
        ...

    async def publish(
        self,
        event: DomainEvent,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Publish event to all registered handlers.

        Never raises. Handler exceptions are logged by the implementation.

        Args:
            event: Domain event to publish.
            metadata: Optional request metadata (``ip_address``,
                ``user_agent``) for audit enrichment.
        """
        ...

    def get_metadata(self) -> dict[str, str]:
        """Metadata of the event currently being dispatched.

        Only meaningful inside a handler; returns an empty dict elsewhere.
        """
        ...
