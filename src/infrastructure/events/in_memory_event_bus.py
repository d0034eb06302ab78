"""In-memory event bus implementation.

Implements EventBusProtocol using an in-memory dictionary-based registry.

Architecture:
    - Dictionary-based handler registry (event_type → list of handlers)
    - Fail-open behavior (one handler failure doesn't break others, and
      never reaches the publisher)
    - Concurrent handler execution (asyncio.gather)
    - Request metadata exposed to handlers through a ContextVar, so
      concurrent publishes never see each other's metadata

Usage:
    >>> @lru_cache()
    >>> def get_event_bus() -> EventBusProtocol:
    ...     return InMemoryEventBus(logger=get_logger())
    >>>
    >>> event_bus.subscribe(UserLoginFailed, logging_handler.handle)
    >>> await event_bus.publish(event, metadata={"ip_address": "203.0.113.7"})
"""

import asyncio
from collections import defaultdict
from contextvars import ContextVar

from src.domain.events.base_event import DomainEvent
from src.domain.protocols.event_bus_protocol import EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol

_current_metadata: ContextVar[dict[str, str] | None] = ContextVar(
    "event_metadata", default=None
)


class InMemoryEventBus:
    """In-memory event bus with fail-open behavior.

    Thread Safety:
        - NOT thread-safe (single-threaded async design)

    Attributes:
        _handlers: Event class → list of async handlers.
        _logger: Logger for handler failures and event publishing.

    Design Decisions:
        - **Fail-open**: Handler failures logged but not propagated
        - **Concurrent**: asyncio.gather for parallel handler execution
        - **No ordering**: Handlers execute concurrently (order undefined)
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        """Initialize event bus with logger.

        Args:
            logger: Logger for handler failures (warning level) and event
                publishing (debug level).
        """
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._logger = logger

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
        self._handlers[event_type].append(handler)

    async def publish(
        self,
        event: DomainEvent,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Publish event to all registered handlers.

        Flow:
            1. Look up handlers for type(event)
            2. If no handlers, return immediately (no-op)
            3. Expose metadata to handlers, run them with
               asyncio.gather(return_exceptions=True)
            4. Log any handler exceptions (warning level)
            5. Return (never raise exceptions)
        """
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        if not handlers:
            return

        self._logger.debug(
            "event_publishing",
            event_type=event_type.__name__,
            event_id=str(event.event_id),
            handler_count=len(handlers),
        )

        # Tasks created by gather copy the current context, including metadata
        token = _current_metadata.set(dict(metadata or {}))
        try:
            results = await asyncio.gather(
                *(handler(event) for handler in handlers),
                return_exceptions=True,  # ← Fail-open: catch exceptions
            )
        finally:
            _current_metadata.reset(token)

        for idx, result in enumerate(results):
            if isinstance(result, Exception):
                handler_name = getattr(handlers[idx], "__name__", repr(handlers[idx]))
                self._logger.warning(
                    "event_handler_failed",
                    event_type=event_type.__name__,
                    event_id=str(event.event_id),
                    handler_name=handler_name,
                    error_type=type(result).__name__,
                    error_message=str(result),
                )

    def get_metadata(self) -> dict[str, str]:
        """Metadata of the event currently being dispatched."""
        return dict(_current_metadata.get() or {})
