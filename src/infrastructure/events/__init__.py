"""Infrastructure event implementations.

Event Bus:
    - InMemoryEventBus: event bus with fail-open behavior

Event Handlers (src.infrastructure.events.handlers):
    - LoggingEventHandler: structured logging for domain events
    - AuditEventHandler: audit trail with coarse client context
    - EmailEventHandler: transactional emails

Usage:
    >>> from src.infrastructure.events import InMemoryEventBus
    >>> event_bus = InMemoryEventBus(logger=logger)
    >>> audit_handler.subscribe_all(event_bus)
"""

from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

__all__ = [
    "InMemoryEventBus",
]
