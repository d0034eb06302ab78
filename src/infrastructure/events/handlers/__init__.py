"""Event handlers subscribed to the in-memory event bus.

Handlers:
    - AuditEventHandler: audit trail with coarse client context
    - LoggingEventHandler: structured log line per event
    - EmailEventHandler: transactional emails for SUCCEEDED events
"""

from src.infrastructure.events.handlers.audit_event_handler import (
    AUDITED_EVENTS,
    AuditEventHandler,
)
from src.infrastructure.events.handlers.email_event_handler import EmailEventHandler
from src.infrastructure.events.handlers.logging_event_handler import (
    LoggingEventHandler,
)

__all__ = [
    "AUDITED_EVENTS",
    "AuditEventHandler",
    "EmailEventHandler",
    "LoggingEventHandler",
]
