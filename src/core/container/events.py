# mypy: disable-error-code="arg-type"
"""Event bus dependency factory.

Application-scoped singleton for domain event publishing.
Configures all event handlers and subscriptions at startup using
registry-driven auto-wiring over EVENT_REGISTRY.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.protocols.event_bus_protocol import EventBusProtocol


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Event handlers are registered at startup from EVENT_REGISTRY:
        1. Loop through EVENT_REGISTRY
        2. Subscribe the logging handler when requires_logging is set
        3. Subscribe the audit handler when requires_audit is set
        4. Let the email handler subscribe to the events that send mail

    Handlers are fail-open: a failing subscriber is logged by the bus and
    never changes the outcome of the operation that published the event.

    Returns:
        Event bus implementing EventBusProtocol.

    Usage:
        event_bus = get_event_bus()
        await event_bus.publish(UserLoginSucceeded(...), metadata=context.to_metadata())
    """
    from src.core.container.infrastructure import (
        get_audit,
        get_device_enricher,
        get_logger,
        get_notification_service,
        get_settings,
    )
    from src.domain.events.registry import EVENT_REGISTRY
    from src.infrastructure.events.handlers.audit_event_handler import AuditEventHandler
    from src.infrastructure.events.handlers.email_event_handler import EmailEventHandler
    from src.infrastructure.events.handlers.logging_event_handler import (
        LoggingEventHandler,
    )
    from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

    logger = get_logger()
    event_bus = InMemoryEventBus(logger=logger)

    logging_handler = LoggingEventHandler(logger=logger, event_bus=event_bus)
    audit_handler = AuditEventHandler(
        audit=get_audit(),
        event_bus=event_bus,
        device_enricher=get_device_enricher(),
        logger=logger,
    )
    email_handler = EmailEventHandler(
        notifications=get_notification_service(),
        logger=logger,
        settings=get_settings(),
    )

    # Handler signatures are narrower than EventHandler (contravariance);
    # mypy arg-type is disabled at file level for that reason.
    for metadata in EVENT_REGISTRY:
        if metadata.requires_logging:
            event_bus.subscribe(metadata.event_class, logging_handler.handle)
        if metadata.requires_audit:
            event_bus.subscribe(metadata.event_class, audit_handler.handle)

    email_handler.subscribe_all(event_bus)

    return event_bus
