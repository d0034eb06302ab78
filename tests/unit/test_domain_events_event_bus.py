"""Unit tests for InMemoryEventBus.

Tests cover:
- Subscribe/publish basic flow
- Multiple handlers for same event
- Handler failure doesn't break others (fail-open)
- No handlers registered (no-op)
- Exact-type routing
- Request metadata visible to handlers, isolated between publishes
- Concurrent handler execution

Architecture:
- Unit tests with mocked logger
- Tests fail-open behavior (critical requirement)
"""

import asyncio
from unittest.mock import MagicMock

import pytest
from uuid_extensions import uuid7

from src.domain.events import (
    DomainEvent,
    UserLoginFailed,
    UserLoginSucceeded,
    UserRegistrationSucceeded,
)
from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus


def registration_event() -> UserRegistrationSucceeded:
    return UserRegistrationSucceeded(
        user_id=uuid7(), email="test@example.com", verification_token="test_token"
    )


@pytest.mark.unit
class TestInMemoryEventBusBasicFlow:
    """Test basic subscribe/publish flow."""

    async def test_subscribe_and_publish_single_handler(self):
        # Arrange
        event_bus = InMemoryEventBus(logger=MagicMock())
        received: list[DomainEvent] = []

        async def handler(event: DomainEvent) -> None:
            received.append(event)

        event = registration_event()

        # Act
        event_bus.subscribe(UserRegistrationSucceeded, handler)
        await event_bus.publish(event)

        # Assert
        assert received == [event]

    async def test_all_handlers_for_event_run(self):
        event_bus = InMemoryEventBus(logger=MagicMock())
        calls: list[str] = []

        async def handler_1(event: DomainEvent) -> None:
            calls.append("handler_1")

        async def handler_2(event: DomainEvent) -> None:
            calls.append("handler_2")

        event_bus.subscribe(UserRegistrationSucceeded, handler_1)
        event_bus.subscribe(UserRegistrationSucceeded, handler_2)
        await event_bus.publish(registration_event())

        # Order not guaranteed (concurrent execution)
        assert sorted(calls) == ["handler_1", "handler_2"]

    async def test_publish_with_no_handlers_is_noop(self):
        mock_logger = MagicMock()
        event_bus = InMemoryEventBus(logger=mock_logger)

        await event_bus.publish(registration_event())

        mock_logger.debug.assert_not_called()

    async def test_routing_is_by_exact_type(self):
        event_bus = InMemoryEventBus(logger=MagicMock())
        received: list[str] = []

        async def on_failed(event: DomainEvent) -> None:
            received.append("failed")

        event_bus.subscribe(UserLoginFailed, on_failed)
        await event_bus.publish(UserLoginSucceeded(user_id=uuid7(), email="a@b.io"))

        assert received == []


@pytest.mark.unit
class TestInMemoryEventBusFailOpen:
    """Test fail-open behavior (critical requirement)."""

    async def test_handler_failure_does_not_break_other_handlers(self):
        # Arrange
        mock_logger = MagicMock()
        event_bus = InMemoryEventBus(logger=mock_logger)
        successful: list[str] = []

        async def failing_handler(event: DomainEvent) -> None:
            raise ValueError("Handler intentionally failed")

        async def successful_handler(event: DomainEvent) -> None:
            successful.append("ok")

        event_bus.subscribe(UserRegistrationSucceeded, failing_handler)
        event_bus.subscribe(UserRegistrationSucceeded, successful_handler)

        # Act - must not raise
        await event_bus.publish(registration_event())

        # Assert
        assert successful == ["ok"]
        mock_logger.warning.assert_called_once()
        call_args = mock_logger.warning.call_args
        assert call_args.args[0] == "event_handler_failed"
        assert call_args.kwargs["error_type"] == "ValueError"
        assert call_args.kwargs["handler_name"] == "failing_handler"


@pytest.mark.unit
class TestInMemoryEventBusMetadata:
    """Test request metadata exposure."""

    async def test_handlers_see_publish_metadata(self):
        event_bus = InMemoryEventBus(logger=MagicMock())
        seen: list[dict[str, str]] = []

        async def handler(event: DomainEvent) -> None:
            seen.append(event_bus.get_metadata())

        event_bus.subscribe(UserRegistrationSucceeded, handler)
        await event_bus.publish(
            registration_event(),
            metadata={"ip_address": "203.0.113.7", "user_agent": "curl/8.0"},
        )

        assert seen == [{"ip_address": "203.0.113.7", "user_agent": "curl/8.0"}]

    async def test_metadata_cleared_after_publish(self):
        event_bus = InMemoryEventBus(logger=MagicMock())

        async def handler(event: DomainEvent) -> None:
            pass

        event_bus.subscribe(UserRegistrationSucceeded, handler)
        await event_bus.publish(registration_event(), metadata={"ip_address": "1.2.3.4"})

        assert event_bus.get_metadata() == {}

    async def test_concurrent_publishes_do_not_share_metadata(self):
        # Arrange
        event_bus = InMemoryEventBus(logger=MagicMock())
        seen: dict[str, str] = {}

        async def handler(event: UserLoginFailed) -> None:
            await asyncio.sleep(0.01)
            seen[event.email] = event_bus.get_metadata()["ip_address"]

        event_bus.subscribe(UserLoginFailed, handler)

        # Act
        await asyncio.gather(
            event_bus.publish(
                UserLoginFailed(email="a@example.com", reason="invalid_credentials"),
                metadata={"ip_address": "10.0.0.1"},
            ),
            event_bus.publish(
                UserLoginFailed(email="b@example.com", reason="invalid_credentials"),
                metadata={"ip_address": "10.0.0.2"},
            ),
        )

        # Assert
        assert seen == {"a@example.com": "10.0.0.1", "b@example.com": "10.0.0.2"}


@pytest.mark.unit
class TestInMemoryEventBusConcurrency:
    async def test_handlers_execute_concurrently(self):
        event_bus = InMemoryEventBus(logger=MagicMock())
        loop = asyncio.get_running_loop()

        async def slow_handler(event: DomainEvent) -> None:
            await asyncio.sleep(0.1)

        for _ in range(3):
            event_bus.subscribe(UserRegistrationSucceeded, slow_handler)

        start = loop.time()
        await event_bus.publish(registration_event())
        elapsed = loop.time() - start

        assert elapsed < 0.25
