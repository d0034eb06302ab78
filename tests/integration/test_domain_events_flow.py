"""Integration tests for the domain event flow.

Tests cover:
- Handlers run → audit trail, structured log lines and mail side effects
- Client context (IP, user agent) reaches audit entries, coarsened
- Refresh replay leaves a REFRESH_TOKEN_REPLAYED entry
- A failing subscriber never changes the command outcome

Architecture:
- Conftest event bus wired with the real handlers, the same way the
  container wires them (registry-driven subscriptions)
- In-memory audit adapter and stub notification service
"""

from unittest.mock import MagicMock

import pytest

from src.application.commands.auth_commands import (
    LoginUser,
    RefreshAccessToken,
    RegisterUser,
)
from src.core.config import Settings
from src.core.result import Success
from src.domain.enums import AuditAction
from src.domain.events import UserLoginSucceeded
from src.domain.events.registry import EVENT_REGISTRY
from src.domain.value_objects.request_context import RequestContext
from src.infrastructure.audit import InMemoryAuditAdapter
from src.infrastructure.email import StubNotificationService
from src.infrastructure.enrichers import UserAgentDeviceEnricher
from src.infrastructure.events.handlers import (
    AuditEventHandler,
    EmailEventHandler,
    LoggingEventHandler,
)
from tests.conftest import MAX_FAILED_ATTEMPTS, TEST_PASSWORD

FIREFOX_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"
)
CONTEXT = RequestContext(ip_address="198.51.100.77", user_agent=FIREFOX_WINDOWS)


@pytest.fixture
def audit() -> InMemoryAuditAdapter:
    return InMemoryAuditAdapter()


@pytest.fixture
def notifications() -> StubNotificationService:
    return StubNotificationService(logger=MagicMock())


@pytest.fixture(autouse=True)
def wired_bus(event_bus, mock_logger, audit, notifications, settings: Settings):
    """Subscribe the real handlers to the per-test bus."""
    logging_handler = LoggingEventHandler(logger=mock_logger, event_bus=event_bus)
    audit_handler = AuditEventHandler(
        audit=audit,
        event_bus=event_bus,
        device_enricher=UserAgentDeviceEnricher(),
        logger=mock_logger,
    )
    for metadata in EVENT_REGISTRY:
        if metadata.requires_logging:
            event_bus.subscribe(metadata.event_class, logging_handler.handle)
        if metadata.requires_audit:
            event_bus.subscribe(metadata.event_class, audit_handler.handle)
    EmailEventHandler(
        notifications=notifications, logger=mock_logger, settings=settings
    ).subscribe_all(event_bus)
    return event_bus


def logged_messages(mock_logger: MagicMock, level: str) -> list[str]:
    return [c.args[0] for c in getattr(mock_logger, level).call_args_list]


@pytest.mark.integration
class TestAuditTrail:
    async def test_login_success_audited_with_client_context(
        self, login_handler, create_account, audit, mock_logger
    ):
        # Arrange
        account = await create_account()

        # Act
        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD), CONTEXT
        )

        # Assert
        assert isinstance(result, Success)
        [entry] = audit.find(AuditAction.USER_LOGIN_SUCCESS)
        assert entry.user_id == account.id
        assert entry.resource_type == "account"
        assert entry.ip_address == "198.51.100.0/24"
        assert entry.user_agent == "Firefox on Windows"
        assert entry.context["outcome"] == "success"
        assert entry.context["method"] == "password"

        assert "user_login_succeeded" in logged_messages(mock_logger, "info")

    async def test_lockout_leaves_trail(
        self, login_handler, create_account, audit, mock_logger
    ):
        await create_account()

        for _ in range(MAX_FAILED_ATTEMPTS):
            await login_handler.handle(
                LoginUser(email="user@example.com", password="WrongPass123!"), CONTEXT
            )

        failures = audit.find(AuditAction.USER_LOGIN_FAILED)
        assert len(failures) == MAX_FAILED_ATTEMPTS
        assert [f.context["failed_attempts"] for f in failures] == list(
            range(1, MAX_FAILED_ATTEMPTS + 1)
        )
        assert all(f.context["outcome"] == "failure" for f in failures)
        assert len(audit.find(AuditAction.ACCOUNT_LOCKED)) == 1
        assert "account_locked_out" in logged_messages(mock_logger, "warning")

    async def test_replay_audited(
        self, login_handler, refresh_handler, create_account, audit
    ):
        # Arrange
        account = await create_account()
        login = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD), CONTEXT
        )
        t0 = login.value.tokens.refresh_token
        await refresh_handler.handle(RefreshAccessToken(refresh_token=t0), CONTEXT)

        # Act
        await refresh_handler.handle(RefreshAccessToken(refresh_token=t0), CONTEXT)

        # Assert
        [replay] = audit.find(AuditAction.REFRESH_TOKEN_REPLAYED)
        assert replay.user_id == account.id
        assert replay.resource_type == "session"
        assert replay.ip_address == "198.51.100.0/24"
        assert len(audit.find(AuditAction.TOKEN_REFRESHED)) == 1
        assert len(audit.find(AuditAction.TOKEN_REFRESH_FAILED)) == 1


@pytest.mark.integration
class TestMailSideEffects:
    async def test_registration_sends_verification_mail(
        self, register_handler, notifications, audit
    ):
        result = await register_handler.handle(
            RegisterUser(email="new@example.com", password=TEST_PASSWORD), CONTEXT
        )

        assert isinstance(result, Success)
        assert notifications.sent == [("verification", "new@example.com")]
        [entry] = audit.find(AuditAction.USER_REGISTERED)
        assert "verification_token" not in entry.context


@pytest.mark.integration
class TestFailOpen:
    async def test_failing_subscriber_does_not_change_outcome(
        self, login_handler, create_account, event_bus, mock_logger, audit
    ):
        # Arrange
        async def broken(event: UserLoginSucceeded) -> None:
            raise RuntimeError("downstream unavailable")

        event_bus.subscribe(UserLoginSucceeded, broken)
        await create_account()

        # Act
        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD), CONTEXT
        )

        # Assert
        assert isinstance(result, Success)
        assert audit.find(AuditAction.USER_LOGIN_SUCCESS)
        assert "event_handler_failed" in logged_messages(mock_logger, "warning")
