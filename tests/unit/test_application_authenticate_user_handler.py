"""Unit tests for AuthenticateUserHandler.

Tests cover:
- Successful authentication (returns Account, resets counter)
- Unknown email (dummy hash comparison, ACCOUNT_NOT_FOUND)
- Wrong password (atomic increment, lockout at threshold)
- Check order: locked before unverified before inactive before password
- Provider-only accounts (no password hash)
- MFA-enabled accounts (counter not reset until the second factor)
- Event publishing (ATTEMPTED, SUCCEEDED, FAILED, LOCKED_OUT)
- Storage failures surface as SERVICE_UNAVAILABLE

Architecture:
- Unit tests for application handler (mocked dependencies)
- Mock repository protocols
- Test handler logic, not persistence

Note: This handler ONLY authenticates. It does NOT generate tokens.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from uuid_extensions import uuid7

from src.application.commands.auth_commands import AuthenticateUser
from src.application.commands.handlers.authenticate_user_handler import (
    AuthenticateUserHandler,
)
from src.application.services import StorageGuard
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.entities.account import Account
from src.domain.enums import AccountStatus
from src.domain.errors import StorageError
from src.domain.events.auth_events import (
    AccountLockedOut,
    UserLoginAttempted,
    UserLoginFailed,
    UserLoginSucceeded,
    UserMfaChallengeIssued,
)


def make_account(**overrides) -> Account:
    values = {
        "id": uuid7(),
        "email": "test@example.com",
        "password_hash": "hashed_password",
        "email_verified": True,
    }
    values.update(overrides)
    return Account(**values)


def published(event_bus: AsyncMock) -> list:
    return [call.args[0] for call in event_bus.publish.await_args_list]


def build_handler(
    account: Account | None,
    password_ok: bool = True,
    failed_attempts_after: int = 1,
    max_failed_attempts: int = 5,
):
    account_repo = AsyncMock()
    account_repo.find_by_email.return_value = account
    account_repo.atomic_increment_failed_attempts.return_value = failed_attempts_after

    password_service = Mock()
    password_service.verify_password.return_value = password_ok

    event_bus = AsyncMock()
    handler = AuthenticateUserHandler(
        account_repo=account_repo,
        password_service=password_service,
        event_bus=event_bus,
        guard=StorageGuard(timeout_seconds=1.0, logger=MagicMock()),
        max_failed_attempts=max_failed_attempts,
        lockout_duration=timedelta(minutes=30),
    )
    return handler, account_repo, password_service, event_bus


@pytest.mark.unit
class TestAuthenticateUserHandlerSuccess:
    """Test successful authentication scenarios."""

    async def test_authentication_success_returns_account(self):
        # Arrange
        account = make_account(failed_login_attempts=2)
        handler, account_repo, _, event_bus = build_handler(account)

        # Act
        result = await handler.handle(
            AuthenticateUser(email="Test@Example.com ", password="SecurePass123!")
        )

        # Assert
        assert isinstance(result, Success)
        assert result.value is account
        account_repo.find_by_email.assert_awaited_once_with("test@example.com")
        account_repo.reset_failed_attempts.assert_awaited_once()
        assert account_repo.reset_failed_attempts.await_args.args == (account.id,)
        assert account.failed_login_attempts == 0
        assert account.last_login_at is not None

        events = published(event_bus)
        assert isinstance(events[0], UserLoginAttempted)
        assert isinstance(events[1], UserLoginSucceeded)
        assert events[1].method == "password"

    async def test_mfa_account_not_reset_until_second_factor(self):
        account = make_account(mfa_enabled=True, mfa_secret="JBSWY3DPEHPK3PXP")
        handler, account_repo, _, event_bus = build_handler(account)

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert isinstance(result, Success)
        account_repo.reset_failed_attempts.assert_not_awaited()
        events = published(event_bus)
        assert isinstance(events[-1], UserMfaChallengeIssued)
        assert not any(isinstance(e, UserLoginSucceeded) for e in events)


@pytest.mark.unit
class TestAuthenticateUserHandlerFailures:
    """Test rejected credentials."""

    async def test_unknown_email_runs_dummy_comparison(self):
        handler, account_repo, password_service, event_bus = build_handler(None)

        result = await handler.authenticate("ghost@example.com", "SecurePass123!")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ACCOUNT_NOT_FOUND
        password_service.dummy_verify.assert_called_once_with("SecurePass123!")
        account_repo.atomic_increment_failed_attempts.assert_not_awaited()
        failed = published(event_bus)[-1]
        assert isinstance(failed, UserLoginFailed)
        assert failed.reason == "account_not_found"
        assert failed.user_id is None

    async def test_wrong_password_increments_counter(self):
        # Arrange
        account = make_account()
        handler, account_repo, _, event_bus = build_handler(
            account, password_ok=False, failed_attempts_after=3
        )

        # Act
        result = await handler.authenticate("test@example.com", "WrongPass123!")

        # Assert
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        account_repo.atomic_increment_failed_attempts.assert_awaited_once_with(account.id)
        account_repo.set_lockout.assert_not_awaited()
        failed = published(event_bus)[-1]
        assert failed.failed_attempts == 3
        assert failed.user_id == account.id

    async def test_threshold_reached_locks_account(self):
        account = make_account()
        handler, account_repo, _, event_bus = build_handler(
            account, password_ok=False, failed_attempts_after=5
        )
        before = datetime.now(UTC)

        await handler.authenticate("test@example.com", "WrongPass123!")

        account_repo.set_lockout.assert_awaited_once()
        user_id, locked_until = account_repo.set_lockout.await_args.args
        assert user_id == account.id
        assert locked_until >= before + timedelta(minutes=30)
        lockouts = [e for e in published(event_bus) if isinstance(e, AccountLockedOut)]
        assert len(lockouts) == 1
        assert lockouts[0].failed_attempts == 5

    async def test_locked_account_rejected_before_password_check(self):
        account = make_account(locked_until=datetime.now(UTC) + timedelta(minutes=5))
        handler, account_repo, password_service, _ = build_handler(account)

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert result.error.code == ErrorCode.ACCOUNT_LOCKED
        password_service.verify_password.assert_not_called()
        account_repo.atomic_increment_failed_attempts.assert_not_awaited()

    async def test_expired_lock_no_longer_blocks(self):
        account = make_account(locked_until=datetime.now(UTC) - timedelta(seconds=1))
        handler, _, _, _ = build_handler(account)

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert isinstance(result, Success)

    async def test_unverified_checked_before_inactive(self):
        account = make_account(email_verified=False, status=AccountStatus.SUSPENDED)
        handler, _, password_service, _ = build_handler(account)

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert result.error.code == ErrorCode.ACCOUNT_NOT_VERIFIED
        password_service.verify_password.assert_not_called()

    async def test_inactive_account_rejected(self):
        account = make_account(status=AccountStatus.SUSPENDED)
        handler, _, _, _ = build_handler(account)

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert result.error.code == ErrorCode.ACCOUNT_INACTIVE

    async def test_provider_only_account_does_not_count_failure(self):
        account = make_account(password_hash=None)
        handler, account_repo, password_service, _ = build_handler(account)

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        password_service.dummy_verify.assert_called_once()
        account_repo.atomic_increment_failed_attempts.assert_not_awaited()


@pytest.mark.unit
class TestAuthenticateUserHandlerStorage:
    async def test_storage_outage_is_not_a_credential_failure(self):
        handler, account_repo, _, _ = build_handler(make_account())
        account_repo.find_by_email.side_effect = StorageError("connection refused")

        result = await handler.authenticate("test@example.com", "SecurePass123!")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.SERVICE_UNAVAILABLE
