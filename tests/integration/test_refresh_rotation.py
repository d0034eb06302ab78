"""Integration tests for refresh token rotation, logout and revoke-all.

Tests cover:
- T0 → T1 rotation, T1 usable, T0 dead
- Replaying a rotated token: rejected, RefreshTokenReplayDetected published,
  other sessions untouched
- Concurrent refreshes with the same token: exactly one succeeds
- Expired and unknown tokens, and their external collapse
- Inactive account: token revoked on presentation
- Logout is idempotent; revoke-all counts only live sessions
- Single-use consumption through the ledger

Architecture:
- Real handlers, repositories and token services
- In-memory database per test
"""

import asyncio
from datetime import timedelta

import pytest
from freezegun import freeze_time

from src.application.commands.auth_commands import (
    LoginUser,
    LogoutUser,
    RefreshAccessToken,
    RevokeAllSessions,
)
from src.application.errors import to_external_error
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import AccountStatus, RevocationReason, TokenType
from src.domain.events import (
    AllSessionsRevoked,
    AuthTokenRefreshFailed,
    AuthTokenRefreshSucceeded,
    RefreshTokenReplayDetected,
    UserLogoutSucceeded,
)
from tests.conftest import TEST_PASSWORD


async def login(login_handler, email: str = "user@example.com") -> str:
    result = await login_handler.handle(LoginUser(email=email, password=TEST_PASSWORD))
    assert isinstance(result, Success)
    return result.value.tokens.refresh_token


@pytest.mark.integration
class TestRotation:
    async def test_rotation_chain(
        self, login_handler, refresh_handler, create_account, token_issuer, session_repo,
        refresh_token_service, published_events,
    ):
        # Arrange
        account = await create_account()
        t0 = await login(login_handler)

        # Act
        first = await refresh_handler.handle(RefreshAccessToken(refresh_token=t0))
        t1 = first.value.refresh_token
        second = await refresh_handler.handle(RefreshAccessToken(refresh_token=t1))

        # Assert
        assert isinstance(first, Success)
        assert isinstance(second, Success)
        assert t1 != t0
        access = token_issuer.verify(first.value.access_token, TokenType.ACCESS)
        assert access.value.subject == account.id

        s0 = await session_repo.find_by_token_hash(refresh_token_service.hash_token(t0))
        s1 = await session_repo.find_by_token_hash(refresh_token_service.hash_token(t1))
        assert s0.revoked_reason == RevocationReason.ROTATION.value
        assert s1.rotated_from_id == s0.id
        assert len(await session_repo.list_live_for_account(account.id)) == 1
        assert (
            sum(isinstance(e, AuthTokenRefreshSucceeded) for e in published_events) == 2
        )

    async def test_replay_rejected_and_reported(
        self, login_handler, refresh_handler, create_account, session_repo,
        published_events,
    ):
        # Arrange
        account = await create_account()
        t0 = await login(login_handler)
        other_device = await login(login_handler)
        rotated = await refresh_handler.handle(RefreshAccessToken(refresh_token=t0))
        assert isinstance(rotated, Success)

        # Act
        replay = await refresh_handler.handle(RefreshAccessToken(refresh_token=t0))

        # Assert
        assert isinstance(replay, Failure)
        assert replay.error.code == ErrorCode.TOKEN_REVOKED
        assert to_external_error(replay.error, refresh_token=True).code == (
            ErrorCode.INVALID_REFRESH_TOKEN
        )

        replays = [e for e in published_events if isinstance(e, RefreshTokenReplayDetected)]
        assert len(replays) == 1
        assert replays[0].user_id == account.id

        failed = [e for e in published_events if isinstance(e, AuthTokenRefreshFailed)]
        assert failed[-1].user_id == account.id

        # Other sessions keep working
        assert len(await session_repo.list_live_for_account(account.id)) == 2
        still_ok = await refresh_handler.handle(
            RefreshAccessToken(refresh_token=other_device)
        )
        assert isinstance(still_ok, Success)

    async def test_concurrent_refresh_has_one_winner(
        self, login_handler, refresh_handler, create_account
    ):
        await create_account()
        t0 = await login(login_handler)

        results = await asyncio.gather(
            *(
                refresh_handler.handle(RefreshAccessToken(refresh_token=t0))
                for _ in range(5)
            )
        )

        successes = [r for r in results if isinstance(r, Success)]
        failures = [r for r in results if isinstance(r, Failure)]
        assert len(successes) == 1
        assert {f.error.code for f in failures} == {ErrorCode.TOKEN_REVOKED}

    async def test_unknown_token(self, refresh_handler, published_events):
        result = await refresh_handler.handle(
            RefreshAccessToken(refresh_token="A" * 43)
        )

        assert result.error.code == ErrorCode.TOKEN_NOT_FOUND
        assert to_external_error(result.error, refresh_token=True).message == (
            "Invalid refresh token"
        )
        assert not any(isinstance(e, RefreshTokenReplayDetected) for e in published_events)

    async def test_expired_token(self, login_handler, refresh_handler, create_account):
        with freeze_time("2026-03-01 12:00:00", real_asyncio=True) as frozen:
            await create_account()
            t0 = await login(login_handler)

            frozen.tick(timedelta(days=31))
            result = await refresh_handler.handle(RefreshAccessToken(refresh_token=t0))

        assert result.error.code == ErrorCode.TOKEN_EXPIRED

    async def test_inactive_account_revokes_presented_token(
        self, login_handler, refresh_handler, create_account, account_repo,
        session_repo, refresh_token_service,
    ):
        # Arrange
        account = await create_account()
        t0 = await login(login_handler)
        stored = await account_repo.find_by_id(account.id)
        stored.status = AccountStatus.SUSPENDED
        await account_repo.save(stored)

        # Act
        result = await refresh_handler.handle(RefreshAccessToken(refresh_token=t0))

        # Assert
        assert result.error.code == ErrorCode.ACCOUNT_INACTIVE
        session = await session_repo.find_by_token_hash(refresh_token_service.hash_token(t0))
        assert session.revoked_reason == RevocationReason.ACCOUNT_DISABLED.value


@pytest.mark.integration
class TestLedgerOwnership:
    async def test_foreign_predecessor_reads_as_not_found(
        self, login_handler, session_ledger, create_account, account_repo
    ):
        await create_account(email="alice@example.com")
        bob = await create_account(email="bob@example.com")
        alice_token = await login(login_handler, "alice@example.com")

        result = await session_ledger.rotate(bob, alice_token)

        assert result.error.code == ErrorCode.TOKEN_NOT_FOUND

    async def test_validate_and_consume_single_use(
        self, login_handler, session_ledger, create_account
    ):
        account = await create_account()
        t0 = await login(login_handler)

        first = await session_ledger.validate_and_consume(t0)
        second = await session_ledger.validate_and_consume(t0)

        assert first.value.id == account.id
        assert second.error.code == ErrorCode.TOKEN_REVOKED


@pytest.mark.integration
class TestLogout:
    async def test_logout_is_idempotent(
        self, login_handler, logout_handler, refresh_handler, create_account,
        published_events,
    ):
        account = await create_account()
        t0 = await login(login_handler)

        first = await logout_handler.handle(LogoutUser(refresh_token=t0))
        second = await logout_handler.handle(LogoutUser(refresh_token=t0))
        unknown = await logout_handler.handle(LogoutUser(refresh_token="B" * 43))

        assert isinstance(first, Success)
        assert isinstance(second, Success)
        assert isinstance(unknown, Success)
        logouts = [e for e in published_events if isinstance(e, UserLogoutSucceeded)]
        assert logouts[0].user_id == account.id
        assert logouts[-1].user_id is None

        refreshed = await refresh_handler.handle(RefreshAccessToken(refresh_token=t0))
        assert refreshed.error.code == ErrorCode.TOKEN_REVOKED

    async def test_revoke_all(
        self, login_handler, revoke_all_handler, refresh_handler, create_account,
        published_events,
    ):
        # Arrange
        account = await create_account()
        tokens = [await login(login_handler) for _ in range(3)]
        await refresh_handler.handle(RefreshAccessToken(refresh_token=tokens[0]))

        # Act
        result = await revoke_all_handler.handle(RevokeAllSessions(user_id=account.id))

        # Assert - the rotated-away session was already dead
        assert result == Success(value=3)
        event = next(e for e in published_events if isinstance(e, AllSessionsRevoked))
        assert event.revoked_count == 3
        assert event.reason == RevocationReason.LOGOUT_ALL.value
        for token in tokens[1:]:
            refreshed = await refresh_handler.handle(
                RefreshAccessToken(refresh_token=token)
            )
            assert refreshed.error.code == ErrorCode.TOKEN_REVOKED
