"""Integration tests for password login.

Tests cover:
- Login without MFA issues an access token and a refresh token
- Lockout after the configured number of failures, and its expiry
- Concurrent failed logins lock the account exactly once
- A successful login resets the failure counter
- Unknown, unverified, inactive and provider-only accounts
- MFA: challenge token path, inline code path (an empty code asks for a
  challenge), wrong codes count toward lockout
- Completing a challenge: wrong purpose, expired challenge, replay after lock

Architecture:
- Real handlers, repositories, bcrypt, PyJWT and pyotp
- In-memory database per test
"""

import asyncio
from datetime import timedelta

import pyotp
import pytest
from freezegun import freeze_time

from src.application.commands.auth_commands import CompleteMfaLogin, LoginUser
from src.application.errors import to_external_error
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import AccountStatus, ChallengePurpose, TokenType
from src.domain.events import (
    AccountLockedOut,
    UserLoginFailed,
    UserLoginSucceeded,
    UserMfaChallengeIssued,
    UserMfaLoginFailed,
)
from src.domain.value_objects.request_context import RequestContext
from tests.conftest import MAX_FAILED_ATTEMPTS, TEST_PASSWORD

MFA_SECRET = "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP"


def wrong_code(secret: str) -> str:
    """A code that is not valid in the current window."""
    totp = pyotp.TOTP(secret)
    candidate = "000000"
    while totp.verify(candidate, valid_window=1):
        candidate = f"{(int(candidate) + 1) % 1_000_000:06d}"
    return candidate


@pytest.mark.integration
class TestPasswordLogin:
    async def test_login_issues_tokens(
        self, login_handler, create_account, token_issuer, session_repo, published_events
    ):
        # Arrange
        account = await create_account()

        # Act
        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD),
            RequestContext(ip_address="203.0.113.9", user_agent="curl/8.4.0"),
        )

        # Assert
        assert isinstance(result, Success)
        login = result.value
        assert login.mfa_required is False
        assert login.user_id == account.id

        claims = token_issuer.verify(login.tokens.access_token, TokenType.ACCESS)
        assert isinstance(claims, Success)
        assert claims.value.subject == account.id
        assert claims.value.authorities == ["ROLE_USER"]

        sessions = await session_repo.list_live_for_account(account.id)
        assert len(sessions) == 1
        assert sessions[0].ip_address == "203.0.113.9"

        assert any(isinstance(e, UserLoginSucceeded) for e in published_events)

    async def test_success_resets_failure_counter(
        self, login_handler, create_account, account_repo
    ):
        account = await create_account()
        for _ in range(3):
            await login_handler.handle(
                LoginUser(email="user@example.com", password="WrongPass123!")
            )

        await login_handler.handle(LoginUser(email="user@example.com", password=TEST_PASSWORD))

        stored = await account_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 0
        assert stored.last_login_at is not None

    async def test_unknown_email_is_indistinguishable(self, login_handler, create_account):
        await create_account()

        unknown = await login_handler.handle(
            LoginUser(email="nobody@example.com", password=TEST_PASSWORD)
        )
        wrong = await login_handler.handle(
            LoginUser(email="user@example.com", password="WrongPass123!")
        )

        assert unknown.error.code == ErrorCode.ACCOUNT_NOT_FOUND
        assert wrong.error.code == ErrorCode.INVALID_CREDENTIALS
        external_unknown = to_external_error(unknown.error)
        external_wrong = to_external_error(wrong.error)
        assert external_unknown.code == external_wrong.code
        assert external_unknown.message == external_wrong.message

    async def test_unverified_account_rejected(self, login_handler, create_account):
        await create_account(email_verified=False)

        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )

        assert result.error.code == ErrorCode.ACCOUNT_NOT_VERIFIED

    async def test_inactive_account_rejected(self, login_handler, create_account):
        await create_account(status=AccountStatus.SUSPENDED)

        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )

        assert result.error.code == ErrorCode.ACCOUNT_INACTIVE

    async def test_provider_only_account_cannot_use_password(
        self, login_handler, create_account
    ):
        await create_account(password=None)

        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )

        assert result.error.code == ErrorCode.INVALID_CREDENTIALS


@pytest.mark.integration
class TestLockout:
    async def test_lockout_and_expiry(
        self, login_handler, create_account, account_repo, published_events
    ):
        with freeze_time("2026-03-01 12:00:00", real_asyncio=True) as frozen:
            # Arrange
            account = await create_account()

            # Act - reach the threshold
            for _ in range(MAX_FAILED_ATTEMPTS):
                result = await login_handler.handle(
                    LoginUser(email="user@example.com", password="WrongPass123!")
                )
                assert result.error.code == ErrorCode.INVALID_CREDENTIALS

            # Assert - correct password now refused
            locked = await login_handler.handle(
                LoginUser(email="user@example.com", password=TEST_PASSWORD)
            )
            assert locked.error.code == ErrorCode.ACCOUNT_LOCKED

            lockouts = [e for e in published_events if isinstance(e, AccountLockedOut)]
            assert len(lockouts) == 1
            assert lockouts[0].failed_attempts == MAX_FAILED_ATTEMPTS

            # Locked attempts are not counted
            stored = await account_repo.find_by_id(account.id)
            assert stored.failed_login_attempts == MAX_FAILED_ATTEMPTS

            # Lockout expires
            frozen.tick(timedelta(minutes=31))
            unlocked = await login_handler.handle(
                LoginUser(email="user@example.com", password=TEST_PASSWORD)
            )
            assert isinstance(unlocked, Success)

        stored = await account_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 0
        assert stored.locked_until is None

    async def test_concurrent_failures_lock_exactly_once(
        self, login_handler, create_account, account_repo, published_events
    ):
        # Arrange
        account = await create_account()

        # Act
        results = await asyncio.gather(
            *(
                login_handler.handle(
                    LoginUser(email="user@example.com", password="WrongPass123!")
                )
                for _ in range(MAX_FAILED_ATTEMPTS)
            )
        )

        # Assert
        assert all(r.error.code == ErrorCode.INVALID_CREDENTIALS for r in results)
        stored = await account_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == MAX_FAILED_ATTEMPTS
        assert stored.locked_until is not None

        lockouts = [e for e in published_events if isinstance(e, AccountLockedOut)]
        assert len(lockouts) == 1
        assert lockouts[0].failed_attempts == MAX_FAILED_ATTEMPTS

        locked = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )
        assert locked.error.code == ErrorCode.ACCOUNT_LOCKED

    async def test_failure_events_carry_counter(
        self, login_handler, create_account, published_events
    ):
        await create_account()

        await login_handler.handle(
            LoginUser(email="user@example.com", password="WrongPass123!")
        )

        failed = [e for e in published_events if isinstance(e, UserLoginFailed)]
        assert failed[-1].failed_attempts == 1
        assert failed[-1].reason == "invalid_credentials"


@pytest.mark.integration
class TestMfaLogin:
    async def test_challenge_then_complete(
        self,
        login_handler,
        complete_mfa_handler,
        create_account,
        token_issuer,
        published_events,
    ):
        # Arrange
        await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)

        # Act
        first = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )
        challenge = first.value.challenge_token
        tokens = await complete_mfa_handler.handle(
            CompleteMfaLogin(
                challenge_token=challenge, code=pyotp.TOTP(MFA_SECRET).now()
            )
        )

        # Assert
        assert first.value.mfa_required is True
        assert first.value.tokens is None
        claims = token_issuer.verify(challenge, TokenType.MFA_REQUIRED).value
        assert claims.authorities == []
        assert claims.purpose == ChallengePurpose.MFA_LOGIN

        assert isinstance(tokens, Success)
        assert isinstance(token_issuer.verify(tokens.value.access_token, TokenType.ACCESS), Success)
        assert any(isinstance(e, UserMfaChallengeIssued) for e in published_events)
        succeeded = [e for e in published_events if isinstance(e, UserLoginSucceeded)]
        assert [e.method for e in succeeded] == ["mfa"]

    async def test_challenge_token_is_not_an_access_token(
        self, login_handler, create_account, token_issuer
    ):
        await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)

        first = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )

        result = token_issuer.verify(first.value.challenge_token, TokenType.ACCESS)
        assert isinstance(result, Failure)

    async def test_inline_code(self, login_handler, create_account):
        await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)

        result = await login_handler.handle(
            LoginUser(
                email="user@example.com",
                password=TEST_PASSWORD,
                mfa_code=pyotp.TOTP(MFA_SECRET).now(),
            )
        )

        assert isinstance(result, Success)
        assert result.value.tokens is not None
        assert result.value.mfa_required is False

    async def test_empty_inline_code_asks_for_challenge(
        self, login_handler, create_account, account_repo, published_events
    ):
        account = await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)

        result = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD, mfa_code="")
        )

        assert isinstance(result, Success)
        assert result.value.mfa_required is True
        assert result.value.challenge_token is not None
        stored = await account_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 0
        assert not any(isinstance(e, UserMfaLoginFailed) for e in published_events)

    async def test_wrong_inline_code_counts_toward_lockout(
        self, login_handler, create_account, account_repo, published_events
    ):
        account = await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)

        result = await login_handler.handle(
            LoginUser(
                email="user@example.com",
                password=TEST_PASSWORD,
                mfa_code=wrong_code(MFA_SECRET),
            )
        )

        assert result.error.code == ErrorCode.INVALID_MFA_CODE
        stored = await account_repo.find_by_id(account.id)
        assert stored.failed_login_attempts == 1
        assert any(isinstance(e, UserMfaLoginFailed) for e in published_events)

    async def test_wrong_codes_lock_account(
        self, login_handler, complete_mfa_handler, create_account
    ):
        # Arrange
        await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)
        first = await login_handler.handle(
            LoginUser(email="user@example.com", password=TEST_PASSWORD)
        )
        challenge = first.value.challenge_token
        bad = wrong_code(MFA_SECRET)

        # Act
        for _ in range(MAX_FAILED_ATTEMPTS):
            await complete_mfa_handler.handle(
                CompleteMfaLogin(challenge_token=challenge, code=bad)
            )
        result = await complete_mfa_handler.handle(
            CompleteMfaLogin(
                challenge_token=challenge, code=pyotp.TOTP(MFA_SECRET).now()
            )
        )

        # Assert
        assert result.error.code == ErrorCode.ACCOUNT_LOCKED

    async def test_expired_challenge(self, login_handler, complete_mfa_handler, create_account):
        with freeze_time("2026-03-01 12:00:00", real_asyncio=True) as frozen:
            await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)
            first = await login_handler.handle(
                LoginUser(email="user@example.com", password=TEST_PASSWORD)
            )

            frozen.tick(timedelta(seconds=301))
            result = await complete_mfa_handler.handle(
                CompleteMfaLogin(
                    challenge_token=first.value.challenge_token, code="123456"
                )
            )

        assert result.error.code == ErrorCode.TOKEN_EXPIRED

    async def test_enrollment_token_cannot_complete_login(
        self, complete_mfa_handler, create_account, token_issuer
    ):
        account = await create_account(mfa_enabled=True, mfa_secret=MFA_SECRET)
        enrollment_token = token_issuer.issue_challenge_token(
            account, ChallengePurpose.MFA_ENROLLMENT
        )

        result = await complete_mfa_handler.handle(
            CompleteMfaLogin(
                challenge_token=enrollment_token, code=pyotp.TOTP(MFA_SECRET).now()
            )
        )

        assert result.error.code == ErrorCode.TOKEN_MALFORMED
