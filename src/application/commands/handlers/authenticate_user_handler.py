"""Authenticate user handler (credential gate).

Single responsibility: Verify user credentials and maintain lockout state.
Does NOT create sessions or generate tokens (CQRS separation).

Flow:
1. Emit UserLoginAttempted event
2. Find account by normalized email
3. Check account exists (dummy hash comparison when it does not)
4. Check account not locked (before any password comparison)
5. Check email verified
6. Check account active
7. Verify password (constant time)
8. On mismatch: atomic increment, lock at threshold
9. On match: reset counter unless a second factor is still due
10. Emit UserLoginSucceeded (or UserMfaChallengeIssued) event
11. Return Success(Account)

On failure:
- Emit UserLoginFailed event (and AccountLockedOut when the threshold is hit)
- Return Failure(error)

Error codes are internal. ACCOUNT_NOT_FOUND and ACCOUNT_INACTIVE must reach
callers as INVALID_CREDENTIALS (see ``to_external_error``).

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, events)
- NO infrastructure imports (repositories are injected via protocols)
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.application.commands.auth_commands import AuthenticateUser
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.errors import auth_error
from src.domain.events.auth_events import (
    AccountLockedOut,
    UserLoginAttempted,
    UserLoginFailed,
    UserLoginSucceeded,
    UserMfaChallengeIssued,
)
from src.domain.protocols import AccountRepository, PasswordHashingProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.validators import normalize_email
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class AuthenticateUserHandler:
    """Handler for user authentication command.

    Single responsibility: Verify user credentials and return the account.

    Follows hexagonal architecture:
    - Application layer (this handler)
    - Domain layer (Account entity, protocols)
    - Infrastructure layer (repositories via dependency injection)
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        password_service: PasswordHashingProtocol,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
        max_failed_attempts: int = 5,
        lockout_duration: timedelta = timedelta(minutes=30),
    ) -> None:
        """Initialize authentication handler with dependencies.

        Args:
            account_repo: Account repository for persistence.
            password_service: Password hashing/verification service.
            event_bus: Event bus for publishing domain events.
            guard: Storage time budget and fault mapping.
            max_failed_attempts: Consecutive failures that trigger a lockout.
            lockout_duration: How long a lockout lasts.
        """
        self._account_repo = account_repo
        self._password_service = password_service
        self._event_bus = event_bus
        self._guard = guard
        self._max_failed_attempts = max_failed_attempts
        self._lockout_duration = lockout_duration

    async def authenticate(
        self,
        email: str,
        password: str,
        context: RequestContext = ANONYMOUS_CONTEXT,
    ) -> Result[Account, DomainError]:
        """Verify an email and password pair."""
        return await self.handle(AuthenticateUser(email=email, password=password), context)

    async def handle(
        self, cmd: AuthenticateUser, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[Account, DomainError]:
        """Handle user authentication command.

        Args:
            cmd: AuthenticateUser command (email and password).
            context: Client IP/user agent for the audit trail.

        Returns:
            Success(Account) on correct credentials.
            Failure(AuthenticationError) otherwise; SERVICE_UNAVAILABLE when
            storage fails.

        Side Effects:
            - Publishes UserLoginAttempted event (always).
            - Publishes UserLoginSucceeded or UserMfaChallengeIssued (on success).
            - Publishes UserLoginFailed event (on failure).
            - Increments failed_login_attempts on wrong password.
        """
        return await self._guard.run("authenticate_user", self._authenticate(cmd, context))

    async def _authenticate(
        self, cmd: AuthenticateUser, context: RequestContext
    ) -> Result[Account, DomainError]:
        metadata = context.to_metadata()
        email = normalize_email(cmd.email)

        # Step 1: Emit ATTEMPTED event
        await self._event_bus.publish(UserLoginAttempted(email=email), metadata=metadata)

        # Step 2: Find account by email
        account = await self._account_repo.find_by_email(email)

        # Step 3: Check account exists
        if account is None:
            # Same bcrypt cost as a real comparison
            self._password_service.dummy_verify(cmd.password)
            return await self._fail(email, ErrorCode.ACCOUNT_NOT_FOUND, None, metadata)

        # Step 4: Check account not locked
        now = datetime.now(UTC)
        if account.is_locked(now):
            return await self._fail(email, ErrorCode.ACCOUNT_LOCKED, account.id, metadata)

        # Step 5: Check email verified
        if not account.email_verified:
            return await self._fail(
                email, ErrorCode.ACCOUNT_NOT_VERIFIED, account.id, metadata
            )

        # Step 6: Check account active
        if not account.is_active:
            return await self._fail(email, ErrorCode.ACCOUNT_INACTIVE, account.id, metadata)

        # Step 7: Verify password
        if account.password_hash is None:
            # Provider-only account: no password to compare, no counter bump
            self._password_service.dummy_verify(cmd.password)
            return await self._fail(
                email, ErrorCode.INVALID_CREDENTIALS, account.id, metadata
            )

        if not self._password_service.verify_password(cmd.password, account.password_hash):
            # Step 8: Count the failure, lock at threshold
            failed_attempts = await self.record_failed_attempt(account, metadata)
            return await self._fail(
                email,
                ErrorCode.INVALID_CREDENTIALS,
                account.id,
                metadata,
                failed_attempts=failed_attempts,
            )

        # Step 9: Reset counter (full authentication only)
        if account.mfa_enabled:
            await self._event_bus.publish(
                UserMfaChallengeIssued(user_id=account.id, email=account.email),
                metadata=metadata,
            )
            return Success(value=account)

        await self._account_repo.reset_failed_attempts(account.id, last_login_at=now)
        account.record_login()

        # Step 10: Emit SUCCEEDED event
        await self._event_bus.publish(
            UserLoginSucceeded(user_id=account.id, email=account.email, method="password"),
            metadata=metadata,
        )

        # Step 11: Return authenticated account
        return Success(value=account)

    async def record_failed_attempt(
        self, account: Account, metadata: dict[str, str]
    ) -> int:
        """Atomically count a failed attempt and lock at the threshold.

        Shared with the MFA login path, where a wrong code counts like a
        wrong password.

        Returns:
            Counter value after the increment.
        """
        failed_attempts = await self._account_repo.atomic_increment_failed_attempts(
            account.id
        )
        if failed_attempts >= self._max_failed_attempts:
            locked_until = datetime.now(UTC) + self._lockout_duration
            await self._account_repo.set_lockout(account.id, locked_until)
            await self._event_bus.publish(
                AccountLockedOut(
                    user_id=account.id,
                    email=account.email,
                    failed_attempts=failed_attempts,
                    locked_until=locked_until,
                ),
                metadata=metadata,
            )
        return failed_attempts

    async def _fail(
        self,
        email: str,
        code: ErrorCode,
        user_id: UUID | None,
        metadata: dict[str, str],
        failed_attempts: int | None = None,
    ) -> Failure[DomainError]:
        await self._publish_failed_event(
            email=email,
            reason=code.value,
            user_id=user_id,
            metadata=metadata,
            failed_attempts=failed_attempts,
        )
        return Failure(error=auth_error(code))

    async def _publish_failed_event(
        self,
        email: str,
        reason: str,
        user_id: UUID | None,
        metadata: dict[str, str],
        failed_attempts: int | None = None,
    ) -> None:
        """Publish UserLoginFailed event.

        Args:
            email: Email address attempted.
            reason: Failure reason (internal error code).
            user_id: User ID if found (for tracking lockout).
            metadata: Request metadata for audit trail.
            failed_attempts: Counter after this attempt, for wrong passwords.
        """
        await self._event_bus.publish(
            UserLoginFailed(
                email=email,
                reason=reason,
                user_id=user_id,
                failed_attempts=failed_attempts,
            ),
            metadata=metadata,
        )
