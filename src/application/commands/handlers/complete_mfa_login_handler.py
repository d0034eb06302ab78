"""Complete MFA login handler.

Second half of a login for accounts with two-factor authentication.

Flow:
1. Verify the challenge token (MFA_REQUIRED, purpose mfa_login)
2. Load the account, re-check it is active and not locked
3. Verify the TOTP code
4. Reset the failed-attempt counter (full authentication)
5. Emit UserLoginSucceeded event
6. Issue tokens

On failure:
- A wrong code counts towards the lockout threshold
- Emit UserMfaLoginFailed event
- Return Failure(error)
"""

from datetime import UTC, datetime
from uuid import UUID

from src.application.commands.auth_commands import CompleteMfaLogin
from src.application.commands.handlers.authenticate_user_handler import (
    AuthenticateUserHandler,
)
from src.application.commands.handlers.generate_auth_tokens_handler import (
    GenerateAuthTokensHandler,
)
from src.application.dtos import AuthTokens
from src.application.services.mfa_challenge import MfaChallenge
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result
from src.domain.enums import ChallengePurpose, TokenType
from src.domain.errors import auth_error
from src.domain.events.auth_events import UserLoginSucceeded, UserMfaLoginFailed
from src.domain.protocols import AccountRepository, TokenIssuerProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class CompleteMfaLoginHandler:
    """Handler exchanging a challenge token and TOTP code for tokens."""

    def __init__(
        self,
        account_repo: AccountRepository,
        token_issuer: TokenIssuerProtocol,
        mfa_challenge: MfaChallenge,
        authenticate_handler: AuthenticateUserHandler,
        token_handler: GenerateAuthTokensHandler,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._account_repo = account_repo
        self._token_issuer = token_issuer
        self._mfa_challenge = mfa_challenge
        self._authenticate_handler = authenticate_handler
        self._token_handler = token_handler
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: CompleteMfaLogin, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[AuthTokens, DomainError]:
        """Handle MFA login completion.

        Returns:
            Success(AuthTokens) or Failure (token errors, ACCOUNT_NOT_FOUND,
            ACCOUNT_LOCKED, ACCOUNT_INACTIVE, MFA_NOT_ENABLED,
            INVALID_MFA_CODE).
        """
        return await self._guard.run("complete_mfa_login", self._complete(cmd, context))

    async def _complete(
        self, cmd: CompleteMfaLogin, context: RequestContext
    ) -> Result[AuthTokens, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Verify challenge token
        verified = self._token_issuer.verify(
            cmd.challenge_token, expected_type=TokenType.MFA_REQUIRED
        )
        if isinstance(verified, Failure):
            await self._publish_failed_event(verified.error.code.value, None, metadata)
            return verified
        claims = verified.value
        if claims.purpose != ChallengePurpose.MFA_LOGIN:
            await self._publish_failed_event(
                ErrorCode.TOKEN_MALFORMED.value, claims.subject, metadata
            )
            return Failure(
                error=auth_error(ErrorCode.TOKEN_MALFORMED, message="Not a login challenge")
            )

        # Step 2: Load account, re-check state
        account = await self._account_repo.find_by_id(claims.subject)
        if account is None:
            return await self._fail(ErrorCode.ACCOUNT_NOT_FOUND, claims.subject, metadata)
        if account.is_locked():
            return await self._fail(ErrorCode.ACCOUNT_LOCKED, account.id, metadata)
        if not account.is_active:
            return await self._fail(ErrorCode.ACCOUNT_INACTIVE, account.id, metadata)
        if not account.mfa_enabled or account.mfa_secret is None:
            return await self._fail(ErrorCode.MFA_NOT_ENABLED, account.id, metadata)

        # Step 3: Verify code
        if not self._mfa_challenge.verify_code(account.mfa_secret, cmd.code):
            failed_attempts = await self._authenticate_handler.record_failed_attempt(
                account, metadata
            )
            await self._publish_failed_event(
                ErrorCode.INVALID_MFA_CODE.value,
                account.id,
                metadata,
                failed_attempts=failed_attempts,
            )
            return Failure(error=auth_error(ErrorCode.INVALID_MFA_CODE))

        # Step 4: Full authentication
        await self._account_repo.reset_failed_attempts(
            account.id, last_login_at=datetime.now(UTC)
        )
        account.record_login()

        # Step 5: Emit SUCCEEDED event
        await self._event_bus.publish(
            UserLoginSucceeded(user_id=account.id, email=account.email, method="mfa"),
            metadata=metadata,
        )

        # Step 6: Issue tokens
        return await self._token_handler.handle(account, context)

    async def _fail(
        self, code: ErrorCode, user_id: UUID, metadata: dict[str, str]
    ) -> Failure[DomainError]:
        await self._publish_failed_event(code.value, user_id, metadata)
        return Failure(error=auth_error(code))

    async def _publish_failed_event(
        self,
        reason: str,
        user_id: UUID | None,
        metadata: dict[str, str],
        failed_attempts: int | None = None,
    ) -> None:
        await self._event_bus.publish(
            UserMfaLoginFailed(
                reason=reason, user_id=user_id, failed_attempts=failed_attempts
            ),
            metadata=metadata,
        )
