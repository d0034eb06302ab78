"""Login user handler.

Orchestrates a password login: credential gate, optional second factor,
tokens.

Flow:
1. Run the credential gate (AuthenticateUserHandler)
2. MFA disabled → issue tokens
3. MFA enabled, code supplied → verify code, then issue tokens
4. MFA enabled, no code → return an MFA_REQUIRED challenge token

A wrong inline code counts towards the lockout threshold exactly like a
wrong password.
"""

from datetime import UTC, datetime

from src.application.commands.auth_commands import AuthenticateUser, LoginUser
from src.application.commands.handlers.authenticate_user_handler import (
    AuthenticateUserHandler,
)
from src.application.commands.handlers.generate_auth_tokens_handler import (
    GenerateAuthTokensHandler,
)
from src.application.dtos import LoginResult
from src.application.services.mfa_challenge import MfaChallenge
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.enums import ChallengePurpose
from src.domain.errors import auth_error
from src.domain.events.auth_events import UserLoginSucceeded, UserMfaLoginFailed
from src.domain.protocols import AccountRepository, TokenIssuerProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class LoginUserHandler:
    """Handler for password login."""

    def __init__(
        self,
        authenticate_handler: AuthenticateUserHandler,
        token_handler: GenerateAuthTokensHandler,
        mfa_challenge: MfaChallenge,
        token_issuer: TokenIssuerProtocol,
        account_repo: AccountRepository,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._authenticate_handler = authenticate_handler
        self._token_handler = token_handler
        self._mfa_challenge = mfa_challenge
        self._token_issuer = token_issuer
        self._account_repo = account_repo
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: LoginUser, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[LoginResult, DomainError]:
        """Handle login command.

        Returns:
            Success(LoginResult) with tokens, or with a challenge token when
            a second factor is due. Failure from the credential gate, or
            INVALID_MFA_CODE.
        """
        return await self._guard.run("login_user", self._login(cmd, context))

    async def _login(
        self, cmd: LoginUser, context: RequestContext
    ) -> Result[LoginResult, DomainError]:
        # Step 1: Credential gate
        authenticated = await self._authenticate_handler.handle(
            AuthenticateUser(email=cmd.email, password=cmd.password), context
        )
        if isinstance(authenticated, Failure):
            return authenticated
        account = authenticated.value

        # Step 2: No second factor
        if not account.mfa_enabled:
            return await self._issue(account, context)

        # Step 3: Inline code (empty counts as not supplied)
        if cmd.mfa_code:
            return await self._verify_inline_code(account, cmd.mfa_code, context)

        # Step 4: Challenge
        challenge_token = self._token_issuer.issue_challenge_token(
            account, ChallengePurpose.MFA_LOGIN
        )
        return Success(value=LoginResult(user_id=account.id, challenge_token=challenge_token))

    async def _verify_inline_code(
        self, account: Account, code: str, context: RequestContext
    ) -> Result[LoginResult, DomainError]:
        metadata = context.to_metadata()
        if account.mfa_secret is None or not self._mfa_challenge.verify_code(
            account.mfa_secret, code
        ):
            failed_attempts = await self._authenticate_handler.record_failed_attempt(
                account, metadata
            )
            await self._event_bus.publish(
                UserMfaLoginFailed(
                    reason=ErrorCode.INVALID_MFA_CODE.value,
                    user_id=account.id,
                    failed_attempts=failed_attempts,
                ),
                metadata=metadata,
            )
            return Failure(error=auth_error(ErrorCode.INVALID_MFA_CODE))

        await self._account_repo.reset_failed_attempts(
            account.id, last_login_at=datetime.now(UTC)
        )
        account.record_login()
        await self._event_bus.publish(
            UserLoginSucceeded(user_id=account.id, email=account.email, method="mfa"),
            metadata=metadata,
        )
        return await self._issue(account, context)

    async def _issue(
        self, account: Account, context: RequestContext
    ) -> Result[LoginResult, DomainError]:
        tokens = await self._token_handler.handle(account, context)
        if isinstance(tokens, Failure):
            return tokens
        return Success(value=LoginResult(user_id=account.id, tokens=tokens.value))
