"""Verify email handler.

Flow:
1. Look up the verification token by hash
2. Check it is unused and not expired
3. Consume it (single use, atomic)
4. Mark the account verified
5. Emit EmailVerificationSucceeded event

On failure:
- Emit EmailVerificationFailed event
- Return Failure(TOKEN_NOT_FOUND | TOKEN_REVOKED | TOKEN_EXPIRED)
"""

from src.application.commands.auth_commands import VerifyEmail
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import ActionTokenPurpose
from src.domain.errors import auth_error
from src.domain.events.auth_events import (
    EmailVerificationFailed,
    EmailVerificationSucceeded,
)
from src.domain.protocols import (
    AccountRepository,
    ActionTokenRepository,
    OpaqueTokenServiceProtocol,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class VerifyEmailHandler:
    """Handler for email verification command."""

    def __init__(
        self,
        account_repo: AccountRepository,
        action_token_repo: ActionTokenRepository,
        verification_token_service: OpaqueTokenServiceProtocol,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._account_repo = account_repo
        self._action_token_repo = action_token_repo
        self._verification_token_service = verification_token_service
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: VerifyEmail, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[None, DomainError]:
        return await self._guard.run("verify_email", self._verify(cmd, context))

    async def _verify(
        self, cmd: VerifyEmail, context: RequestContext
    ) -> Result[None, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Look up token
        token_hash = self._verification_token_service.hash_token(cmd.token)
        token = await self._action_token_repo.find_by_hash(
            token_hash, ActionTokenPurpose.EMAIL_VERIFICATION
        )
        if token is None:
            return await self._fail(ErrorCode.TOKEN_NOT_FOUND, metadata)

        # Step 2: Check state
        if token.is_used:
            return await self._fail(ErrorCode.TOKEN_REVOKED, metadata)
        if not token.is_valid():
            return await self._fail(ErrorCode.TOKEN_EXPIRED, metadata)

        # Step 3: Consume
        if not await self._action_token_repo.mark_used(token.id):
            return await self._fail(ErrorCode.TOKEN_REVOKED, metadata)

        # Step 4: Mark verified
        account = await self._account_repo.find_by_id(token.account_id)
        if account is None:
            return await self._fail(ErrorCode.ACCOUNT_NOT_FOUND, metadata)
        if not account.email_verified:
            account.mark_email_verified()
            await self._account_repo.save(account)

        # Step 5: Emit SUCCEEDED event
        await self._event_bus.publish(
            EmailVerificationSucceeded(user_id=account.id, email=account.email),
            metadata=metadata,
        )
        return Success(value=None)

    async def _fail(
        self, code: ErrorCode, metadata: dict[str, str]
    ) -> Failure[DomainError]:
        await self._event_bus.publish(
            EmailVerificationFailed(reason=code.value), metadata=metadata
        )
        return Failure(error=auth_error(code))
