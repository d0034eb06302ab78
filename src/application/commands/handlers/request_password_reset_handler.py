"""Request password reset handler.

Flow:
1. Look up the account by normalized email
2. Unknown, unverified or inactive accounts: emit
   PasswordResetRequestFailed and return Success anyway (no enumeration)
3. Generate a single-use reset token (1 hour; only its hash is stored)
4. Emit PasswordResetRequestSucceeded event (triggers reset email)
5. Return Success(None)

Provider-only accounts (no password) may use the reset flow to set one.
"""

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RequestPasswordReset
from src.application.services.storage_guard import StorageGuard
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.entities.action_token import ActionToken
from src.domain.enums import ActionTokenPurpose
from src.domain.events.auth_events import (
    PasswordResetRequestFailed,
    PasswordResetRequestSucceeded,
)
from src.domain.protocols import (
    AccountRepository,
    ActionTokenRepository,
    OpaqueTokenServiceProtocol,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.validators import normalize_email
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class RequestPasswordResetHandler:
    """Handler for password reset requests.

    Always returns Success(None) unless storage fails: the response must not
    reveal whether the email is registered.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        action_token_repo: ActionTokenRepository,
        reset_token_service: OpaqueTokenServiceProtocol,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._account_repo = account_repo
        self._action_token_repo = action_token_repo
        self._reset_token_service = reset_token_service
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: RequestPasswordReset, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[None, DomainError]:
        return await self._guard.run("request_password_reset", self._request(cmd, context))

    async def _request(
        self, cmd: RequestPasswordReset, context: RequestContext
    ) -> Result[None, DomainError]:
        metadata = context.to_metadata()
        email = normalize_email(cmd.email)

        # Step 1: Look up account
        account = await self._account_repo.find_by_email(email)

        # Step 2: Silent failure
        if account is None or not account.is_active or not account.email_verified:
            reason = "account_not_found" if account is None else "account_not_eligible"
            await self._event_bus.publish(
                PasswordResetRequestFailed(email=email, reason=reason),
                metadata=metadata,
            )
            return Success(value=None)

        # Step 3: Reset token
        token, token_hash = self._reset_token_service.generate_token()
        expires_at = self._reset_token_service.calculate_expiration()
        await self._action_token_repo.create(
            ActionToken(
                id=uuid7(),
                account_id=account.id,
                purpose=ActionTokenPurpose.PASSWORD_RESET,
                token_hash=token_hash,
                expires_at=expires_at,
            )
        )

        # Step 4: Emit SUCCEEDED event
        await self._event_bus.publish(
            PasswordResetRequestSucceeded(
                user_id=account.id,
                email=account.email,
                reset_token=token,
                expires_at=expires_at,
            ),
            metadata=metadata,
        )

        # Step 5: Return Success
        return Success(value=None)
