"""Confirm password reset handler.

Flow:
1. Look up the reset token by hash
2. Check it is unused and not expired
3. Validate the new password strength
4. Consume the token (single use, atomic)
5. Store the new hash (reloaded and reapplied on a version conflict)
6. Revoke every session (reason ``password_reset``)
7. Emit PasswordResetConfirmSucceeded event (triggers security notice)

On failure:
- Emit PasswordResetConfirmFailed event
- Return Failure(error)
"""

from uuid import UUID

from src.application.commands.auth_commands import ConfirmPasswordReset
from src.application.services.session_ledger import SessionLedger
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.enums import ActionTokenPurpose, RevocationReason
from src.domain.errors import ConcurrentModificationError, auth_error
from src.domain.events.auth_events import (
    PasswordResetConfirmFailed,
    PasswordResetConfirmSucceeded,
)
from src.domain.protocols import (
    AccountRepository,
    ActionTokenRepository,
    OpaqueTokenServiceProtocol,
    PasswordHashingProtocol,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.validators import validate_strong_password
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext

SAVE_ATTEMPTS = 3


class ConfirmPasswordResetHandler:
    """Handler for password reset confirmation."""

    def __init__(
        self,
        account_repo: AccountRepository,
        action_token_repo: ActionTokenRepository,
        reset_token_service: OpaqueTokenServiceProtocol,
        password_service: PasswordHashingProtocol,
        session_ledger: SessionLedger,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._account_repo = account_repo
        self._action_token_repo = action_token_repo
        self._reset_token_service = reset_token_service
        self._password_service = password_service
        self._session_ledger = session_ledger
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: ConfirmPasswordReset, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[int, DomainError]:
        """Handle password reset confirmation.

        Returns:
            Success(number of sessions revoked) or Failure (TOKEN_NOT_FOUND,
            TOKEN_REVOKED, TOKEN_EXPIRED, PASSWORD_TOO_WEAK).
        """
        return await self._guard.run("confirm_password_reset", self._confirm(cmd, context))

    async def _confirm(
        self, cmd: ConfirmPasswordReset, context: RequestContext
    ) -> Result[int, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Look up token
        token_hash = self._reset_token_service.hash_token(cmd.token)
        token = await self._action_token_repo.find_by_hash(
            token_hash, ActionTokenPurpose.PASSWORD_RESET
        )
        if token is None:
            return await self._fail(auth_error(ErrorCode.TOKEN_NOT_FOUND), metadata)

        # Step 2: Check state
        if token.is_used:
            return await self._fail(auth_error(ErrorCode.TOKEN_REVOKED), metadata)
        if not token.is_valid():
            return await self._fail(auth_error(ErrorCode.TOKEN_EXPIRED), metadata)

        # Step 3: Validate new password (token stays usable on a weak password)
        try:
            validate_strong_password(cmd.new_password)
        except ValueError as e:
            return await self._fail(
                ValidationError(
                    code=ErrorCode.PASSWORD_TOO_WEAK, message=str(e), field="new_password"
                ),
                metadata,
            )

        # Step 4: Consume token
        if not await self._action_token_repo.mark_used(token.id):
            return await self._fail(auth_error(ErrorCode.TOKEN_REVOKED), metadata)

        # Step 5: Store new hash
        password_hash = self._password_service.hash_password(cmd.new_password)
        account = await self._store_password(token.account_id, password_hash)
        if account is None:
            return await self._fail(auth_error(ErrorCode.ACCOUNT_NOT_FOUND), metadata)

        # Step 6: Revoke every session
        revoked = await self._session_ledger.revoke_all(
            account.id, RevocationReason.PASSWORD_RESET
        )
        if isinstance(revoked, Failure):
            return revoked

        # Step 7: Emit SUCCEEDED event
        await self._event_bus.publish(
            PasswordResetConfirmSucceeded(
                user_id=account.id, email=account.email, revoked_sessions=revoked.value
            ),
            metadata=metadata,
        )
        return Success(value=revoked.value)

    async def _store_password(
        self, account_id: UUID, password_hash: str
    ) -> Account | None:
        attempts = 0
        while True:
            account = await self._account_repo.find_by_id(account_id)
            if account is None:
                return None
            account.change_password(password_hash)
            try:
                await self._account_repo.save(account)
            except ConcurrentModificationError:
                attempts += 1
                if attempts >= SAVE_ATTEMPTS:
                    raise
                continue
            return account

    async def _fail(
        self, error: DomainError, metadata: dict[str, str]
    ) -> Failure[DomainError]:
        await self._event_bus.publish(
            PasswordResetConfirmFailed(reason=error.code.value), metadata=metadata
        )
        return Failure(error=error)
