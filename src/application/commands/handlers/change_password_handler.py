"""Change password handler.

Flow:
1. Load the account
2. Re-prove the current password
3. Validate the new password strength
4. Store the new hash
5. Revoke every session (reason ``password_changed``)
6. Emit UserPasswordChangeSucceeded event (triggers security notice email)

On failure:
- Emit UserPasswordChangeFailed event
- Return Failure(error)

A wrong current password does not count towards the lockout threshold:
the caller already holds a valid access token.
"""

from uuid import UUID

from src.application.commands.auth_commands import ChangePassword
from src.application.services.session_ledger import SessionLedger
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import RevocationReason
from src.domain.errors import auth_error
from src.domain.events.auth_events import (
    UserPasswordChangeFailed,
    UserPasswordChangeSucceeded,
)
from src.domain.protocols import AccountRepository, PasswordHashingProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.validators import validate_strong_password
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class ChangePasswordHandler:
    """Handler for change password command."""

    def __init__(
        self,
        account_repo: AccountRepository,
        password_service: PasswordHashingProtocol,
        session_ledger: SessionLedger,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._account_repo = account_repo
        self._password_service = password_service
        self._session_ledger = session_ledger
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: ChangePassword, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[int, DomainError]:
        """Handle change password command.

        Returns:
            Success(number of sessions revoked) or Failure
            (ACCOUNT_NOT_FOUND, INVALID_CREDENTIALS, PASSWORD_TOO_WEAK).
        """
        return await self._guard.run("change_password", self._change(cmd, context))

    async def _change(
        self, cmd: ChangePassword, context: RequestContext
    ) -> Result[int, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Load account
        account = await self._account_repo.find_by_id(cmd.user_id)
        if account is None:
            return await self._fail(
                cmd.user_id, auth_error(ErrorCode.ACCOUNT_NOT_FOUND), metadata
            )

        # Step 2: Re-prove current password
        if account.password_hash is None or not self._password_service.verify_password(
            cmd.current_password, account.password_hash
        ):
            return await self._fail(
                account.id, auth_error(ErrorCode.INVALID_CREDENTIALS), metadata
            )

        # Step 3: Validate new password
        try:
            validate_strong_password(cmd.new_password)
        except ValueError as e:
            return await self._fail(
                account.id,
                ValidationError(
                    code=ErrorCode.PASSWORD_TOO_WEAK, message=str(e), field="new_password"
                ),
                metadata,
            )

        # Step 4: Store new hash
        account.change_password(self._password_service.hash_password(cmd.new_password))
        await self._account_repo.save(account)

        # Step 5: Revoke every session
        revoked = await self._session_ledger.revoke_all(
            account.id, RevocationReason.PASSWORD_CHANGED
        )
        if isinstance(revoked, Failure):
            return revoked

        # Step 6: Emit SUCCEEDED event
        await self._event_bus.publish(
            UserPasswordChangeSucceeded(
                user_id=account.id, email=account.email, revoked_sessions=revoked.value
            ),
            metadata=metadata,
        )
        return Success(value=revoked.value)

    async def _fail(
        self, user_id: UUID, error: DomainError, metadata: dict[str, str]
    ) -> Failure[DomainError]:
        await self._event_bus.publish(
            UserPasswordChangeFailed(user_id=user_id, reason=error.code.value),
            metadata=metadata,
        )
        return Failure(error=error)
