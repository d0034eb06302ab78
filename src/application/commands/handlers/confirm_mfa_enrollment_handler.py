"""Confirm MFA enrollment handler.

Flow:
1. Load the account
2. Read the candidate secret from the enrollment token
3. Verify the code against it and commit the secret
4. Emit MfaEnabled event (triggers security notice email)

On failure:
- Emit MfaEnrollmentFailed event
- Return Failure(error); the account is unchanged
"""

from uuid import UUID

from src.application.commands.auth_commands import ConfirmMfaEnrollment
from src.application.services.mfa_challenge import MfaChallenge
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.errors import auth_error
from src.domain.events.auth_events import MfaEnabled, MfaEnrollmentFailed
from src.domain.protocols import AccountRepository
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class ConfirmMfaEnrollmentHandler:
    """Handler committing a verified TOTP secret."""

    def __init__(
        self,
        account_repo: AccountRepository,
        mfa_challenge: MfaChallenge,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._account_repo = account_repo
        self._mfa_challenge = mfa_challenge
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: ConfirmMfaEnrollment, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[None, DomainError]:
        """Handle enrollment confirmation.

        Returns:
            Success(None) or Failure (ACCOUNT_NOT_FOUND, token errors,
            MFA_ALREADY_ENABLED, INVALID_MFA_CODE).
        """
        return await self._guard.run("confirm_mfa_enrollment", self._confirm(cmd, context))

    async def _confirm(
        self, cmd: ConfirmMfaEnrollment, context: RequestContext
    ) -> Result[None, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Load account
        account = await self._account_repo.find_by_id(cmd.user_id)
        if account is None:
            return Failure(error=auth_error(ErrorCode.ACCOUNT_NOT_FOUND))

        # Step 2: Candidate secret
        secret = self._mfa_challenge.read_enrollment_token(cmd.enrollment_token, account.id)
        if isinstance(secret, Failure):
            return await self._fail(account.id, secret.error, metadata)

        # Step 3: Verify and commit
        confirmed = await self._mfa_challenge.confirm_enrollment(
            account, secret.value, cmd.code
        )
        if isinstance(confirmed, Failure):
            return await self._fail(account.id, confirmed.error, metadata)

        # Step 4: Emit SUCCEEDED event
        await self._event_bus.publish(
            MfaEnabled(user_id=account.id, email=account.email), metadata=metadata
        )
        return Success(value=None)

    async def _fail(
        self, user_id: UUID, error: DomainError, metadata: dict[str, str]
    ) -> Failure[DomainError]:
        await self._event_bus.publish(
            MfaEnrollmentFailed(user_id=user_id, reason=error.code.value),
            metadata=metadata,
        )
        return Failure(error=error)
