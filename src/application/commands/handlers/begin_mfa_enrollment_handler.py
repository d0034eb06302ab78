"""Begin MFA enrollment handler.

Flow:
1. Load the account
2. Generate a candidate secret and its enrollment token (nothing persisted)
3. Emit MfaEnrollmentStarted event
4. Return Success(MfaEnrollment)
"""

from src.application.commands.auth_commands import BeginMfaEnrollment
from src.application.dtos import MfaEnrollment
from src.application.services.mfa_challenge import MfaChallenge
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result
from src.domain.errors import auth_error
from src.domain.events.auth_events import MfaEnrollmentFailed, MfaEnrollmentStarted
from src.domain.protocols import AccountRepository
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class BeginMfaEnrollmentHandler:
    """Handler starting TOTP enrollment."""

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
        self, cmd: BeginMfaEnrollment, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[MfaEnrollment, DomainError]:
        return await self._guard.run("begin_mfa_enrollment", self._begin(cmd, context))

    async def _begin(
        self, cmd: BeginMfaEnrollment, context: RequestContext
    ) -> Result[MfaEnrollment, DomainError]:
        metadata = context.to_metadata()

        account = await self._account_repo.find_by_id(cmd.user_id)
        if account is None:
            return Failure(error=auth_error(ErrorCode.ACCOUNT_NOT_FOUND))

        result = self._mfa_challenge.begin_enrollment(account)
        if isinstance(result, Failure):
            await self._event_bus.publish(
                MfaEnrollmentFailed(user_id=account.id, reason=result.error.code.value),
                metadata=metadata,
            )
            return result

        await self._event_bus.publish(
            MfaEnrollmentStarted(user_id=account.id), metadata=metadata
        )
        return result
