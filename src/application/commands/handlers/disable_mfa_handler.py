"""Disable MFA handler.

Flow:
1. Load the account
2. Re-prove the password and clear the second factor
3. Emit MfaDisabled event
"""

from src.application.commands.auth_commands import DisableMfa
from src.application.services.mfa_challenge import MfaChallenge
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.errors import auth_error
from src.domain.events.auth_events import MfaDisabled
from src.domain.protocols import AccountRepository
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class DisableMfaHandler:
    """Handler removing the second factor."""

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
        self, cmd: DisableMfa, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[None, DomainError]:
        """Handle disable MFA command.

        Returns:
            Success(None) or Failure (ACCOUNT_NOT_FOUND, MFA_NOT_ENABLED,
            INVALID_CREDENTIALS).
        """
        return await self._guard.run("disable_mfa", self._disable(cmd, context))

    async def _disable(
        self, cmd: DisableMfa, context: RequestContext
    ) -> Result[None, DomainError]:
        account = await self._account_repo.find_by_id(cmd.user_id)
        if account is None:
            return Failure(error=auth_error(ErrorCode.ACCOUNT_NOT_FOUND))

        disabled = await self._mfa_challenge.disable(account, cmd.password)
        if isinstance(disabled, Failure):
            return disabled

        await self._event_bus.publish(
            MfaDisabled(user_id=account.id, email=account.email),
            metadata=context.to_metadata(),
        )
        return Success(value=None)
