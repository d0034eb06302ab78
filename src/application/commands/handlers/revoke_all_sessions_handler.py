"""Revoke all sessions handler ("log out everywhere").

Flow:
1. Revoke every live session of the account in one pass
2. Emit AllSessionsRevoked event
3. Return Success(revoked count)

Session rows are kept (revoked) for the audit trail.
"""

from src.application.commands.auth_commands import RevokeAllSessions
from src.application.services.session_ledger import SessionLedger
from src.application.services.storage_guard import StorageGuard
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.events.auth_events import AllSessionsRevoked
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class RevokeAllSessionsHandler:
    """Handler for revoke all sessions command."""

    def __init__(
        self,
        session_ledger: SessionLedger,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._session_ledger = session_ledger
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: RevokeAllSessions, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[int, DomainError]:
        return await self._guard.run("revoke_all_sessions", self._revoke_all(cmd, context))

    async def _revoke_all(
        self, cmd: RevokeAllSessions, context: RequestContext
    ) -> Result[int, DomainError]:
        result = await self._session_ledger.revoke_all(cmd.user_id, cmd.reason)
        if isinstance(result, Failure):
            return result

        await self._event_bus.publish(
            AllSessionsRevoked(
                user_id=cmd.user_id,
                reason=cmd.reason.value,
                revoked_count=result.value,
            ),
            metadata=context.to_metadata(),
        )
        return Success(value=result.value)
