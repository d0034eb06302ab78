"""Logout User handler for User Authentication.

Flow:
1. Revoke the refresh token (reason ``logout``)
2. Emit UserLogoutSucceeded event
3. Return Success(None)

Idempotent: unknown, expired and already revoked tokens all succeed, so a
client retrying a logout never sees an error and a caller cannot probe
whether a token exists.

Note: JWT access tokens cannot be revoked (they expire naturally).
This handler only revokes the refresh token to prevent new access tokens.
"""

from src.application.commands.auth_commands import LogoutUser
from src.application.services.session_ledger import SessionLedger
from src.application.services.storage_guard import StorageGuard
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import RevocationReason
from src.domain.events.auth_events import UserLogoutSucceeded
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class LogoutUserHandler:
    """Handler for user logout command."""

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
        self, cmd: LogoutUser, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[None, DomainError]:
        """Handle logout command.

        Returns:
            Success(None), or Failure only when storage is unavailable.
        """
        return await self._guard.run("logout_user", self._logout(cmd, context))

    async def _logout(
        self, cmd: LogoutUser, context: RequestContext
    ) -> Result[None, DomainError]:
        # Step 1: Revoke
        revoked = await self._session_ledger.revoke(
            cmd.refresh_token, RevocationReason.LOGOUT
        )
        if isinstance(revoked, Failure):
            return revoked
        session = revoked.value

        # Step 2: Emit SUCCEEDED event
        await self._event_bus.publish(
            UserLogoutSucceeded(
                user_id=session.account_id if session else None,
                session_id=session.id if session else None,
            ),
            metadata=context.to_metadata(),
        )

        # Step 3: Return Success
        return Success(value=None)
