"""Refresh Access Token handler for User Authentication.

Flow:
1. Exchange the presented refresh token through the session ledger
   (atomic: revoke predecessor, insert successor)
2. Issue a new JWT access token for the token's owner
3. Emit AuthTokenRefreshSucceeded event
4. Return Success(tokens)

On failure:
- Emit AuthTokenRefreshFailed event
- Return Failure(error): TOKEN_NOT_FOUND, TOKEN_REVOKED, TOKEN_EXPIRED or
  ACCOUNT_INACTIVE internally; callers see INVALID_REFRESH_TOKEN

Rotation:
    Every refresh burns the presented token. Presenting it again fails
    TOKEN_REVOKED, and the ledger reports the replay as a security event.
"""

from uuid import UUID

from src.application.commands.auth_commands import RefreshAccessToken
from src.application.dtos import AuthTokens
from src.application.services.session_ledger import SessionLedger
from src.application.services.storage_guard import StorageGuard
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.events.auth_events import (
    AuthTokenRefreshFailed,
    AuthTokenRefreshSucceeded,
)
from src.domain.protocols import TokenIssuerProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class RefreshAccessTokenHandler:
    """Handler for refresh access token command.

    Implements token rotation security pattern:
    - On each refresh, the old refresh token is revoked (reason ``rotation``)
    - A new refresh token is generated and saved in the same atomic step
    - This prevents token reuse attacks
    """

    def __init__(
        self,
        session_ledger: SessionLedger,
        token_issuer: TokenIssuerProtocol,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
        default_authorities: list[str],
        access_token_ttl_seconds: int,
    ) -> None:
        """Initialize refresh handler with dependencies.

        Args:
            session_ledger: Refresh token ledger.
            token_issuer: JWT access token service.
            event_bus: Event bus for publishing domain events.
            guard: Storage time budget and fault mapping.
            default_authorities: Authorities for accounts without roles.
            access_token_ttl_seconds: Reported as ``expires_in``.
        """
        self._session_ledger = session_ledger
        self._token_issuer = token_issuer
        self._event_bus = event_bus
        self._guard = guard
        self._default_authorities = list(default_authorities)
        self._access_token_ttl_seconds = access_token_ttl_seconds

    async def handle(
        self, cmd: RefreshAccessToken, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[AuthTokens, DomainError]:
        """Handle refresh access token command.

        Side Effects:
            - Publishes AuthTokenRefreshSucceeded event (on success).
            - Publishes AuthTokenRefreshFailed event (on failure).
            - Revokes the presented refresh token, creates its successor.
        """
        return await self._guard.run("refresh_access_token", self._refresh(cmd, context))

    async def _refresh(
        self, cmd: RefreshAccessToken, context: RequestContext
    ) -> Result[AuthTokens, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Rotate
        exchanged = await self._session_ledger.exchange(cmd.refresh_token, context)
        if isinstance(exchanged, Failure):
            details = exchanged.error.details or {}
            account_id = details.get("account_id")
            await self._publish_failed_event(
                user_id=UUID(account_id) if account_id else None,
                reason=exchanged.error.code.value,
                metadata=metadata,
            )
            return exchanged
        account, issued = exchanged.value

        # Step 2: New access token
        access_token = self._token_issuer.issue_access_token(
            account, account.authorities or self._default_authorities
        )

        # Step 3: Emit SUCCEEDED event
        await self._event_bus.publish(
            AuthTokenRefreshSucceeded(user_id=account.id, session_id=issued.session_id),
            metadata=metadata,
        )

        # Step 4: Return Success
        return Success(
            value=AuthTokens(
                access_token=access_token,
                refresh_token=issued.token,
                expires_in=self._access_token_ttl_seconds,
            )
        )

    async def _publish_failed_event(
        self,
        user_id: UUID | None,
        reason: str,
        metadata: dict[str, str],
    ) -> None:
        """Publish AuthTokenRefreshFailed event.

        Args:
            user_id: User ID if known.
            reason: Failure reason.
            metadata: Request metadata for audit trail.
        """
        await self._event_bus.publish(
            AuthTokenRefreshFailed(user_id=user_id, reason=reason),
            metadata=metadata,
        )
