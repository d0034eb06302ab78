"""Session ledger: refresh-token lifecycle.

The ledger mints refresh tokens, exchanges them exactly once and revokes
them. Storage holds only the SHA-256 of each token; the plaintext exists in
the response and on the client.

Single use:
    ``rotate`` (with a predecessor) and ``validate_and_consume`` delegate
    the check-and-revoke to one atomic repository call. Of two concurrent
    requests presenting the same token exactly one wins; the loser sees
    TOKEN_REVOKED.

Replay:
    Presenting a token that was already rotated away means either a client
    retry or a stolen token. The ledger publishes RefreshTokenReplayDetected
    and rejects the request; it does not revoke the account's other
    sessions.

Internal failure kinds (TOKEN_NOT_FOUND, TOKEN_REVOKED, TOKEN_EXPIRED) stay
distinct here. Callers collapse them to INVALID_REFRESH_TOKEN with
``to_external_error(..., refresh_token=True)``.
"""

from uuid import UUID

from uuid_extensions import uuid7

from src.application.dtos import IssuedRefreshToken
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.entities.session import Session
from src.domain.enums import RevocationReason
from src.domain.errors import auth_error
from src.domain.events import RefreshTokenReplayDetected
from src.domain.protocols import (
    AccountRepository,
    DeviceEnricherProtocol,
    EventBusProtocol,
    OpaqueTokenServiceProtocol,
    SessionRepository,
)
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class SessionLedger:
    """Refresh-token issuance, rotation and revocation.

    Usage:
        ledger = get_session_ledger()

        # Login: first token of a new session chain
        issued = await ledger.rotate(account, None, context)

        # Refresh: exchange T0 for T1
        issued = await ledger.rotate(account, "T0", context)
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        account_repo: AccountRepository,
        token_service: OpaqueTokenServiceProtocol,
        device_enricher: DeviceEnricherProtocol,
        event_bus: EventBusProtocol,
    ) -> None:
        self._session_repo = session_repo
        self._account_repo = account_repo
        self._token_service = token_service
        self._device_enricher = device_enricher
        self._event_bus = event_bus

    async def rotate(
        self,
        account: Account,
        predecessor_token: str | None,
        context: RequestContext = ANONYMOUS_CONTEXT,
    ) -> Result[IssuedRefreshToken, DomainError]:
        """Mint a new refresh token, revoking the predecessor if given.

        Args:
            account: Account the token is issued to.
            predecessor_token: Token being exchanged, or None at login.
            context: Client context recorded on the new session.

        Returns:
            Success(IssuedRefreshToken), or Failure with TOKEN_NOT_FOUND,
            TOKEN_REVOKED or TOKEN_EXPIRED when the predecessor is not live.
            A predecessor owned by another account reads as TOKEN_NOT_FOUND.
            Nothing is written on failure.
        """
        token, token_hash = self._token_service.generate_token()
        successor = Session(
            id=uuid7(),
            account_id=account.id,
            token_hash=token_hash,
            expires_at=self._token_service.calculate_expiration(),
            device_info=self._device_enricher.describe(context.user_agent),
            ip_address=context.ip_address,
            user_agent=context.user_agent,
        )

        if predecessor_token is None:
            await self._session_repo.create(successor)
        else:
            predecessor_hash = self._token_service.hash_token(predecessor_token)
            predecessor = await self._session_repo.find_by_token_hash(predecessor_hash)
            if predecessor is not None and predecessor.account_id != account.id:
                return Failure(error=auth_error(ErrorCode.TOKEN_NOT_FOUND))

            result = await self._session_repo.rotate(predecessor_hash, successor)
            if isinstance(result, Failure):
                await self._report_replay(result.error, context)
                return result

        return Success(
            value=IssuedRefreshToken(
                token=token,
                session_id=successor.id,
                expires_at=successor.expires_at,
            )
        )

    async def exchange(
        self, refresh_token: str, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[tuple[Account, IssuedRefreshToken], DomainError]:
        """Rotate a presented token without knowing its account up front.

        Used by the refresh flow: the account is the predecessor's owner and
        is loaded after the atomic rotation succeeds.

        Returns:
            Success((account, issued)) or the rotation Failure. An account
            that vanished or is no longer active fails ACCOUNT_INACTIVE and
            the presented token is revoked.
        """
        predecessor_hash = self._token_service.hash_token(refresh_token)
        predecessor = await self._session_repo.find_by_token_hash(predecessor_hash)
        if predecessor is None:
            return Failure(error=auth_error(ErrorCode.TOKEN_NOT_FOUND))

        account = await self._account_repo.find_by_id(predecessor.account_id)
        if account is None or not account.is_active:
            await self._session_repo.revoke(
                predecessor_hash, RevocationReason.ACCOUNT_DISABLED.value
            )
            return Failure(
                error=auth_error(
                    ErrorCode.ACCOUNT_INACTIVE,
                    details={"account_id": str(predecessor.account_id)},
                )
            )

        match await self.rotate(account, refresh_token, context):
            case Success(value=issued):
                return Success(value=(account, issued))
            case Failure() as failure:
                return failure

    async def validate_and_consume(
        self, refresh_token: str, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[Account, DomainError]:
        """Check the token is live and revoke it in one atomic step.

        Revoked is reported before expired. A second call with the same
        token always fails TOKEN_REVOKED.

        Returns:
            Success(owning Account) or Failure (TOKEN_NOT_FOUND,
            TOKEN_REVOKED, TOKEN_EXPIRED, ACCOUNT_NOT_FOUND).
        """
        token_hash = self._token_service.hash_token(refresh_token)
        result = await self._session_repo.consume(token_hash)
        if isinstance(result, Failure):
            await self._report_replay(result.error, context)
            return result

        account = await self._account_repo.find_by_id(result.value.account_id)
        if account is None:
            return Failure(error=auth_error(ErrorCode.ACCOUNT_NOT_FOUND))
        return Success(value=account)

    async def revoke(
        self, refresh_token: str, reason: RevocationReason
    ) -> Result[Session | None, DomainError]:
        """Revoke one token. Idempotent.

        Unknown and already revoked tokens succeed; the original revocation
        reason is kept.

        Returns:
            Success(session) or Success(None) when the token is unknown.
        """
        token_hash = self._token_service.hash_token(refresh_token)
        session = await self._session_repo.revoke(token_hash, reason.value)
        return Success(value=session)

    async def revoke_all(
        self, account_id: UUID, reason: RevocationReason
    ) -> Result[int, DomainError]:
        """Revoke every live session of an account (rows kept for audit).

        Returns:
            Success(number of sessions revoked by this call).
        """
        count = await self._session_repo.revoke_all_for_account(account_id, reason.value)
        return Success(value=count)

    async def _report_replay(
        self, error: DomainError, context: RequestContext
    ) -> None:
        details = error.details or {}
        if not (
            error.code == ErrorCode.TOKEN_REVOKED
            and details.get("revoked_reason") == RevocationReason.ROTATION.value
        ):
            return
        await self._event_bus.publish(
            RefreshTokenReplayDetected(
                user_id=UUID(details["account_id"]),
                session_id=UUID(details["session_id"]),
            ),
            metadata=context.to_metadata(),
        )
