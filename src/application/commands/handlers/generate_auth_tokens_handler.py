"""Generate auth tokens handler.

Single responsibility: Generate JWT access token and opaque refresh token
for an account that has fully authenticated. Does NOT authenticate.

Flow:
1. Resolve authorities (account roles, else configured defaults)
2. Generate JWT access token
3. Record a new refresh token in the session ledger (no predecessor)
4. Return tokens to caller

Architecture:
- Application layer ONLY imports from domain layer and application services
- NO infrastructure imports (services are injected via protocols)
"""

from src.application.dtos import AuthTokens
from src.application.services.session_ledger import SessionLedger
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.protocols import TokenIssuerProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class GenerateAuthTokensHandler:
    """Issues the token pair at the end of every successful login path.

    Shared by password, MFA and third-party logins so that all of them
    produce identical tokens.
    """

    def __init__(
        self,
        token_issuer: TokenIssuerProtocol,
        session_ledger: SessionLedger,
        default_authorities: list[str],
        access_token_ttl_seconds: int,
    ) -> None:
        """Initialize token generation handler with dependencies.

        Args:
            token_issuer: JWT access token service.
            session_ledger: Refresh token ledger.
            default_authorities: Authorities for accounts without roles.
            access_token_ttl_seconds: Reported as ``expires_in``.
        """
        self._token_issuer = token_issuer
        self._session_ledger = session_ledger
        self._default_authorities = list(default_authorities)
        self._access_token_ttl_seconds = access_token_ttl_seconds

    async def handle(
        self, account: Account, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[AuthTokens, DomainError]:
        """Issue an access token and the first refresh token of a session.

        Side Effects:
            - Creates a session record (refresh token hash).
        """
        # Step 1: Authorities
        authorities = account.authorities or self._default_authorities

        # Step 2: Access token
        access_token = self._token_issuer.issue_access_token(account, authorities)

        # Step 3: Refresh token
        issued = await self._session_ledger.rotate(account, None, context)
        if isinstance(issued, Failure):
            return issued

        # Step 4: Return tokens
        return Success(
            value=AuthTokens(
                access_token=access_token,
                refresh_token=issued.value.token,
                expires_in=self._access_token_ttl_seconds,
            )
        )
