"""Token issuer protocol for domain layer.

Signs and verifies access and challenge tokens. Implementations hold the
signing key (from immutable settings) and never touch storage.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (JWTService)
"""

from datetime import timedelta
from typing import Any, Protocol

from src.core.errors import AuthenticationError
from src.core.result import Result
from src.domain.entities.account import Account
from src.domain.enums import ChallengePurpose, TokenType
from src.domain.value_objects.token_claims import TokenClaims


class TokenIssuerProtocol(Protocol):
    """Access/challenge token issuing interface.

    Implementations:
        - JWTService: PyJWT, HS256
    """

    def issue_access_token(self, account: Account, authorities: list[str]) -> str:
        """Issue a signed ACCESS token for the account.

        Args:
            account: Authenticated account (``sub`` claim).
            authorities: Role names for the ``authorities`` claim.

        Returns:
            Encoded token.
        """
        ...

    def issue_challenge_token(
        self,
        account: Account,
        purpose: ChallengePurpose,
        ttl: timedelta | None = None,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        """Issue a short-lived MFA_REQUIRED token with no authorities.

        Args:
            account: Account being challenged.
            purpose: What the token may be exchanged for.
            ttl: Lifetime (defaults to the configured MFA challenge TTL).
            extra_claims: Additional claims (enrollment secret).

        Returns:
            Encoded token.
        """
        ...

    def verify(
        self, token: str, expected_type: TokenType | None = None
    ) -> Result[TokenClaims, AuthenticationError]:
        """Verify signature, issuer, audience and expiry.

        Args:
            token: Encoded token.
            expected_type: Required ``tokenType`` (any type if None).

        Returns:
            Success(TokenClaims) or Failure with TOKEN_MALFORMED,
            TOKEN_SIGNATURE_INVALID or TOKEN_EXPIRED.
        """
        ...
