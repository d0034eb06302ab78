"""JWT token service (adapter).

Implements TokenIssuerProtocol using PyJWT with HMAC-SHA256.

Claims:
    Every token carries ``sub``, ``iss``, ``aud``, ``iat``, ``exp``, ``tokenType``
    (ACCESS, REFRESH or MFA_REQUIRED) and ``authorities``.
    MFA_REQUIRED tokens add ``purpose`` and, for enrollment, ``mfaSecret``.
    Claim names are consumed by downstream verifiers and must not change.

Security:
    - HMAC-SHA256 (HS256), key of at least 256 bits from immutable settings
    - Only the configured algorithm is accepted on decode ("none" rejected)
    - Issuer and audience are enforced

Performance:
    - Stateless validation (no storage lookup)
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidAlgorithmError,
    InvalidAudienceError,
    InvalidIssuerError,
    InvalidSignatureError,
    InvalidTokenError,
)

from src.core.config import MIN_SECRET_KEY_BYTES
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.enums import ChallengePurpose, TokenType
from src.domain.errors import auth_error
from src.domain.value_objects.token_claims import TokenClaims

REQUIRED_CLAIMS = ["sub", "iss", "aud", "iat", "exp", "tokenType"]


class JWTService:
    """JWT token issuing and verification service.

    Usage:
        from src.core.container import get_token_issuer

        issuer = get_token_issuer()
        token = issuer.issue_access_token(account, ["ROLE_USER"])

        match issuer.verify(token, expected_type=TokenType.ACCESS):
            case Success(value=claims):
                account_id = claims.subject
            case Failure(error=error):
                ...
    """

    def __init__(
        self,
        secret_key: str,
        *,
        issuer: str,
        audience: str,
        access_token_ttl_seconds: int = 3600,
        challenge_ttl_seconds: int = 300,
        algorithm: str = "HS256",
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Secret key for HMAC signing (at least 32 bytes).
            issuer: ``iss`` claim value, enforced on verify.
            audience: ``aud`` claim value, enforced on verify.
            access_token_ttl_seconds: ACCESS token lifetime.
            challenge_ttl_seconds: Default MFA_REQUIRED token lifetime.
            algorithm: Signing algorithm.

        Raises:
            ValueError: If secret_key is too short.
        """
        if len(secret_key.encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._issuer = issuer
        self._audience = audience
        self._access_ttl = timedelta(seconds=access_token_ttl_seconds)
        self._challenge_ttl = timedelta(seconds=challenge_ttl_seconds)
        self._algorithm = algorithm

    def issue_access_token(self, account: Account, authorities: list[str]) -> str:
        """Issue a signed ACCESS token.

        Example:
            >>> token = service.issue_access_token(account, ["ROLE_USER"])
            >>> len(token.split("."))
            3
        """
        return self._encode(
            subject=account.id,
            token_type=TokenType.ACCESS,
            authorities=list(authorities),
            ttl=self._access_ttl,
        )

    def issue_challenge_token(
        self,
        account: Account,
        purpose: ChallengePurpose,
        ttl: timedelta | None = None,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        """Issue an MFA_REQUIRED token (empty authorities).

        Args:
            account: Account being challenged.
            purpose: What the token may be exchanged for.
            ttl: Lifetime (defaults to the MFA challenge TTL).
            extra_claims: Additional claims (``mfaSecret`` for enrollment).
        """
        claims: dict[str, Any] = {"purpose": purpose.value}
        if extra_claims:
            claims.update(extra_claims)
        return self._encode(
            subject=account.id,
            token_type=TokenType.MFA_REQUIRED,
            authorities=[],
            ttl=ttl or self._challenge_ttl,
            extra_claims=claims,
        )

    def verify(
        self, token: str, expected_type: TokenType | None = None
    ) -> Result[TokenClaims, AuthenticationError]:
        """Verify a token and extract its claims.

        Note:
            - PyJWT checks the signature before any claim, so an expired
              token with a bad signature reports TOKEN_SIGNATURE_INVALID
            - A foreign issuer or audience is treated like a bad signature
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except ExpiredSignatureError:
            return Failure(error=auth_error(ErrorCode.TOKEN_EXPIRED))
        except (
            InvalidSignatureError,
            InvalidAlgorithmError,
            InvalidAudienceError,
            InvalidIssuerError,
        ):
            return Failure(error=auth_error(ErrorCode.TOKEN_SIGNATURE_INVALID))
        except (DecodeError, InvalidTokenError):
            return Failure(error=auth_error(ErrorCode.TOKEN_MALFORMED))

        return self._to_claims(payload, expected_type)

    def _encode(
        self,
        *,
        subject: UUID,
        token_type: TokenType,
        authorities: list[str],
        ttl: timedelta,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "tokenType": token_type.value,
            "authorities": authorities,
        }
        if extra_claims:
            payload.update(extra_claims)

        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token

    def _to_claims(
        self, payload: dict[str, Any], expected_type: TokenType | None
    ) -> Result[TokenClaims, AuthenticationError]:
        try:
            subject = UUID(str(payload["sub"]))
            token_type = TokenType(payload["tokenType"])
            purpose = (
                ChallengePurpose(payload["purpose"]) if "purpose" in payload else None
            )
        except ValueError:
            return Failure(error=auth_error(ErrorCode.TOKEN_MALFORMED))

        authorities = payload.get("authorities", [])
        if not isinstance(authorities, list) or not all(
            isinstance(item, str) for item in authorities
        ):
            return Failure(error=auth_error(ErrorCode.TOKEN_MALFORMED))

        if expected_type is not None and token_type != expected_type:
            return Failure(
                error=auth_error(
                    ErrorCode.TOKEN_MALFORMED,
                    message="Unexpected token type",
                    details={"token_type": token_type.value},
                )
            )

        return Success(
            value=TokenClaims(
                subject=subject,
                token_type=token_type,
                authorities=authorities,
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
                purpose=purpose,
                mfa_secret=payload.get("mfaSecret"),
            )
        )
