"""Verified token claims.

Produced only by the Token Issuer after signature, issuer, audience and
expiry have been checked.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.domain.enums import ChallengePurpose, TokenType


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenClaims:
    """Claims of a verified token.

    Attributes:
        subject: Account id from the ``sub`` claim.
        token_type: Value of the ``tokenType`` claim.
        authorities: Role names (empty for challenge tokens).
        issued_at: ``iat`` claim.
        expires_at: ``exp`` claim.
        purpose: ``purpose`` claim of MFA_REQUIRED tokens.
        mfa_secret: Candidate secret carried by enrollment tokens.
    """

    subject: UUID
    token_type: TokenType
    issued_at: datetime
    expires_at: datetime
    authorities: list[str] = field(default_factory=list)
    purpose: ChallengePurpose | None = None
    mfa_secret: str | None = None
