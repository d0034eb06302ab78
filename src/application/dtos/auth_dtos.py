"""Authentication DTOs (Data Transfer Objects).

Response/result dataclasses for authentication command handlers.
These carry data from handlers back to the caller.

DTOs:
    - AuthTokens: Access + refresh token pair
    - LoginResult: Tokens, or an MFA challenge when a second factor is due
    - IssuedRefreshToken: Result of a session ledger rotation
    - MfaEnrollment: Candidate secret handed to the user during enrollment
    - RegisteredAccount: Result of RegisterUser
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class AuthTokens:
    """Response from successful token generation.

    Attributes:
        access_token: JWT access token (short-lived, 1 hour by default).
        refresh_token: Opaque refresh token (long-lived, 30 days).
        token_type: Token type (always "bearer").
        expires_in: Access token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 3600


@dataclass(frozen=True, kw_only=True)
class LoginResult:
    """Outcome of a successful password check.

    Exactly one of ``tokens`` and ``challenge_token`` is set.

    Attributes:
        user_id: Authenticated account.
        tokens: Issued tokens when login is complete.
        challenge_token: MFA_REQUIRED token to exchange with a TOTP code.
    """

    user_id: UUID
    tokens: AuthTokens | None = None
    challenge_token: str | None = None

    @property
    def mfa_required(self) -> bool:
        return self.challenge_token is not None


@dataclass(frozen=True, kw_only=True)
class IssuedRefreshToken:
    """New refresh token minted by the session ledger.

    Attributes:
        token: Plaintext token (returned to the client once, never stored).
        session_id: Session record holding the token hash.
        expires_at: Expiry of the token.
    """

    token: str
    session_id: UUID
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class MfaEnrollment:
    """Enrollment material shown to the user.

    Attributes:
        secret: Base32 TOTP secret (for manual entry).
        provisioning_uri: otpauth:// URI (for the QR code).
        enrollment_token: Signed token carrying the secret until confirmed.
    """

    secret: str
    provisioning_uri: str
    enrollment_token: str


@dataclass(frozen=True, kw_only=True)
class RegisteredAccount:
    user_id: UUID
    email: str
