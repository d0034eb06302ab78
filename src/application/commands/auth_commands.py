"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic
- Commands don't return values (handlers return Result types)
- Fields use the Annotated types from src.domain.types, so any boundary
  that validates them (pydantic TypeAdapter, request models) shares the same
  rules. Handlers re-normalize what they depend on.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.domain.enums import RevocationReason
from src.domain.types import Email, Password, RefreshToken, TotpCode, VerificationToken


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Register new user account.

    Creates user with email/password, generates email verification token.
    User cannot login until email is verified.

    Attributes:
        email: User's email address (validated, normalized).
        password: User's password (validated strength, plain text, will be hashed).

    Example:
        >>> command = RegisterUser(
        ...     email="user@example.com",
        ...     password="SecurePass123!",
        ... )
        >>> result = await handler.handle(command)
    """

    email: Email
    password: Password


@dataclass(frozen=True, kw_only=True)
class AuthenticateUser:
    """Authenticate user credentials.

    Single responsibility: Verify user credentials only.
    Does NOT create sessions or generate tokens (CQRS separation).

    Attributes:
        email: User's email address.
        password: User's password (plain text). Strength is not checked
            here: older passwords may predate the current rules.
    """

    email: Email
    password: str


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Password login, with an optional inline TOTP code.

    Attributes:
        email: User's email address.
        password: User's password (plain text).
        mfa_code: TOTP code, when the client collects it up front. None or
            empty asks for a challenge instead.

    Example:
        >>> result = await handler.handle(
        ...     LoginUser(email="user@example.com", password="SecurePass123!")
        ... )
        >>> # Success(LoginResult(tokens=...)) or, with MFA on and no code,
        >>> # Success(LoginResult(challenge_token=...))
    """

    email: Email
    password: str
    mfa_code: TotpCode | None = None


@dataclass(frozen=True, kw_only=True)
class CompleteMfaLogin:
    """Exchange an MFA challenge token and a TOTP code for tokens.

    Attributes:
        challenge_token: MFA_REQUIRED token from LoginUser.
        code: Six digit TOTP code.
    """

    challenge_token: str
    code: TotpCode


@dataclass(frozen=True, kw_only=True)
class RefreshAccessToken:
    """Refresh access token using refresh token.

    Validates refresh token, generates new access token + new refresh token.
    Implements token rotation (old refresh token revoked).

    Attributes:
        refresh_token: Opaque refresh token (urlsafe base64).

    Example:
        >>> command = RefreshAccessToken(refresh_token="dGhpcyBpcyB...")
        >>> result = await handler.handle(command)
    """

    refresh_token: RefreshToken


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """Logout and revoke the refresh token.

    JWT access tokens cannot be revoked (they expire naturally).

    Attributes:
        refresh_token: Refresh token to revoke.
    """

    refresh_token: RefreshToken


@dataclass(frozen=True, kw_only=True)
class RevokeAllSessions:
    """Log out everywhere.

    Attributes:
        user_id: Account whose sessions are revoked.
        reason: Revocation reason stored on every session.
    """

    user_id: UUID
    reason: RevocationReason = RevocationReason.LOGOUT_ALL


@dataclass(frozen=True, kw_only=True)
class OAuthLogin:
    """Login through a third-party identity provider.

    The provider exchange (redirects, code → token) happens upstream; this
    command carries the provider's user-info attributes.

    Attributes:
        provider: Provider name ("google", "facebook", "github").
        attributes: Raw user-info attributes returned by the provider.
    """

    provider: str
    attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class VerifyEmail:
    """Verify user's email address.

    Attributes:
        token: Email verification token (hex).

    Example:
        >>> command = VerifyEmail(token="abc123def456...")
        >>> result = await handler.handle(command)
    """

    token: VerificationToken


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change password while logged in.

    Re-proves the current password and revokes every session.

    Attributes:
        user_id: Account changing its password.
        current_password: Current password (plain text).
        new_password: New password (validated strength).
    """

    user_id: UUID
    current_password: str
    new_password: Password


@dataclass(frozen=True, kw_only=True)
class RequestPasswordReset:
    """Request password reset for user.

    Generates password reset token, sends email with reset link.
    Always returns success (no user enumeration).

    Attributes:
        email: User's email address.
    """

    email: Email


@dataclass(frozen=True, kw_only=True)
class ConfirmPasswordReset:
    """Confirm password reset with token and new password.

    Validates reset token, updates user password, revokes all sessions.
    Forces user to login again after password change.

    Attributes:
        token: Password reset token (hex).
        new_password: New password (validated strength, plain text, will be hashed).

    Example:
        >>> command = ConfirmPasswordReset(
        ...     token="xyz789abc123...",
        ...     new_password="NewSecurePass456!",
        ... )
        >>> result = await handler.handle(command)
    """

    token: VerificationToken
    new_password: Password


@dataclass(frozen=True, kw_only=True)
class BeginMfaEnrollment:
    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ConfirmMfaEnrollment:
    """Commit the candidate secret once the user proves they hold it.

    Attributes:
        user_id: Account enrolling (from the access token).
        enrollment_token: Token returned by BeginMfaEnrollment.
        code: TOTP code generated from the candidate secret.
    """

    user_id: UUID
    enrollment_token: str
    code: TotpCode


@dataclass(frozen=True, kw_only=True)
class DisableMfa:
    """Turn off two-factor authentication (password required).

    Attributes:
        user_id: Account disabling MFA.
        password: Current password.
    """

    user_id: UUID
    password: str
