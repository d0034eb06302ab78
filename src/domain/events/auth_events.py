"""Authentication domain events.

Pattern: 3 events per workflow (ATTEMPTED → SUCCEEDED/FAILED)
- *Attempted: Caller initiated action (before business logic)
- *Succeeded: Operation completed successfully (after storage commit)
- *Failed: Operation failed

Security events (AccountLockedOut, RefreshTokenReplayDetected) stand alone.

Handlers:
- LoggingEventHandler: ALL events
- AuditEventHandler: ALL events except *Attempted of token flows
- EmailEventHandler: registration, password reset request, password change,
  MFA enabled

``reason`` fields carry the internal ErrorCode value (for example
``account_not_found``); audit keeps the precise reason even though callers
only ever see the collapsed external code.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.events.base_event import DomainEvent


# ═══════════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserRegistrationAttempted(DomainEvent):
    """User registration attempt initiated.

    Attributes:
        email: Email address attempted.
    """

    email: str


@dataclass(frozen=True, kw_only=True)
class UserRegistrationSucceeded(DomainEvent):
    """User registration completed successfully.

    Triggers:
    - EmailEventHandler: Send verification email

    Attributes:
        user_id: ID of newly registered account.
        email: Account email address.
        verification_token: Email verification secret (for email handler only).
    """

    user_id: UUID
    email: str
    verification_token: str


@dataclass(frozen=True, kw_only=True)
class UserRegistrationFailed(DomainEvent):
    """User registration failed.

    Attributes:
        email: Email address attempted.
        reason: Failure reason.
    """

    email: str
    reason: str


# ═══════════════════════════════════════════════════════════════
# Password login (Credential Gate)
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserLoginAttempted(DomainEvent):
    """Password login attempt initiated.

    Attributes:
        email: Email address attempted.
    """

    email: str


@dataclass(frozen=True, kw_only=True)
class UserLoginSucceeded(DomainEvent):
    """Full authentication completed (password and MFA when enabled).

    Attributes:
        user_id: Authenticated account.
        email: Account email.
        session_id: Refresh-token session created for this login.
        method: "password", "password+mfa" or provider name.
    """

    user_id: UUID
    email: str
    session_id: UUID | None = None
    method: str = "password"


@dataclass(frozen=True, kw_only=True)
class UserLoginFailed(DomainEvent):
    """Password login failed.

    Attributes:
        email: Email address attempted.
        reason: Internal failure reason (ErrorCode value).
        user_id: Account id when the account exists.
        failed_attempts: Counter value after this failure, if incremented.
    """

    email: str
    reason: str
    user_id: UUID | None = None
    failed_attempts: int | None = None


@dataclass(frozen=True, kw_only=True)
class UserMfaChallengeIssued(DomainEvent):
    """Password verified; an MFA_REQUIRED challenge token was issued.

    Attributes:
        user_id: Account being challenged.
        email: Account email.
    """

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class UserMfaLoginFailed(DomainEvent):
    """Second factor rejected during login.

    Attributes:
        reason: Internal failure reason.
        user_id: Account id, when the challenge token could be read.
        failed_attempts: Counter value after this failure, if incremented.
    """

    reason: str
    user_id: UUID | None = None
    failed_attempts: int | None = None


@dataclass(frozen=True, kw_only=True)
class AccountLockedOut(DomainEvent):
    """Lockout threshold reached.

    Attributes:
        user_id: Locked account.
        email: Account email.
        failed_attempts: Counter value that triggered the lockout.
        locked_until: Lockout expiry.
    """

    user_id: UUID
    email: str
    failed_attempts: int
    locked_until: datetime


# ═══════════════════════════════════════════════════════════════
# OAuth2 login (Identity Linker)
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class OAuthLoginAttempted(DomainEvent):
    """Login through an identity provider initiated.

    Attributes:
        provider: Provider name as received.
    """

    provider: str


@dataclass(frozen=True, kw_only=True)
class OAuthLoginSucceeded(DomainEvent):
    """Login through an identity provider succeeded.

    Attributes:
        user_id: Resolved or created account.
        email: Account email.
        provider: Identity provider.
        account_created: True if this login created the account.
        session_id: Refresh-token session created for this login.
    """

    user_id: UUID
    email: str
    provider: str
    account_created: bool
    session_id: UUID | None = None


@dataclass(frozen=True, kw_only=True)
class OAuthLoginFailed(DomainEvent):
    """Login through an identity provider failed.

    Attributes:
        provider: Provider name as received.
        reason: Internal failure reason.
        email: Email reported by the provider, if any.
    """

    provider: str
    reason: str
    email: str | None = None


# ═══════════════════════════════════════════════════════════════
# Email verification
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class EmailVerificationSucceeded(DomainEvent):
    """Email address confirmed.

    Attributes:
        user_id: Verified account.
        email: Verified address.
    """

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class EmailVerificationFailed(DomainEvent):
    """Email verification token rejected.

    Attributes:
        reason: Failure reason.
    """

    reason: str


# ═══════════════════════════════════════════════════════════════
# Password change
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserPasswordChangeSucceeded(DomainEvent):
    """Password changed; every session was revoked.

    Triggers:
    - EmailEventHandler: Send password changed notification

    Attributes:
        user_id: Account whose password changed.
        email: Account email.
        revoked_sessions: Number of sessions revoked.
    """

    user_id: UUID
    email: str
    revoked_sessions: int


@dataclass(frozen=True, kw_only=True)
class UserPasswordChangeFailed(DomainEvent):
    """Password change failed.

    Attributes:
        user_id: Account id.
        reason: Failure reason.
    """

    user_id: UUID
    reason: str


# ═══════════════════════════════════════════════════════════════
# Password reset
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class PasswordResetRequestSucceeded(DomainEvent):
    """Password reset token issued.

    Triggers:
    - EmailEventHandler: Send reset email

    Attributes:
        user_id: Account id.
        email: Account email.
        reset_token: Reset secret (for email handler only).
        expires_at: Token expiry.
    """

    user_id: UUID
    email: str
    reset_token: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class PasswordResetRequestFailed(DomainEvent):
    """Password reset requested for an unknown or ineligible account.

    The caller still receives success (no account enumeration).

    Attributes:
        email: Email address attempted.
        reason: Failure reason.
    """

    email: str
    reason: str


@dataclass(frozen=True, kw_only=True)
class PasswordResetConfirmSucceeded(DomainEvent):
    """Password reset completed; every session was revoked.

    Attributes:
        user_id: Account id.
        email: Account email.
        revoked_sessions: Number of sessions revoked.
    """

    user_id: UUID
    email: str
    revoked_sessions: int


@dataclass(frozen=True, kw_only=True)
class PasswordResetConfirmFailed(DomainEvent):
    """Password reset confirmation failed.

    Attributes:
        reason: Failure reason.
    """

    reason: str


# ═══════════════════════════════════════════════════════════════
# MFA enrollment
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class MfaEnrollmentStarted(DomainEvent):
    """Candidate TOTP secret generated (nothing persisted yet).

    Attributes:
        user_id: Account enrolling.
    """

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class MfaEnabled(DomainEvent):
    """Second factor committed to the account.

    Triggers:
    - EmailEventHandler: Send MFA enabled notification

    Attributes:
        user_id: Account id.
        email: Account email.
    """

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class MfaEnrollmentFailed(DomainEvent):
    """Enrollment could not be started or confirmed.

    Attributes:
        user_id: Account id.
        reason: Failure reason.
    """

    user_id: UUID
    reason: str


@dataclass(frozen=True, kw_only=True)
class MfaDisabled(DomainEvent):
    """Second factor removed from the account.

    Attributes:
        user_id: Account id.
        email: Account email.
    """

    user_id: UUID
    email: str


# ═══════════════════════════════════════════════════════════════
# Refresh tokens (Session Ledger)
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class AuthTokenRefreshSucceeded(DomainEvent):
    """Refresh token rotated and a new access token issued.

    Attributes:
        user_id: Account id.
        session_id: New session.
        rotated_from_id: Revoked predecessor session.
    """

    user_id: UUID
    session_id: UUID
    rotated_from_id: UUID | None = None


@dataclass(frozen=True, kw_only=True)
class AuthTokenRefreshFailed(DomainEvent):
    """Refresh token rejected.

    Attributes:
        reason: Internal failure reason (token_revoked, token_expired, ...).
        user_id: Account id, if the token was found.
    """

    reason: str
    user_id: UUID | None = None


@dataclass(frozen=True, kw_only=True)
class RefreshTokenReplayDetected(DomainEvent):
    """A refresh token already revoked by rotation was presented again.

    Attributes:
        user_id: Account the token belonged to.
        session_id: Replayed session.
    """

    user_id: UUID
    session_id: UUID


@dataclass(frozen=True, kw_only=True)
class UserLogoutSucceeded(DomainEvent):
    """Refresh token revoked on logout.

    Attributes:
        user_id: Account id, when the token was known.
        session_id: Revoked session, when the token was known.
    """

    user_id: UUID | None = None
    session_id: UUID | None = None


@dataclass(frozen=True, kw_only=True)
class AllSessionsRevoked(DomainEvent):
    """Every live session of an account was revoked.

    Attributes:
        user_id: Account id.
        reason: RevocationReason value.
        revoked_count: Number of sessions revoked.
    """

    user_id: UUID
    reason: str
    revoked_count: int
