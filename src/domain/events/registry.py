"""Domain Events Registry - Single Source of Truth.

Catalogs every domain event with the subscribers it needs. Used for:
- Container wiring (automated subscription)
- Validation tests (every audited event has an AuditAction mapping)

Adding new events:
1. Define event dataclass in auth_events.py
2. Add entry to EVENT_REGISTRY below
3. Run tests - they'll tell you what's missing (audit mapping)
"""

from dataclasses import dataclass

from src.domain.events.auth_events import (
    AccountLockedOut,
    AllSessionsRevoked,
    AuthTokenRefreshFailed,
    AuthTokenRefreshSucceeded,
    EmailVerificationFailed,
    EmailVerificationSucceeded,
    MfaDisabled,
    MfaEnabled,
    MfaEnrollmentFailed,
    MfaEnrollmentStarted,
    OAuthLoginAttempted,
    OAuthLoginFailed,
    OAuthLoginSucceeded,
    PasswordResetConfirmFailed,
    PasswordResetConfirmSucceeded,
    PasswordResetRequestFailed,
    PasswordResetRequestSucceeded,
    RefreshTokenReplayDetected,
    UserLoginAttempted,
    UserLoginFailed,
    UserLoginSucceeded,
    UserLogoutSucceeded,
    UserMfaChallengeIssued,
    UserMfaLoginFailed,
    UserPasswordChangeFailed,
    UserPasswordChangeSucceeded,
    UserRegistrationAttempted,
    UserRegistrationFailed,
    UserRegistrationSucceeded,
)
from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True)
class EventMetadata:
    """Subscribers required for one event class.

    Attributes:
        event_class: Event dataclass.
        requires_logging: Subscribe LoggingEventHandler.
        requires_audit: Subscribe AuditEventHandler (needs an AuditAction).
    """

    event_class: type[DomainEvent]
    requires_logging: bool = True
    requires_audit: bool = True


EVENT_REGISTRY: tuple[EventMetadata, ...] = (
    # Registration
    EventMetadata(UserRegistrationAttempted, requires_audit=False),
    EventMetadata(UserRegistrationSucceeded),
    EventMetadata(UserRegistrationFailed, requires_audit=False),
    EventMetadata(EmailVerificationSucceeded),
    EventMetadata(EmailVerificationFailed),
    # Password login
    EventMetadata(UserLoginAttempted),
    EventMetadata(UserLoginSucceeded),
    EventMetadata(UserLoginFailed),
    EventMetadata(AccountLockedOut),
    # MFA login
    EventMetadata(UserMfaChallengeIssued),
    EventMetadata(UserMfaLoginFailed),
    # Third-party login
    EventMetadata(OAuthLoginAttempted, requires_audit=False),
    EventMetadata(OAuthLoginSucceeded),
    EventMetadata(OAuthLoginFailed),
    # Sessions
    EventMetadata(AuthTokenRefreshSucceeded),
    EventMetadata(AuthTokenRefreshFailed),
    EventMetadata(RefreshTokenReplayDetected),
    EventMetadata(UserLogoutSucceeded),
    EventMetadata(AllSessionsRevoked),
    # Password management
    EventMetadata(UserPasswordChangeSucceeded),
    EventMetadata(UserPasswordChangeFailed),
    EventMetadata(PasswordResetRequestSucceeded),
    EventMetadata(PasswordResetRequestFailed),
    EventMetadata(PasswordResetConfirmSucceeded),
    EventMetadata(PasswordResetConfirmFailed),
    # MFA management
    EventMetadata(MfaEnrollmentStarted, requires_audit=False),
    EventMetadata(MfaEnabled),
    EventMetadata(MfaEnrollmentFailed),
    EventMetadata(MfaDisabled),
)
