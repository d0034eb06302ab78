"""Domain events module.

Events decouple authentication logic from audit, logging and email
delivery. Handlers publish after storage commits; subscribers live in
``src/infrastructure/events/handlers``.

Usage:
    >>> from src.domain.events import UserLoginFailed
    >>> await event_bus.publish(
    ...     UserLoginFailed(email=email, reason="invalid_credentials"),
    ...     metadata=context.to_metadata(),
    ... )
"""

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

__all__ = [
    "DomainEvent",
    "AccountLockedOut",
    "AllSessionsRevoked",
    "AuthTokenRefreshFailed",
    "AuthTokenRefreshSucceeded",
    "EmailVerificationFailed",
    "EmailVerificationSucceeded",
    "MfaDisabled",
    "MfaEnabled",
    "MfaEnrollmentFailed",
    "MfaEnrollmentStarted",
    "OAuthLoginAttempted",
    "OAuthLoginFailed",
    "OAuthLoginSucceeded",
    "PasswordResetConfirmFailed",
    "PasswordResetConfirmSucceeded",
    "PasswordResetRequestFailed",
    "PasswordResetRequestSucceeded",
    "RefreshTokenReplayDetected",
    "UserLoginAttempted",
    "UserLoginFailed",
    "UserLoginSucceeded",
    "UserLogoutSucceeded",
    "UserMfaChallengeIssued",
    "UserMfaLoginFailed",
    "UserPasswordChangeFailed",
    "UserPasswordChangeSucceeded",
    "UserRegistrationAttempted",
    "UserRegistrationFailed",
    "UserRegistrationSucceeded",
]
