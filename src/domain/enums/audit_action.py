"""Audit action types for security event tracking.

Every authentication attempt, token lifecycle change and MFA change is
recorded under one of these actions. Organized by category.

Categories:
    - Authentication: USER_LOGIN_* and MFA login actions
    - Sessions: TOKEN_* and SESSION_* actions
    - Account: registration, verification and password actions
    - MFA: enrollment and disable actions
    - Security: lockouts and replayed refresh tokens

Usage:
    from src.domain.enums import AuditAction

    await audit.record(
        action=AuditAction.USER_LOGIN_FAILED,
        user_id=account_id,
        resource_type="account",
        context={"reason": "invalid_credentials"},
    )
"""

from enum import Enum


class AuditAction(str, Enum):
    """Audit action types.

    String Enum:
        Inherits from str for easy serialization and storage.
        Values are snake_case strings for consistency.
    """

    # =========================================================================
    # Authentication
    # =========================================================================

    USER_LOGIN_ATTEMPTED = "user_login_attempted"
    """Password login attempt started (before any check)."""

    USER_LOGIN_SUCCESS = "user_login_success"
    """Password login fully succeeded (password and, if enabled, MFA)."""

    USER_LOGIN_FAILED = "user_login_failed"
    """Password login failed. Context carries the internal reason."""

    USER_MFA_CHALLENGED = "user_mfa_challenged"
    """Password verified, MFA_REQUIRED challenge issued."""

    USER_MFA_LOGIN_FAILED = "user_mfa_login_failed"
    """Second factor rejected during login."""

    USER_OAUTH_LOGIN_SUCCESS = "user_oauth_login_success"
    """Login through a third-party identity provider succeeded."""

    USER_OAUTH_LOGIN_FAILED = "user_oauth_login_failed"
    """Login through a third-party identity provider failed."""

    # =========================================================================
    # Sessions
    # =========================================================================

    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"
    SESSION_REVOKED = "session_revoked"
    SESSION_ALL_REVOKED = "session_all_revoked"

    # =========================================================================
    # Account
    # =========================================================================

    USER_REGISTERED = "user_registered"
    USER_EMAIL_VERIFIED = "user_email_verified"
    USER_PASSWORD_CHANGED = "user_password_changed"
    USER_PASSWORD_RESET_REQUESTED = "user_password_reset_requested"
    USER_PASSWORD_RESET_COMPLETED = "user_password_reset_completed"

    # =========================================================================
    # MFA
    # =========================================================================

    MFA_ENABLED = "mfa_enabled"
    MFA_ENROLLMENT_FAILED = "mfa_enrollment_failed"
    MFA_DISABLED = "mfa_disabled"

    # =========================================================================
    # Security
    # =========================================================================

    ACCOUNT_LOCKED = "account_locked"
    """Lockout threshold reached."""

    REFRESH_TOKEN_REPLAYED = "refresh_token_replayed"
    """A refresh token already revoked by rotation was presented again."""
