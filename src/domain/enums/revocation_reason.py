"""Why a refresh-token session was revoked.

Stored on the session row and recorded in the audit trail.
"""

from enum import Enum


class RevocationReason(str, Enum):
    """Reason recorded when a session is revoked."""

    ROTATION = "rotation"
    CONSUMED = "consumed"
    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET = "password_reset"
    ACCOUNT_DISABLED = "account_disabled"
