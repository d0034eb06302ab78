"""Authentication error catalog.

Standard messages for every authentication ErrorCode and a small factory so
handlers build errors the same way everywhere.

Architecture:
    - Domain layer errors (no infrastructure dependencies)
    - Used in Result types (railway-oriented programming)
    - Never raised as exceptions (return Failure(error) instead)

Usage:
    from src.domain.errors import auth_error
    from src.core.enums import ErrorCode

    return Failure(error=auth_error(ErrorCode.ACCOUNT_LOCKED))
"""

from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError

AUTH_ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Credential errors
    ErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorCode.ACCOUNT_NOT_FOUND: "Account not found",
    ErrorCode.ACCOUNT_LOCKED: "Account is temporarily locked",
    ErrorCode.ACCOUNT_NOT_VERIFIED: "Email address not verified",
    ErrorCode.ACCOUNT_INACTIVE: "Account is not active",
    ErrorCode.ACCOUNT_ALREADY_EXISTS: "An account with this email already exists",
    # Token errors
    ErrorCode.TOKEN_EXPIRED: "Token expired",
    ErrorCode.TOKEN_REVOKED: "Token revoked",
    ErrorCode.TOKEN_NOT_FOUND: "Token not found",
    ErrorCode.TOKEN_MALFORMED: "Malformed token",
    ErrorCode.TOKEN_SIGNATURE_INVALID: "Invalid token signature",
    ErrorCode.INVALID_REFRESH_TOKEN: "Invalid refresh token",
    # MFA errors
    ErrorCode.INVALID_MFA_CODE: "Invalid verification code",
    ErrorCode.MFA_ALREADY_ENABLED: "Two-factor authentication is already enabled",
    ErrorCode.MFA_NOT_ENABLED: "Two-factor authentication is not enabled",
    # Identity linking errors
    ErrorCode.MISSING_REQUIRED_IDENTITY_ATTRIBUTE: (
        "Identity provider did not return a required attribute"
    ),
    ErrorCode.UNSUPPORTED_IDENTITY_PROVIDER: "Unsupported identity provider",
}


def auth_error(
    code: ErrorCode,
    message: str | None = None,
    details: dict[str, str] | None = None,
) -> AuthenticationError:
    """Build an AuthenticationError with the standard message for its code.

    Args:
        code: Error code.
        message: Override for the standard message.
        details: Optional context (logged and audited, not shown to callers).

    Returns:
        AuthenticationError value.
    """
    return AuthenticationError(
        code=code,
        message=message or AUTH_ERROR_MESSAGES.get(code, code.value),
        details=details,
    )
