"""Centralized validation functions (DRY principle).

All validation logic defined once, reused by the Annotated types in
``src/domain/types.py`` and by command handlers that accept new secrets.
Validators are pure functions that raise ValueError on validation failure.
"""

import re

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
TOTP_CODE_PATTERN = re.compile(r"^\d{6}$")


def normalize_email(v: str) -> str:
    """Canonical form used for every email lookup (trimmed, lowercase).

    Example:
        >>> normalize_email("  User@Example.COM ")
        'user@example.com'
    """
    return v.strip().lower()


def validate_email(v: str) -> str:
    """Validate email format.

    Args:
        v: Email address to validate.

    Returns:
        Normalized email (lowercase).

    Raises:
        ValueError: If email format is invalid.

    Example:
        >>> validate_email("User@Example.COM")
        'user@example.com'
        >>> validate_email("invalid")
        ValueError: Invalid email format
    """
    normalized = normalize_email(v)
    if not EMAIL_PATTERN.match(normalized):
        raise ValueError(f"Invalid email format: {v}")
    return normalized


def validate_strong_password(v: str) -> str:
    """Validate password strength.

    Args:
        v: Password to validate.

    Returns:
        Password unchanged (validation only).

    Raises:
        ValueError: If password doesn't meet requirements.

    Example:
        >>> validate_strong_password("SecurePass123!")
        'SecurePass123!'
        >>> validate_strong_password("weak")
        ValueError: Password must be at least 8 characters
    """
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(v) > 128:
        raise ValueError("Password must be at most 128 characters")
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain uppercase letter")
    if not any(c.islower() for c in v):
        raise ValueError("Password must contain lowercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain digit")
    if not any(c in '!@#$%^&*(),.?":{}|<>' for c in v):
        raise ValueError("Password must contain special character")
    return v


def validate_token_format(v: str) -> str:
    """Validate action token format (hex string).

    Used for email verification and password reset tokens.

    Raises:
        ValueError: If token format is invalid.
    """
    if not v:
        raise ValueError("Token cannot be empty")
    if not re.match(r"^[a-fA-F0-9]+$", v):
        raise ValueError("Token must be hexadecimal")
    return v


def validate_refresh_token_format(v: str) -> str:
    """Validate refresh token format (urlsafe base64).

    Raises:
        ValueError: If token format is invalid.
    """
    if not v:
        raise ValueError("Refresh token cannot be empty")
    # urlsafe base64 uses A-Z, a-z, 0-9, -, _
    if not re.match(r"^[A-Za-z0-9_-]+$", v):
        raise ValueError("Invalid refresh token format")
    return v


def normalize_totp_code(v: str) -> str:
    """Strip the separators people type into authenticator codes.

    Args:
        v: Code as entered ("123 456", "123-456").

    Returns:
        The 6-digit code.

    Raises:
        ValueError: If the result is not exactly 6 digits.
    """
    code = v.replace(" ", "").replace("-", "")
    if not TOTP_CODE_PATTERN.match(code):
        raise ValueError("Verification code must be 6 digits")
    return code
