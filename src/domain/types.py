"""Annotated types with centralized validation (DRY principle).

Define validation once, use everywhere. Commands annotate their fields with
these types; any pydantic model or ``TypeAdapter`` built on them validates
through the functions in ``src/domain/validators``.

Usage:
    from src.domain.types import Email, Password

    @dataclass(frozen=True, kw_only=True)
    class RegisterUser:
        email: Email
        password: Password
"""

from typing import Annotated

from pydantic import AfterValidator, Field

from src.domain.validators import (
    normalize_totp_code,
    validate_email,
    validate_refresh_token_format,
    validate_strong_password,
    validate_token_format,
)

# ============================================================================
# Authentication Types
# ============================================================================

Email = Annotated[
    str,
    Field(
        min_length=5,
        max_length=255,
        description="Email address",
        examples=["user@example.com"],
    ),
    AfterValidator(validate_email),
]
"""Email address with validation and normalization (lowercase)."""

Password = Annotated[
    str,
    Field(
        min_length=8,
        max_length=128,
        description="Password with strength requirements",
        examples=["SecurePass123!"],
    ),
    AfterValidator(validate_strong_password),
]
"""Password with strength validation.

Requirements:
- 8 to 128 characters
- At least one uppercase letter, one lowercase letter and one digit
- At least one special character (!@#$%^&*(),.?":{}|<>)
"""

VerificationToken = Annotated[
    str,
    Field(
        min_length=16,
        max_length=128,
        description="Email verification or password reset token (hex)",
        pattern=r"^[a-fA-F0-9]+$",
    ),
    AfterValidator(validate_token_format),
]
"""Email verification or password reset token (64 hex characters)."""

RefreshToken = Annotated[
    str,
    Field(
        min_length=16,
        max_length=256,
        description="Opaque refresh token (urlsafe base64)",
        pattern=r"^[A-Za-z0-9_-]+$",
    ),
    AfterValidator(validate_refresh_token_format),
]
"""Opaque refresh token (32 random bytes, urlsafe base64)."""

TotpCode = Annotated[
    str,
    Field(
        min_length=6,
        max_length=9,
        description="Six digit authenticator code, optional space or dash separators",
        examples=["123456", "123 456"],
    ),
    AfterValidator(normalize_totp_code),
]
"""Six digit TOTP code as typed by a person."""
