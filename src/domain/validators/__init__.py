"""Validators package exports."""

from src.domain.validators.functions import (
    normalize_email,
    normalize_totp_code,
    validate_email,
    validate_refresh_token_format,
    validate_strong_password,
    validate_token_format,
)

__all__ = [
    "normalize_email",
    "normalize_totp_code",
    "validate_email",
    "validate_strong_password",
    "validate_token_format",
    "validate_refresh_token_format",
]
