"""Engine error codes (machine-readable).

Error codes follow ENTITY_REASON naming convention and are carried by every
DomainError returned inside a Failure.

Categories:
- Credential errors (INVALID_CREDENTIALS, ACCOUNT_*)
- Token errors (TOKEN_*, INVALID_REFRESH_TOKEN)
- MFA errors (INVALID_MFA_CODE, MFA_*)
- Identity linking errors (MISSING_REQUIRED_IDENTITY_ATTRIBUTE, ...)
- Validation errors (INVALID_EMAIL, PASSWORD_TOO_WEAK, ...)
- Infrastructure errors (SERVICE_UNAVAILABLE, INTERNAL_ERROR)

Some codes are internal only. ``to_external_error`` in the application layer
collapses them before anything reaches a caller (for example
ACCOUNT_NOT_FOUND becomes INVALID_CREDENTIALS).
"""

from enum import Enum


class ErrorCode(Enum):
    """Engine error codes (machine-readable)."""

    # Credential errors
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_NOT_FOUND = "account_not_found"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_NOT_VERIFIED = "account_not_verified"
    ACCOUNT_INACTIVE = "account_inactive"
    ACCOUNT_ALREADY_EXISTS = "account_already_exists"

    # Token errors
    TOKEN_EXPIRED = "token_expired"
    TOKEN_REVOKED = "token_revoked"
    TOKEN_NOT_FOUND = "token_not_found"
    TOKEN_MALFORMED = "token_malformed"
    TOKEN_SIGNATURE_INVALID = "token_signature_invalid"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"

    # MFA errors
    INVALID_MFA_CODE = "invalid_mfa_code"
    MFA_ALREADY_ENABLED = "mfa_already_enabled"
    MFA_NOT_ENABLED = "mfa_not_enabled"

    # Identity linking errors
    MISSING_REQUIRED_IDENTITY_ATTRIBUTE = "missing_required_identity_attribute"
    UNSUPPORTED_IDENTITY_PROVIDER = "unsupported_identity_provider"

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    PASSWORD_TOO_WEAK = "password_too_weak"
    VALIDATION_FAILED = "validation_failed"

    # Infrastructure errors
    AUDIT_RECORD_FAILED = "audit_record_failed"
    SERVICE_UNAVAILABLE = "service_unavailable"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    INTERNAL_ERROR = "internal_error"
