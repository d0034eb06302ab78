"""Common error classes used across all layers.

Error Types:
- ValidationError: Input validation failures
- ConflictError: Resource conflicts (duplicates, stale writes)
- AuthenticationError: Every credential, token, MFA and identity failure
- ServiceUnavailableError: Storage or collaborator unreachable / timed out

Usage:
    from src.core.errors import AuthenticationError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=AuthenticationError(
        code=ErrorCode.ACCOUNT_LOCKED,
        message="Account is temporarily locked",
    ))
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        field: Field name that failed validation.
        details: Additional context.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (duplicate, stale optimistic write).

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        resource_type: Type of resource in conflict.
        conflicting_field: Field that has conflict (email, subject_id, etc.).
        details: Additional context.
    """

    resource_type: str
    conflicting_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (credentials, tokens, MFA, identity linking).

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        details: Additional context.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ServiceUnavailableError(DomainError):
    """A storage call or collaborator failed or exceeded its time budget.

    Never reported as a credential failure.

    Attributes:
        code: ErrorCode enum (SERVICE_UNAVAILABLE).
        message: Human-readable message.
        operation: Name of the operation that could not complete.
        details: Additional context.
    """

    operation: str | None = None
