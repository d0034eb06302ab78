"""Core errors package.

Exports all core-level error classes for convenient importing.

Usage:
    from src.core.errors import DomainError, AuthenticationError
"""

from src.core.errors.common_errors import (
    AuthenticationError,
    ConflictError,
    ServiceUnavailableError,
    ValidationError,
)
from src.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "ServiceUnavailableError",
]
