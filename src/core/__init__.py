"""Core shared kernel.

This module provides foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Base error classes and error codes
- Settings

The core module has NO dependencies on other application layers.
"""

from src.core.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    ServiceUnavailableError,
    ValidationError,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "ServiceUnavailableError",
    "Success",
    "ValidationError",
]
