"""Application layer errors.

Exports:
    ApplicationError: Caller-facing error
    to_external_error: Collapse internal errors for callers
"""

from src.application.errors.application_error import (
    ApplicationError,
    to_external_error,
)

__all__ = [
    "ApplicationError",
    "to_external_error",
]
