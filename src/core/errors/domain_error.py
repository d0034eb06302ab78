"""Base error value for railway-oriented error handling.

DomainError is the base class for every error the engine returns. Errors
flow through handlers as data inside ``Failure``; they are never raised.

Usage:
    from src.core.errors import DomainError
    from src.core.enums import ErrorCode

    @dataclass(frozen=True, slots=True, kw_only=True)
    class MyError(DomainError):
        pass  # Inherits code, message, details
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error value (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for logs and audit. Never sent to callers
            for security-sensitive codes.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"

    def is_code(self, *codes: ErrorCode) -> bool:
        """Check whether this error carries one of the given codes."""
        return self.code in codes
