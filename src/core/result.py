"""Result types for railway-oriented programming.

Every engine operation returns a Result instead of raising. Failures carry a
DomainError value whose ErrorCode is the machine-readable kind.

Usage:
    result = await authenticate_handler.handle(cmd)
    match result:
        case Success(value=account):
            ...
        case Failure(error=error) if error.code == ErrorCode.ACCOUNT_LOCKED:
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
