"""Domain errors package.

Usage:
    from src.domain.errors import auth_error, StorageError
"""

from src.domain.errors.authentication_error import AUTH_ERROR_MESSAGES, auth_error
from src.domain.errors.storage_error import (
    ConcurrentModificationError,
    DuplicateAccountError,
    StorageError,
)

__all__ = [
    "AUTH_ERROR_MESSAGES",
    "auth_error",
    "ConcurrentModificationError",
    "DuplicateAccountError",
    "StorageError",
]
