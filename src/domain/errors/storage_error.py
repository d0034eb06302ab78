"""Storage failure raised by repository adapters.

Repositories are the only components allowed to raise. The storage guard
in the application layer turns this exception into a SERVICE_UNAVAILABLE
Failure, so a database outage is never reported as bad credentials.
"""


class StorageError(Exception):
    """Persistent storage unreachable or rejected the operation."""


class ConcurrentModificationError(StorageError):
    """Optimistic concurrency check failed (stale ``version``)."""


class DuplicateAccountError(StorageError):
    """Uniqueness constraint on email or (provider, subject) violated."""
