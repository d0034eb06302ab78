"""AccountRepository protocol for account persistence.

Port (interface) for hexagonal architecture.
Infrastructure layer implements this protocol.

Concurrency contract:
    - ``atomic_increment_failed_attempts`` must be a single atomic
      read-modify-write (``UPDATE ... SET n = n + 1 RETURNING n`` or a lock),
      so N concurrent failures always produce a counter of N.
    - ``save`` is optimistic: it fails with ConcurrentModificationError when
      the stored ``version`` differs from the entity's.
    - ``create`` fails with DuplicateAccountError when the email or the
      (provider, subject) pair is already taken.

All methods may raise StorageError when storage is unreachable.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.account import Account
from src.domain.enums import IdentityProvider


class AccountRepository(Protocol):
    """Account repository protocol (port).

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.
    """

    async def find_by_id(self, account_id: UUID) -> Account | None:
        """Find account by ID.

        Returns:
            Account if found, None otherwise.
        """
        ...

    async def find_by_email(self, email: str) -> Account | None:
        """Find account by email address (case-insensitive).

        Returns:
            Account if found, None otherwise.
        """
        ...

    async def find_by_provider_subject(
        self, provider: IdentityProvider, subject_id: str
    ) -> Account | None:
        """Find account linked to a third-party identity.

        Args:
            provider: Identity provider.
            subject_id: Stable subject id at the provider.

        Returns:
            Account if found, None otherwise.
        """
        ...

    async def create(self, account: Account) -> None:
        """Persist a new account.

        Raises:
            DuplicateAccountError: If email or (provider, subject) exists.
            StorageError: If storage operation fails.
        """
        ...

    async def save(self, account: Account) -> None:
        """Persist changes to an existing account and bump its version.

        Raises:
            ConcurrentModificationError: If the stored version is newer.
            StorageError: If storage operation fails.
        """
        ...

    async def atomic_increment_failed_attempts(self, account_id: UUID) -> int:
        """Atomically increment the failed login counter.

        Args:
            account_id: Account whose counter is incremented.

        Returns:
            Counter value after the increment.
        """
        ...

    async def set_lockout(self, account_id: UUID, locked_until: datetime) -> None:
        """Set the lockout expiry without touching the counter."""
        ...

    async def reset_failed_attempts(
        self, account_id: UUID, last_login_at: datetime | None = None
    ) -> None:
        """Set the counter to zero and clear any lockout.

        Args:
            account_id: Account to reset.
            last_login_at: Stamped as the last successful login when given.
        """
        ...
