"""AccountRepository - in-memory implementation of AccountRepository protocol.

Adapter for hexagonal architecture. Rows are stored as detached copies so
callers never share mutable state with storage, exactly like entities mapped
from database models.

Column ownership:
    ``save`` writes profile, status, password and MFA fields and is
    optimistic on ``version``. The lockout columns (``failed_login_attempts``,
    ``locked_until``) and ``last_login_at`` are written only by the dedicated
    atomic operations, so a stale entity can never roll the counter back.
"""

import copy
from datetime import datetime
from uuid import UUID

from src.domain.entities.account import Account
from src.domain.enums import IdentityProvider
from src.domain.errors import ConcurrentModificationError, DuplicateAccountError
from src.infrastructure.persistence.in_memory.database import InMemoryDatabase

ATOMIC_FIELDS = ("failed_login_attempts", "locked_until", "last_login_at")


class AccountRepository:
    """In-memory implementation of AccountRepository protocol.

    This class does NOT inherit from the protocol (structural typing).

    Example:
        >>> repo = AccountRepository(InMemoryDatabase())
        >>> await repo.create(account)
        >>> found = await repo.find_by_email("user@example.com")
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        """Initialize repository with the shared in-memory database.

        Args:
            db: Tables, indexes and lock.
        """
        self._db = db

    async def find_by_id(self, account_id: UUID) -> Account | None:
        row = self._db.accounts.get(account_id)
        return self._to_domain(row) if row else None

    async def find_by_email(self, email: str) -> Account | None:
        """Find account by email (case-insensitive)."""
        account_id = self._db.account_ids_by_email.get(email.strip().lower())
        if account_id is None:
            return None
        return self._to_domain(self._db.accounts[account_id])

    async def find_by_provider_subject(
        self, provider: IdentityProvider, subject_id: str
    ) -> Account | None:
        account_id = self._db.account_ids_by_identity.get((provider.value, subject_id))
        if account_id is None:
            return None
        return self._to_domain(self._db.accounts[account_id])

    async def create(self, account: Account) -> None:
        """Insert a new account.

        Raises:
            DuplicateAccountError: If email or (provider, subject) is taken.
        """
        email_key = account.email.strip().lower()
        identity_key = self._identity_key(account)

        async with self._db.lock:
            if email_key in self._db.account_ids_by_email:
                raise DuplicateAccountError(f"email already registered: {email_key}")
            if identity_key and identity_key in self._db.account_ids_by_identity:
                raise DuplicateAccountError("identity already linked")

            self._db.accounts[account.id] = self._to_row(account)
            self._db.account_ids_by_email[email_key] = account.id
            if identity_key:
                self._db.account_ids_by_identity[identity_key] = account.id

    async def save(self, account: Account) -> None:
        """Persist changes and bump the version.

        Raises:
            ConcurrentModificationError: If the stored version moved on.
            DuplicateAccountError: If a new (provider, subject) link is taken.
        """
        async with self._db.lock:
            row = self._db.accounts.get(account.id)
            if row is None:
                raise ConcurrentModificationError(f"account {account.id} not found")
            if row.version != account.version:
                raise ConcurrentModificationError(
                    f"account {account.id} version {account.version} is stale"
                )

            identity_key = self._identity_key(account)
            if identity_key:
                owner = self._db.account_ids_by_identity.get(identity_key)
                if owner is not None and owner != account.id:
                    raise DuplicateAccountError("identity already linked")
                self._db.account_ids_by_identity[identity_key] = account.id

            updated = self._to_row(account)
            for name in ATOMIC_FIELDS:
                setattr(updated, name, getattr(row, name))
            updated.version = row.version + 1
            self._db.accounts[account.id] = updated
            account.version = updated.version

    async def atomic_increment_failed_attempts(self, account_id: UUID) -> int:
        async with self._db.lock:
            row = self._db.accounts[account_id]
            row.failed_login_attempts += 1
            return row.failed_login_attempts

    async def set_lockout(self, account_id: UUID, locked_until: datetime) -> None:
        async with self._db.lock:
            self._db.accounts[account_id].locked_until = locked_until

    async def reset_failed_attempts(
        self, account_id: UUID, last_login_at: datetime | None = None
    ) -> None:
        async with self._db.lock:
            row = self._db.accounts[account_id]
            row.failed_login_attempts = 0
            row.locked_until = None
            if last_login_at is not None:
                row.last_login_at = last_login_at

    @staticmethod
    def _identity_key(account: Account) -> tuple[str, str] | None:
        if account.identity_provider is None or account.provider_subject_id is None:
            return None
        return (account.identity_provider.value, account.provider_subject_id)

    @staticmethod
    def _to_domain(row: Account) -> Account:
        return copy.deepcopy(row)

    @staticmethod
    def _to_row(account: Account) -> Account:
        row = copy.deepcopy(account)
        row.email = row.email.strip().lower()
        return row
