"""SessionRepository - in-memory implementation of SessionRepository protocol.

Adapter for hexagonal architecture. ``rotate`` and ``consume`` run their
check and their revocation under the database lock, so of two concurrent
callers presenting the same token exactly one wins.
"""

import copy
from datetime import UTC, datetime
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.entities.session import Session
from src.domain.enums import RevocationReason
from src.domain.errors import StorageError, auth_error
from src.infrastructure.persistence.in_memory.database import InMemoryDatabase


class SessionRepository:
    """In-memory implementation of SessionRepository protocol.

    Example:
        >>> repo = SessionRepository(InMemoryDatabase())
        >>> await repo.create(session)
        >>> result = await repo.consume(session.token_hash)
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        """Initialize repository with the shared in-memory database.

        Args:
            db: Tables, indexes and lock.
        """
        self._db = db

    async def find_by_token_hash(self, token_hash: str) -> Session | None:
        row = self._find_row(token_hash)
        return self._to_domain(row) if row else None

    async def create(self, session: Session) -> None:
        async with self._db.lock:
            self._insert(session)

    async def rotate(
        self, predecessor_hash: str, successor: Session
    ) -> Result[Session, AuthenticationError]:
        """Revoke the predecessor and insert the successor atomically."""
        async with self._db.lock:
            row = self._find_row(predecessor_hash)
            if row is None:
                return Failure(error=auth_error(ErrorCode.TOKEN_NOT_FOUND))
            rejection = self._check_live(row)
            if rejection is not None:
                return rejection

            row.revoke(RevocationReason.ROTATION.value)
            successor.rotated_from_id = row.id
            self._insert(successor)
            return Success(value=self._to_domain(row))

    async def consume(self, token_hash: str) -> Result[Session, AuthenticationError]:
        """Check liveness and revoke atomically."""
        async with self._db.lock:
            row = self._find_row(token_hash)
            if row is None:
                return Failure(error=auth_error(ErrorCode.TOKEN_NOT_FOUND))
            rejection = self._check_live(row)
            if rejection is not None:
                return rejection

            row.revoke(RevocationReason.CONSUMED.value)
            return Success(value=self._to_domain(row))

    async def revoke(self, token_hash: str, reason: str) -> Session | None:
        async with self._db.lock:
            row = self._find_row(token_hash)
            if row is None:
                return None
            row.revoke(reason)
            return self._to_domain(row)

    async def revoke_all_for_account(self, account_id: UUID, reason: str) -> int:
        async with self._db.lock:
            now = datetime.now(UTC)
            revoked = 0
            for row in self._db.sessions.values():
                if row.account_id == account_id and row.is_live(now):
                    row.revoke(reason)
                    revoked += 1
            return revoked

    async def list_live_for_account(self, account_id: UUID) -> list[Session]:
        now = datetime.now(UTC)
        rows = [
            row
            for row in self._db.sessions.values()
            if row.account_id == account_id and row.is_live(now)
        ]
        rows.sort(key=lambda row: row.created_at, reverse=True)
        return [self._to_domain(row) for row in rows]

    def _find_row(self, token_hash: str) -> Session | None:
        session_id = self._db.session_ids_by_hash.get(token_hash)
        return self._db.sessions.get(session_id) if session_id else None

    def _insert(self, session: Session) -> None:
        if session.token_hash in self._db.session_ids_by_hash:
            raise StorageError("refresh token hash collision")
        self._db.sessions[session.id] = copy.deepcopy(session)
        self._db.session_ids_by_hash[session.token_hash] = session.id

    @staticmethod
    def _check_live(row: Session) -> Failure[AuthenticationError] | None:
        """Rejection for a session that cannot be exchanged, else None.

        Revoked is reported before expired.
        """
        details = {"session_id": str(row.id), "account_id": str(row.account_id)}
        if row.is_revoked:
            details["revoked_reason"] = row.revoked_reason or ""
            return Failure(error=auth_error(ErrorCode.TOKEN_REVOKED, details=details))
        if row.is_expired():
            return Failure(error=auth_error(ErrorCode.TOKEN_EXPIRED, details=details))
        return None

    @staticmethod
    def _to_domain(row: Session) -> Session:
        return copy.deepcopy(row)
