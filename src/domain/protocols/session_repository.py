"""SessionRepository protocol for refresh-token session persistence.

Port (interface) for hexagonal architecture. Sessions are looked up by the
SHA-256 hash of the refresh token; the token itself is never stored.

Atomicity contract:
    ``rotate`` and ``consume`` each check-and-revoke in one atomic step
    (row lock or conditional update). Two concurrent callers presenting the
    same token: exactly one sees Success, the other sees the token as
    revoked. This is what keeps refresh tokens single-use.

All methods may raise StorageError when storage is unreachable.
"""

from typing import Protocol
from uuid import UUID

from src.core.errors import AuthenticationError
from src.core.result import Result
from src.domain.entities.session import Session


class SessionRepository(Protocol):
    """Refresh-token session repository protocol (port)."""

    async def find_by_token_hash(self, token_hash: str) -> Session | None:
        """Find session by refresh token hash (live or not)."""
        ...

    async def create(self, session: Session) -> None:
        """Insert a new session (no predecessor)."""
        ...

    async def rotate(
        self, predecessor_hash: str, successor: Session
    ) -> Result[Session, AuthenticationError]:
        """Revoke the predecessor (reason ``rotation``) and insert the successor.

        Single atomic step. The successor's ``rotated_from_id`` is set to the
        predecessor's id.

        Args:
            predecessor_hash: Hash of the refresh token being exchanged.
            successor: New session to insert.

        Returns:
            Success(revoked predecessor) or Failure with TOKEN_NOT_FOUND,
            TOKEN_REVOKED (checked first) or TOKEN_EXPIRED. Nothing is
            written on failure.
        """
        ...

    async def consume(self, token_hash: str) -> Result[Session, AuthenticationError]:
        """Check the session is live and revoke it (reason ``consumed``).

        Returns:
            Success(consumed session) or Failure with TOKEN_NOT_FOUND,
            TOKEN_REVOKED (checked first) or TOKEN_EXPIRED.
        """
        ...

    async def revoke(self, token_hash: str, reason: str) -> Session | None:
        """Revoke a session by token hash. Idempotent.

        Returns:
            The session (revoked now or earlier), or None if unknown.
        """
        ...

    async def revoke_all_for_account(self, account_id: UUID, reason: str) -> int:
        """Revoke every live session of an account in one pass.

        Returns:
            Number of sessions revoked by this call.
        """
        ...

    async def list_live_for_account(self, account_id: UUID) -> list[Session]:
        """All live sessions of an account, newest first."""
        ...
