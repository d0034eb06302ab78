"""Session domain entity (refresh-token record).

Pure business logic, no framework dependencies.

A Session is the server-side record backing one refresh token. Rotation
revokes the predecessor and links the successor through ``rotated_from_id``,
so a whole rotation chain stays inspectable for audit. Rows are never
deleted on revocation.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class Session:
    """Refresh-token session.

    Invariants:
        - At most one session exists per token hash.
        - Once revoked a session is never reactivated.

    Attributes:
        id: Unique session identifier (UUIDv7).
        account_id: Account the session belongs to.
        token_hash: SHA-256 hex digest of the refresh token. The token
            itself is only ever held by the client.
        expires_at: Absolute expiry.
        device_info: Parsed device description ("Chrome on Mac OS X").
        ip_address: Client IP at issuance.
        user_agent: Raw user agent at issuance.
        created_at: Issuance time.
        is_revoked: Whether the session has been revoked.
        revoked_at: Revocation time.
        revoked_reason: Why it was revoked (see RevocationReason).
        rotated_from_id: Session this one replaced, if any.
    """

    id: UUID
    account_id: UUID
    token_hash: str
    expires_at: datetime
    device_info: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_reason: str | None = None
    rotated_from_id: UUID | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the session is past its expiry."""
        return (now or datetime.now(UTC)) >= self.expires_at

    def is_live(self, now: datetime | None = None) -> bool:
        """Check if session can still be exchanged (not revoked, not expired).

        Returns:
            True if session is live, False otherwise.

        Example:
            >>> session.is_live()
            True
            >>> session.revoke("logout")
            >>> session.is_live()
            False
        """
        return not self.is_revoked and not self.is_expired(now)

    def revoke(self, reason: str) -> bool:
        """Revoke this session.

        Idempotent: revoking an already revoked session keeps the original
        timestamp and reason.

        Args:
            reason: Why the session is being revoked (RevocationReason value).

        Returns:
            True if this call revoked the session, False if it already was.
        """
        if self.is_revoked:
            return False
        self.is_revoked = True
        self.revoked_at = datetime.now(UTC)
        self.revoked_reason = reason
        return True
