"""One-time action token (email verification, password reset).

Only the SHA-256 hash of the emailed secret is stored. A token is consumed by
setting ``used_at``; a used or expired token is never accepted again.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import ActionTokenPurpose


@dataclass(slots=True, kw_only=True)
class ActionToken:
    """Stored one-time action token.

    Attributes:
        id: Unique identifier.
        account_id: Account the token acts on.
        purpose: What the token authorizes.
        token_hash: Hex SHA-256 of the secret sent by email.
        expires_at: Absolute expiry.
        used_at: When the token was consumed (None while unused).
        created_at: Issuance time.
    """

    id: UUID
    account_id: UUID
    purpose: ActionTokenPurpose
    token_hash: str
    expires_at: datetime
    used_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    def is_valid(self, now: datetime | None = None) -> bool:
        """Unused and not expired."""
        return not self.is_used and (now or datetime.now(UTC)) < self.expires_at

    def mark_used(self) -> None:
        self.used_at = datetime.now(UTC)
