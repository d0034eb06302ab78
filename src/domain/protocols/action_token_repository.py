"""ActionTokenRepository protocol for one-time email tokens.

Port (interface) for email verification and password reset tokens. Only the
SHA-256 hash of a token is ever stored or looked up.
"""

from typing import Protocol
from uuid import UUID

from src.domain.entities.action_token import ActionToken
from src.domain.enums import ActionTokenPurpose


class ActionTokenRepository(Protocol):
    """One-time action token repository protocol (port)."""

    async def create(self, token: ActionToken) -> None:
        """Persist a new action token."""
        ...

    async def find_by_hash(
        self, token_hash: str, purpose: ActionTokenPurpose
    ) -> ActionToken | None:
        """Find a token by hash and purpose (used or not)."""
        ...

    async def mark_used(self, token_id: UUID) -> bool:
        """Atomically mark a token used.

        Returns:
            True if this call consumed it, False if it was already used.
        """
        ...
