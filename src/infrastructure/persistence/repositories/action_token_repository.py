"""ActionTokenRepository - in-memory implementation.

Stores email verification and password reset tokens by SHA-256 digest.
"""

import copy
from datetime import UTC, datetime
from uuid import UUID

from src.domain.entities.action_token import ActionToken
from src.domain.enums import ActionTokenPurpose
from src.infrastructure.persistence.in_memory.database import InMemoryDatabase


class ActionTokenRepository:
    """In-memory implementation of ActionTokenRepository protocol."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def create(self, token: ActionToken) -> None:
        async with self._db.lock:
            self._db.action_tokens[token.id] = copy.deepcopy(token)
            self._db.action_token_ids_by_hash[token.token_hash] = token.id

    async def find_by_hash(
        self, token_hash: str, purpose: ActionTokenPurpose
    ) -> ActionToken | None:
        token_id = self._db.action_token_ids_by_hash.get(token_hash)
        if token_id is None:
            return None
        row = self._db.action_tokens[token_id]
        if row.purpose != purpose:
            return None
        return copy.deepcopy(row)

    async def mark_used(self, token_id: UUID) -> bool:
        """Consume a token. False if it was already used."""
        async with self._db.lock:
            row = self._db.action_tokens.get(token_id)
            if row is None or row.used_at is not None:
                return False
            row.used_at = datetime.now(UTC)
            return True
