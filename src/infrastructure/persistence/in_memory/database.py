"""In-memory database shared by the in-memory repositories.

Plays the role of the relational store: rows are detached copies of domain
entities, uniqueness is enforced through indexes, and a single
``asyncio.Lock`` gives every multi-step repository operation the atomicity a
row lock or conditional UPDATE would give in PostgreSQL.

Suitable for tests and single-process deployments only.
"""

import asyncio
from dataclasses import dataclass, field
from uuid import UUID

from src.domain.entities.account import Account
from src.domain.entities.action_token import ActionToken
from src.domain.entities.session import Session


@dataclass
class InMemoryDatabase:
    """Tables and indexes.

    Attributes:
        accounts: Account rows by id.
        account_ids_by_email: Unique index on lowercase email.
        account_ids_by_identity: Unique index on (provider value, subject id).
        sessions: Session rows by id.
        session_ids_by_hash: Unique index on refresh token hash.
        action_tokens: Action token rows by id.
        action_token_ids_by_hash: Unique index on token hash.
        lock: Serializes every write and every check-then-write.
    """

    accounts: dict[UUID, Account] = field(default_factory=dict)
    account_ids_by_email: dict[str, UUID] = field(default_factory=dict)
    account_ids_by_identity: dict[tuple[str, str], UUID] = field(default_factory=dict)
    sessions: dict[UUID, Session] = field(default_factory=dict)
    session_ids_by_hash: dict[str, UUID] = field(default_factory=dict)
    action_tokens: dict[UUID, ActionToken] = field(default_factory=dict)
    action_token_ids_by_hash: dict[str, UUID] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
