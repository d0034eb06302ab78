"""Base domain event class.

Domain events represent "things that happened" in the authentication
engine and are named in past tense (UserLoginFailed, AccountLockedOut).

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (UUIDv7, time-ordered) for event tracking
    - occurred_at timestamp (UTC) for event ordering
    - All events inherit from this base class

Usage:
    >>> @dataclass(frozen=True, kw_only=True)
    >>> class UserLoginFailed(DomainEvent):
    ...     email: str
    ...     reason: str
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    All domain events MUST:
        1. Inherit from this base class
        2. Use past tense naming (UserLoginSucceeded, NOT LoginUser)
        3. Be frozen dataclasses with kw_only=True
        4. Never carry passwords, password hashes or TOTP secrets

    Attributes:
        event_id: Unique identifier for this event instance (UUIDv7).
        occurred_at: Timestamp when the event occurred (UTC).
    """

    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
