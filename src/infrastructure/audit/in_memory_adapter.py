"""In-memory implementation of AuditProtocol.

Append-only list of immutable entries. Used by tests and single-process
deployments; a database adapter implements the same protocol in production.

Usage:
    adapter = InMemoryAuditAdapter()
    result = await adapter.record(
        action=AuditAction.USER_LOGIN_FAILED,
        resource_type="account",
        ip_address="203.0.113.0/24",
        context={"reason": "invalid_credentials"},
    )
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEntry:
    """One immutable audit record."""

    id: UUID
    action: AuditAction
    resource_type: str
    occurred_at: datetime
    user_id: UUID | None = None
    resource_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    context: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )


class InMemoryAuditAdapter:
    """In-memory implementation of AuditProtocol.

    Entries can be appended and read, never updated or deleted.

    Attributes:
        entries: Recorded entries in insertion order (read-only view).
    """

    def __init__(self, max_entries: int | None = None) -> None:
        """Initialize adapter.

        Args:
            max_entries: Optional cap; recording beyond it fails (lets
                callers exercise the audit-failure path).
        """
        self._entries: list[AuditEntry] = []
        self._max_entries = max_entries

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)

    async def record(
        self,
        *,
        action: AuditAction,
        resource_type: str,
        user_id: UUID | None = None,
        resource_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> Result[None, DomainError]:
        """Append an audit entry."""
        if self._max_entries is not None and len(self._entries) >= self._max_entries:
            return Failure(
                error=DomainError(
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    message="Audit log is full",
                )
            )

        self._entries.append(
            AuditEntry(
                id=uuid7(),
                action=action,
                resource_type=resource_type,
                occurred_at=datetime.now(UTC),
                user_id=user_id,
                resource_id=resource_id,
                ip_address=ip_address,
                user_agent=user_agent,
                context=MappingProxyType(dict(context or {})),
            )
        )
        return Success(value=None)

    def find(self, action: AuditAction) -> list[AuditEntry]:
        """Entries recorded for one action, oldest first."""
        return [entry for entry in self._entries if entry.action == action]
