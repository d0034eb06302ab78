"""Audit trail protocol (port) for security event tracking.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (InMemoryAuditAdapter, ...)
- AuditEventHandler is the only caller; it sits behind the fail-open event
  bus so an audit failure never fails an authentication operation.

Usage:
    result = await audit.record(
        action=AuditAction.USER_LOGIN_FAILED,
        resource_type="account",
        user_id=account_id,
        ip_address="203.0.113.0/24",
        user_agent="Chrome on Mac OS X",
        context={"reason": "invalid_credentials", "failed_attempts": 3},
    )
"""

from typing import Any, Protocol
from uuid import UUID

from src.core.errors import DomainError
from src.core.result import Result
from src.domain.enums import AuditAction


class AuditProtocol(Protocol):
    """Protocol for audit trail systems.

    Records immutable audit entries. Implementations MUST NOT update or
    delete entries. Entries never contain passwords, hashes, tokens or TOTP
    secrets; IP addresses and user agents arrive already coarsened.

    Error Handling:
        NEVER raise exceptions - wrap in Failure(DomainError(...)) instead.
    """

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
        """Record an immutable audit entry.

        Args:
            action: What happened.
            resource_type: What was affected (account, session, mfa).
            user_id: Account involved. None when unknown (failed lookup).
            resource_id: Specific resource identifier (session id, ...).
            ip_address: Coarse network (``203.0.113.0/24``).
            user_agent: Coarse device description.
            context: Additional event context.

        Returns:
            Success(None) if recorded, Failure(DomainError) otherwise.
        """
        ...
