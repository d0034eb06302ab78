"""Audit infrastructure implementations."""

from src.infrastructure.audit.in_memory_adapter import AuditEntry, InMemoryAuditAdapter

__all__ = ["AuditEntry", "InMemoryAuditAdapter"]
