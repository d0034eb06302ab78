"""In-memory storage backend (reference adapter and test double)."""

from src.infrastructure.persistence.in_memory.database import InMemoryDatabase

__all__ = ["InMemoryDatabase"]
