"""Repository adapters.

Usage:
    from src.infrastructure.persistence.repositories import AccountRepository
"""

from src.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from src.infrastructure.persistence.repositories.action_token_repository import (
    ActionTokenRepository,
)
from src.infrastructure.persistence.repositories.session_repository import (
    SessionRepository,
)

__all__ = ["AccountRepository", "ActionTokenRepository", "SessionRepository"]
