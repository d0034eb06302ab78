"""Repository dependency factories.

Repositories are thin views over the shared in-memory database, so they are
created per call and cost nothing to build. Every instance returned here
sees the same rows and the same lock.
"""

from typing import TYPE_CHECKING

from src.core.container.infrastructure import get_database

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import (
        AccountRepository,
        ActionTokenRepository,
        SessionRepository,
    )


# ============================================================================
# Repository Factories
# ============================================================================


def get_account_repository() -> "AccountRepository":
    """Get account repository.

    Returns:
        AccountRepository bound to the shared database.

    Usage:
        from src.core.container import get_account_repository
        account_repo = get_account_repository()
        account = await account_repo.find_by_email("user@example.com")
    """
    from src.infrastructure.persistence.repositories import AccountRepository

    return AccountRepository(db=get_database())


def get_session_repository() -> "SessionRepository":
    """Get session repository (refresh token ledger rows)."""
    from src.infrastructure.persistence.repositories import SessionRepository

    return SessionRepository(db=get_database())


def get_action_token_repository() -> "ActionTokenRepository":
    """Get action token repository (email verification and password reset)."""
    from src.infrastructure.persistence.repositories import ActionTokenRepository

    return ActionTokenRepository(db=get_database())
