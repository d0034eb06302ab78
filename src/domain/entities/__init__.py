"""Domain entities."""

from src.domain.entities.account import Account
from src.domain.entities.action_token import ActionToken
from src.domain.entities.session import Session

__all__ = ["Account", "ActionToken", "Session"]
