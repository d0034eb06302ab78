"""Third-party identity attribute mapping."""

from src.domain.identity.provider_mappers import extract_identity

__all__ = ["extract_identity"]
