"""Third-party identity providers supported for OAuth2 login.

Closed set: adding a provider means adding a variant here and a mapper in
``src/domain/identity/provider_mappers.py``. Unknown provider names
are rejected at the boundary by ``IdentityProvider.parse``.
"""

from enum import Enum


class IdentityProvider(str, Enum):
    """Supported OAuth2 identity providers."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    GITHUB = "github"

    @classmethod
    def parse(cls, name: str) -> "IdentityProvider | None":
        """Resolve a provider name case-insensitively.

        Args:
            name: Provider registration id (e.g. "google", "GitHub").

        Returns:
            Matching provider, or None if the name is not supported.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        """Name used in user-facing conflict messages."""
        return {
            IdentityProvider.GOOGLE: "Google",
            IdentityProvider.FACEBOOK: "Facebook",
            IdentityProvider.GITHUB: "GitHub",
        }[self]
