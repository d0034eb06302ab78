"""Normalized identity returned by an OAuth2 provider."""

from dataclasses import dataclass

from src.domain.enums import IdentityProvider


@dataclass(frozen=True, slots=True, kw_only=True)
class IdentityProfile:
    """Provider-independent view of a third-party identity.

    Attributes:
        provider: Identity provider the attributes came from.
        subject_id: Stable user id at the provider.
        email: Email reported by the provider (normalized lowercase).
        display_name: Name reported by the provider.
        avatar_url: Picture URL, if any.
    """

    provider: IdentityProvider
    subject_id: str
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
