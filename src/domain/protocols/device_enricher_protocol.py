"""Device enricher protocol.

Turns a raw User-Agent header into a coarse device label for session
listings. Implementations must never raise.
"""

from typing import Protocol


class DeviceEnricherProtocol(Protocol):
    """User agent to device label ("Chrome on Mac OS X")."""

    def describe(self, user_agent: str | None) -> str | None:
        """Coarse device description, or None when nothing is known."""
        ...
