"""OpaqueTokenServiceProtocol - Port for random one-time secrets.

Implemented by RefreshTokenService (refresh tokens) and ActionTokenService
(email verification and password reset links). Only the digest is stored;
the token itself is handed to the client once.
"""

from datetime import datetime
from typing import Protocol


class OpaqueTokenServiceProtocol(Protocol):
    """Opaque token generation protocol (port)."""

    def generate_token(self) -> tuple[str, str]:
        """Generate a token.

        Returns:
            Tuple of (token, token_hash).
        """
        ...

    def hash_token(self, token: str) -> str:
        """Digest used to look a presented token up."""
        ...

    def calculate_expiration(self) -> datetime:
        """Expiry for a token issued now."""
        ...
