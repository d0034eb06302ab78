"""Refresh token service.

Generates opaque refresh tokens and the digest stored in their place.

Token Strategy:
    - Opaque tokens (NOT JWT)
    - 32-byte random string (urlsafe base64), 256 bits of entropy
    - Stored as SHA-256 hex digest so sessions can be looked up by token
      without keeping the token itself
    - Rotated on every use
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta

REFRESH_TOKEN_BYTES = 32


class RefreshTokenService:
    """Refresh token generation service.

    Usage:
        service = RefreshTokenService(ttl_seconds=30 * 24 * 3600)
        token, token_hash = service.generate_token()
        # Store token_hash on the session, return token to the client.
    """

    def __init__(self, ttl_seconds: int = 30 * 24 * 3600) -> None:
        """Initialize refresh token service.

        Args:
            ttl_seconds: Token lifetime (default: 30 days).
        """
        self._ttl = timedelta(seconds=ttl_seconds)

    def generate_token(self) -> tuple[str, str]:
        """Generate refresh token and its digest.

        Returns:
            Tuple of (token, token_hash).

        Example:
            >>> token, token_hash = RefreshTokenService().generate_token()
            >>> len(token)
            43
            >>> len(token_hash)
            64
        """
        token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)
        return token, self.hash_token(token)

    @staticmethod
    def hash_token(token: str) -> str:
        """SHA-256 hex digest of a refresh token."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def calculate_expiration(self) -> datetime:
        """Expiration timestamp (UTC) for a token issued now."""
        return datetime.now(UTC) + self._ttl
