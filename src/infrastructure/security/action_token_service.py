"""One-time action token service.

Generates email verification and password reset tokens.

Token Strategy:
    - 32-byte random hex string (64 characters)
    - Stored as SHA-256 digest, compared by digest
    - One-time use (``used_at``)
    - Password reset: 1 hour; email verification: 24 hours (configurable)
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta

ACTION_TOKEN_BYTES = 32


class ActionTokenService:
    """Action token generation service.

    Usage:
        service = ActionTokenService(ttl=timedelta(hours=1))
        token, token_hash = service.generate_token()
        reset_url = f"{settings.verification_url_base}/reset-password?token={token}"
    """

    def __init__(self, ttl: timedelta) -> None:
        self._ttl = ttl

    def generate_token(self) -> tuple[str, str]:
        """Generate a token and its digest.

        Returns:
            Tuple of (64-character hex token, SHA-256 hex digest).
        """
        token = secrets.token_hex(ACTION_TOKEN_BYTES)
        return token, self.hash_token(token)

    @staticmethod
    def hash_token(token: str) -> str:
        """SHA-256 hex digest of a token."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def calculate_expiration(self) -> datetime:
        """Expiration timestamp (UTC) for a token issued now."""
        return datetime.now(UTC) + self._ttl
