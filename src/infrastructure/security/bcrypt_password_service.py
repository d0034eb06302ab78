"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol using bcrypt.

Security:
    - Bcrypt with configurable cost factor (12 in production, ~250ms)
    - Constant-time comparison via bcrypt.checkpw
    - Inputs longer than 72 bytes are truncated to bcrypt's limit, the same
      way on hash and on verify
    - ``dummy_verify`` keeps unknown-email logins as slow as real ones

Performance:
    - Cost factor is logarithmic: each +1 doubles computation time
    - Tests run with cost factor 4
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from src.core.container import get_password_service

        password_service = get_password_service()
        password_hash = password_service.hash_password("SecurePass123!")
        is_valid = password_service.verify_password("SecurePass123!", password_hash)
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor (default: 12).

        Raises:
            ValueError: If cost factor is outside bcrypt's 4-31 range.
        """
        if not 4 <= cost_factor <= 31:
            msg = "Cost factor must be between 4 and 31"
            raise ValueError(msg)

        self._cost_factor = cost_factor
        self._dummy_hash: bytes | None = None

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password using bcrypt.

        Returns:
            Hashed password string (bcrypt format: $2b$12$...).

        Example:
            >>> service = BcryptPasswordService(cost_factor=12)
            >>> hash1 = service.hash_password("SecurePass123!")
            >>> hash2 = service.hash_password("SecurePass123!")
            >>> hash1 != hash2  # Different salts
            True
        """
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns:
            True if password matches hash, False otherwise (including
            malformed hashes).
        """
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode("utf-8"))
        except (ValueError, AttributeError):
            # Invalid hash format: fail closed
            return False

    def dummy_verify(self, password: str) -> None:
        """Run a full-cost comparison against a throwaway hash."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(
                b"timing-equalizer", bcrypt.gensalt(rounds=self._cost_factor)
            )
        bcrypt.checkpw(self._encode(password), self._dummy_hash)

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]
