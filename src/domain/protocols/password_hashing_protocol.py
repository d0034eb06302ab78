"""Password hashing protocol for domain layer.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptPasswordService)
    - No framework dependencies in domain
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Implementations:
        - BcryptPasswordService: bcrypt with configurable cost factor

    Usage:
        password_hash = password_service.hash_password("SecurePass123!")
        is_valid = password_service.verify_password("SecurePass123!", password_hash)
    """

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password.

        Args:
            password: Plaintext password to hash.

        Returns:
            Hashed password string (bcrypt format: $2b$12$...).
        """
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a hash.

        Args:
            password: Plaintext password to verify.
            password_hash: Stored hash.

        Returns:
            True if password matches hash, False otherwise.

        Note:
            - Constant-time comparison (prevents timing attacks)
            - Returns False for invalid hash format (no exceptions)
        """
        ...

    def dummy_verify(self, password: str) -> None:
        """Spend the same time as a real verification, against a fixed hash.

        Called when the account does not exist so that response time does
        not reveal whether an email is registered.
        """
        ...
