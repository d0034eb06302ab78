"""TOTP service (adapter) backed by pyotp.

Implements TOTPProtocol.

Parameters:
    - 6 digits, 30 second step, SHA-1 (authenticator app defaults)
    - ``valid_window=1``: codes from the previous and next step are accepted,
      two steps away are rejected
    - 160-bit Base32 secrets (``pyotp.random_base32``)
"""

import binascii

import pyotp

from src.domain.validators import normalize_totp_code

VALID_WINDOW = 1


class PyOTPService:
    """TOTP secret generation and code verification.

    Usage:
        totp = PyOTPService(issuer_name="CC AutoPay")
        secret = totp.generate_secret()
        uri = totp.provisioning_uri(secret, "user@example.com")
        totp.verify(secret, "123456")
    """

    def __init__(self, issuer_name: str) -> None:
        """Initialize TOTP service.

        Args:
            issuer_name: Issuer label shown by authenticator apps.
        """
        self._issuer_name = issuer_name

    def generate_secret(self) -> str:
        return pyotp.random_base32()

    def provisioning_uri(self, secret: str, account_name: str) -> str:
        """Build the otpauth:// URI for QR enrollment.

        Example:
            >>> PyOTPService("CC AutoPay").provisioning_uri(secret, "a@b.io")
            'otpauth://totp/CC%20AutoPay:a%40b.io?secret=...&issuer=CC%20AutoPay'
        """
        return pyotp.TOTP(secret).provisioning_uri(
            name=account_name, issuer_name=self._issuer_name
        )

    def verify(self, secret: str, code: str) -> bool:
        """Verify a code with one step of tolerance either side.

        Returns:
            True if the code is valid now, False otherwise (including
            malformed codes and secrets).
        """
        try:
            normalized = normalize_totp_code(code)
        except ValueError:
            return False
        try:
            return pyotp.TOTP(secret).verify(normalized, valid_window=VALID_WINDOW)
        except (binascii.Error, ValueError):
            # Secret is not valid Base32
            return False

    def current_code(self, secret: str) -> str:
        """Code for the current step (test fixtures and support tooling)."""
        return pyotp.TOTP(secret).now()
