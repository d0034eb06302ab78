"""TOTP protocol for the MFA challenge.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (PyOTPService)
"""

from typing import Protocol


class TOTPProtocol(Protocol):
    """Time-based one-time password interface (RFC 6238).

    Parameters fixed by implementations: 6 digits, 30 second step, SHA-1,
    one step of tolerance either side of the current step.
    """

    def generate_secret(self) -> str:
        """Generate a new random Base32 secret (160 bits)."""
        ...

    def provisioning_uri(self, secret: str, account_name: str) -> str:
        """Build the ``otpauth://`` URI an authenticator app scans.

        Args:
            secret: Base32 secret.
            account_name: Label shown in the app (account email).
        """
        ...

    def verify(self, secret: str, code: str) -> bool:
        """Check a code against the secret with ±1 step tolerance.

        Returns False for malformed codes or secrets (never raises).
        """
        ...
