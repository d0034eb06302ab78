"""Account domain entity for authentication.

Pure business logic, no framework dependencies.

An Account is the local identity a person logs in as, either with a password
or through a third-party identity provider. The brute-force lockout state
(``failed_login_attempts`` and ``locked_until``) lives on the account.

Lockout:
    - The counter is incremented atomically by the repository, never here,
      so concurrent failures cannot lose updates.
    - ``lock_until`` is set once the counter reaches the configured threshold.
    - The counter is only reset by a successful full authentication.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import AccountStatus, IdentityProvider


@dataclass(slots=True, kw_only=True)
class Account:
    """Account domain entity with authentication business rules.

    Business Rules:
        - Email verification required before password login
        - Only ACTIVE accounts may authenticate
        - Accounts created through an identity provider have no password
        - One (provider, subject) pair maps to at most one account

    Attributes:
        id: Unique account identifier (UUIDv7).
        email: Lowercase email address, unique across accounts.
        password_hash: Bcrypt hash, or None for provider-only accounts.
        status: Lifecycle status.
        email_verified: Whether the email address has been confirmed.
        failed_login_attempts: Consecutive failed password attempts.
        locked_until: Lockout expiry (None if never locked).
        mfa_enabled: Whether a TOTP second factor is required.
        mfa_secret: Base32 TOTP secret (None unless MFA is enabled).
        identity_provider: Provider the account was created through.
        provider_subject_id: Stable subject id at that provider.
        display_name: Name shown to the user.
        avatar_url: Avatar image from the identity provider.
        authorities: Role names placed in access tokens.
        version: Optimistic concurrency version, bumped on every save.
        last_login_at: Time of the last successful full authentication.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.

    Example:
        >>> account = Account(id=uuid7(), email="user@example.com",
        ...                   password_hash="$2b$12$...")
        >>> account.is_locked()
        False
    """

    id: UUID
    email: str
    password_hash: str | None = None
    status: AccountStatus = AccountStatus.ACTIVE
    email_verified: bool = False
    failed_login_attempts: int = 0
    locked_until: datetime | None = None

    # Second factor
    mfa_enabled: bool = False
    mfa_secret: str | None = None

    # Third-party identity
    identity_provider: IdentityProvider | None = None
    provider_subject_id: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None

    authorities: list[str] = field(default_factory=list)
    version: int = 0
    last_login_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_active(self) -> bool:
        """True if the account status allows authentication."""
        return self.status == AccountStatus.ACTIVE

    @property
    def auth_method(self) -> str:
        """How this account signs in, used in conflict messages.

        Returns:
            Provider display name (e.g. "Google") or "email and password".
        """
        if self.identity_provider is not None:
            return self.identity_provider.display_name
        return "email and password"

    def is_locked(self, now: datetime | None = None) -> bool:
        """Check if account is currently locked out.

        Account is locked if ``locked_until`` is in the future.

        Args:
            now: Reference time (defaults to current UTC time).

        Returns:
            bool: True if account is locked, False otherwise.
        """
        if self.locked_until is None:
            return False
        return (now or datetime.now(UTC)) < self.locked_until

    def reset_failed_login(self) -> None:
        """Reset lockout state after a successful full authentication.

        Side Effects:
            - Resets failed_login_attempts to 0
            - Clears locked_until
        """
        self.failed_login_attempts = 0
        self.locked_until = None

    def record_login(self) -> None:
        """Stamp a successful full authentication."""
        self.reset_failed_login()
        self.last_login_at = datetime.now(UTC)
        self.updated_at = self.last_login_at

    def enable_mfa(self, secret: str) -> None:
        """Commit a verified TOTP secret to the account."""
        self.mfa_enabled = True
        self.mfa_secret = secret
        self.updated_at = datetime.now(UTC)

    def disable_mfa(self) -> None:
        """Turn off the second factor and discard its secret."""
        self.mfa_enabled = False
        self.mfa_secret = None
        self.updated_at = datetime.now(UTC)

    def change_password(self, password_hash: str) -> None:
        """Replace the stored password hash."""
        self.password_hash = password_hash
        self.updated_at = datetime.now(UTC)

    def mark_email_verified(self) -> None:
        """Mark the email address as confirmed."""
        self.email_verified = True
        self.updated_at = datetime.now(UTC)
