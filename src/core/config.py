"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables. The
signing key and every tunable of the engine (token lifetimes, lockout
threshold, MFA issuer label, storage time budget) live here and are immutable
once loaded.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Frozen after construction (the signing key cannot change at runtime)

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    ttl = settings.access_token_ttl_seconds

    # Environment detection
    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.core.enums import Environment

MIN_SECRET_KEY_BYTES = 32


class Settings(BaseSettings):
    """
    Engine settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (only for non-sensitive config)

    Returns:
        Settings: Engine configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="cc-autopay-auth",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Token signing
    secret_key: str = Field(
        description="Symmetric key for token signing (at least 32 bytes, keep secret)",
    )
    algorithm: str = Field(
        default="HS256",
        description="Token signing algorithm",
    )
    token_issuer: str = Field(
        default="cc-autopay-system",
        description="Value of the iss claim on every issued token",
    )
    token_audience: str = Field(
        default="cc-autopay-client",
        description="Value of the aud claim on every issued token",
    )
    default_authorities: Annotated[list[str], NoDecode] = Field(
        default=["ROLE_USER"],
        description="Authorities granted to accounts without explicit roles",
    )

    # Token lifetimes
    access_token_ttl_seconds: int = Field(
        default=3600,
        description="Access token lifetime in seconds",
    )
    refresh_token_ttl_seconds: int = Field(
        default=30 * 24 * 3600,
        description="Refresh token lifetime in seconds (30 days)",
    )
    mfa_challenge_ttl_seconds: int = Field(
        default=300,
        description="Lifetime of the MFA_REQUIRED challenge token issued at login",
    )
    mfa_enrollment_ttl_seconds: int = Field(
        default=600,
        description="Lifetime of the enrollment token carrying a candidate TOTP secret",
    )

    # MFA
    mfa_issuer: str = Field(
        default="CC AutoPay",
        description="Issuer label shown by authenticator apps",
    )

    # Lockout
    max_failed_attempts: int = Field(
        default=5,
        description="Consecutive password failures before the account is locked",
    )
    lockout_duration_minutes: int = Field(
        default=30,
        description="How long a lockout lasts once triggered",
    )

    # Action tokens
    password_reset_ttl_minutes: int = Field(
        default=60,
        description="Password reset token lifetime in minutes",
    )
    email_verification_ttl_hours: int = Field(
        default=24,
        description="Email verification token lifetime in hours",
    )
    verification_url_base: str = Field(
        default="https://localhost",
        description="Base URL for email verification and password reset links",
    )

    # Hashing
    bcrypt_rounds: int = Field(
        default=12,
        description="Number of bcrypt hashing rounds (10-14 recommended, 12 = ~300ms)",
    )

    # Storage
    storage_timeout_seconds: float = Field(
        default=5.0,
        description="Time budget for a single engine operation's storage calls",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """
        Reject signing keys that are too short for HS256.

        Args:
            v: Secret key.

        Returns:
            str: Validated secret key.

        Raises:
            ValueError: If key is shorter than 32 bytes.
        """
        if len(v.encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            raise ValueError(
                f"secret_key must be at least {MIN_SECRET_KEY_BYTES} bytes"
            )
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """
        Validate bcrypt rounds are within safe range.

        Args:
            v: Number of bcrypt rounds.

        Returns:
            int: Validated bcrypt rounds.

        Raises:
            ValueError: If rounds are not between 4 and 31.
        """
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator(
        "access_token_ttl_seconds",
        "refresh_token_ttl_seconds",
        "mfa_challenge_ttl_seconds",
        "mfa_enrollment_ttl_seconds",
        "max_failed_attempts",
        "lockout_duration_minutes",
        "password_reset_ttl_minutes",
        "email_verification_ttl_hours",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Lifetimes and limits must be positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("storage_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("storage_timeout_seconds must be positive")
        return v

    @field_validator("verification_url_base")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("default_authorities", mode="before")
    @classmethod
    def parse_authorities(cls, v: object) -> object:
        """
        Accept comma-separated authorities from the environment.

        Args:
            v: List of authorities or comma-separated string.

        Returns:
            List of authority names.
        """
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """
        Check if running in CI environment.

        Returns:
            bool: True if environment is CI, False otherwise.
        """
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()  # type: ignore[call-arg]  # Pydantic Settings loads from env
