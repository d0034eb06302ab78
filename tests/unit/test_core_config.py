"""
Unit tests for configuration management (flat Settings).

Tests cover:
- Settings loading from environment variables
- Environment detection
- Validation (secret key length, bcrypt_rounds, positive limits, URLs)
- Default values
- Immutability
- Cached singleton behavior
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import Environment, Settings, get_settings

VALID_SECRET = "unit-test-signing-key-0123456789abcdef"


@pytest.fixture
def base_test_env():
    """Base environment dict for config tests.

    Provides minimal required settings. Tests can override specific values
    by merging with this dict.
    """
    return {"SECRET_KEY": VALID_SECRET}


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestEnvironmentEnum:
    """Test Environment enum."""

    def test_environment_values(self):
        """Test that all expected environments are defined."""
        assert Environment.DEVELOPMENT == "development"
        assert Environment.TESTING == "testing"
        assert Environment.CI == "ci"
        assert Environment.PRODUCTION == "production"


class TestSettingsValidation:
    """Test Settings field validation."""

    def test_secret_key_too_short(self, base_test_env):
        """Signing keys under 32 bytes are rejected."""
        env_values = base_test_env | {"SECRET_KEY": "short-key"}
        with patch.dict(os.environ, env_values, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings()

            errors = exc_info.value.errors()
            assert any("at least 32 bytes" in str(error) for error in errors)

    def test_bcrypt_rounds_valid(self, base_test_env):
        """Test bcrypt_rounds validation with valid values."""
        env_values = base_test_env | {"BCRYPT_ROUNDS": "10"}
        with patch.dict(os.environ, env_values, clear=True):
            settings = get_settings()
            assert settings.bcrypt_rounds == 10

    @pytest.mark.parametrize("rounds", ["3", "32"])
    def test_bcrypt_rounds_out_of_range(self, base_test_env, rounds):
        """Test bcrypt_rounds validation rejects values outside 4..31."""
        env_values = base_test_env | {"BCRYPT_ROUNDS": rounds}
        with patch.dict(os.environ, env_values, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings()

            errors = exc_info.value.errors()
            assert any(
                "bcrypt_rounds must be between 4 and 31" in str(error)
                for error in errors
            )

    @pytest.mark.parametrize(
        "name",
        [
            "ACCESS_TOKEN_TTL_SECONDS",
            "REFRESH_TOKEN_TTL_SECONDS",
            "MAX_FAILED_ATTEMPTS",
            "PASSWORD_RESET_TTL_MINUTES",
        ],
    )
    def test_limits_must_be_positive(self, base_test_env, name):
        env_values = base_test_env | {name: "0"}
        with patch.dict(os.environ, env_values, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    def test_url_trailing_slash_removed(self, base_test_env):
        """Test that trailing slashes are removed from URLs."""
        env_values = base_test_env | {"VERIFICATION_URL_BASE": "https://app.test/"}
        with patch.dict(os.environ, env_values, clear=True):
            settings = get_settings()
            assert settings.verification_url_base == "https://app.test"

    def test_authorities_parsing(self, base_test_env):
        """Comma-separated authorities are parsed into a list."""
        env_values = base_test_env | {
            "DEFAULT_AUTHORITIES": "ROLE_USER, ROLE_BETA,",
        }
        with patch.dict(os.environ, env_values, clear=True):
            settings = get_settings()
            assert settings.default_authorities == ["ROLE_USER", "ROLE_BETA"]


class TestSettingsLoading:
    """Test Settings loading from environment variables."""

    def test_settings_from_env(self, base_test_env):
        """Test that Settings loads from environment variables."""
        env_values = base_test_env | {
            "ENVIRONMENT": "testing",
            "ACCESS_TOKEN_TTL_SECONDS": "900",
            "MAX_FAILED_ATTEMPTS": "3",
            "MFA_ISSUER": "Example Bank",
        }
        with patch.dict(os.environ, env_values, clear=True):
            settings = get_settings()

            assert settings.environment == Environment.TESTING
            assert settings.secret_key == VALID_SECRET
            assert settings.access_token_ttl_seconds == 900
            assert settings.max_failed_attempts == 3
            assert settings.mfa_issuer == "Example Bank"

    def test_settings_defaults(self, base_test_env):
        """Test Settings default values."""
        with patch.dict(os.environ, base_test_env, clear=True):
            settings = get_settings()

            assert settings.environment == Environment.DEVELOPMENT  # default
            assert settings.log_level == "INFO"
            assert settings.algorithm == "HS256"
            assert settings.token_issuer == "cc-autopay-system"
            assert settings.token_audience == "cc-autopay-client"
            assert settings.default_authorities == ["ROLE_USER"]
            assert settings.access_token_ttl_seconds == 3600
            assert settings.mfa_challenge_ttl_seconds == 300
            assert settings.mfa_issuer == "CC AutoPay"
            assert settings.max_failed_attempts == 5
            assert settings.lockout_duration_minutes == 30
            assert settings.password_reset_ttl_minutes == 60
            assert settings.email_verification_ttl_hours == 24
            assert settings.bcrypt_rounds == 12

    def test_settings_required_fields(self):
        """Test that required fields must be provided."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings()

            error_fields = {error["loc"][0] for error in exc_info.value.errors()}
            assert error_fields == {"secret_key"}

    def test_settings_are_frozen(self, base_test_env):
        with patch.dict(os.environ, base_test_env, clear=True):
            settings = get_settings()

            with pytest.raises(ValidationError):
                settings.secret_key = "x" * 40


class TestEnvironmentProperties:
    """Test environment check convenience properties."""

    @pytest.mark.parametrize(
        ("value", "prop"),
        [
            ("development", "is_development"),
            ("testing", "is_testing"),
            ("ci", "is_ci"),
            ("production", "is_production"),
        ],
    )
    def test_exactly_one_environment_flag(self, base_test_env, value, prop):
        env_values = base_test_env | {"ENVIRONMENT": value}
        with patch.dict(os.environ, env_values, clear=True):
            settings = get_settings()

            flags = {
                name: getattr(settings, name)
                for name in ("is_development", "is_testing", "is_ci", "is_production")
            }
            assert flags.pop(prop) is True
            assert not any(flags.values())


class TestSettingsCaching:
    """Test Settings singleton caching behavior."""

    def test_get_settings_cached(self, base_test_env):
        """Test that get_settings returns cached instance."""
        with patch.dict(os.environ, base_test_env, clear=True):
            settings1 = get_settings()
            settings2 = get_settings()

            assert settings1 is settings2  # Same instance (cached)
