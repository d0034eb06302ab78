# mypy: disable-error-code="arg-type"
"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Settings (pydantic-settings, frozen)
- Logging (structlog console adapter)
- Database (in-memory tables and indexes)
- Audit trail (in-memory append-only log)
- Notifications (stub, logs instead of sending)
- Password hashing (bcrypt)
- Token signing (JWT) and TOTP (pyotp)
- Opaque tokens (refresh, email verification, password reset)
- Device enrichment (user-agents)
- Storage guard (time budget and storage error mapping)
"""

from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings

if TYPE_CHECKING:
    from src.application.services.storage_guard import StorageGuard
    from src.domain.protocols.audit_protocol import AuditProtocol
    from src.domain.protocols.device_enricher_protocol import DeviceEnricherProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.notification_protocol import NotificationProtocol
    from src.domain.protocols.opaque_token_service_protocol import (
        OpaqueTokenServiceProtocol,
    )
    from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
    from src.domain.protocols.token_issuer_protocol import TokenIssuerProtocol
    from src.domain.protocols.totp_protocol import TOTPProtocol
    from src.infrastructure.persistence.in_memory.database import InMemoryDatabase

__all__ = [
    "get_audit",
    "get_database",
    "get_device_enricher",
    "get_logger",
    "get_notification_service",
    "get_password_service",
    "get_refresh_token_service",
    "get_reset_token_service",
    "get_settings",
    "get_storage_guard",
    "get_token_issuer",
    "get_totp_service",
    "get_verification_token_service",
]


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Get logger singleton (app-scoped).

    Human-readable output in development, JSON everywhere else.

    Returns:
        Logger implementing LoggerProtocol.

    Usage:
        logger = get_logger()
        logger.info("session_rotated", session_id=str(session_id))
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_database() -> "InMemoryDatabase":
    """Get database singleton (app-scoped).

    All repositories share these tables, indexes and lock.

    Returns:
        InMemoryDatabase instance.
    """
    from src.infrastructure.persistence.in_memory.database import InMemoryDatabase

    return InMemoryDatabase()


@lru_cache()
def get_audit() -> "AuditProtocol":
    """Get audit trail singleton (app-scoped).

    Returns:
        Audit adapter implementing AuditProtocol.
    """
    from src.infrastructure.audit.in_memory_adapter import InMemoryAuditAdapter

    return InMemoryAuditAdapter()


@lru_cache()
def get_notification_service() -> "NotificationProtocol":
    """Get notification service singleton (app-scoped).

    Returns:
        Notification adapter implementing NotificationProtocol.
    """
    from src.infrastructure.email.stub_notification_service import (
        StubNotificationService,
    )

    return StubNotificationService(logger=get_logger())


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped).

    Returns:
        Password service implementing PasswordHashingProtocol.

    Usage:
        service = get_password_service()
        hashed = service.hash_password("SecurePass123!")
    """
    from src.infrastructure.security.bcrypt_password_service import (
        BcryptPasswordService,
    )

    return BcryptPasswordService(cost_factor=get_settings().bcrypt_rounds)


@lru_cache()
def get_token_issuer() -> "TokenIssuerProtocol":
    """Get JWT service singleton (app-scoped).

    The signing key, issuer and audience are read once from frozen settings.

    Returns:
        Token issuer implementing TokenIssuerProtocol.
    """
    from src.infrastructure.security.jwt_service import JWTService

    settings = get_settings()
    return JWTService(
        secret_key=settings.secret_key,
        issuer=settings.token_issuer,
        audience=settings.token_audience,
        access_token_ttl_seconds=settings.access_token_ttl_seconds,
        challenge_ttl_seconds=settings.mfa_challenge_ttl_seconds,
        algorithm=settings.algorithm,
    )


@lru_cache()
def get_totp_service() -> "TOTPProtocol":
    """Get TOTP service singleton (app-scoped)."""
    from src.infrastructure.security.totp_service import PyOTPService

    return PyOTPService(issuer_name=get_settings().mfa_issuer)


@lru_cache()
def get_refresh_token_service() -> "OpaqueTokenServiceProtocol":
    """Get refresh token service singleton (app-scoped)."""
    from src.infrastructure.security.refresh_token_service import RefreshTokenService

    return RefreshTokenService(ttl_seconds=get_settings().refresh_token_ttl_seconds)


@lru_cache()
def get_verification_token_service() -> "OpaqueTokenServiceProtocol":
    """Get email verification token service singleton (app-scoped)."""
    from src.infrastructure.security.action_token_service import ActionTokenService

    return ActionTokenService(
        ttl=timedelta(hours=get_settings().email_verification_ttl_hours)
    )


@lru_cache()
def get_reset_token_service() -> "OpaqueTokenServiceProtocol":
    """Get password reset token service singleton (app-scoped)."""
    from src.infrastructure.security.action_token_service import ActionTokenService

    return ActionTokenService(
        ttl=timedelta(minutes=get_settings().password_reset_ttl_minutes)
    )


@lru_cache()
def get_device_enricher() -> "DeviceEnricherProtocol":
    """Get device enricher singleton (app-scoped)."""
    from src.infrastructure.enrichers.device_enricher import UserAgentDeviceEnricher

    return UserAgentDeviceEnricher()


@lru_cache()
def get_storage_guard() -> "StorageGuard":
    """Get storage guard singleton (app-scoped).

    Every handler runs its storage work through this guard so that a slow or
    failing store surfaces as a typed error instead of an exception.
    """
    from src.application.services.storage_guard import StorageGuard

    return StorageGuard(
        timeout_seconds=get_settings().storage_timeout_seconds,
        logger=get_logger(),
    )
