"""Container module - Centralized dependency injection.

This module re-exports all factory functions from submodules:

    from src.core.container import get_login_user_handler, get_event_bus, ...

The container is organized into modules by concern:
- infrastructure: Core services (settings, logging, storage, security adapters)
- events: Event bus and registry-driven subscriptions
- repositories: Repository factories
- auth_handlers: Application services and handler factories
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_audit,
    get_database,
    get_device_enricher,
    get_logger,
    get_notification_service,
    get_password_service,
    get_refresh_token_service,
    get_reset_token_service,
    get_settings,
    get_storage_guard,
    get_token_issuer,
    get_totp_service,
    get_verification_token_service,
)

# Event bus
from src.core.container.events import get_event_bus

# Repositories
from src.core.container.repositories import (
    get_account_repository,
    get_action_token_repository,
    get_session_repository,
)

# Application services and handlers
from src.core.container.auth_handlers import (
    get_authenticate_user_handler,
    get_begin_mfa_enrollment_handler,
    get_change_password_handler,
    get_complete_mfa_login_handler,
    get_confirm_mfa_enrollment_handler,
    get_confirm_password_reset_handler,
    get_disable_mfa_handler,
    get_generate_auth_tokens_handler,
    get_identity_linker,
    get_login_user_handler,
    get_logout_user_handler,
    get_mfa_challenge,
    get_oauth_login_handler,
    get_refresh_token_handler,
    get_register_user_handler,
    get_request_password_reset_handler,
    get_revoke_all_sessions_handler,
    get_session_ledger,
    get_verify_email_handler,
)

_SINGLETON_FACTORIES = (
    get_audit,
    get_database,
    get_device_enricher,
    get_event_bus,
    get_identity_linker,
    get_logger,
    get_mfa_challenge,
    get_notification_service,
    get_password_service,
    get_refresh_token_service,
    get_reset_token_service,
    get_session_ledger,
    get_settings,
    get_storage_guard,
    get_token_issuer,
    get_totp_service,
    get_verification_token_service,
)


def clear_container_cache() -> None:
    """Drop every cached singleton.

    The next factory call rebuilds from current settings. Used by tests that
    change environment variables or need an empty database.
    """
    for factory in _SINGLETON_FACTORIES:
        factory.cache_clear()


__all__ = [
    "clear_container_cache",
    # Infrastructure
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
    # Events
    "get_event_bus",
    # Repositories
    "get_account_repository",
    "get_action_token_repository",
    "get_session_repository",
    # Services
    "get_identity_linker",
    "get_mfa_challenge",
    "get_session_ledger",
    # Auth handlers
    "get_authenticate_user_handler",
    "get_begin_mfa_enrollment_handler",
    "get_change_password_handler",
    "get_complete_mfa_login_handler",
    "get_confirm_mfa_enrollment_handler",
    "get_confirm_password_reset_handler",
    "get_disable_mfa_handler",
    "get_generate_auth_tokens_handler",
    "get_login_user_handler",
    "get_logout_user_handler",
    "get_oauth_login_handler",
    "get_refresh_token_handler",
    "get_register_user_handler",
    "get_request_password_reset_handler",
    "get_revoke_all_sessions_handler",
    "get_verify_email_handler",
]
