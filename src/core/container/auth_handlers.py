"""Authentication handler dependency factories.

Handler instances for the engine's operations:
- Registration, email verification
- Login (password, MFA completion, OAuth identity)
- Token refresh, logout, revoke-all
- Password change and reset (request and confirm)
- MFA enrollment and disable

Shared services (session ledger, MFA challenge, identity linker) are
application-scoped singletons. Handlers are cheap and created per call.
"""

from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.container.events import get_event_bus
from src.core.container.infrastructure import (
    get_device_enricher,
    get_logger,
    get_password_service,
    get_refresh_token_service,
    get_reset_token_service,
    get_settings,
    get_storage_guard,
    get_token_issuer,
    get_totp_service,
    get_verification_token_service,
)
from src.core.container.repositories import (
    get_account_repository,
    get_action_token_repository,
    get_session_repository,
)

if TYPE_CHECKING:
    from src.application.commands.handlers.authenticate_user_handler import (
        AuthenticateUserHandler,
    )
    from src.application.commands.handlers.begin_mfa_enrollment_handler import (
        BeginMfaEnrollmentHandler,
    )
    from src.application.commands.handlers.change_password_handler import (
        ChangePasswordHandler,
    )
    from src.application.commands.handlers.complete_mfa_login_handler import (
        CompleteMfaLoginHandler,
    )
    from src.application.commands.handlers.confirm_mfa_enrollment_handler import (
        ConfirmMfaEnrollmentHandler,
    )
    from src.application.commands.handlers.confirm_password_reset_handler import (
        ConfirmPasswordResetHandler,
    )
    from src.application.commands.handlers.disable_mfa_handler import (
        DisableMfaHandler,
    )
    from src.application.commands.handlers.generate_auth_tokens_handler import (
        GenerateAuthTokensHandler,
    )
    from src.application.commands.handlers.login_user_handler import LoginUserHandler
    from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
    from src.application.commands.handlers.oauth_login_handler import (
        OAuthLoginHandler,
    )
    from src.application.commands.handlers.refresh_access_token_handler import (
        RefreshAccessTokenHandler,
    )
    from src.application.commands.handlers.register_user_handler import (
        RegisterUserHandler,
    )
    from src.application.commands.handlers.request_password_reset_handler import (
        RequestPasswordResetHandler,
    )
    from src.application.commands.handlers.revoke_all_sessions_handler import (
        RevokeAllSessionsHandler,
    )
    from src.application.commands.handlers.verify_email_handler import (
        VerifyEmailHandler,
    )
    from src.application.services.identity_linker import IdentityLinker
    from src.application.services.mfa_challenge import MfaChallenge
    from src.application.services.session_ledger import SessionLedger


# ============================================================================
# Application Services (Singletons)
# ============================================================================


@lru_cache()
def get_session_ledger() -> "SessionLedger":
    """Get session ledger singleton (app-scoped).

    Owns refresh token rotation, consumption and revocation.
    """
    from src.application.services.session_ledger import SessionLedger

    return SessionLedger(
        session_repo=get_session_repository(),
        account_repo=get_account_repository(),
        token_service=get_refresh_token_service(),
        device_enricher=get_device_enricher(),
        event_bus=get_event_bus(),
    )


@lru_cache()
def get_mfa_challenge() -> "MfaChallenge":
    """Get MFA challenge singleton (app-scoped)."""
    from src.application.services.mfa_challenge import MfaChallenge

    return MfaChallenge(
        account_repo=get_account_repository(),
        totp=get_totp_service(),
        token_issuer=get_token_issuer(),
        password_service=get_password_service(),
        enrollment_ttl=timedelta(seconds=get_settings().mfa_enrollment_ttl_seconds),
    )


@lru_cache()
def get_identity_linker() -> "IdentityLinker":
    """Get identity linker singleton (app-scoped)."""
    from src.application.services.identity_linker import IdentityLinker

    return IdentityLinker(
        account_repo=get_account_repository(),
        default_authorities=list(get_settings().default_authorities),
        logger=get_logger(),
    )


# ============================================================================
# Authentication Handler Factories
# ============================================================================


def get_register_user_handler() -> "RegisterUserHandler":
    """Get RegisterUser command handler.

    Returns:
        RegisterUserHandler instance.

    Usage:
        handler = get_register_user_handler()
        result = await handler.handle(RegisterUser(email=..., password=...))
    """
    from src.application.commands.handlers.register_user_handler import (
        RegisterUserHandler,
    )

    return RegisterUserHandler(
        account_repo=get_account_repository(),
        action_token_repo=get_action_token_repository(),
        verification_token_service=get_verification_token_service(),
        password_service=get_password_service(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
        default_authorities=list(get_settings().default_authorities),
    )


def get_verify_email_handler() -> "VerifyEmailHandler":
    from src.application.commands.handlers.verify_email_handler import (
        VerifyEmailHandler,
    )

    return VerifyEmailHandler(
        account_repo=get_account_repository(),
        action_token_repo=get_action_token_repository(),
        verification_token_service=get_verification_token_service(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_authenticate_user_handler() -> "AuthenticateUserHandler":
    """Get AuthenticateUser command handler (credential gate).

    Lockout threshold and duration come from settings.
    """
    from src.application.commands.handlers.authenticate_user_handler import (
        AuthenticateUserHandler,
    )

    settings = get_settings()
    return AuthenticateUserHandler(
        account_repo=get_account_repository(),
        password_service=get_password_service(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
        max_failed_attempts=settings.max_failed_attempts,
        lockout_duration=timedelta(minutes=settings.lockout_duration_minutes),
    )


def get_generate_auth_tokens_handler() -> "GenerateAuthTokensHandler":
    """Get GenerateAuthTokens handler (access token plus rotated refresh token)."""
    from src.application.commands.handlers.generate_auth_tokens_handler import (
        GenerateAuthTokensHandler,
    )

    settings = get_settings()
    return GenerateAuthTokensHandler(
        token_issuer=get_token_issuer(),
        session_ledger=get_session_ledger(),
        default_authorities=list(settings.default_authorities),
        access_token_ttl_seconds=settings.access_token_ttl_seconds,
    )


def get_login_user_handler() -> "LoginUserHandler":
    """Get LoginUser command handler.

    Orchestrates credential gate, MFA decision and token issuance.
    """
    from src.application.commands.handlers.login_user_handler import LoginUserHandler

    return LoginUserHandler(
        authenticate_handler=get_authenticate_user_handler(),
        token_handler=get_generate_auth_tokens_handler(),
        mfa_challenge=get_mfa_challenge(),
        token_issuer=get_token_issuer(),
        account_repo=get_account_repository(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_complete_mfa_login_handler() -> "CompleteMfaLoginHandler":
    from src.application.commands.handlers.complete_mfa_login_handler import (
        CompleteMfaLoginHandler,
    )

    return CompleteMfaLoginHandler(
        account_repo=get_account_repository(),
        token_issuer=get_token_issuer(),
        mfa_challenge=get_mfa_challenge(),
        authenticate_handler=get_authenticate_user_handler(),
        token_handler=get_generate_auth_tokens_handler(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_oauth_login_handler() -> "OAuthLoginHandler":
    from src.application.commands.handlers.oauth_login_handler import (
        OAuthLoginHandler,
    )

    return OAuthLoginHandler(
        identity_linker=get_identity_linker(),
        account_repo=get_account_repository(),
        token_handler=get_generate_auth_tokens_handler(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_refresh_token_handler() -> "RefreshAccessTokenHandler":
    """Get RefreshAccessToken command handler (rotation on every use)."""
    from src.application.commands.handlers.refresh_access_token_handler import (
        RefreshAccessTokenHandler,
    )

    settings = get_settings()
    return RefreshAccessTokenHandler(
        session_ledger=get_session_ledger(),
        token_issuer=get_token_issuer(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
        default_authorities=list(settings.default_authorities),
        access_token_ttl_seconds=settings.access_token_ttl_seconds,
    )


def get_logout_user_handler() -> "LogoutUserHandler":
    from src.application.commands.handlers.logout_user_handler import LogoutUserHandler

    return LogoutUserHandler(
        session_ledger=get_session_ledger(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_revoke_all_sessions_handler() -> "RevokeAllSessionsHandler":
    from src.application.commands.handlers.revoke_all_sessions_handler import (
        RevokeAllSessionsHandler,
    )

    return RevokeAllSessionsHandler(
        session_ledger=get_session_ledger(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_change_password_handler() -> "ChangePasswordHandler":
    from src.application.commands.handlers.change_password_handler import (
        ChangePasswordHandler,
    )

    return ChangePasswordHandler(
        account_repo=get_account_repository(),
        password_service=get_password_service(),
        session_ledger=get_session_ledger(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_request_password_reset_handler() -> "RequestPasswordResetHandler":
    """Get RequestPasswordReset command handler.

    Unknown addresses succeed silently, so the handler cannot be used to
    probe which emails have accounts.
    """
    from src.application.commands.handlers.request_password_reset_handler import (
        RequestPasswordResetHandler,
    )

    return RequestPasswordResetHandler(
        account_repo=get_account_repository(),
        action_token_repo=get_action_token_repository(),
        reset_token_service=get_reset_token_service(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_confirm_password_reset_handler() -> "ConfirmPasswordResetHandler":
    from src.application.commands.handlers.confirm_password_reset_handler import (
        ConfirmPasswordResetHandler,
    )

    return ConfirmPasswordResetHandler(
        account_repo=get_account_repository(),
        action_token_repo=get_action_token_repository(),
        reset_token_service=get_reset_token_service(),
        password_service=get_password_service(),
        session_ledger=get_session_ledger(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_begin_mfa_enrollment_handler() -> "BeginMfaEnrollmentHandler":
    from src.application.commands.handlers.begin_mfa_enrollment_handler import (
        BeginMfaEnrollmentHandler,
    )

    return BeginMfaEnrollmentHandler(
        account_repo=get_account_repository(),
        mfa_challenge=get_mfa_challenge(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_confirm_mfa_enrollment_handler() -> "ConfirmMfaEnrollmentHandler":
    from src.application.commands.handlers.confirm_mfa_enrollment_handler import (
        ConfirmMfaEnrollmentHandler,
    )

    return ConfirmMfaEnrollmentHandler(
        account_repo=get_account_repository(),
        mfa_challenge=get_mfa_challenge(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )


def get_disable_mfa_handler() -> "DisableMfaHandler":
    from src.application.commands.handlers.disable_mfa_handler import (
        DisableMfaHandler,
    )

    return DisableMfaHandler(
        account_repo=get_account_repository(),
        mfa_challenge=get_mfa_challenge(),
        event_bus=get_event_bus(),
        guard=get_storage_guard(),
    )
