"""Pytest configuration and shared fixtures.

Every test gets its own InMemoryDatabase and event bus, so no state leaks
between tests. Bcrypt runs with cost factor 4 to keep the suite fast.

Fixtures come in layers:
1. Settings and infrastructure adapters (real implementations)
2. Application services (session ledger, MFA challenge, identity linker)
3. Command handlers wired the same way the container wires them
4. Helpers (create_account, published_events)
"""

from collections.abc import Awaitable, Callable
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from uuid_extensions import uuid7

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
from src.application.commands.handlers.disable_mfa_handler import DisableMfaHandler
from src.application.commands.handlers.generate_auth_tokens_handler import (
    GenerateAuthTokensHandler,
)
from src.application.commands.handlers.login_user_handler import LoginUserHandler
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.commands.handlers.oauth_login_handler import OAuthLoginHandler
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
from src.application.services import (
    IdentityLinker,
    MfaChallenge,
    SessionLedger,
    StorageGuard,
)
from src.core.config import Settings
from src.core.enums import Environment
from src.domain.entities.account import Account
from src.domain.events.base_event import DomainEvent
from src.domain.events.registry import EVENT_REGISTRY
from src.infrastructure.enrichers.device_enricher import UserAgentDeviceEnricher
from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus
from src.infrastructure.persistence.in_memory.database import InMemoryDatabase
from src.infrastructure.persistence.repositories import (
    AccountRepository,
    ActionTokenRepository,
    SessionRepository,
)
from src.infrastructure.security import (
    ActionTokenService,
    BcryptPasswordService,
    JWTService,
    PyOTPService,
    RefreshTokenService,
)

TEST_SECRET_KEY = "test-secret-key-for-hs256-signing-0123456789"
TEST_PASSWORD = "SecurePass123!"
MAX_FAILED_ATTEMPTS = 5
LOCKOUT_DURATION = timedelta(minutes=30)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests against the in-memory backend"
    )


# ============================================================================
# Settings and infrastructure
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings for tests (no environment variables needed)."""
    return Settings(
        secret_key=TEST_SECRET_KEY,
        environment=Environment.TESTING,
        bcrypt_rounds=4,
    )


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def db() -> InMemoryDatabase:
    """Fresh tables per test."""
    return InMemoryDatabase()


@pytest.fixture
def account_repo(db: InMemoryDatabase) -> AccountRepository:
    return AccountRepository(db=db)


@pytest.fixture
def session_repo(db: InMemoryDatabase) -> SessionRepository:
    return SessionRepository(db=db)


@pytest.fixture
def action_token_repo(db: InMemoryDatabase) -> ActionTokenRepository:
    return ActionTokenRepository(db=db)


@pytest.fixture(scope="session")
def password_service() -> BcryptPasswordService:
    return BcryptPasswordService(cost_factor=4)


@pytest.fixture
def token_issuer(settings: Settings) -> JWTService:
    return JWTService(
        secret_key=settings.secret_key,
        issuer=settings.token_issuer,
        audience=settings.token_audience,
        access_token_ttl_seconds=settings.access_token_ttl_seconds,
        challenge_ttl_seconds=settings.mfa_challenge_ttl_seconds,
    )


@pytest.fixture
def totp(settings: Settings) -> PyOTPService:
    return PyOTPService(issuer_name=settings.mfa_issuer)


@pytest.fixture
def refresh_token_service(settings: Settings) -> RefreshTokenService:
    return RefreshTokenService(ttl_seconds=settings.refresh_token_ttl_seconds)


@pytest.fixture
def verification_token_service() -> ActionTokenService:
    return ActionTokenService(ttl=timedelta(hours=24))


@pytest.fixture
def reset_token_service() -> ActionTokenService:
    return ActionTokenService(ttl=timedelta(hours=1))


@pytest.fixture
def event_bus(mock_logger: MagicMock) -> InMemoryEventBus:
    return InMemoryEventBus(logger=mock_logger)


@pytest.fixture
def published_events(event_bus: InMemoryEventBus) -> list[DomainEvent]:
    """Every event published on ``event_bus`` during the test, in order."""
    events: list[DomainEvent] = []

    async def collect(event: DomainEvent) -> None:
        events.append(event)

    for metadata in EVENT_REGISTRY:
        event_bus.subscribe(metadata.event_class, collect)
    return events


@pytest.fixture
def guard(mock_logger: MagicMock) -> StorageGuard:
    return StorageGuard(timeout_seconds=5.0, logger=mock_logger)


# ============================================================================
# Application services
# ============================================================================


@pytest.fixture
def session_ledger(
    session_repo: SessionRepository,
    account_repo: AccountRepository,
    refresh_token_service: RefreshTokenService,
    event_bus: InMemoryEventBus,
) -> SessionLedger:
    return SessionLedger(
        session_repo=session_repo,
        account_repo=account_repo,
        token_service=refresh_token_service,
        device_enricher=UserAgentDeviceEnricher(),
        event_bus=event_bus,
    )


@pytest.fixture
def mfa_challenge(
    account_repo: AccountRepository,
    totp: PyOTPService,
    token_issuer: JWTService,
    password_service: BcryptPasswordService,
) -> MfaChallenge:
    return MfaChallenge(
        account_repo=account_repo,
        totp=totp,
        token_issuer=token_issuer,
        password_service=password_service,
        enrollment_ttl=timedelta(minutes=10),
    )


@pytest.fixture
def identity_linker(
    account_repo: AccountRepository, mock_logger: MagicMock
) -> IdentityLinker:
    return IdentityLinker(
        account_repo=account_repo,
        default_authorities=["ROLE_USER"],
        logger=mock_logger,
    )


# ============================================================================
# Handlers
# ============================================================================


@pytest.fixture
def authenticate_handler(
    account_repo: AccountRepository,
    password_service: BcryptPasswordService,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> AuthenticateUserHandler:
    return AuthenticateUserHandler(
        account_repo=account_repo,
        password_service=password_service,
        event_bus=event_bus,
        guard=guard,
        max_failed_attempts=MAX_FAILED_ATTEMPTS,
        lockout_duration=LOCKOUT_DURATION,
    )


@pytest.fixture
def token_handler(
    token_issuer: JWTService, session_ledger: SessionLedger
) -> GenerateAuthTokensHandler:
    return GenerateAuthTokensHandler(
        token_issuer=token_issuer,
        session_ledger=session_ledger,
        default_authorities=["ROLE_USER"],
        access_token_ttl_seconds=3600,
    )


@pytest.fixture
def login_handler(
    authenticate_handler: AuthenticateUserHandler,
    token_handler: GenerateAuthTokensHandler,
    mfa_challenge: MfaChallenge,
    token_issuer: JWTService,
    account_repo: AccountRepository,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> LoginUserHandler:
    return LoginUserHandler(
        authenticate_handler=authenticate_handler,
        token_handler=token_handler,
        mfa_challenge=mfa_challenge,
        token_issuer=token_issuer,
        account_repo=account_repo,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def complete_mfa_handler(
    account_repo: AccountRepository,
    token_issuer: JWTService,
    mfa_challenge: MfaChallenge,
    authenticate_handler: AuthenticateUserHandler,
    token_handler: GenerateAuthTokensHandler,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> CompleteMfaLoginHandler:
    return CompleteMfaLoginHandler(
        account_repo=account_repo,
        token_issuer=token_issuer,
        mfa_challenge=mfa_challenge,
        authenticate_handler=authenticate_handler,
        token_handler=token_handler,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def refresh_handler(
    session_ledger: SessionLedger,
    token_issuer: JWTService,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> RefreshAccessTokenHandler:
    return RefreshAccessTokenHandler(
        session_ledger=session_ledger,
        token_issuer=token_issuer,
        event_bus=event_bus,
        guard=guard,
        default_authorities=["ROLE_USER"],
        access_token_ttl_seconds=3600,
    )


@pytest.fixture
def logout_handler(
    session_ledger: SessionLedger, event_bus: InMemoryEventBus, guard: StorageGuard
) -> LogoutUserHandler:
    return LogoutUserHandler(session_ledger=session_ledger, event_bus=event_bus, guard=guard)


@pytest.fixture
def revoke_all_handler(
    session_ledger: SessionLedger, event_bus: InMemoryEventBus, guard: StorageGuard
) -> RevokeAllSessionsHandler:
    return RevokeAllSessionsHandler(
        session_ledger=session_ledger, event_bus=event_bus, guard=guard
    )


@pytest.fixture
def oauth_handler(
    identity_linker: IdentityLinker,
    account_repo: AccountRepository,
    token_handler: GenerateAuthTokensHandler,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> OAuthLoginHandler:
    return OAuthLoginHandler(
        identity_linker=identity_linker,
        account_repo=account_repo,
        token_handler=token_handler,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def register_handler(
    account_repo: AccountRepository,
    action_token_repo: ActionTokenRepository,
    verification_token_service: ActionTokenService,
    password_service: BcryptPasswordService,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> RegisterUserHandler:
    return RegisterUserHandler(
        account_repo=account_repo,
        action_token_repo=action_token_repo,
        verification_token_service=verification_token_service,
        password_service=password_service,
        event_bus=event_bus,
        guard=guard,
        default_authorities=["ROLE_USER"],
    )


@pytest.fixture
def verify_email_handler(
    account_repo: AccountRepository,
    action_token_repo: ActionTokenRepository,
    verification_token_service: ActionTokenService,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> VerifyEmailHandler:
    return VerifyEmailHandler(
        account_repo=account_repo,
        action_token_repo=action_token_repo,
        verification_token_service=verification_token_service,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def change_password_handler(
    account_repo: AccountRepository,
    password_service: BcryptPasswordService,
    session_ledger: SessionLedger,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> ChangePasswordHandler:
    return ChangePasswordHandler(
        account_repo=account_repo,
        password_service=password_service,
        session_ledger=session_ledger,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def request_reset_handler(
    account_repo: AccountRepository,
    action_token_repo: ActionTokenRepository,
    reset_token_service: ActionTokenService,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> RequestPasswordResetHandler:
    return RequestPasswordResetHandler(
        account_repo=account_repo,
        action_token_repo=action_token_repo,
        reset_token_service=reset_token_service,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def confirm_reset_handler(
    account_repo: AccountRepository,
    action_token_repo: ActionTokenRepository,
    reset_token_service: ActionTokenService,
    password_service: BcryptPasswordService,
    session_ledger: SessionLedger,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> ConfirmPasswordResetHandler:
    return ConfirmPasswordResetHandler(
        account_repo=account_repo,
        action_token_repo=action_token_repo,
        reset_token_service=reset_token_service,
        password_service=password_service,
        session_ledger=session_ledger,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def begin_enrollment_handler(
    account_repo: AccountRepository,
    mfa_challenge: MfaChallenge,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> BeginMfaEnrollmentHandler:
    return BeginMfaEnrollmentHandler(
        account_repo=account_repo,
        mfa_challenge=mfa_challenge,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def confirm_enrollment_handler(
    account_repo: AccountRepository,
    mfa_challenge: MfaChallenge,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> ConfirmMfaEnrollmentHandler:
    return ConfirmMfaEnrollmentHandler(
        account_repo=account_repo,
        mfa_challenge=mfa_challenge,
        event_bus=event_bus,
        guard=guard,
    )


@pytest.fixture
def disable_mfa_handler(
    account_repo: AccountRepository,
    mfa_challenge: MfaChallenge,
    event_bus: InMemoryEventBus,
    guard: StorageGuard,
) -> DisableMfaHandler:
    return DisableMfaHandler(
        account_repo=account_repo,
        mfa_challenge=mfa_challenge,
        event_bus=event_bus,
        guard=guard,
    )


# ============================================================================
# Helpers
# ============================================================================


@pytest.fixture
def create_account(
    account_repo: AccountRepository, password_service: BcryptPasswordService
) -> Callable[..., Awaitable[Account]]:
    """Factory inserting a verified, active password account.

    Usage:
        account = await create_account(email="alice@example.com")
        locked = await create_account(locked_until=future, failed_login_attempts=5)
    """

    async def _create(
        email: str = "user@example.com",
        password: str | None = TEST_PASSWORD,
        **overrides,
    ) -> Account:
        fields = {
            "id": uuid7(),
            "email": email,
            "password_hash": (
                password_service.hash_password(password) if password is not None else None
            ),
            "email_verified": True,
        }
        fields.update(overrides)
        account = Account(**fields)
        await account_repo.create(account)
        return account

    return _create
