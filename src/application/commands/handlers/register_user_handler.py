"""Registration handler for User Authentication.

Flow:
1. Emit UserRegistrationAttempted event
2. Validate email/password
3. Check email uniqueness
4. Hash password
5. Create Account entity (unverified)
6. Generate email verification token (only its hash is stored)
7. Emit UserRegistrationSucceeded event (triggers email via EmailEventHandler)
8. Return Success(RegisteredAccount)

On failure:
- Emit UserRegistrationFailed event
- Return Failure(error)

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, events)
- NO infrastructure imports (repositories are injected via protocols)
- Handler orchestrates business logic without knowing persistence details
"""

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RegisterUser
from src.application.dtos import RegisteredAccount
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.entities.action_token import ActionToken
from src.domain.enums import ActionTokenPurpose
from src.domain.errors import DuplicateAccountError
from src.domain.events.auth_events import (
    UserRegistrationAttempted,
    UserRegistrationFailed,
    UserRegistrationSucceeded,
)
from src.domain.protocols import (
    AccountRepository,
    ActionTokenRepository,
    OpaqueTokenServiceProtocol,
    PasswordHashingProtocol,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.validators import validate_email, validate_strong_password
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class RegisterUserHandler:
    """Handler for user registration command.

    Follows hexagonal architecture:
    - Application layer (this handler)
    - Domain layer (Account entity, protocols)
    - Infrastructure layer (repositories, services via dependency injection)
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        action_token_repo: ActionTokenRepository,
        verification_token_service: OpaqueTokenServiceProtocol,
        password_service: PasswordHashingProtocol,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
        default_authorities: list[str],
    ) -> None:
        """Initialize registration handler with dependencies.

        Args:
            account_repo: Account repository for persistence.
            action_token_repo: Stores verification token hashes.
            verification_token_service: Generates verification tokens.
            password_service: Password hashing service.
            event_bus: Event bus for publishing domain events.
            guard: Storage time budget and fault mapping.
            default_authorities: Authorities of new accounts.
        """
        self._account_repo = account_repo
        self._action_token_repo = action_token_repo
        self._verification_token_service = verification_token_service
        self._password_service = password_service
        self._event_bus = event_bus
        self._guard = guard
        self._default_authorities = list(default_authorities)

    async def handle(
        self, cmd: RegisterUser, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[RegisteredAccount, DomainError]:
        """Handle user registration command.

        Returns:
            Success(RegisteredAccount) on successful registration.
            Failure: INVALID_EMAIL, PASSWORD_TOO_WEAK (ValidationError) or
            ACCOUNT_ALREADY_EXISTS (ConflictError).

        Side Effects:
            - Publishes UserRegistrationAttempted event (always).
            - Publishes UserRegistrationSucceeded event (on success).
            - Publishes UserRegistrationFailed event (on failure).
            - Creates Account and verification token records.
        """
        return await self._guard.run("register_user", self._register(cmd, context))

    async def _register(
        self, cmd: RegisterUser, context: RequestContext
    ) -> Result[RegisteredAccount, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Emit ATTEMPTED event
        await self._event_bus.publish(
            UserRegistrationAttempted(email=cmd.email), metadata=metadata
        )

        # Step 2: Validate input
        try:
            email = validate_email(cmd.email)
        except ValueError as e:
            return await self._fail(
                cmd.email,
                ValidationError(code=ErrorCode.INVALID_EMAIL, message=str(e), field="email"),
                metadata,
            )
        try:
            validate_strong_password(cmd.password)
        except ValueError as e:
            return await self._fail(
                email,
                ValidationError(
                    code=ErrorCode.PASSWORD_TOO_WEAK, message=str(e), field="password"
                ),
                metadata,
            )

        # Step 3: Check email uniqueness
        if await self._account_repo.find_by_email(email) is not None:
            return await self._fail(email, self._email_taken(), metadata)

        # Step 4: Hash password
        password_hash = self._password_service.hash_password(cmd.password)

        # Step 5: Create account
        account = Account(
            id=uuid7(),
            email=email,
            password_hash=password_hash,
            email_verified=False,
            authorities=list(self._default_authorities),
        )
        try:
            await self._account_repo.create(account)
        except DuplicateAccountError:
            return await self._fail(email, self._email_taken(), metadata)

        # Step 6: Verification token
        token, token_hash = self._verification_token_service.generate_token()
        await self._action_token_repo.create(
            ActionToken(
                id=uuid7(),
                account_id=account.id,
                purpose=ActionTokenPurpose.EMAIL_VERIFICATION,
                token_hash=token_hash,
                expires_at=self._verification_token_service.calculate_expiration(),
            )
        )

        # Step 7: Emit SUCCEEDED event
        await self._event_bus.publish(
            UserRegistrationSucceeded(
                user_id=account.id, email=account.email, verification_token=token
            ),
            metadata=metadata,
        )

        # Step 8: Return Success
        return Success(value=RegisteredAccount(user_id=account.id, email=account.email))

    @staticmethod
    def _email_taken() -> ConflictError:
        return ConflictError(
            code=ErrorCode.ACCOUNT_ALREADY_EXISTS,
            message="Email already registered",
            resource_type="account",
            conflicting_field="email",
        )

    async def _fail(
        self, email: str, error: DomainError, metadata: dict[str, str]
    ) -> Failure[DomainError]:
        await self._event_bus.publish(
            UserRegistrationFailed(email=email, reason=error.code.value),
            metadata=metadata,
        )
        return Failure(error=error)
