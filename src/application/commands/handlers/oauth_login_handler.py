"""OAuth login handler.

Third-party logins bypass the credential gate and the second factor: the
identity provider already authenticated the person.

Flow:
1. Emit OAuthLoginAttempted event
2. Extract a normalized identity from the provider attributes
3. Resolve or create the local account (IdentityLinker)
4. Check the account is active and not locked
5. Issue tokens
6. Emit OAuthLoginSucceeded event
7. Return Success(AuthTokens)

On failure:
- Emit OAuthLoginFailed event
- Return Failure(error): UNSUPPORTED_IDENTITY_PROVIDER,
  MISSING_REQUIRED_IDENTITY_ATTRIBUTE, ACCOUNT_ALREADY_EXISTS,
  ACCOUNT_INACTIVE, ACCOUNT_LOCKED
"""

from datetime import UTC, datetime

from src.application.commands.auth_commands import OAuthLogin
from src.application.commands.handlers.generate_auth_tokens_handler import (
    GenerateAuthTokensHandler,
)
from src.application.dtos import AuthTokens
from src.application.services.identity_linker import IdentityLinker
from src.application.services.storage_guard import StorageGuard
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.errors import auth_error
from src.domain.events.auth_events import (
    OAuthLoginAttempted,
    OAuthLoginFailed,
    OAuthLoginSucceeded,
)
from src.domain.protocols import AccountRepository
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext


class OAuthLoginHandler:
    """Handler for third-party identity logins."""

    def __init__(
        self,
        identity_linker: IdentityLinker,
        account_repo: AccountRepository,
        token_handler: GenerateAuthTokensHandler,
        event_bus: EventBusProtocol,
        guard: StorageGuard,
    ) -> None:
        self._identity_linker = identity_linker
        self._account_repo = account_repo
        self._token_handler = token_handler
        self._event_bus = event_bus
        self._guard = guard

    async def handle(
        self, cmd: OAuthLogin, context: RequestContext = ANONYMOUS_CONTEXT
    ) -> Result[AuthTokens, DomainError]:
        return await self._guard.run("oauth_login", self._login(cmd, context))

    async def _login(
        self, cmd: OAuthLogin, context: RequestContext
    ) -> Result[AuthTokens, DomainError]:
        metadata = context.to_metadata()

        # Step 1: Emit ATTEMPTED event
        await self._event_bus.publish(
            OAuthLoginAttempted(provider=cmd.provider), metadata=metadata
        )

        # Step 2: Extract identity
        extracted = self._identity_linker.extract_identity(cmd.provider, cmd.attributes)
        if isinstance(extracted, Failure):
            await self._publish_failed_event(
                cmd.provider, extracted.error.code.value, None, metadata
            )
            return extracted
        profile = extracted.value

        # Step 3: Resolve or create
        linked = await self._identity_linker.resolve_profile(profile)
        if isinstance(linked, Failure):
            await self._publish_failed_event(
                profile.provider.value, linked.error.code.value, profile.email, metadata
            )
            return linked
        account, created = linked.value

        # Step 4: Status checks
        now = datetime.now(UTC)
        if not account.is_active or account.is_locked(now):
            code = (
                ErrorCode.ACCOUNT_INACTIVE
                if not account.is_active
                else ErrorCode.ACCOUNT_LOCKED
            )
            await self._publish_failed_event(
                profile.provider.value, code.value, account.email, metadata
            )
            return Failure(error=auth_error(code))

        await self._account_repo.reset_failed_attempts(account.id, last_login_at=now)
        account.record_login()

        # Step 5: Issue tokens
        tokens = await self._token_handler.handle(account, context)
        if isinstance(tokens, Failure):
            return tokens

        # Step 6: Emit SUCCEEDED event
        await self._event_bus.publish(
            OAuthLoginSucceeded(
                user_id=account.id,
                email=account.email,
                provider=profile.provider.value,
                account_created=created,
            ),
            metadata=metadata,
        )

        # Step 7: Return tokens
        return Success(value=tokens.value)

    async def _publish_failed_event(
        self,
        provider: str,
        reason: str,
        email: str | None,
        metadata: dict[str, str],
    ) -> None:
        await self._event_bus.publish(
            OAuthLoginFailed(provider=provider, reason=reason, email=email),
            metadata=metadata,
        )
