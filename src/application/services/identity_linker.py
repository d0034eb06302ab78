"""Identity linker: third-party identities to local accounts.

Resolution order for (provider, subject, email):

    1. An account already linked to (provider, subject) is returned as is.
    2. An account with the same email but another sign-in method is NOT
       linked automatically (that would let whoever controls the email at
       the provider take the account over). ACCOUNT_ALREADY_EXISTS names
       the method the existing account uses; the account is not touched.
    3. Otherwise a new account is created: email verified (the provider
       vouched for it), no password.

Two concurrent first logins for the same identity race on the unique
(provider, subject) index; the loser re-resolves and gets the winner's
account.
"""

from collections.abc import Mapping
from typing import Any

from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.enums import IdentityProvider
from src.domain.errors import DuplicateAccountError, auth_error
from src.domain.identity import extract_identity
from src.domain.protocols import AccountRepository, LoggerProtocol
from src.domain.value_objects.identity_profile import IdentityProfile


class IdentityLinker:
    """Resolves or creates the local account behind a third-party login."""

    def __init__(
        self,
        account_repo: AccountRepository,
        default_authorities: list[str],
        logger: LoggerProtocol,
    ) -> None:
        """Initialize linker.

        Args:
            account_repo: Account storage.
            default_authorities: Authorities given to accounts it creates.
            logger: Logs lost creation races.
        """
        self._account_repo = account_repo
        self._default_authorities = list(default_authorities)
        self._logger = logger

    @staticmethod
    def extract_identity(
        provider: IdentityProvider | str, attributes: Mapping[str, Any]
    ) -> Result[IdentityProfile, AuthenticationError]:
        """Map provider attributes (see src.domain.identity.provider_mappers)."""
        return extract_identity(provider, attributes)

    async def resolve_or_create(
        self,
        provider: IdentityProvider,
        subject_id: str,
        email: str,
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Result[Account, DomainError]:
        """Find or create the account for a third-party identity.

        Idempotent for the same (provider, subject).

        Returns:
            Success(account) or Failure(ACCOUNT_ALREADY_EXISTS).
        """
        result = await self.link(
            provider, subject_id, email, display_name=display_name, avatar_url=avatar_url
        )
        if isinstance(result, Failure):
            return result
        account, _ = result.value
        return Success(value=account)

    async def link(
        self,
        provider: IdentityProvider,
        subject_id: str,
        email: str,
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Result[tuple[Account, bool], DomainError]:
        """Like ``resolve_or_create``, also reporting whether it created.

        Returns:
            Success((account, created)) or Failure(ACCOUNT_ALREADY_EXISTS).
        """
        # Step 1: Exact identity match
        existing = await self._account_repo.find_by_provider_subject(provider, subject_id)
        if existing is not None:
            return Success(value=(existing, False))

        # Step 2: Email owned by another sign-in method
        conflict = await self._email_conflict(email, provider, subject_id)
        if conflict is not None:
            return conflict

        # Step 3: Create
        account = Account(
            id=uuid7(),
            email=email,
            email_verified=True,
            identity_provider=provider,
            provider_subject_id=subject_id,
            display_name=display_name,
            avatar_url=avatar_url,
            authorities=list(self._default_authorities),
        )
        try:
            await self._account_repo.create(account)
        except DuplicateAccountError:
            self._logger.info(
                "identity_link_race_lost", provider=provider.value, subject_id=subject_id
            )
            winner = await self._account_repo.find_by_provider_subject(
                provider, subject_id
            )
            if winner is not None:
                return Success(value=(winner, False))
            conflict = await self._email_conflict(email, provider, subject_id)
            if conflict is not None:
                return conflict
            raise

        return Success(value=(account, True))

    async def resolve_profile(
        self, profile: IdentityProfile
    ) -> Result[tuple[Account, bool], DomainError]:
        """``link`` for an extracted profile."""
        return await self.link(
            profile.provider,
            profile.subject_id,
            profile.email,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
        )

    async def _email_conflict(
        self, email: str, provider: IdentityProvider, subject_id: str
    ) -> Result[tuple[Account, bool], DomainError] | None:
        holder = await self._account_repo.find_by_email(email)
        if holder is None:
            return None
        # Created by a concurrent first login for the same identity
        if (
            holder.identity_provider == provider
            and holder.provider_subject_id == subject_id
        ):
            return Success(value=(holder, False))
        return Failure(
            error=auth_error(
                ErrorCode.ACCOUNT_ALREADY_EXISTS,
                message=(
                    "An account with this email already exists. "
                    f"Sign in with {holder.auth_method}."
                ),
                details={"existing_method": holder.auth_method},
            )
        )
