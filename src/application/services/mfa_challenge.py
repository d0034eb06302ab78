"""MFA challenge: TOTP enrollment, verification and removal.

Enrollment is two-step and stateless on the server:

    1. ``begin_enrollment`` generates a candidate secret and signs it into a
       short-lived enrollment token (MFA_REQUIRED, purpose mfa_enrollment).
       Nothing is persisted.
    2. ``confirm_enrollment`` commits the secret to the account only after a
       code generated from it verifies.

Codes are six digits on a 30 second step with one step of tolerance either
side. Spaces and dashes typed by the user are ignored.
"""

from datetime import timedelta
from uuid import UUID

from src.application.dtos import MfaEnrollment
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities.account import Account
from src.domain.enums import ChallengePurpose, TokenType
from src.domain.errors import auth_error
from src.domain.protocols import (
    AccountRepository,
    PasswordHashingProtocol,
    TokenIssuerProtocol,
    TOTPProtocol,
)

MFA_SECRET_CLAIM = "mfaSecret"


class MfaChallenge:
    """Second-factor operations on an account.

    Attributes:
        _account_repo: Persists committed secrets.
        _totp: TOTP adapter (pyotp).
        _token_issuer: Signs enrollment tokens.
        _password_service: Re-proves the password on disable.
        _enrollment_ttl: Lifetime of an enrollment token.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        totp: TOTPProtocol,
        token_issuer: TokenIssuerProtocol,
        password_service: PasswordHashingProtocol,
        enrollment_ttl: timedelta,
    ) -> None:
        self._account_repo = account_repo
        self._totp = totp
        self._token_issuer = token_issuer
        self._password_service = password_service
        self._enrollment_ttl = enrollment_ttl

    def begin_enrollment(self, account: Account) -> Result[MfaEnrollment, DomainError]:
        """Generate a candidate secret for the account.

        Returns:
            Success(MfaEnrollment) or Failure(MFA_ALREADY_ENABLED).
        """
        if account.mfa_enabled:
            return Failure(error=auth_error(ErrorCode.MFA_ALREADY_ENABLED))

        secret = self._totp.generate_secret()
        enrollment_token = self._token_issuer.issue_challenge_token(
            account,
            ChallengePurpose.MFA_ENROLLMENT,
            ttl=self._enrollment_ttl,
            extra_claims={MFA_SECRET_CLAIM: secret},
        )
        return Success(
            value=MfaEnrollment(
                secret=secret,
                provisioning_uri=self._totp.provisioning_uri(secret, account.email),
                enrollment_token=enrollment_token,
            )
        )

    def read_enrollment_token(
        self, enrollment_token: str, account_id: UUID
    ) -> Result[str, DomainError]:
        """Extract the candidate secret from an enrollment token.

        The token must be an MFA_REQUIRED token with purpose mfa_enrollment
        issued to ``account_id`` and must carry a secret.

        Returns:
            Success(secret) or the token verification Failure
            (TOKEN_EXPIRED, TOKEN_SIGNATURE_INVALID, TOKEN_MALFORMED).
        """
        result = self._token_issuer.verify(
            enrollment_token, expected_type=TokenType.MFA_REQUIRED
        )
        if isinstance(result, Failure):
            return result
        claims = result.value

        if (
            claims.purpose != ChallengePurpose.MFA_ENROLLMENT
            or claims.subject != account_id
            or not claims.mfa_secret
        ):
            return Failure(
                error=auth_error(
                    ErrorCode.TOKEN_MALFORMED, message="Not an enrollment token"
                )
            )
        return Success(value=claims.mfa_secret)

    async def confirm_enrollment(
        self, account: Account, secret: str, code: str
    ) -> Result[Account, DomainError]:
        """Commit ``secret`` once ``code`` verifies against it.

        Returns:
            Success(updated Account) or Failure (MFA_ALREADY_ENABLED,
            INVALID_MFA_CODE). The account is unchanged on failure.
        """
        if account.mfa_enabled:
            return Failure(error=auth_error(ErrorCode.MFA_ALREADY_ENABLED))
        if not self.verify_code(secret, code):
            return Failure(error=auth_error(ErrorCode.INVALID_MFA_CODE))

        account.enable_mfa(secret)
        await self._account_repo.save(account)
        return Success(value=account)

    def verify_code(self, secret: str, code: str) -> bool:
        """True if ``code`` is valid for ``secret`` within one step."""
        return self._totp.verify(secret, code)

    async def disable(
        self, account: Account, password: str
    ) -> Result[Account, DomainError]:
        """Remove the second factor after re-proving the password.

        Returns:
            Success(updated Account) or Failure (MFA_NOT_ENABLED,
            INVALID_CREDENTIALS).
        """
        if not account.mfa_enabled:
            return Failure(error=auth_error(ErrorCode.MFA_NOT_ENABLED))

        if account.password_hash is None:
            self._password_service.dummy_verify(password)
            return Failure(error=auth_error(ErrorCode.INVALID_CREDENTIALS))
        if not self._password_service.verify_password(password, account.password_hash):
            return Failure(error=auth_error(ErrorCode.INVALID_CREDENTIALS))

        account.disable_mfa()
        await self._account_repo.save(account)
        return Success(value=account)
