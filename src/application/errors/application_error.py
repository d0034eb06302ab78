"""Application layer error mapping.

Handlers return precise internal errors (ACCOUNT_NOT_FOUND, TOKEN_EXPIRED,
...) so that logs, audit and tests can tell failures apart. Anything shown to
a caller first goes through ``to_external_error``, which collapses the
distinctions that would let an attacker probe account or token state.

Exports:
    ApplicationError: Caller-facing error wrapping the internal one
    to_external_error: Internal DomainError → ApplicationError
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode
from src.core.errors.domain_error import DomainError

# Internal code → external code
EXTERNAL_CODES: dict[ErrorCode, ErrorCode] = {
    ErrorCode.ACCOUNT_NOT_FOUND: ErrorCode.INVALID_CREDENTIALS,
    ErrorCode.ACCOUNT_INACTIVE: ErrorCode.INVALID_CREDENTIALS,
    ErrorCode.TOKEN_EXPIRED: ErrorCode.INVALID_REFRESH_TOKEN,
    ErrorCode.TOKEN_REVOKED: ErrorCode.INVALID_REFRESH_TOKEN,
    ErrorCode.TOKEN_NOT_FOUND: ErrorCode.INVALID_REFRESH_TOKEN,
}

# Codes only refresh-token paths report; access and challenge token failures
# keep their own kinds.
REFRESH_TOKEN_CODES = frozenset(
    {ErrorCode.TOKEN_EXPIRED, ErrorCode.TOKEN_REVOKED, ErrorCode.TOKEN_NOT_FOUND}
)

EXTERNAL_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorCode.INVALID_REFRESH_TOKEN: "Invalid refresh token",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplicationError:
    """Caller-facing error.

    Attributes:
        code: External error code.
        message: Message safe to show to the caller.
        domain_error: Original internal error (for server-side logging only).
    """

    code: ErrorCode
    message: str
    domain_error: DomainError | None = None


def to_external_error(
    error: DomainError, *, refresh_token: bool = False
) -> ApplicationError:
    """Collapse an internal error into what a caller may see.

    Args:
        error: Internal error returned by a handler.
        refresh_token: True when the error came from a refresh-token path.
            Expired, revoked and unknown tokens then all read as
            INVALID_REFRESH_TOKEN. Other token failures (access or challenge
            tokens) keep their kind.

    Returns:
        ApplicationError with the external code and a generic message where
        the internal message would leak state.

    Example:
        >>> to_external_error(auth_error(ErrorCode.ACCOUNT_NOT_FOUND)).code
        <ErrorCode.INVALID_CREDENTIALS: 'invalid_credentials'>
    """
    code = error.code
    if code in REFRESH_TOKEN_CODES and not refresh_token:
        external = code
    else:
        external = EXTERNAL_CODES.get(code, code)

    message = EXTERNAL_MESSAGES.get(external)
    if message is None:
        message = error.message if external == code else external.value
    return ApplicationError(code=external, message=message, domain_error=error)
