"""Per-provider mapping of OAuth2 user attributes to an IdentityProfile.

One pure function per IdentityProvider variant. Attribute names follow each
provider's userinfo payload:

    Provider  | subject | email | name           | avatar
    ----------|---------|-------|----------------|-----------------
    GOOGLE    | sub     | email | name           | picture
    FACEBOOK  | id      | email | name           | picture.data.url
    GITHUB    | id      | email | name or login  | avatar_url

Subject ids are always strings (GitHub reports an integer).
"""

from collections.abc import Mapping
from typing import Any, TypeAlias

from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.enums import IdentityProvider
from src.domain.errors import auth_error
from src.domain.validators import validate_email
from src.domain.value_objects.identity_profile import IdentityProfile


def extract_identity(
    provider: IdentityProvider | str, attributes: Mapping[str, Any]
) -> Result[IdentityProfile, AuthenticationError]:
    """Map raw provider attributes to a normalized identity.

    Args:
        provider: Provider variant, or its registration name as received.
        attributes: Userinfo payload from the provider.

    Returns:
        Success(IdentityProfile), or Failure with
        UNSUPPORTED_IDENTITY_PROVIDER or MISSING_REQUIRED_IDENTITY_ATTRIBUTE.

    Example:
        >>> extract_identity("google", {"sub": "1", "email": "A@x.io"})
        Success(value=IdentityProfile(provider=..., subject_id='1', email='a@x.io', ...))
    """
    if not isinstance(provider, IdentityProvider):
        parsed = IdentityProvider.parse(provider)
        if parsed is None:
            return Failure(
                error=auth_error(
                    ErrorCode.UNSUPPORTED_IDENTITY_PROVIDER,
                    details={"provider": str(provider)},
                )
            )
        provider = parsed

    match provider:
        case IdentityProvider.GOOGLE:
            fields = _google(attributes)
        case IdentityProvider.FACEBOOK:
            fields = _facebook(attributes)
        case IdentityProvider.GITHUB:
            fields = _github(attributes)

    subject_id, email, display_name, avatar_url = fields

    if not subject_id:
        return _missing(provider, "subject_id")
    if not email:
        return _missing(provider, "email")
    try:
        normalized_email = validate_email(email)
    except ValueError:
        return _missing(provider, "email")

    return Success(
        value=IdentityProfile(
            provider=provider,
            subject_id=subject_id,
            email=normalized_email,
            display_name=display_name,
            avatar_url=avatar_url,
        )
    )


_Fields: TypeAlias = tuple[str | None, str | None, str | None, str | None]


def _google(attributes: Mapping[str, Any]) -> _Fields:
    return (
        _text(attributes.get("sub")),
        _text(attributes.get("email")),
        _text(attributes.get("name")),
        _text(attributes.get("picture")),
    )


def _facebook(attributes: Mapping[str, Any]) -> _Fields:
    avatar_url = None
    picture = attributes.get("picture")
    if isinstance(picture, Mapping):
        data = picture.get("data")
        if isinstance(data, Mapping):
            avatar_url = _text(data.get("url"))
    return (
        _text(attributes.get("id")),
        _text(attributes.get("email")),
        _text(attributes.get("name")),
        avatar_url,
    )


def _github(attributes: Mapping[str, Any]) -> _Fields:
    return (
        _text(attributes.get("id")),
        _text(attributes.get("email")),
        _text(attributes.get("name")) or _text(attributes.get("login")),
        _text(attributes.get("avatar_url")),
    )


def _text(value: Any) -> str | None:
    """Stringify scalar attributes; blanks and non-scalars become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def _missing(
    provider: IdentityProvider, attribute: str
) -> Failure[AuthenticationError]:
    return Failure(
        error=auth_error(
            ErrorCode.MISSING_REQUIRED_IDENTITY_ATTRIBUTE,
            details={"provider": provider.value, "attribute": attribute},
        )
    )
