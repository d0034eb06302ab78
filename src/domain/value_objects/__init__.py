"""Domain value objects."""

from src.domain.value_objects.identity_profile import IdentityProfile
from src.domain.value_objects.request_context import ANONYMOUS_CONTEXT, RequestContext
from src.domain.value_objects.token_claims import TokenClaims

__all__ = ["ANONYMOUS_CONTEXT", "IdentityProfile", "RequestContext", "TokenClaims"]
