"""Domain enums.

Available Enums:
    - AccountStatus: Account lifecycle status
    - ActionTokenPurpose: One-time email token purpose
    - AuditAction: Audit trail action types
    - ChallengePurpose: What an MFA challenge token authorizes
    - IdentityProvider: Supported OAuth2 identity providers
    - RevocationReason: Why a session was revoked
    - TokenType: Value of the tokenType claim
"""

from src.domain.enums.account_status import AccountStatus
from src.domain.enums.action_token_purpose import ActionTokenPurpose
from src.domain.enums.audit_action import AuditAction
from src.domain.enums.identity_provider import IdentityProvider
from src.domain.enums.revocation_reason import RevocationReason
from src.domain.enums.token_type import ChallengePurpose, TokenType

__all__ = [
    "AccountStatus",
    "ActionTokenPurpose",
    "AuditAction",
    "ChallengePurpose",
    "IdentityProvider",
    "RevocationReason",
    "TokenType",
]
