"""Application services shared by command handlers.

Services:
    - SessionLedger: refresh-token issuance, rotation and revocation
    - MfaChallenge: TOTP enrollment, verification and removal
    - IdentityLinker: third-party identities to local accounts
    - StorageGuard: time budget and infrastructure fault mapping
"""

from src.application.services.identity_linker import IdentityLinker
from src.application.services.mfa_challenge import MfaChallenge
from src.application.services.session_ledger import SessionLedger
from src.application.services.storage_guard import StorageGuard

__all__ = [
    "IdentityLinker",
    "MfaChallenge",
    "SessionLedger",
    "StorageGuard",
]
