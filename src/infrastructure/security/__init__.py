"""Security adapters: hashing, token issuing and TOTP."""

from src.infrastructure.security.action_token_service import ActionTokenService
from src.infrastructure.security.bcrypt_password_service import BcryptPasswordService
from src.infrastructure.security.jwt_service import JWTService
from src.infrastructure.security.refresh_token_service import RefreshTokenService
from src.infrastructure.security.totp_service import PyOTPService

__all__ = [
    "ActionTokenService",
    "BcryptPasswordService",
    "JWTService",
    "PyOTPService",
    "RefreshTokenService",
]
