"""Data Transfer Objects (DTOs) for application layer.

DTOs are response/result dataclasses returned by command handlers.

Usage:
    from src.application.dtos import AuthTokens, LoginResult

Note:
    DTOs are NOT the same as domain value objects (TokenClaims,
    IdentityProfile), which are shared by domain and infrastructure.
"""

from src.application.dtos.auth_dtos import (
    AuthTokens,
    IssuedRefreshToken,
    LoginResult,
    MfaEnrollment,
    RegisteredAccount,
)

__all__ = [
    "AuthTokens",
    "IssuedRefreshToken",
    "LoginResult",
    "MfaEnrollment",
    "RegisteredAccount",
]
