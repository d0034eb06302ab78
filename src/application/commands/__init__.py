"""Commands - Write operations that change state.

Commands represent user intent to perform an action. They are immutable
dataclasses with imperative names (RegisterUser, ChangePassword).

Each command has a corresponding handler in ``handlers/`` that contains the
business logic to execute the command.
"""

from src.application.commands.auth_commands import (
    AuthenticateUser,
    BeginMfaEnrollment,
    ChangePassword,
    CompleteMfaLogin,
    ConfirmMfaEnrollment,
    ConfirmPasswordReset,
    DisableMfa,
    LoginUser,
    LogoutUser,
    OAuthLogin,
    RefreshAccessToken,
    RegisterUser,
    RequestPasswordReset,
    RevokeAllSessions,
    VerifyEmail,
)

__all__ = [
    "AuthenticateUser",
    "BeginMfaEnrollment",
    "ChangePassword",
    "CompleteMfaLogin",
    "ConfirmMfaEnrollment",
    "ConfirmPasswordReset",
    "DisableMfa",
    "LoginUser",
    "LogoutUser",
    "OAuthLogin",
    "RefreshAccessToken",
    "RegisterUser",
    "RequestPasswordReset",
    "RevokeAllSessions",
    "VerifyEmail",
]
