"""Audit event handler for domain events.

Maps each authentication event to an AuditAction and records it through
AuditProtocol with coarse client context:

    - ip_address: network only (IPv4 /24, IPv6 /48)
    - user_agent: "Browser on OS" only

Event fields named in EXCLUDED_FIELDS (one-time secrets meant for the email
handler) never reach the audit trail.

Usage:
    >>> audit_handler = AuditEventHandler(
    ...     audit=get_audit(), event_bus=event_bus,
    ...     device_enricher=enricher, logger=get_logger(),
    ... )
    >>> event_bus.subscribe(UserLoginFailed, audit_handler.handle)
"""

from dataclasses import fields
from datetime import datetime
from typing import Any
from uuid import UUID

from src.core.result import Failure
from src.domain.enums.audit_action import AuditAction
from src.domain.events import (
    AccountLockedOut,
    AllSessionsRevoked,
    AuthTokenRefreshFailed,
    AuthTokenRefreshSucceeded,
    DomainEvent,
    EmailVerificationFailed,
    EmailVerificationSucceeded,
    MfaDisabled,
    MfaEnabled,
    MfaEnrollmentFailed,
    OAuthLoginFailed,
    OAuthLoginSucceeded,
    PasswordResetConfirmFailed,
    PasswordResetConfirmSucceeded,
    PasswordResetRequestFailed,
    PasswordResetRequestSucceeded,
    RefreshTokenReplayDetected,
    UserLoginAttempted,
    UserLoginFailed,
    UserLoginSucceeded,
    UserLogoutSucceeded,
    UserMfaChallengeIssued,
    UserMfaLoginFailed,
    UserPasswordChangeFailed,
    UserPasswordChangeSucceeded,
    UserRegistrationSucceeded,
)
from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.device_enricher_protocol import DeviceEnricherProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.infrastructure.enrichers.network_enricher import coarsen_ip_address

# Event → (audit action, resource type)
AUDITED_EVENTS: dict[type[DomainEvent], tuple[AuditAction, str]] = {
    UserLoginAttempted: (AuditAction.USER_LOGIN_ATTEMPTED, "account"),
    UserLoginSucceeded: (AuditAction.USER_LOGIN_SUCCESS, "account"),
    UserLoginFailed: (AuditAction.USER_LOGIN_FAILED, "account"),
    UserMfaChallengeIssued: (AuditAction.USER_MFA_CHALLENGED, "account"),
    UserMfaLoginFailed: (AuditAction.USER_MFA_LOGIN_FAILED, "account"),
    AccountLockedOut: (AuditAction.ACCOUNT_LOCKED, "account"),
    OAuthLoginSucceeded: (AuditAction.USER_OAUTH_LOGIN_SUCCESS, "account"),
    OAuthLoginFailed: (AuditAction.USER_OAUTH_LOGIN_FAILED, "account"),
    AuthTokenRefreshSucceeded: (AuditAction.TOKEN_REFRESHED, "session"),
    AuthTokenRefreshFailed: (AuditAction.TOKEN_REFRESH_FAILED, "session"),
    RefreshTokenReplayDetected: (AuditAction.REFRESH_TOKEN_REPLAYED, "session"),
    UserLogoutSucceeded: (AuditAction.SESSION_REVOKED, "session"),
    AllSessionsRevoked: (AuditAction.SESSION_ALL_REVOKED, "session"),
    UserRegistrationSucceeded: (AuditAction.USER_REGISTERED, "account"),
    EmailVerificationSucceeded: (AuditAction.USER_EMAIL_VERIFIED, "account"),
    EmailVerificationFailed: (AuditAction.USER_EMAIL_VERIFIED, "account"),
    UserPasswordChangeSucceeded: (AuditAction.USER_PASSWORD_CHANGED, "account"),
    UserPasswordChangeFailed: (AuditAction.USER_PASSWORD_CHANGED, "account"),
    PasswordResetRequestSucceeded: (
        AuditAction.USER_PASSWORD_RESET_REQUESTED,
        "account",
    ),
    PasswordResetRequestFailed: (AuditAction.USER_PASSWORD_RESET_REQUESTED, "account"),
    PasswordResetConfirmSucceeded: (
        AuditAction.USER_PASSWORD_RESET_COMPLETED,
        "account",
    ),
    PasswordResetConfirmFailed: (AuditAction.USER_PASSWORD_RESET_COMPLETED, "account"),
    MfaEnabled: (AuditAction.MFA_ENABLED, "mfa"),
    MfaEnrollmentFailed: (AuditAction.MFA_ENROLLMENT_FAILED, "mfa"),
    MfaDisabled: (AuditAction.MFA_DISABLED, "mfa"),
}

EXCLUDED_FIELDS = frozenset(
    {"event_id", "occurred_at", "user_id", "verification_token", "reset_token"}
)


class AuditEventHandler:
    """Event handler that writes the audit trail.

    Attributes:
        _audit: Audit adapter.
        _event_bus: Source of request metadata for the event being handled.
        _device_enricher: Reduces user agents to a device label.
        _logger: Logs audit adapter failures.
    """

    def __init__(
        self,
        audit: AuditProtocol,
        event_bus: EventBusProtocol,
        device_enricher: DeviceEnricherProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._audit = audit
        self._event_bus = event_bus
        self._device_enricher = device_enricher
        self._logger = logger

    async def handle(self, event: DomainEvent) -> None:
        """Record one audit entry for the event.

        Failed events share the action of their success counterpart where no
        dedicated failure action exists; ``context.outcome`` tells them apart.
        """
        mapping = AUDITED_EVENTS.get(type(event))
        if mapping is None:
            return
        action, resource_type = mapping

        metadata = self._event_bus.get_metadata()
        context = self._build_context(event)
        context["outcome"] = "failure" if type(event).__name__.endswith("Failed") else "success"

        result = await self._audit.record(
            action=action,
            resource_type=resource_type,
            user_id=getattr(event, "user_id", None),
            resource_id=self._resource_id(event),
            ip_address=coarsen_ip_address(metadata.get("ip_address")),
            user_agent=self._device_enricher.describe(metadata.get("user_agent")),
            context=context,
        )
        if isinstance(result, Failure):
            self._logger.warning(
                "audit_record_failed",
                event_type=type(event).__name__,
                event_id=str(event.event_id),
                error_code=result.error.code.value,
            )

    @staticmethod
    def _build_context(event: DomainEvent) -> dict[str, Any]:
        context: dict[str, Any] = {"event_id": str(event.event_id)}
        for item in fields(event):
            if item.name in EXCLUDED_FIELDS:
                continue
            value = getattr(event, item.name)
            if isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            context[item.name] = value
        return context

    @staticmethod
    def _resource_id(event: DomainEvent) -> UUID | None:
        session_id = getattr(event, "session_id", None)
        if isinstance(session_id, UUID):
            return session_id
        return getattr(event, "user_id", None)
