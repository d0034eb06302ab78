"""Domain protocols (ports).

Protocols define the interfaces the engine needs from the outside world.
Infrastructure adapters implement them; application handlers depend only on
these types.

Usage:
    from src.domain.protocols import AccountRepository, SessionRepository
"""

from src.domain.protocols.account_repository import AccountRepository
from src.domain.protocols.action_token_repository import ActionTokenRepository
from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.device_enricher_protocol import DeviceEnricherProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol, EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_protocol import NotificationProtocol
from src.domain.protocols.opaque_token_service_protocol import (
    OpaqueTokenServiceProtocol,
)
from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from src.domain.protocols.session_repository import SessionRepository
from src.domain.protocols.token_issuer_protocol import TokenIssuerProtocol
from src.domain.protocols.totp_protocol import TOTPProtocol

__all__ = [
    "AccountRepository",
    "ActionTokenRepository",
    "AuditProtocol",
    "DeviceEnricherProtocol",
    "EventBusProtocol",
    "EventHandler",
    "LoggerProtocol",
    "NotificationProtocol",
    "OpaqueTokenServiceProtocol",
    "PasswordHashingProtocol",
    "SessionRepository",
    "TokenIssuerProtocol",
    "TOTPProtocol",
]
