"""Notification adapters.

- StubNotificationService: logs instead of sending (development/testing)
"""

from src.infrastructure.email.stub_notification_service import StubNotificationService

__all__ = ["StubNotificationService"]
