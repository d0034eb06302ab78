"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the codebase while
remaining backend-agnostic. Implementations MUST ensure logs are structured
(key-value context) and safe (no secrets).

Log Levels (standard 5-level hierarchy):
    - DEBUG: Detailed diagnostic info (dev only)
    - INFO: Normal operational events
    - WARNING: Degraded service, approaching limits
    - ERROR: Operation failed, system continues
    - CRITICAL: System-wide failure, immediate attention

Context Binding:
    Use bind() or with_context() to create request-scoped loggers with
    permanent context (account_id, handler) automatically included in all logs.

Security:
    - NEVER log passwords, password hashes, refresh tokens, access
      tokens, TOTP secrets or TOTP codes
    - Log account ids, never raw email addresses at INFO or above

Usage:
    from src.core.container import get_logger
    from src.domain.protocols.logger_protocol import LoggerProtocol

    # Basic logging
    logger: LoggerProtocol = get_logger()
    logger.info("login_succeeded", account_id=str(account_id))

    # Handler-scoped logging with bind()
    handler_logger = logger.bind(handler="refresh_access_token")
    handler_logger.warning("refresh_token_replayed", session_id=str(session_id))
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls MUST be structured: message + key-value context.
    Supports 5 standard log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    and context binding for request-scoped logging.

    Implementations may enrich logs with timestamp, level, and trace correlation.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for catastrophic failures.

        Use CRITICAL for system-wide failures requiring immediate attention:
        - Signing key unusable
        - Storage returning inconsistent session state

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.

        """
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Bound context is automatically included in all subsequent log calls.
        Original logger instance remains unchanged (immutable pattern).

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.

        Example:
            account_logger = logger.bind(account_id=str(account.id))
            account_logger.info("mfa_enrollment_started")
            account_logger.info("mfa_enabled")
            # account_id included automatically
        """
        ...

    def with_context(self, **context: Any) -> "LoggerProtocol":
        """Alias for bind() - return logger with bound context.

        Functionally identical to bind(), provided for semantic clarity
        in certain contexts.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.

        Example:
            scoped_logger = logger.with_context(operation="revoke_all")
        """
        ...
