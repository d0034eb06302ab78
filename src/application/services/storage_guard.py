"""Storage guard for command handlers.

Every engine operation runs inside a time budget. Storage that is slow or
unreachable is reported as SERVICE_UNAVAILABLE, never as a credential
failure, so an outage cannot be mistaken for a wrong password. Writes that
committed before the failure (a failed-attempt increment, for instance) are
not rolled back.

Mapping:
    - TimeoutError (budget exceeded) → ServiceUnavailableError
    - ConcurrentModificationError → ConflictError (CONCURRENT_MODIFICATION)
    - StorageError → ServiceUnavailableError
    - Any other exception → DomainError(INTERNAL_ERROR), logged with detail

Usage:
    guard = StorageGuard(timeout_seconds=5.0, logger=logger)
    return await guard.run("login_user", self._login(cmd, context))
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, ServiceUnavailableError
from src.core.result import Failure, Result
from src.domain.errors import ConcurrentModificationError, StorageError
from src.domain.protocols.logger_protocol import LoggerProtocol

T = TypeVar("T")


class StorageGuard:
    """Runs one operation under a time budget and maps infrastructure faults."""

    def __init__(self, timeout_seconds: float, logger: LoggerProtocol) -> None:
        self._timeout_seconds = timeout_seconds
        self._logger = logger

    async def run(
        self, operation: str, work: Awaitable[Result[T, DomainError]]
    ) -> Result[T, DomainError]:
        """Await ``work`` and convert infrastructure exceptions to Failures.

        Args:
            operation: Operation name for logs and error details.
            work: The operation's coroutine.

        Returns:
            Whatever ``work`` returns, or a Failure for the mapped faults.
        """
        try:
            async with asyncio.timeout(self._timeout_seconds):
                return await work
        except TimeoutError:
            self._logger.warning(
                "storage_timeout",
                operation=operation,
                timeout_seconds=self._timeout_seconds,
            )
            return Failure(
                error=ServiceUnavailableError(
                    code=ErrorCode.SERVICE_UNAVAILABLE,
                    message="Service temporarily unavailable",
                    operation=operation,
                )
            )
        except ConcurrentModificationError as e:
            self._logger.warning(
                "concurrent_modification", operation=operation, detail=str(e)
            )
            return Failure(
                error=ConflictError(
                    code=ErrorCode.CONCURRENT_MODIFICATION,
                    message="The resource was modified concurrently, retry",
                    resource_type="account",
                )
            )
        except StorageError as e:
            self._logger.error("storage_unavailable", error=e, operation=operation)
            return Failure(
                error=ServiceUnavailableError(
                    code=ErrorCode.SERVICE_UNAVAILABLE,
                    message="Service temporarily unavailable",
                    operation=operation,
                )
            )
        except Exception as e:
            self._logger.error("unexpected_error", error=e, operation=operation)
            return Failure(
                error=DomainError(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="An unexpected error occurred",
                )
            )
