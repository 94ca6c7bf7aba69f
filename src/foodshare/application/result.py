"""Result objects for the inbound layers.

Handlers raise; route handlers and CLI commands that prefer a value they can
branch on wrap the call with ``execute()``.  ``category`` is stable per
error kind so the caller can pick a status code without inspecting
internals.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog

from foodshare.domain.exceptions import (
    DomainException,
    StorageError,
    WriteConflictError,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Operations rejected because another writer got there first are rerun
# from scratch this many times in total before the conflict is reported.
WRITE_CONFLICT_ATTEMPTS = 3


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    success: bool
    value: T | None = None
    error: DomainException | StorageError | None = None

    @property
    def category(self) -> str | None:
        return self.error.category if self.error is not None else None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""

    @property
    def retryable(self) -> bool:
        return isinstance(self.error, StorageError)


def execute(operation: Callable[..., T], *args: Any, **kwargs: Any) -> OperationResult[T]:
    """Run *operation* and capture domain/storage failures as a result.

    A WriteConflictError means nothing was written, so the operation is
    simply run again against fresh state, up to WRITE_CONFLICT_ATTEMPTS.
    """
    attempt = 1
    while True:
        try:
            value = operation(*args, **kwargs)
            break
        except WriteConflictError as exc:
            if attempt >= WRITE_CONFLICT_ATTEMPTS:
                logger.info("operation_failed", category=exc.category, error=str(exc))
                return OperationResult(success=False, error=exc)
            logger.info("operation_retried", attempt=attempt, error=str(exc))
            attempt += 1
        except (DomainException, StorageError) as exc:
            logger.info("operation_failed", category=exc.category, error=str(exc))
            return OperationResult(success=False, error=exc)
    return OperationResult(success=True, value=value)
