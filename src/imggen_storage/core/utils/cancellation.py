"""
Cancellation signals for storage operations.

A cancellation signal is any object exposing ``is_set() -> bool``; a plain
``threading.Event`` qualifies. Operations check the signal before their
commit point only: once a write is durable, cancellation has no effect.
"""

import os
from typing import Any, Protocol

from imggen_storage.core.models.errors import OperationCancelledError
from imggen_storage.core.utils.constants import (
    DEFAULT_CANCELLATION_MARGIN_MS,
    ENV_CANCELLATION_MARGIN_MS,
)


class CancellationSignal(Protocol):
    def is_set(self) -> bool: ...


class LambdaDeadline:
    """Cancellation signal driven by the remaining Lambda invocation time.

    The signal reports "set" once fewer than ``margin_ms`` milliseconds
    remain, leaving room to roll back before the runtime kills the
    invocation. Contexts without ``get_remaining_time_in_millis`` never
    cancel.
    """

    def __init__(self, context: Any, margin_ms: int | None = None) -> None:
        self._context = context
        if margin_ms is None:
            margin_ms = int(
                os.getenv(ENV_CANCELLATION_MARGIN_MS, str(DEFAULT_CANCELLATION_MARGIN_MS))
            )
        self._margin_ms = margin_ms

    def is_set(self) -> bool:
        remaining = getattr(self._context, "get_remaining_time_in_millis", None)
        if remaining is None:
            return False
        return bool(remaining() < self._margin_ms)


def raise_if_cancelled(
    cancel: CancellationSignal | None,
    *,
    operation: str,
    details: dict[str, Any] | None = None,
) -> None:
    """Raise OperationCancelledError when the signal is set."""
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError(
            message=f"{operation} cancelled before commit",
            details={"operation": operation, **(details or {})},
        )
