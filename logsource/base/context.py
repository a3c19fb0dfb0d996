"""
Cancellable, deadline-bearing call context.

Every provider call (log fetch or discovery) receives a :class:`CallContext`.
The pipeline checks it between provider calls and passes
:meth:`CallContext.remaining` to the SDK as the per-call timeout.
"""

from __future__ import annotations

import threading
import time

from logsource.base.exceptions import DeadlineExceededError, QueryCancelledError


class CallContext:
    """Cancellation flag plus an optional monotonic deadline."""

    def __init__(self, timeout: float | None = None) -> None:
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> CallContext:
        """A context that is never cancelled and never expires."""
        return cls()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def check(self) -> None:
        """Raise if the context has been cancelled or its deadline passed.

        Raises:
            QueryCancelledError: The caller cancelled the context.
            DeadlineExceededError: The deadline passed.
        """
        if self.cancelled:
            raise QueryCancelledError("request cancelled")
        if self.expired():
            raise DeadlineExceededError("request deadline exceeded")
