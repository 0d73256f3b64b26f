"""Cancellation / deadline signal passed by callers to service operations."""

import threading
import time
from typing import Optional

from tasker.core.errors import OperationCancelledError


class CallContext:
    def __init__(self, deadline: Optional[float] = None):
        # deadline en secondes, horloge monotonic
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CallContext":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def done(self) -> bool:
        return self.cancelled or self.expired

    def raise_if_done(self) -> None:
        if self.cancelled:
            raise OperationCancelledError("context canceled")
        if self.expired:
            raise OperationCancelledError("context deadline exceeded")


def check(ctx: Optional[CallContext]) -> None:
    if ctx is not None:
        ctx.raise_if_done()
