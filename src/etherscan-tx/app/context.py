import threading
import time
from typing import Optional

from .errors import CallCancelledError


class CallContext:
    """
    Cancellation scope shared by every remote call of one resolution.
    - Optional monotonic deadline.
    - Explicit cancel() from another thread (e.g. a UI quitting mid-lookup).
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "CallContext":
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "CallContext":
        if seconds < 0:
            raise ValueError("timeout must be non-negative.")
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        return self.cancelled() or self.expired()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> Optional[CallCancelledError]:
        if self.cancelled():
            return CallCancelledError("context canceled")
        if self.expired():
            return CallCancelledError("context deadline exceeded")
        return None

    def check(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    def wait(self, seconds: float) -> bool:
        """
        Sleep up to `seconds`, waking early on cancel.
        Returns True when the full delay elapsed and the context is still live.
        """
        if self.done():
            return False
        delay = max(0.0, seconds)
        remaining = self.remaining()
        if remaining is not None and remaining < delay:
            self._cancelled.wait(remaining)
            return False
        self._cancelled.wait(delay)
        return not self.done()
