import threading
import time
from typing import Callable, Optional

from .errors import LimiterCancelled


class RateLimiter:
    """
    Token bucket shared by every worker of a run.

    Callers reserve the next token under the lock (the bucket may go into
    debt) and sleep off the debt outside it, so each waiter gets a fixed slot
    and nobody starves while tokens keep refilling.
    """
    def __init__(self, rate: float, burst: int = 1, clock: Callable[[], float] = time.monotonic):
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if burst < 1:
            raise ValueError(f"burst must be at least 1, got {burst}")
        self.rate = float(rate)
        self.burst = int(burst)
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = float(burst)
        self._last = clock()

    def _refill(self, now: float) -> None:
        if now > self._last:
            self._tokens = min(float(self.burst), self._tokens + (now - self._last) * self.rate)
            self._last = now

    def _reserve(self) -> float:
        """Take one token; return how long the caller must wait before using it."""
        with self._lock:
            self._refill(self._clock())
            self._tokens -= 1.0
            if self._tokens >= 0:
                return 0.0
            return -self._tokens / self.rate

    def acquire(self, cancel: Optional[threading.Event] = None) -> None:
        if cancel is not None and cancel.is_set():
            raise LimiterCancelled("cancelled before waiting for a token")
        delay = self._reserve()
        if delay <= 0:
            return
        if cancel is None:
            time.sleep(delay)
        elif cancel.wait(delay):
            raise LimiterCancelled("cancelled while waiting for a token")
