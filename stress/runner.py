import enum
import logging
import threading
import time
from typing import List, Optional

from .aggregator import ResultAggregator
from .errors import LimiterCancelled
from .executor import RequestExecutor, build_session
from .limiter import RateLimiter
from .models import RequestOutcome, RunSummary
from .settings import settings
from .telemetry import CANCELLED, INFLIGHT

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


class LoadRunner:
    """
    Fixed-size fan-out: one thread per logical request, each going
    limiter -> executor -> aggregator. run() returns only after every
    worker thread has been joined.
    """
    def __init__(
        self,
        executor: Optional[RequestExecutor] = None,
        limiter: Optional[RateLimiter] = None,
        request_count: Optional[int] = None,
    ):
        self.request_count = settings.requests if request_count is None else request_count
        self.executor = executor or RequestExecutor(session=build_session(self.request_count))
        self.limiter = limiter or RateLimiter(settings.rate_per_sec, settings.burst)
        self.aggregator = ResultAggregator()
        self.state = RunState.NOT_STARTED
        self.cancelled = 0
        self._cancel_lock = threading.Lock()

    def _worker(self, url: str, i: int, cancel: Optional[threading.Event]) -> None:
        try:
            self.limiter.acquire(cancel)
        except LimiterCancelled as e:
            logger.info("request %d not sent: %s", i, e)
            CANCELLED.inc()
            with self._cancel_lock:
                self.cancelled += 1
            return

        INFLIGHT.inc()
        try:
            outcome = self.executor.execute(url, i)
        except Exception as e:
            logger.exception("request %d: worker crashed", i)
            outcome = RequestOutcome(index=i, succeeded=False, error=repr(e))
        finally:
            INFLIGHT.dec()
        self.aggregator.record(outcome)

    def run(self, url: str, request_count: Optional[int] = None,
            cancel: Optional[threading.Event] = None) -> RunSummary:
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"runner already {self.state.value}; create a new LoadRunner")
        n = self.request_count if request_count is None else request_count
        if n < 0:
            raise ValueError(f"request count must be >= 0, got {n}")

        if cancel is None:
            cancel = threading.Event()
        self.state = RunState.RUNNING
        logger.info("dispatching %d requests to %s", n, url)
        t0 = time.perf_counter()
        threads: List[threading.Thread] = []
        try:
            for i in range(n):
                t = threading.Thread(target=self._worker, args=(url, i, cancel), name=f"stress-worker-{i}")
                t.start()
                threads.append(t)
            for t in threads:
                t.join()
        except KeyboardInterrupt:
            # in-flight requests finish; queued ones abort at the limiter
            logger.warning("interrupted, cancelling workers still waiting for a token")
            cancel.set()
            for t in threads:
                t.join()
            self.state = RunState.COMPLETED
            raise
        total_elapsed = time.perf_counter() - t0
        self.state = RunState.COMPLETED

        return RunSummary(
            url=url,
            request_count=n,
            total_elapsed=total_elapsed,
            stats=self.aggregator.snapshot(),
            cancelled=self.cancelled,
        )
