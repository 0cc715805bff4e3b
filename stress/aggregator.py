import threading

from .models import AggregateStats, RequestOutcome


class ResultAggregator:
    """Thread-safe accumulator; workers only ever call record()."""
    def __init__(self):
        self._lock = threading.Lock()
        self._stats = AggregateStats()

    def record(self, outcome: RequestOutcome) -> None:
        with self._lock:
            self._stats.response_times.append(outcome.elapsed)
            if outcome.succeeded:
                self._stats.success_count += 1
            else:
                self._stats.failure_count += 1
            self._stats.total_count += 1

    def snapshot(self) -> AggregateStats:
        # call after every worker has joined
        with self._lock:
            return self._stats.model_copy(deep=True)
