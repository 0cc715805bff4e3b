from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from .errors import NoTimingSamplesError


class RequestOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = 0
    elapsed: float = Field(default=0.0, ge=0.0)  # seconds, last attempt only
    succeeded: bool
    status_code: Optional[int] = None
    attempts: int = 0
    error: Optional[str] = None


class AggregateStats(BaseModel):
    total_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    response_times: List[float] = Field(default_factory=list)


class RunSummary(BaseModel):
    url: str
    request_count: int
    total_elapsed: float
    stats: AggregateStats
    cancelled: int = 0

    @property
    def average_response_time(self) -> float:
        times = self.stats.response_times
        if not times:
            raise NoTimingSamplesError("no response-time samples were recorded")
        return sum(times) / len(times)

    @property
    def average_request_rate(self) -> float:
        if self.total_elapsed <= 0:
            return 0.0
        return self.request_count / self.total_elapsed

    @property
    def success_rate(self) -> float:
        if self.request_count <= 0:
            return 0.0
        return self.stats.success_count / self.request_count * 100
