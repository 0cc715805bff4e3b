import json
import pytest
from pydantic import ValidationError
from stress.errors import NoTimingSamplesError
from stress.models import AggregateStats, RequestOutcome, RunSummary

def test_outcome_is_immutable():
    o = RequestOutcome(index=3, elapsed=0.25, succeeded=True, status_code=200, attempts=1)
    with pytest.raises(ValidationError):
        o.succeeded = False
    j = json.loads(o.model_dump_json())
    assert j["elapsed"] == 0.25 and j["status_code"] == 200

def test_outcome_rejects_negative_elapsed():
    with pytest.raises(ValidationError):
        RequestOutcome(elapsed=-0.1, succeeded=False)

def test_summary_derived_values():
    stats = AggregateStats(total_count=4, success_count=3, failure_count=1, response_times=[0.1, 0.2, 0.3, 0.4])
    s = RunSummary(url="http://x/", request_count=4, total_elapsed=2.0, stats=stats)
    assert s.average_response_time == pytest.approx(0.25)
    assert s.average_request_rate == pytest.approx(2.0)
    assert s.success_rate == pytest.approx(75.0)

def test_summary_without_samples_is_explicit():
    s = RunSummary(url="http://x/", request_count=0, total_elapsed=0.0, stats=AggregateStats())
    with pytest.raises(NoTimingSamplesError):
        s.average_response_time
    assert s.success_rate == 0.0
    assert s.average_request_rate == 0.0
