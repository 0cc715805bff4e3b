import json

from stress.auth import issue_token
from stress.executor import RequestExecutor, build_session
from stress.headers import HeaderSource
from stress.limiter import RateLimiter
from stress.runner import LoadRunner
from stress.settings import settings


def _runner(tmp_path, headers=None, n=15):
    ex = RequestExecutor(
        session=build_session(n),
        headers=HeaderSource(str(headers or tmp_path / "headers.json")),
        timeout=10.0,
    )
    return LoadRunner(executor=ex, limiter=RateLimiter(100, 1), request_count=n)


def test_all_200(target_url, tmp_path):
    s = _runner(tmp_path).run(f"{target_url}/status/200")
    assert s.stats.success_count == 15
    assert s.stats.failure_count == 0
    assert s.success_rate == 100.0
    assert s.average_response_time >= 0
    # 15 requests at 100/s with no burst need at least ~0.14s
    assert s.total_elapsed >= 0.12


def test_all_400(target_url, tmp_path):
    s = _runner(tmp_path).run(f"{target_url}/status/400")
    assert s.stats.success_count == 0
    assert s.stats.failure_count == 15
    assert s.success_rate == 0.0
    assert len(s.stats.response_times) == 15
    assert all(t >= 0 for t in s.stats.response_times)


def test_api_target_with_jwt_headers(target_url, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", "e2e-secret")
    hdr = tmp_path / "headers.json"
    hdr.write_text(json.dumps({"Authorization": f"Bearer {issue_token('e2e')}"}), encoding="utf-8")
    s = _runner(tmp_path, headers=hdr, n=5).run(f"{target_url}/api/stats")
    assert s.stats.success_count == 5


def test_api_target_without_header_file(target_url, tmp_path):
    s = _runner(tmp_path, n=4).run(f"{target_url}/api/stats")
    assert s.stats.failure_count == 4
    assert s.stats.response_times == [0.0] * 4


def test_unreachable_target(tmp_path):
    # nothing listens on port 9 locally; connection refused is not retried
    s = _runner(tmp_path, n=3).run("http://127.0.0.1:9/")
    assert s.stats.failure_count == 3
