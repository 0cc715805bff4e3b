from fastapi.testclient import TestClient

from stress.auth import issue_token
from stress.settings import settings
from stress.target import app

client = TestClient(app)
PAYLOAD = '{"action":"get_stats"}'
JSON = {"Content-Type": "application/json"}


def test_health():
    r = client.get("/health")
    assert r.status_code == 200 and r.json()["ok"] is True


def test_status_echo():
    assert client.get("/status/200").status_code == 200
    assert client.get("/status/400").status_code == 400
    assert client.get("/status/503").status_code == 503
    assert client.get("/status/204").status_code == 204
    assert client.get("/status/42").status_code == 422


def test_api_accepts_get_stats():
    r = client.post("/api/stats", content=PAYLOAD, headers=JSON)
    assert r.status_code == 200
    assert r.json()["auth"] == "open"


def test_api_rejects_other_actions():
    r = client.post("/api/stats", content='{"action":"drop_tables"}', headers=JSON)
    assert r.status_code == 400
    assert r.json()["error"] == "unknown_action"
    assert client.post("/api/stats", content="{oops", headers=JSON).json()["error"] == "invalid_json"


def test_api_auth_with_key_and_jwt(monkeypatch):
    monkeypatch.setattr(settings, "api_keys", ["k1"])
    monkeypatch.setattr(settings, "jwt_secret", "s3cret")
    assert client.post("/api/stats", content=PAYLOAD, headers=JSON).status_code == 401
    r = client.post("/api/stats", content=PAYLOAD, headers={**JSON, "X-API-Key": "k1"})
    assert r.status_code == 200 and r.json()["auth"] == "api_key"
    token = issue_token("tester")
    r = client.post("/api/stats", content=PAYLOAD, headers={**JSON, "Authorization": f"Bearer {token}"})
    assert r.status_code == 200 and r.json()["auth"] == "jwt"
    bad = issue_token("tester", secret="other")
    r = client.post("/api/stats", content=PAYLOAD, headers={**JSON, "Authorization": f"Bearer {bad}"})
    assert r.status_code == 401


def test_metrics_exposed():
    client.get("/status/200")
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "stress_target_requests_total" in r.text
