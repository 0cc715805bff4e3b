import json, os, time, uuid, hmac, hashlib
from typing import Iterable, Optional
from .models import RunSummary
from .settings import settings

def new_run_id() -> str:
    return uuid.uuid4().hex

def _canonical(obj: dict) -> str:
    return json.dumps(obj, separators=(",", ":"), sort_keys=True)

def _sign(payload: dict, key: str) -> str:
    msg = _canonical(payload).encode()
    return hmac.new(key.encode(), msg, hashlib.sha256).hexdigest()

def run_entry(summary: RunSummary, run_id: Optional[str] = None) -> dict:
    stats = summary.stats
    times = stats.response_times
    return {
        "run_id": run_id or new_run_id(),
        "url": summary.url,
        "requests": summary.request_count,
        "success": stats.success_count,
        "failure": stats.failure_count,
        "cancelled": summary.cancelled,
        "success_rate": round(summary.success_rate, 2),
        "total_sec": round(summary.total_elapsed, 4),
        # null when no samples were recorded
        "avg_response_sec": round(sum(times) / len(times), 4) if times else None,
    }

def write_run(summary: RunSummary, path: Optional[str] = None) -> Optional[dict]:
    """Append signed line: {"ts":..., "entry":{...}, "sig":"..."}. No-op without a path."""
    path = path or settings.audit_path
    if not path:
        return None
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    payload = {"ts": round(time.time(), 3), "entry": run_entry(summary)}
    sig = _sign(payload, settings.audit_signing_key)
    out = {"ts": payload["ts"], "entry": payload["entry"], "sig": sig}
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(out) + "\n")
    return out

def tail_runs(n: int = 50, path: Optional[str] = None) -> str:
    path = path or settings.audit_path
    if not path or not os.path.exists(path):
        return ""
    with open(path, "r", encoding="utf-8") as f:
        lines = f.readlines()[-n:]
    return "".join(lines)

def verify_run_lines(lines: Iterable[str]) -> list[dict]:
    """Verify signatures; accepts current key or any in AUDIT_PREV_KEYS (rotation)."""
    keys = [settings.audit_signing_key] + list(settings.audit_prev_keys)
    results = []
    for ln in lines:
        ln = ln.strip()
        if not ln:
            continue
        try:
            obj = json.loads(ln)
        except ValueError:
            results.append({"ok": False, "error": "parse_error"})
            continue
        if not isinstance(obj, dict):
            results.append({"ok": False, "error": "parse_error"})
            continue
        sig = str(obj.get("sig", ""))
        payload = {"ts": obj.get("ts"), "entry": obj.get("entry")}
        ok = any(hmac.compare_digest(_sign(payload, k), sig) for k in keys)
        results.append({"ok": ok, "ts": obj.get("ts"), "run_id": (obj.get("entry") or {}).get("run_id")})
    return results
