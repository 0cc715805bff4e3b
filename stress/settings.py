from typing import List, Optional
from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()

def _split_csv(v: Optional[str]) -> List[str]:
    return [x.strip() for x in (v or "").split(",") if x.strip()]

def _truthy(v: Optional[str], default: bool = False) -> bool:
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")

def _int(v: Optional[str], default: int) -> int:
    try:
        return int(v) if v is not None else default
    except Exception:
        return default

def _float(v: Optional[str], default: float) -> float:
    try:
        return float(v) if v is not None else default
    except Exception:
        return default

class Settings(BaseModel):
    # Load shape
    requests: int = _int(os.getenv("STRESS_REQUESTS"), 15)
    max_attempts: int = _int(os.getenv("STRESS_ATTEMPTS"), 3)
    # effectively unbounded unless overridden
    client_timeout_sec: float = _float(os.getenv("STRESS_TIMEOUT_SEC"), 3000.0)

    # Token bucket (tokens/second, burst)
    rate_per_sec: float = _float(os.getenv("STRESS_RATE"), 100.0)
    burst: int = _int(os.getenv("STRESS_BURST"), 1)

    # API-style targets
    api_marker: str = os.getenv("STRESS_API_MARKER", "/api")
    api_payload: str = '{"action":"get_stats"}'
    headers_file: str = os.getenv("STRESS_HEADERS_FILE", "headers.json")
    cache_headers: bool = _truthy(os.getenv("STRESS_CACHE_HEADERS"), False)

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Run ledger (signed JSONL, disabled when unset)
    audit_path: Optional[str] = os.getenv("AUDIT_PATH") or None
    audit_signing_key: str = os.getenv("AUDIT_SIGNING_KEY", "dev-signing-key")
    audit_prev_keys: List[str] = _split_csv(os.getenv("AUDIT_PREV_KEYS"))

    # Sample target auth
    api_keys: List[str] = _split_csv(os.getenv("API_KEYS"))
    jwt_secret: Optional[str] = os.getenv("JWT_SECRET")
    auth_required: bool = _truthy(os.getenv("AUTH_REQUIRED"), False)

settings = Settings()
