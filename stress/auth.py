from typing import Optional, Dict, Any
from fastapi import HTTPException, status, Header
import jwt
import time

from .settings import settings
from .telemetry import TARGET_AUTH_FAILS

def _ok_api_key(x_api_key: Optional[str]) -> bool:
    return bool(settings.api_keys) and (x_api_key in settings.api_keys)

def _bearer_claims(auth_header: Optional[str]) -> Optional[Dict[str, Any]]:
    if not (settings.jwt_secret and auth_header):
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    try:
        return jwt.decode(token.strip(), settings.jwt_secret, algorithms=["HS256"])
    except jwt.PyJWTError:
        return None

def issue_token(sub: str, mins: int = 120, secret: Optional[str] = None) -> str:
    """HS256 token accepted by the sample target's /api routes."""
    secret = secret or settings.jwt_secret
    if not secret:
        raise ValueError("JWT_SECRET is not configured")
    now = int(time.time())
    return jwt.encode({"sub": sub, "iat": now, "exp": now + mins * 60}, secret, algorithm="HS256")

def require_auth(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    authorization: Optional[str] = Header(None, alias="Authorization"),
):
    """
    Guards the sample target's /api routes, which is what headers.json is for:
      - AUTH_REQUIRED=false and no creds configured -> open.
      - Otherwise an API key (X-API-Key) or a JWT (Authorization: Bearer ...).
    """
    if not settings.auth_required and not (settings.api_keys or settings.jwt_secret):
        return {"mode": "open"}

    if _ok_api_key(x_api_key):
        return {"mode": "api_key", "sub": "api-key"}

    claims = _bearer_claims(authorization)
    if claims is not None:
        return {"mode": "jwt", "sub": claims.get("sub") or "jwt"}

    TARGET_AUTH_FAILS.labels(route="/api").inc()
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
