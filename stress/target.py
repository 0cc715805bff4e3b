"""
Sample target service to point the load generator at.
Run with: uvicorn stress.target:app --port 8080
"""
from fastapi import FastAPI, Depends, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import json

from .auth import require_auth
from .settings import settings
from .telemetry import TARGET_REQS
from .version import __version__

app = FastAPI(title="stress sample target", version=__version__)

@app.get("/health")
def health():
    return {"ok": True, "version": __version__}

@app.get("/status/{code}")
def status_code(code: int):
    TARGET_REQS.labels(route="/status").inc()
    if code < 200 or code > 599:
        return JSONResponse({"error": "status out of range"}, status_code=422)
    if code in (204, 304):
        return Response(status_code=code)
    return JSONResponse({"status": code}, status_code=code)

@app.post("/api/stats")
async def api_stats(request: Request, ctx=Depends(require_auth)):
    route = "/api/stats"
    TARGET_REQS.labels(route=route).inc()
    raw = await request.body()
    try:
        body = json.loads(raw or b"null")
    except ValueError:
        return JSONResponse({"error": "invalid_json"}, status_code=400)
    if not isinstance(body, dict) or body.get("action") != "get_stats":
        return JSONResponse({"error": "unknown_action", "expected": json.loads(settings.api_payload)},
                            status_code=400)
    return {"ok": True, "auth": ctx.get("mode")}

@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
