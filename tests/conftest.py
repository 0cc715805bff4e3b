import os
import socket
import threading
import time

import pytest
import requests
import uvicorn

from stress.target import app


def make_response(status: int, body: bytes = b"", url: str = "http://target.test/") -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body
    r._content_consumed = True
    r.encoding = "utf-8"
    r.url = url
    return r


class ScriptedSession(requests.Session):
    """A real Session whose send() plays the next scripted step instead of hitting the network."""
    def __init__(self, steps):
        super().__init__()
        self.steps = list(steps)
        self.sent = []

    def send(self, prepared, **kwargs):
        self.sent.append((prepared, kwargs))
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


@pytest.fixture(scope="session", autouse=True)
def loopback_bypasses_proxy():
    # local test servers must not be routed through a proxy from the environment
    saved = {k: os.environ.get(k) for k in ("no_proxy", "NO_PROXY")}
    existing = saved["no_proxy"] or saved["NO_PROXY"]
    value = ",".join(x for x in (existing, "127.0.0.1,localhost") if x)
    os.environ["no_proxy"] = os.environ["NO_PROXY"] = value
    yield
    for k, v in saved.items():
        if v is None:
            os.environ.pop(k, None)
        else:
            os.environ[k] = v


@pytest.fixture(scope="session")
def target_url():
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()

    server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning"))
    t = threading.Thread(target=server.run, daemon=True)
    t.start()
    deadline = time.time() + 10
    while not server.started:
        if time.time() > deadline:
            raise RuntimeError("sample target did not start")
        time.sleep(0.02)
    yield f"http://127.0.0.1:{port}"
    server.should_exit = True
    t.join(timeout=5)
