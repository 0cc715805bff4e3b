"""
One logical request against the target: build, send with retry-on-timeout,
classify. Nothing in here raises into the worker pool; every failure comes back
as a RequestOutcome with succeeded=False.
"""
from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from requests.adapters import HTTPAdapter

from .errors import HeaderLoadError
from .headers import HeaderSource
from .models import RequestOutcome
from .settings import settings
from .telemetry import ATTEMPTS, RETRIES, OUTCOMES, FAILS

logger = logging.getLogger(__name__)


class AttemptKind(enum.Enum):
    TIMEOUT = "timeout"
    ERROR = "error"
    RESPONSE = "response"


@dataclass
class Attempt:
    kind: AttemptKind
    elapsed: float
    response: Optional[requests.Response] = None
    error: Optional[Exception] = None


def build_session(pool_size: int = 10) -> requests.Session:
    sess = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=max(1, pool_size))
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    return sess


class RequestExecutor:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        headers: Optional[HeaderSource] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        api_marker: Optional[str] = None,
        api_payload: Optional[str] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.session = session or build_session()
        self.headers = headers or HeaderSource(settings.headers_file, cache=settings.cache_headers)
        self.timeout = settings.client_timeout_sec if timeout is None else timeout
        if self.timeout <= 0:
            raise ValueError(f"client timeout must be positive, got {self.timeout}")
        self.max_attempts = max(1, settings.max_attempts if max_attempts is None else max_attempts)
        self.api_marker = api_marker or settings.api_marker
        self.api_payload = api_payload or settings.api_payload
        self._clock = clock

    def build_request(self, url: str) -> requests.PreparedRequest:
        req = requests.Request("GET", url)
        if self.api_marker in url:
            for key, value in self.headers.load().items():
                req.headers[key] = value
            req.method = "POST"
            req.headers["Content-Type"] = "application/json"
            req.data = self.api_payload
        return self.session.prepare_request(req)

    def _attempt(self, prepared: requests.PreparedRequest) -> Attempt:
        ATTEMPTS.labels(method=prepared.method).inc()
        env = self.session.merge_environment_settings(prepared.url, {}, True, None, None)
        t0 = self._clock()
        try:
            resp = self.session.send(prepared, timeout=self.timeout, **env)
        except requests.exceptions.Timeout as e:
            return Attempt(AttemptKind.TIMEOUT, self._clock() - t0, error=e)
        except requests.exceptions.RequestException as e:
            return Attempt(AttemptKind.ERROR, self._clock() - t0, error=e)
        return Attempt(AttemptKind.RESPONSE, self._clock() - t0, response=resp)

    def _fail(self, index: int, reason: str, elapsed: float = 0.0, attempts: int = 0,
              status_code: Optional[int] = None, error: Optional[str] = None) -> RequestOutcome:
        FAILS.labels(reason=reason).inc()
        OUTCOMES.labels(result="failure").inc()
        return RequestOutcome(index=index, elapsed=max(0.0, elapsed), succeeded=False,
                              status_code=status_code, attempts=attempts, error=error)

    def execute(self, url: str, request_index: int = 0) -> RequestOutcome:
        try:
            prepared = self.build_request(url)
        except HeaderLoadError as e:
            logger.error("request %d: %s", request_index, e)
            return self._fail(request_index, "headers", error=str(e))
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("request %d: cannot build request for %s: %s", request_index, url, e)
            return self._fail(request_index, "build", error=str(e))

        attempt: Optional[Attempt] = None
        n = 0
        while n < self.max_attempts:
            n += 1
            attempt = self._attempt(prepared)
            if attempt.kind is AttemptKind.TIMEOUT:
                logger.warning("request %d attempt %d/%d timed out: %s",
                               request_index, n, self.max_attempts, attempt.error)
                if n < self.max_attempts:
                    RETRIES.inc()
                    continue
            elif attempt.kind is AttemptKind.ERROR:
                logger.warning("request %d attempt %d failed: %s", request_index, n, attempt.error)
            break

        if attempt.kind is AttemptKind.TIMEOUT:
            return self._fail(request_index, "timeout", attempt.elapsed, n, error=str(attempt.error))
        if attempt.kind is AttemptKind.ERROR:
            return self._fail(request_index, "transport", attempt.elapsed, n, error=str(attempt.error))

        resp = attempt.response
        status = resp.status_code
        try:
            if status == 400:
                logger.info("Response body: %s", resp.text)
        except (requests.exceptions.RequestException, OSError) as e:
            logger.error("request %d: error reading response body: %s", request_index, e)
            return self._fail(request_index, "body", attempt.elapsed, n, status, str(e))
        finally:
            resp.close()

        if status != 200:
            return self._fail(request_index, "status", attempt.elapsed, n, status)
        OUTCOMES.labels(result="success").inc()
        return RequestOutcome(index=request_index, elapsed=attempt.elapsed, succeeded=True,
                              status_code=status, attempts=n)
