from prometheus_client import Counter, Gauge

# Load generator side
ATTEMPTS = Counter("stress_attempts_total", "HTTP attempts sent", ["method"])
RETRIES = Counter("stress_retries_total", "Attempts retried after a timeout")
OUTCOMES = Counter("stress_outcomes_total", "Finished logical requests", ["result"])
FAILS = Counter("stress_failures_total", "Failed logical requests", ["reason"])
CANCELLED = Counter("stress_cancelled_total", "Workers cancelled at the rate limiter")
INFLIGHT = Gauge("stress_inflight_workers", "Workers currently running")

# Sample target side
TARGET_REQS = Counter("stress_target_requests_total", "Requests served by the sample target", ["route"])
TARGET_AUTH_FAILS = Counter("stress_target_auth_failures_total", "Auth failures on the sample target", ["route"])
