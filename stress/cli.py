"""
Fire a fixed batch of concurrent requests at one URL and print a summary.
Usage: stress <url> [--requests 15] [--rate 100] [--burst 1]
"""
import argparse
import logging
import sys
import threading
from typing import List, Optional

from prometheus_client import REGISTRY, write_to_textfile

from .audit import write_run
from .errors import InvalidURLError
from .executor import RequestExecutor, build_session
from .headers import HeaderSource
from .limiter import RateLimiter
from .report import render, target_hostname
from .runner import LoadRunner
from .settings import settings

logger = logging.getLogger(__name__)

USAGE = "Usage: stress <url>"

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="stress", description="Minimal concurrent HTTP load generator")
    ap.add_argument("url", nargs="?", help="target URL")
    ap.add_argument("-n", "--requests", type=int, default=settings.requests)
    ap.add_argument("--timeout", type=float, default=settings.client_timeout_sec, help="client timeout (seconds)")
    ap.add_argument("--attempts", type=int, default=settings.max_attempts, help="attempts per request (timeouts only)")
    ap.add_argument("--rate", type=float, default=settings.rate_per_sec, help="requests/second")
    ap.add_argument("--burst", type=int, default=settings.burst)
    ap.add_argument("--headers", default=settings.headers_file, help="JSON header file for /api targets")
    ap.add_argument("--cache-headers", action=argparse.BooleanOptionalAction,
                    default=settings.cache_headers, help="reuse the first good header-file load")
    ap.add_argument("--metrics-out", default=None, help="write Prometheus text metrics here after the run")
    ap.add_argument("--log-level", default=settings.log_level)
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.url:
        print(USAGE)
        return 1

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        target_hostname(args.url)
    except InvalidURLError as e:
        logger.debug("%s", e)
        print("Invalid URL")
        return 1

    try:
        limiter = RateLimiter(args.rate, args.burst)
        executor = RequestExecutor(
            session=build_session(args.requests),
            headers=HeaderSource(args.headers, cache=args.cache_headers),
            timeout=args.timeout,
            max_attempts=args.attempts,
        )
    except ValueError as e:
        print(e)
        return 1

    runner = LoadRunner(executor=executor, limiter=limiter, request_count=args.requests)
    cancel = threading.Event()
    try:
        summary = runner.run(args.url, cancel=cancel)
    except ValueError as e:
        print(e)
        return 1
    except KeyboardInterrupt:
        print("Interrupted")
        return 130

    print(render(summary))

    write_run(summary)
    if args.metrics_out:
        write_to_textfile(args.metrics_out, REGISTRY)
    return 0

if __name__ == "__main__":
    sys.exit(main())
