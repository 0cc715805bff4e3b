import logging
from typing import List, Tuple
from urllib.parse import urlsplit

from .errors import InvalidURLError, NoTimingSamplesError
from .models import RunSummary

logger = logging.getLogger(__name__)


def target_hostname(url: str) -> str:
    try:
        host = urlsplit(url).hostname
    except ValueError as e:
        raise InvalidURLError(f"cannot parse {url!r}: {e}") from e
    if not host:
        raise InvalidURLError(f"no hostname in {url!r}")
    return host


def os_label(hostname: str) -> str:
    """Guess the target platform from its hostname."""
    return "Linux" if "linux" in (hostname or "").lower() else "Windows"


def summary_line(s: RunSummary) -> str:
    return "Total: %d | Success: %d | Failure: %d | Rate: %.2f%%" % (
        s.request_count, s.stats.success_count, s.stats.failure_count, s.success_rate)


def _table(rows: List[Tuple[str, str]], padding: int = 2) -> str:
    # right-aligned first column, '|' separated
    width = max(len(k) for k, _ in rows) + padding
    return "\n".join(f"{k.rjust(width)}|{v}" for k, v in rows)


def render(s: RunSummary) -> str:
    host = target_hostname(s.url)
    try:
        avg_rt = "%.2f sec" % round(s.average_response_time, 2)
    except NoTimingSamplesError as e:
        logger.warning("average response time undefined: %s", e)
        avg_rt = "n/a"
    rows = [
        ("Metric", "Value"),
        (os_label(host), host),
        ("Total execution time", "%.2f sec" % round(s.total_elapsed, 2)),
        ("Average response time", avg_rt),
        ("Average request rate", "%.2f requests/second" % s.average_request_rate),
    ]
    return summary_line(s) + "\n" + _table(rows)
