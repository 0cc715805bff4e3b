import json
import threading
from typing import Dict, Optional

from .errors import HeaderLoadError


def load_headers(path: str) -> Dict[str, str]:
    """Read a JSON object of header-name -> header-value strings."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise HeaderLoadError(f"cannot read header file {path}: {e}") from e
    except ValueError as e:
        raise HeaderLoadError(f"malformed header file {path}: {e}") from e
    if not isinstance(data, dict):
        raise HeaderLoadError(f"header file {path} must hold a JSON object")
    for k, v in data.items():
        if not isinstance(v, str):
            raise HeaderLoadError(f"header {k!r} in {path} is not a string")
    return data


class HeaderSource:
    """
    Header set for API-style targets.
    By default the file is re-read for every request that needs it; with
    cache=True the first successful load is reused. Failed loads are never
    cached, so every request that would have loaded still sees the error.
    """
    def __init__(self, path: str, cache: bool = False):
        self.path = path
        self.cache = cache
        self._lock = threading.Lock()
        self._cached: Optional[Dict[str, str]] = None

    def load(self) -> Dict[str, str]:
        if not self.cache:
            return load_headers(self.path)
        with self._lock:
            if self._cached is None:
                self._cached = load_headers(self.path)
            return dict(self._cached)
