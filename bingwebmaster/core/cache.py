"""BingWebmaster — In-memory TTL cache for raw API responses."""

import copy
import hashlib
import json
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from bingwebmaster.core.logging import get_logger

logger = get_logger("cache")

_MISSING = object()


def fingerprint(endpoint: str, params: Optional[Mapping[str, Any]] = None, prefix: str = "") -> str:
    """Deterministic cache key for an endpoint and its query parameters.

    Parameter order does not matter; values are compared by their JSON form.
    """
    canonical = json.dumps(
        {"endpoint": endpoint, "params": dict(params or {})},
        sort_keys=True,
        default=str,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{prefix}{digest}"


class ResponseCache:
    """Raw envelope store with expiry measured from write time.

    Expired entries are dropped when read, never swept proactively.
    """

    def __init__(
        self,
        ttl: float,
        prefix: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.prefix = prefix
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def key_for(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
        return fingerprint(endpoint, params, self.prefix)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the cached value, or ``default`` on miss/expiry."""
        with self._lock:
            entry = self._entries.get(key, _MISSING)
            if entry is _MISSING:
                return default
            written_at, value = entry
            if self._clock() - written_at >= self.ttl:
                del self._entries[key]
                return default
            return copy.deepcopy(value)

    def lookup(self, key: str) -> Tuple[bool, Any]:
        """(hit, value) pair; distinguishes a cached ``None`` from a miss."""
        value = self.get(key, _MISSING)
        if value is _MISSING:
            return False, None
        return True, value

    def store(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), copy.deepcopy(value))
        logger.debug(f"Cached response {key}", extra={"cache": "store"})

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
