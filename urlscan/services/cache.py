"""In-memory, TTL-bounded store of validation results.

Entries expire a fixed duration after insertion and are never refreshed on
read.  There is no size bound: the working set is the URL list of the
requests served within one TTL window.

Results go in and come out as deep copies, so a caller editing a returned
result (its ``meta_tags`` dict included) never changes the stored entry.
"""

import threading
import time
from typing import Callable, Dict, NamedTuple, Optional

from urlscan.models.result import ValidationResult

DEFAULT_TTL = 30 * 60  # seconds


class _Entry(NamedTuple):
    result: ValidationResult
    expires_at: float


class ResultCache:
    """Map of URL key → :class:`ValidationResult` with per-entry expiry.

    Args:
        ttl:   Lifetime of an entry in seconds.
        clock: Zero-argument callable returning the current time in seconds.
               Defaults to :func:`time.monotonic`; tests inject a fake clock.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ValidationResult]:
        """Return the live result stored under *key*, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.result.model_copy(deep=True)

    def put(self, key: str, result: ValidationResult) -> None:
        """Store *result* under *key* for :attr:`ttl` seconds starting now."""
        with self._lock:
            self._entries[key] = _Entry(result.model_copy(deep=True), self._clock() + self.ttl)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if entry.expires_at > now)
