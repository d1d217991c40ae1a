"""Per-key debouncer: drop repeat work on the same resource within a time window."""

from __future__ import annotations

import time
from collections.abc import Callable

DEFAULT_TIMEOUT_MS = 500


class Debouncer:
    """Accept an action for a key at most once per ``timeout_ms``.

    Rejected calls are not queued; the caller simply drops them.
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout_ms / 1000
        self._clock = clock
        self._last_seen: dict[str, float] = {}

    def should_proceed(self, key: str) -> bool:
        """True (and record now) if *key* is new or its window has elapsed."""
        now = self._clock()
        last = self._last_seen.get(key)
        if last is not None and now - last < self.timeout:
            return False
        self._last_seen[key] = now
        return True

    def reset(self, key: str) -> None:
        self._last_seen.pop(key, None)

    def clear(self) -> None:
        self._last_seen.clear()

    def remaining(self, key: str) -> float | None:
        """Seconds until *key* may proceed again, or ``None`` if it already may."""
        last = self._last_seen.get(key)
        if last is None:
            return None
        elapsed = self._clock() - last
        if elapsed < self.timeout:
            return self.timeout - elapsed
        return None

    def is_debounced(self, key: str) -> bool:
        return self.remaining(key) is not None
