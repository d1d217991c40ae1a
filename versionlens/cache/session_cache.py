"""In-memory latest-version cache for the lifetime of one watcher."""

from __future__ import annotations

import threading


class SessionCache:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._versions.get(key)

    def set(self, key: str, version: str) -> None:
        with self._lock:
            self._versions[key] = version

    def clear(self) -> None:
        with self._lock:
            self._versions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._versions)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._versions
