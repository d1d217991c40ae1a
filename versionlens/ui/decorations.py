"""Annotation store: the current badge set per document."""

from __future__ import annotations

import threading

from versionlens.ui.badges import Badge


class DecorationManager:
    """Holds the latest published badges for each document path.

    Publishing replaces a document's badges wholesale; nothing is merged.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._badges: dict[str, list[Badge]] = {}

    def publish(self, file_path: str, badges: list[Badge]) -> None:
        with self._lock:
            self._badges[file_path] = list(badges)

    def get_annotations(self, file_path: str) -> list[Badge] | None:
        with self._lock:
            badges = self._badges.get(file_path)
            return list(badges) if badges is not None else None

    def has_annotations(self, file_path: str) -> bool:
        with self._lock:
            return bool(self._badges.get(file_path))

    def count(self, file_path: str) -> int:
        with self._lock:
            return len(self._badges.get(file_path, ()))

    def clear(self, file_path: str) -> None:
        with self._lock:
            self._badges.pop(file_path, None)

    def clear_all(self) -> None:
        with self._lock:
            self._badges.clear()

    def active_paths(self) -> list[str]:
        """Paths that currently carry at least one badge."""
        with self._lock:
            return sorted(path for path, badges in self._badges.items() if badges)
