"""Process-wide UI state."""

from __future__ import annotations

import threading


class AppState:
    """Whether inline badges are shown. Passed explicitly to whatever reads it."""

    def __init__(self, inline_enabled: bool = True) -> None:
        self._lock = threading.Lock()
        self._inline_enabled = inline_enabled

    @property
    def inline_enabled(self) -> bool:
        with self._lock:
            return self._inline_enabled

    def toggle_inline(self) -> bool:
        """Flip inline badges on/off and return the new value."""
        with self._lock:
            self._inline_enabled = not self._inline_enabled
            return self._inline_enabled
