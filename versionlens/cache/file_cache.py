"""Persistent TTL cache for registry lookups.

Layout on disk::

    {cache_dir}/{registry}/{quoted package}.json   ->   {"value": "...", "timestamp": 1700000000}

Keys are ``"{registry}@{package}"``. Stale entries are removed when read;
there is no background sweep.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from urllib.parse import quote

import structlog

from versionlens.exceptions import CacheIOError

log = structlog.get_logger("versionlens.cache")


def cache_key(registry: str, package: str) -> str:
    return f"{registry}@{package}"


def _safe_name(part: str) -> str:
    # "@types/node" -> "%40types%2Fnode", "github.com/a/b" -> "github.com%2Fa%2Fb"
    return quote(part, safe="")


class FileCache:
    def __init__(
        self,
        cache_dir: Path,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache_dir = cache_dir
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, key: str) -> str | None:
        """Return the cached value, or ``None`` if absent, unreadable or expired."""
        path = self.cache_path(key)
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
            value = entry["value"]
            timestamp = int(entry["timestamp"])
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            log.warning("file_cache.read_failed", key=key, error=str(exc))
            return None

        age = int(self._clock()) - timestamp
        if age > self.ttl_seconds:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                log.warning("file_cache.evict_failed", key=key, error=str(exc))
            return None

        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Write *value* under *key* with the current timestamp.

        Raises :class:`CacheIOError` if the entry cannot be written.
        """
        path = self.cache_path(key)
        payload = json.dumps({"value": value, "timestamp": int(self._clock())}, indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CacheIOError(f"cannot write cache entry {key!r}: {exc}") from exc

    def is_valid(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        """Remove every entry and leave an empty cache root behind."""
        try:
            if self.cache_dir.exists():
                shutil.rmtree(self.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheIOError(f"cannot clear cache at {self.cache_dir}: {exc}") from exc

    def cache_path(self, key: str) -> Path:
        registry, sep, package = key.partition("@")
        if sep and registry and package:
            return self.cache_dir / _safe_name(registry) / f"{_safe_name(package)}.json"
        return self.cache_dir / f"{_safe_name(key)}.json"
