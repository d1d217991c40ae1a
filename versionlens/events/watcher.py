"""BufferWatcher: turn manifest edits into published version badges.

One pass for a document: pick the parser by file name, debounce on the
path, parse, resolve every dependency's latest version (session cache,
then the persistent cache, then the registry), compare, and replace the
document's badges in the annotation store.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path

import structlog

import versionlens.engines.manifest_parser.parsers  # noqa: F401
from versionlens.cache.file_cache import FileCache, cache_key
from versionlens.cache.session_cache import SessionCache
from versionlens.core.config import Settings
from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import PARSER_REGISTRY, ManifestParser
from versionlens.engines.version_compare.comparator import VersionComparator
from versionlens.events.debouncer import Debouncer
from versionlens.exceptions import CacheIOError, ManifestParseError, RegistryLookupError
from versionlens.registries.base import RegistryClient
from versionlens.ui.badges import Badge
from versionlens.ui.decorations import DecorationManager

log = structlog.get_logger("versionlens.watcher")

DEFAULT_MAX_CONCURRENCY = 8


class BufferWatcher:
    """Owns the session cache, debouncer and annotation store for its lifetime.

    The persistent :class:`FileCache` is optional and may be shared with
    other watchers.
    """

    def __init__(
        self,
        clients: Mapping[str, RegistryClient],
        *,
        settings: Settings | None = None,
        file_cache: FileCache | None = None,
        comparator: VersionComparator | None = None,
        debouncer: Debouncer | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.settings = settings or Settings()
        self._clients = dict(clients)
        self._file_cache = file_cache
        self._comparator = comparator or VersionComparator()
        self._debouncer = debouncer or Debouncer(self.settings.debounce_ms)
        self._session_cache = SessionCache()
        self._store = DecorationManager()
        self._max_concurrency = max_concurrency

        # Static file name -> parser table, limited to registries we can query
        self._parsers: dict[str, ManifestParser] = {
            name: parser
            for name, parser in PARSER_REGISTRY.items()
            if parser.registry in self._clients
            and self.settings.is_registry_enabled(parser.registry)
        }

    # ── document events ────────────────────────────────────────────────────

    async def on_change(self, file_path: str, content: str) -> list[Badge] | None:
        """Handle an open/edit of *file_path*.

        Returns the published badges, or ``None`` when the event was ignored
        (untracked file, debounced, or unparseable).
        """
        filename = Path(file_path).name
        parser = self._parsers.get(filename)
        if parser is None:
            return None

        if not self._debouncer.should_proceed(file_path):
            log.debug("watcher.debounced", file=file_path)
            return None

        try:
            dependencies = parser.parse(content)
        except ManifestParseError as exc:
            # Keep whatever badges were there until a later pass succeeds
            log.warning("watcher.parse_failed", file=file_path, error=str(exc))
            return None

        badges = await self._build_badges(parser, dependencies)
        self._store.publish(file_path, badges)
        log.info(
            "watcher.published",
            file=file_path,
            ecosystem=parser.ecosystem,
            dependencies=len(dependencies),
            badges=len(badges),
        )
        return badges

    async def on_file_change(self, file_path: str) -> list[Badge] | None:
        """Like :meth:`on_change`, reading the content from disk."""
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("watcher.read_failed", file=file_path, error=str(exc))
            return None
        return await self.on_change(file_path, content)

    async def refresh(self, file_path: str, content: str) -> list[Badge] | None:
        """Reprocess *file_path* now, regardless of recent activity."""
        self._debouncer.reset(file_path)
        return await self.on_change(file_path, content)

    def clear(self, file_path: str) -> None:
        self._store.clear(file_path)
        self._debouncer.reset(file_path)

    def clear_all(self) -> None:
        """Drop badges, debounce records and session-cached versions.

        The persistent cache is left alone.
        """
        self._store.clear_all()
        self._debouncer.clear()
        self._session_cache.clear()

    # ── annotation queries ─────────────────────────────────────────────────

    def get_annotations(self, file_path: str) -> list[Badge] | None:
        return self._store.get_annotations(file_path)

    def has_annotations(self, file_path: str) -> bool:
        return self._store.has_annotations(file_path)

    def count(self, file_path: str) -> int:
        return self._store.count(file_path)

    def active_paths(self) -> list[str]:
        return self._store.active_paths()

    # ── introspection ──────────────────────────────────────────────────────

    def is_package_file(self, filename: str) -> bool:
        return filename in self._parsers

    def supported_file_types(self) -> list[str]:
        return sorted(self._parsers)

    def parser_for_file(self, filename: str) -> ManifestParser | None:
        return self._parsers.get(filename)

    def get_cached_version(self, package_name: str, registry: str) -> str | None:
        return self._session_cache.get(cache_key(registry, package_name))

    async def process_dependency(
        self,
        package_name: str,
        current_version: str,
        line_number: int,
        registry: str,
    ) -> Badge:
        """Resolve and badge one dependency. Raises :class:`RegistryLookupError`."""
        latest = await self._resolve_latest(registry, package_name)
        comparison = self._comparator.compare(current_version, latest)
        return Badge.from_comparison(package_name, line_number, comparison)

    # ── internal ───────────────────────────────────────────────────────────

    async def _build_badges(
        self, parser: ManifestParser, dependencies: list[Dependency]
    ) -> list[Badge]:
        wanted = [d for d in dependencies if not self.settings.should_ignore(d.name)]
        names = list(dict.fromkeys(d.name for d in wanted))

        sem = asyncio.Semaphore(self._max_concurrency)

        async def _lookup(name: str) -> str | None:
            async with sem:
                try:
                    return await self._resolve_latest(parser.registry, name)
                except RegistryLookupError as exc:
                    log.warning(
                        "watcher.lookup_failed",
                        registry=parser.registry,
                        package=name,
                        error=exc.reason,
                    )
                except Exception:
                    log.exception("watcher.lookup_error", registry=parser.registry, package=name)
                return None

        results = await asyncio.gather(*(_lookup(name) for name in names))
        latest_by_name = dict(zip(names, results))

        badges: list[Badge] = []
        for dep in wanted:
            latest = latest_by_name.get(dep.name)
            if latest is None:
                continue
            comparison = self._comparator.compare(dep.version_specifier, latest)
            badges.append(Badge.from_comparison(dep.name, dep.line_number, comparison))
        return badges

    async def _resolve_latest(self, registry: str, package_name: str) -> str:
        key = cache_key(registry, package_name)

        cached = self._session_cache.get(key)
        if cached is not None:
            return cached

        if self._file_cache is not None:
            persisted = self._file_cache.get(key)
            if persisted is not None:
                self._session_cache.set(key, persisted)
                return persisted

        client = self._clients.get(registry)
        if client is None:
            raise RegistryLookupError(registry, package_name, "registry is not enabled")

        latest = await client.get_latest_version(package_name)
        self._session_cache.set(key, latest)

        if self._file_cache is not None:
            try:
                self._file_cache.set(key, latest)
            except CacheIOError as exc:
                log.warning("watcher.cache_write_failed", key=key, error=str(exc))

        return latest
