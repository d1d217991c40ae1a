"""Command-palette actions."""

from __future__ import annotations

from pathlib import Path

import structlog

from versionlens.cache.file_cache import FileCache
from versionlens.engines.manifest_parser.registry import discover_manifests
from versionlens.events.watcher import BufferWatcher
from versionlens.registries import REGISTRY_PAGES
from versionlens.state import AppState

log = structlog.get_logger("versionlens.commands")


def clear_cache(cache: FileCache) -> str:
    """Clear the persistent cache. Raises :class:`CacheIOError` on failure."""
    cache.clear()
    log.info("commands.cache_cleared", cache_dir=str(cache.cache_dir))
    return "Cache cleared successfully"


async def check_all_updates(watcher: BufferWatcher, root: Path) -> str:
    """Refresh every manifest under *root* and summarise the result."""
    manifests = 0
    badges = 0
    for _parser, path in discover_manifests(root):
        if not watcher.is_package_file(path.name):
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("commands.read_failed", file=str(path), error=str(exc))
            continue
        published = await watcher.refresh(str(path), content)
        manifests += 1
        badges += len(published or [])
    return f"Checked {manifests} manifest(s), {badges} dependencies annotated"


def toggle_inline(state: AppState) -> str:
    """Show or hide inline badges."""
    enabled = state.toggle_inline()
    return "Inline badges enabled" if enabled else "Inline badges disabled"


def registry_url(package_name: str, registry: str) -> str:
    """Public page for *package_name* on *registry*."""
    template = REGISTRY_PAGES.get(registry)
    if template is None:
        raise ValueError(f"unknown registry: {registry!r}")
    return template.format(name=package_name)
