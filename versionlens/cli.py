"""CLI entry point: versionlens.

Subcommands:
    versionlens check /path/to/project     # Badge every manifest under a directory
    versionlens parse package.json         # Show parsed dependencies (no network)
    versionlens compare ^1.2.0 2.0.0       # Classify a specifier against a version
    versionlens clear-cache                # Wipe the persistent lookup cache
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click

from versionlens import commands
from versionlens.cache.file_cache import FileCache
from versionlens.core.config import Settings
from versionlens.core.logging import setup_logging
from versionlens.engines.manifest_parser import parser_for_file
from versionlens.engines.version_compare import VersionComparator
from versionlens.events.watcher import BufferWatcher
from versionlens.exceptions import CacheIOError, ManifestParseError
from versionlens.registries import build_clients, build_http_client


def _load_settings(config: str | None, project: Path | None = None) -> Settings:
    settings = Settings.load_from_file(Path(config)) if config else Settings.from_env()
    if project is not None:
        settings.ignore_list.extend(Settings.load_from_directory(project).ignore_list)
    return settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Show the latest published version of every declared dependency."""
    setup_logging("DEBUG" if verbose else None)


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--no-cache", is_flag=True, help="Skip the persistent cache")
@click.option("--config", default=None, type=click.Path(exists=True), help="Settings TOML file")
def check(path: str, as_json: bool, no_cache: bool, config: str | None) -> None:
    """Badge every manifest found under PATH."""
    root = Path(path).resolve()
    settings = _load_settings(config, root)
    file_cache = None if no_cache else FileCache(settings.cache_dir, settings.cache_ttl_seconds)

    async def _run() -> tuple[str, dict[str, list]]:
        async with build_http_client(settings.http_timeout) as http:
            watcher = BufferWatcher(
                build_clients(settings.enabled_registries, http),
                settings=settings,
                file_cache=file_cache,
            )
            summary = await commands.check_all_updates(watcher, root)
            results = {
                str(Path(p).relative_to(root)): watcher.get_annotations(p) or []
                for p in watcher.active_paths()
            }
            return summary, results

    summary, results = asyncio.run(_run())

    if as_json:
        rows = {f: [b.to_dict() for b in badges] for f, badges in results.items()}
        click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    for source_file, badges in sorted(results.items()):
        click.echo(f"  {source_file}")
        for badge in sorted(badges, key=lambda b: b.line_number):
            click.echo(f"    {badge.line_number:>4}  {badge.package_name}  {badge.text}")
        click.echo()
    click.echo(summary)


@main.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
def parse(manifest: str) -> None:
    """Print the dependencies declared in MANIFEST."""
    path = Path(manifest)
    parser = parser_for_file(path.name)
    if parser is None:
        click.echo(f"Error: {path.name} is not a supported manifest", err=True)
        sys.exit(1)
    try:
        deps = parser.parse(path.read_text(encoding="utf-8"))
    except ManifestParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not deps:
        click.echo("No dependencies found.")
        return
    click.echo(f"Found {len(deps)} dependencies ({parser.ecosystem})")
    for dep in deps:
        click.echo(f"  {dep.line_number:>4}  {dep.name} {dep.version_specifier}")


@main.command()
@click.argument("current")
@click.argument("latest")
def compare(current: str, latest: str) -> None:
    """Compare a CURRENT specifier with the LATEST version."""
    click.echo(VersionComparator().compare(current, latest).display_text())


@main.command("clear-cache")
@click.option("--config", default=None, type=click.Path(exists=True), help="Settings TOML file")
def clear_cache(config: str | None) -> None:
    """Remove every persisted registry lookup."""
    settings = _load_settings(config)
    cache = FileCache(settings.cache_dir, settings.cache_ttl_seconds)
    try:
        click.echo(commands.clear_cache(cache))
    except CacheIOError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
