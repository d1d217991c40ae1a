"""Parser registry: map manifest file names to parsers and find manifests on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from versionlens.engines.manifest_parser.models import Dependency


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    ecosystem: str
    registry: str
    file_names: tuple[str, ...]

    def parse(self, content: str) -> list[Dependency]: ...

    def supports(self, filename: str) -> bool: ...


# file name -> parser; filled once when the parsers package is imported
PARSER_REGISTRY: dict[str, ManifestParser] = {}

# Directories that hold vendored or generated copies of other projects' manifests
_SKIP_DIRS = frozenset(
    {".git", "node_modules", "target", "vendor", ".venv", "venv", ".dart_tool", "build"}
)


def register_parser(parser: ManifestParser) -> None:
    """Register a parser under every file name it claims."""
    for name in parser.file_names:
        PARSER_REGISTRY[name] = parser


def parser_for_file(filename: str) -> ManifestParser | None:
    """Return the parser claiming *filename* (a basename), if any."""
    return PARSER_REGISTRY.get(filename)


def discover_manifests(root: Path) -> list[tuple[ManifestParser, Path]]:
    """Walk *root* and match manifest files to registered parsers.

    Returns (parser, matched_file) pairs sorted by path.
    """
    matches: list[tuple[ManifestParser, Path]] = []
    for name, parser in PARSER_REGISTRY.items():
        for hit in root.rglob(name):
            rel_parts = hit.relative_to(root).parts[:-1]
            if any(part in _SKIP_DIRS for part in rel_parts):
                continue
            if hit.is_file():
                matches.append((parser, hit))
    matches.sort(key=lambda pair: str(pair[1]))
    return matches
