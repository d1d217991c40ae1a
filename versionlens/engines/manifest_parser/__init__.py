"""Manifest parser engine: extract declared dependencies with their source lines."""

# Ensure parsers are registered before any lookup runs.
import versionlens.engines.manifest_parser.parsers  # noqa: F401
from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import (
    PARSER_REGISTRY,
    ManifestParser,
    discover_manifests,
    parser_for_file,
)

__all__ = [
    "PARSER_REGISTRY",
    "Dependency",
    "ManifestParser",
    "discover_manifests",
    "parser_for_file",
]
