"""Manifest parsers: auto-registered on import."""

from versionlens.engines.manifest_parser.parsers import (
    cargo_toml,  # noqa: F401
    gemfile,  # noqa: F401
    go_mod,  # noqa: F401
    package_json,  # noqa: F401
    pubspec_yaml,  # noqa: F401
    pyproject_toml,  # noqa: F401
)
