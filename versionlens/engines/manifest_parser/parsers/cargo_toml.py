"""Parser for Rust Cargo.toml files."""

from __future__ import annotations

import sys

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import register_parser
from versionlens.exceptions import ManifestParseError

_DEP_SECTIONS = ("dependencies", "dev-dependencies", "build-dependencies")


def _parse_version(spec: object) -> str:
    """Extract version constraint from a dependency spec."""
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict):
        version = spec.get("version")
        if isinstance(version, str):
            return version
    # git/path dependencies and anything else: no constraint
    return "*"


def _find_line(content: str, name: str) -> int:
    needle = f"{name} = "
    for line_number, line in enumerate(content.splitlines(), start=1):
        if needle in line:
            return line_number
    return 1


class CargoTomlParser:
    ecosystem = "cargo"
    registry = "crates.io"
    file_names = ("Cargo.toml",)

    def supports(self, filename: str) -> bool:
        return filename in self.file_names

    def parse(self, content: str) -> list[Dependency]:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestParseError("Cargo.toml", str(exc)) from exc

        deps: list[Dependency] = []

        for section in _DEP_SECTIONS:
            dep_table = data.get(section, {})
            if not isinstance(dep_table, dict):
                continue
            for name, spec in dep_table.items():
                deps.append(
                    Dependency(
                        name=name,
                        version_specifier=_parse_version(spec),
                        line_number=_find_line(content, name),
                    )
                )

        return deps


register_parser(CargoTomlParser())
