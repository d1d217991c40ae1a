"""Parser for npm package.json files.

The JSON decoder gives us names and specifiers but throws away positions,
so a second, line-oriented pass walks the raw text tracking brace depth to
find the line each key sits on inside its section object.
"""

from __future__ import annotations

import json
import re

from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import register_parser
from versionlens.exceptions import ManifestParseError

_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")

# A JSON string (optionally followed by a colon, i.e. an object key) or a bracket
_TOKEN_RE = re.compile(r'"((?:[^"\\]|\\.)*)"(\s*:)?|[{}\[\]]')


def _unescape(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        return raw


def _locate_keys(content: str) -> dict[str, dict[str, int]]:
    """Map section -> {dependency name -> 1-indexed line} for top-level sections."""
    positions: dict[str, dict[str, int]] = {section: {} for section in _SECTIONS}
    depth = 0
    pending_key: str | None = None
    current_section: str | None = None

    for line_number, line in enumerate(content.splitlines(), start=1):
        for m in _TOKEN_RE.finditer(line):
            token = m.group(0)
            if token in ("{", "["):
                depth += 1
                if depth == 2 and token == "{" and pending_key in positions:
                    current_section = pending_key
                pending_key = None
            elif token in ("}", "]"):
                if depth == 2:
                    current_section = None
                depth -= 1
            elif m.group(2):
                key = _unescape(m.group(1))
                if depth == 1:
                    pending_key = key
                elif depth == 2 and current_section is not None:
                    positions[current_section].setdefault(key, line_number)
            else:
                pending_key = None

    return positions


def _specifier(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        # { "version": "1.0.0", "registry": "..." }
        version = value.get("version")
        return version if isinstance(version, str) else ""
    return ""


class PackageJsonParser:
    ecosystem = "npm"
    registry = "npm"
    file_names = ("package.json",)

    def supports(self, filename: str) -> bool:
        return filename in self.file_names

    def parse(self, content: str) -> list[Dependency]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ManifestParseError("package.json", str(exc)) from exc

        if not isinstance(data, dict):
            return []

        positions = _locate_keys(content)
        deps: list[Dependency] = []

        for section in _SECTIONS:
            section_obj = data.get(section)
            if not isinstance(section_obj, dict):
                continue
            for name, value in section_obj.items():
                deps.append(
                    Dependency(
                        name=name,
                        version_specifier=_specifier(value),
                        line_number=positions[section].get(name, 0),
                    )
                )

        return deps


register_parser(PackageJsonParser())
