"""Parser for Dart/Flutter pubspec.yaml files.

Line-oriented on purpose: only the ``dependencies`` and ``dev_dependencies``
blocks matter and their line positions are needed, which a YAML loader
does not give back.
"""

from __future__ import annotations

import re

from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import register_parser

_ENTRY_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_.-]*)\s*:\s*(.*)$")

_NUMERIC_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*")

_RANGE_OPERATORS = ("^", "~", ">=", "<=", ">", "<", "=")

# Keys that appear inside dependency blocks but are not packages
_RESERVED_KEYS = frozenset({"flutter", "sdk", "git", "path"})

_DEPENDENCY_HEADERS = frozenset({"dependencies:"})
_DEV_DEPENDENCY_HEADERS = frozenset({"dev_dependencies:", "dev-dependencies:"})


def _strip_comment(line: str) -> str:
    return line.split(" #", 1)[0].rstrip()


def _reduce_version(value: str) -> str:
    """Reduce ``"^1.2.3"`` to ``1.2.3``; anything without a numeric version becomes ``*``."""
    value = value.strip().strip("'\"").strip()
    if not value or value == "any":
        return "*"
    for op in _RANGE_OPERATORS:
        if value.startswith(op):
            value = value[len(op) :].strip()
            break
    m = _NUMERIC_VERSION_RE.match(value)
    return m.group(0) if m else "*"


class PubspecYamlParser:
    ecosystem = "dart"
    registry = "pub.dev"
    file_names = ("pubspec.yaml", "pubspec.yml")

    def supports(self, filename: str) -> bool:
        return filename in self.file_names

    def parse(self, content: str) -> list[Dependency]:
        # name -> [specifier, line]; kept mutable until a nested "version:" is seen
        entries: dict[str, list] = {}
        in_dependencies = False
        in_dev_dependencies = False
        child_indent: int | None = None
        last_name: str | None = None

        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            line = _strip_comment(raw_line)
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            indent = len(line) - len(line.lstrip())

            if indent == 0:
                in_dependencies = stripped in _DEPENDENCY_HEADERS
                in_dev_dependencies = stripped in _DEV_DEPENDENCY_HEADERS
                child_indent = None
                last_name = None
                continue

            if not (in_dependencies or in_dev_dependencies):
                continue

            m = _ENTRY_RE.match(stripped)
            if not m:
                continue
            key, value = m.group(1), m.group(2)

            if child_indent is None:
                child_indent = indent

            if indent > child_indent:
                # hosted dependency: "  foo:\n    version: ^1.0.0"
                if key == "version" and last_name in entries and entries[last_name][0] == "*":
                    entries[last_name][0] = _reduce_version(value)
                continue

            last_name = None
            if key in _RESERVED_KEYS or key in entries:
                continue
            entries[key] = [_reduce_version(value), line_number]
            last_name = key

        return [
            Dependency(name=name, version_specifier=spec, line_number=line)
            for name, (spec, line) in entries.items()
        ]


register_parser(PubspecYamlParser())
