"""Parser for Python pyproject.toml files.

Collects dependencies from, in order:

1. ``[project.dependencies]`` written as a table
2. ``project.dependencies`` written as a PEP 621 string array
3. ``[project.optional-dependencies]``, specifiers tagged with `` [group]``
4. ``[tool.poetry.dependencies]`` plus poetry dev/group dependencies
5. a root-level ``[dependencies]`` table

A name already collected from an earlier source is not collected again.
"""

from __future__ import annotations

import re
import sys

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import register_parser
from versionlens.exceptions import ManifestParseError

# First character that starts a version constraint in a requirement string
_OPERATOR_RE = re.compile(r"[><=~^!]")

_EXTRAS_RE = re.compile(r"\[[^\]]*\]")

# Interpreter constraint in poetry tables, not a package
_POETRY_RESERVED = frozenset({"python"})


def _split_requirement(raw: str) -> tuple[str, str] | None:
    """Split ``"requests[socks]>=2.0; python_version>'3'"`` into name and specifier."""
    line = raw.split(";", 1)[0].strip()
    if not line:
        return None

    # "foo @ https://host/foo.whl" is a direct reference with no version constraint
    name, sep, _url = line.partition("@")
    if sep:
        name = _EXTRAS_RE.sub("", name).strip()
        return (name, "*") if name else None

    m = _OPERATOR_RE.search(line)
    if m is None:
        name, spec = line, "*"
    else:
        name = line[: m.start()]
        spec = line[m.start() :].strip().rstrip(")").strip() or "*"

    name = _EXTRAS_RE.sub("", name).strip().rstrip("(").strip()
    if not name:
        return None
    return name, spec


def _table_specifier(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        version = value.get("version")
        if isinstance(version, str):
            return version
    return "*"


def _find_line(content: str, name: str) -> int:
    for line_number, line in enumerate(content.splitlines(), start=1):
        if name in line:
            return line_number
    return 1


class PyprojectTomlParser:
    ecosystem = "python"
    registry = "pypi"
    file_names = ("pyproject.toml",)

    def supports(self, filename: str) -> bool:
        return filename in self.file_names

    def parse(self, content: str) -> list[Dependency]:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestParseError("pyproject.toml", str(exc)) from exc

        collected: dict[str, str] = {}

        def add(name: str, spec: str) -> None:
            if name not in collected:
                collected[name] = spec

        project = data.get("project", {})
        if not isinstance(project, dict):
            project = {}
        project_deps = project.get("dependencies")

        if isinstance(project_deps, dict):
            for name, value in project_deps.items():
                add(name, _table_specifier(value))

        if isinstance(project_deps, list):
            for raw in project_deps:
                if isinstance(raw, str) and (parsed := _split_requirement(raw)):
                    add(*parsed)

        optional = project.get("optional-dependencies", {})
        if isinstance(optional, dict):
            for group, entries in optional.items():
                if not isinstance(entries, list):
                    continue
                for raw in entries:
                    if isinstance(raw, str) and (parsed := _split_requirement(raw)):
                        name, spec = parsed
                        add(name, f"{spec} [{group}]")

        for table in self._poetry_tables(data):
            for name, value in table.items():
                if name.lower() not in _POETRY_RESERVED:
                    add(name, _table_specifier(value))

        root_deps = data.get("dependencies")
        if isinstance(root_deps, dict):
            for name, value in root_deps.items():
                add(name, _table_specifier(value))

        return [
            Dependency(name=name, version_specifier=spec, line_number=_find_line(content, name))
            for name, spec in collected.items()
        ]

    @staticmethod
    def _poetry_tables(data: dict) -> list[dict]:
        tool = data.get("tool", {})
        poetry = tool.get("poetry", {}) if isinstance(tool, dict) else None
        if not isinstance(poetry, dict):
            return []
        tables = [poetry.get("dependencies"), poetry.get("dev-dependencies")]
        groups = poetry.get("group", {})
        if isinstance(groups, dict):
            tables.extend(
                group.get("dependencies") for group in groups.values() if isinstance(group, dict)
            )
        return [t for t in tables if isinstance(t, dict)]


register_parser(PyprojectTomlParser())
