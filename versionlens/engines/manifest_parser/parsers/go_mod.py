"""Parser for Go go.mod files."""

from __future__ import annotations

import re

from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import register_parser

# "require github.com/foo/bar v1.2.3" or, inside a require block, "github.com/foo/bar v1.2.3"
_REQUIRE_RE = re.compile(
    r"^(?:require\s+)?"
    r"([^\s()]+)"  # module path
    r"\s+"
    r"(v?\d+(?:\.\d+)*(?:[-+][0-9A-Za-z.+-]*)?)"  # version
    r"(?:\s|$)"
)

_BLOCK_START_RE = re.compile(r"^(require|exclude|retract|replace)\s*\($")

# "go 1.21" is the toolchain directive, not a module
_NOT_MODULES = frozenset({"go", "toolchain", "module", "exclude", "retract", "replace"})


class GoModParser:
    ecosystem = "go"
    registry = "go"
    file_names = ("go.mod",)

    def supports(self, filename: str) -> bool:
        return filename in self.file_names

    def parse(self, content: str) -> list[Dependency]:
        deps: list[Dependency] = []
        block: str | None = None

        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()

            if not line or line.startswith("//"):
                continue

            start = _BLOCK_START_RE.match(line)
            if start:
                block = start.group(1)
                continue
            if block is not None and line == ")":
                block = None
                continue
            # exclude/retract/replace blocks list versions that are not requirements
            if block is not None and block != "require":
                continue

            m = _REQUIRE_RE.match(line)
            if not m or m.group(1) in _NOT_MODULES:
                continue

            deps.append(
                Dependency(
                    name=m.group(1),
                    version_specifier=m.group(2),
                    line_number=line_number,
                )
            )

        return deps


register_parser(GoModParser())
