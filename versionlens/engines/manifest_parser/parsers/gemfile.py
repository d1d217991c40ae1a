"""Parser for Ruby Gemfile files."""

from __future__ import annotations

import re

from versionlens.engines.manifest_parser.models import Dependency
from versionlens.engines.manifest_parser.registry import register_parser

# Tried in order; the first pattern matching a line decides its entry.
_GEM_PATTERNS = (
    # gem 'rails', '7.0.4'
    re.compile(r"""^gem\s+["']([^"']+)["']\s*,\s*["']([^"']+)["']"""),
    # gem 'rails', ~> 7.0
    re.compile(r"""^gem\s+["']([^"']+)["']\s*,\s*((?:~>|\^)\s*[0-9][0-9A-Za-z.]*)"""),
    # gem rails, '7.0.4'  /  gem :rails, '7.0.4'
    re.compile(r"""^gem\s+:?([A-Za-z0-9_][A-Za-z0-9_.-]*)\s*,\s*["']([^"']+)["']"""),
    # gem 'rails'
    re.compile(r"""^gem\s+["']([^"']+)["']"""),
)


class GemfileParser:
    ecosystem = "ruby"
    registry = "rubygems"
    file_names = ("Gemfile",)

    def supports(self, filename: str) -> bool:
        return filename in self.file_names

    def parse(self, content: str) -> list[Dependency]:
        seen: set[str] = set()
        deps: list[Dependency] = []

        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            for pattern in _GEM_PATTERNS:
                m = pattern.match(line)
                if not m:
                    continue
                name = m.group(1)
                version = m.group(2) if m.lastindex and m.lastindex >= 2 else "*"
                if name not in seen:
                    seen.add(name)
                    deps.append(
                        Dependency(
                            name=name,
                            version_specifier=version.strip(),
                            line_number=line_number,
                        )
                    )
                break

        return deps


register_parser(GemfileParser())
