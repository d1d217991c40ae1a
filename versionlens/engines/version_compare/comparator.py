"""Classify a manifest specifier against the latest published version."""

from __future__ import annotations

import re

from semantic_version import SimpleSpec, Version

from versionlens.engines.version_compare.models import (
    ComparisonError,
    Outdated,
    UpToDate,
    VersionComparison,
    VersionDiff,
)

_WILDCARD = SimpleSpec("*")

_RANGE_PREFIXES = ("^", "~", ">", "<", "=")

_WHITESPACE_RE = re.compile(r"\s+")

# pyproject optional dependencies are tagged "{spec} [group]"
_GROUP_SUFFIX_RE = re.compile(r"\s+\[[^\]]*\]$")


def _strip_v(text: str) -> str:
    # Go module versions are written "v1.2.3"
    if len(text) > 1 and text[0] in "vV" and text[1].isdigit():
        return text[1:]
    return text


def _parse_strict(text: str) -> Version | None:
    try:
        return Version(_strip_v(text.strip()))
    except ValueError:
        return None


class VersionComparator:
    """Stateless comparator; one instance can be shared freely."""

    def compare(self, current_spec: str, latest_version: str) -> VersionComparison:
        """Compare a specifier (``^1.2.3``, ``~1.2.3``, ``>=1.0``, ``1.2.3``...) with *latest_version*."""
        try:
            latest = Version(_strip_v(latest_version.strip()))
        except ValueError as exc:
            return ComparisonError(str(exc))

        requirement = self.parse_specifier(current_spec)
        if requirement.match(latest):
            return UpToDate(current=current_spec, latest=latest_version)

        return Outdated(
            current=current_spec,
            latest=latest_version,
            diff=self.version_diff(current_spec, latest),
        )

    def parse_specifier(self, spec: str) -> SimpleSpec:
        """Translate a specifier into a requirement; unknown forms match anything."""
        spec = _GROUP_SUFFIX_RE.sub("", spec.strip())

        # RubyGems pessimistic "~> 1.2.3" behaves like "~1.2.3"
        if spec.startswith("~>"):
            spec = "~" + spec[2:].strip()

        # ^1.2.3 means >=1.2.3,<2.0.0
        if spec.startswith("^"):
            v = _parse_strict(spec[1:])
            if v is not None:
                return self._build(f">={v.major}.{v.minor}.{v.patch},<{v.major + 1}.0.0")

        # ~1.2.3 means >=1.2.3,<1.3.0
        if spec.startswith("~") and not spec.startswith("~="):
            v = _parse_strict(spec[1:])
            if v is not None:
                return self._build(
                    f">={v.major}.{v.minor}.{v.patch},<{v.major}.{v.minor + 1}.0"
                )

        if spec.startswith((">", "<", "=", "~=")):
            return self._build(_WHITESPACE_RE.sub("", spec))

        # A bare version pins exactly
        v = _parse_strict(spec)
        if v is not None:
            return self._build(f"=={v.major}.{v.minor}.{v.patch}")

        return _WILDCARD

    def version_diff(self, current_spec: str, latest: Version) -> VersionDiff:
        base = self.extract_base_version(current_spec)
        if base is None:
            return VersionDiff.PATCH
        if latest.major != base.major:
            return VersionDiff.MAJOR
        if latest.minor != base.minor:
            return VersionDiff.MINOR
        return VersionDiff.PATCH

    @staticmethod
    def extract_base_version(spec: str) -> Version | None:
        base = _GROUP_SUFFIX_RE.sub("", spec.strip())
        return _parse_strict(base.lstrip("".join(_RANGE_PREFIXES)))

    @staticmethod
    def _build(expression: str) -> SimpleSpec:
        try:
            return SimpleSpec(expression)
        except ValueError:
            return _WILDCARD
