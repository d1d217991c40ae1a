"""Inline version badges and their colour coding."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from semantic_version import Version

from versionlens.engines.version_compare.models import (
    Outdated,
    UpToDate,
    VersionComparison,
    VersionDiff,
)


class BadgeStyle(str, enum.Enum):
    UP_TO_DATE = "up_to_date"  # green
    OUTDATED = "outdated"  # yellow: same major, newer minor/patch
    MAJOR_DIFF = "major_diff"  # red

    def color(self) -> str:
        return _COLORS[self][0]

    def background_color(self) -> str:
        return _COLORS[self][1]

    @classmethod
    def from_comparison(cls, comparison: VersionComparison) -> BadgeStyle:
        if isinstance(comparison, UpToDate):
            return cls.UP_TO_DATE
        if isinstance(comparison, Outdated) and comparison.diff is VersionDiff.MAJOR:
            return cls.MAJOR_DIFF
        # minor/patch updates, and unparseable latest versions, stay visible as outdated
        return cls.OUTDATED

    @classmethod
    def from_version_diff(cls, current: str, latest: str) -> BadgeStyle:
        """Style from two plain versions; unparseable input counts as outdated."""
        current_version = _loose_version(current)
        latest_version = _loose_version(latest)
        if current_version is None or latest_version is None:
            return cls.OUTDATED
        if current_version.major != latest_version.major:
            return cls.MAJOR_DIFF
        if current_version != latest_version:
            return cls.OUTDATED
        return cls.UP_TO_DATE


_COLORS: dict[BadgeStyle, tuple[str, str]] = {
    BadgeStyle.UP_TO_DATE: ("#4ade80", "#22c55e33"),
    BadgeStyle.OUTDATED: ("#facc15", "#eab30833"),
    BadgeStyle.MAJOR_DIFF: ("#f87171", "#ef444433"),
}


def _loose_version(text: str) -> Version | None:
    parts = text.strip().lstrip("^~><=").split()
    if not parts:
        return None
    try:
        return Version(parts[0])
    except ValueError:
        return None


@dataclass(frozen=True)
class Badge:
    """An annotation rendered at the end of a dependency's line."""

    text: str
    style: BadgeStyle
    line_number: int
    package_name: str

    @classmethod
    def from_comparison(
        cls, package_name: str, line_number: int, comparison: VersionComparison
    ) -> Badge:
        return cls(
            text=comparison.display_text(),
            style=BadgeStyle.from_comparison(comparison),
            line_number=line_number,
            package_name=package_name,
        )

    def to_dict(self) -> dict:
        return {
            "package_name": self.package_name,
            "line_number": self.line_number,
            "style": self.style.value,
            "text": self.text,
        }


def filter_badges_by_style(badges: list[Badge], style: BadgeStyle) -> list[Badge]:
    return [b for b in badges if b.style is style]
