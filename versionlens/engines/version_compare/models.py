"""Result types for version comparison."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class VersionDiff(str, enum.Enum):
    """Coarse magnitude of the change between a specifier's base version and latest."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class UpToDate:
    current: str
    latest: str

    def display_text(self) -> str:
        return f"{self.current} → {self.latest}"


@dataclass(frozen=True)
class Outdated:
    current: str
    latest: str
    diff: VersionDiff

    def display_text(self) -> str:
        return f"{self.current} → {self.latest} ({self.diff.label})"


@dataclass(frozen=True)
class ComparisonError:
    """The latest version string could not be parsed."""

    message: str

    def display_text(self) -> str:
        return f"Error: {self.message}"


VersionComparison = Union[UpToDate, Outdated, ComparisonError]
