"""Version comparison engine: specifier vs. latest published version."""

from versionlens.engines.version_compare.comparator import VersionComparator
from versionlens.engines.version_compare.models import (
    ComparisonError,
    Outdated,
    UpToDate,
    VersionComparison,
    VersionDiff,
)

__all__ = [
    "ComparisonError",
    "Outdated",
    "UpToDate",
    "VersionComparator",
    "VersionComparison",
    "VersionDiff",
]
