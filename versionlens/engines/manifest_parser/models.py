"""Data models for the manifest parser engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Dependency:
    """A single dependency declared in a manifest.

    ``line_number`` is 1-indexed; ``0`` means the parser could not locate
    the declaration in the source text.
    """

    name: str
    version_specifier: str
    line_number: int
