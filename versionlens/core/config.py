"""Runtime settings: defaults, TOML settings file, ignore file, env overrides."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

IGNORE_FILE_NAME = ".versionlens-ignore"

DEFAULT_REGISTRIES = ("npm", "crates.io", "pypi", "rubygems", "pub.dev", "go")


def _default_cache_dir() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "versionlens"


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


@dataclass
class Settings:
    """User-tunable behaviour of the version-resolution engine."""

    cache_ttl_hours: int = 24
    inline_enabled_default: bool = True
    enabled_registries: list[str] = field(default_factory=lambda: list(DEFAULT_REGISTRIES))
    ignore_list: list[str] = field(default_factory=list)
    debounce_ms: int = 500
    cache_dir: Path = field(default_factory=_default_cache_dir)
    http_timeout: float = 15.0

    @property
    def cache_ttl_seconds(self) -> int:
        return self.cache_ttl_hours * 3600

    @classmethod
    def load_from_file(cls, path: Path) -> Settings:
        """Load settings from a TOML file. Unknown keys are ignored.

        Raises ``tomllib.TOMLDecodeError`` on malformed TOML and ``OSError``
        if the file cannot be read.
        """
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "cache_dir" in kwargs:
            kwargs["cache_dir"] = Path(kwargs["cache_dir"]).expanduser()
        return cls(**kwargs)

    @classmethod
    def load_from_directory(cls, directory: Path) -> Settings:
        """Default settings plus the ignore list found in *directory*, if any."""
        settings = cls()
        ignore_file = directory / IGNORE_FILE_NAME
        if ignore_file.is_file():
            settings.ignore_list = [
                line.strip()
                for line in ignore_file.read_text(encoding="utf-8").splitlines()
                if line.strip() and not line.strip().startswith("#")
            ]
        return settings

    @classmethod
    def from_env(cls) -> Settings:
        """Default settings with ``VERSIONLENS_*`` environment overrides applied."""
        settings = cls()
        settings.cache_ttl_hours = int(
            _env_float("VERSIONLENS_CACHE_TTL_HOURS", settings.cache_ttl_hours)
        )
        settings.debounce_ms = int(_env_float("VERSIONLENS_DEBOUNCE_MS", settings.debounce_ms))
        settings.http_timeout = _env_float("VERSIONLENS_HTTP_TIMEOUT", settings.http_timeout)
        cache_dir = os.environ.get("VERSIONLENS_CACHE_DIR")
        if cache_dir:
            settings.cache_dir = Path(cache_dir).expanduser()
        return settings

    def should_ignore(self, package: str) -> bool:
        return any(package == ignored or package.startswith(ignored) for ignored in self.ignore_list)

    def is_registry_enabled(self, registry: str) -> bool:
        return registry in self.enabled_registries
