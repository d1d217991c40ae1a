"""Custom exceptions for VersionLens."""


class VersionLensError(Exception):
    """Base exception for all VersionLens errors."""


class ManifestParseError(VersionLensError):
    """Raised when a structured manifest (JSON/TOML) is syntactically invalid."""

    def __init__(self, manifest: str, reason: str):
        self.manifest = manifest
        self.reason = reason
        super().__init__(f"failed to parse {manifest}: {reason}")


class RegistryLookupError(VersionLensError):
    """Raised when a registry cannot produce a latest version for a package."""

    def __init__(self, registry: str, package: str, reason: str):
        self.registry = registry
        self.package = package
        self.reason = reason
        super().__init__(f"{registry} lookup for '{package}' failed: {reason}")


class CacheIOError(VersionLensError):
    """Raised when the persistent cache cannot be written or cleared."""
