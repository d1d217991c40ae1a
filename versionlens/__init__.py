"""VersionLens: inline latest-version annotations for package manifests."""

__version__ = "0.1.0"
