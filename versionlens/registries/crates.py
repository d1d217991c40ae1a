"""crates.io registry client."""

from __future__ import annotations

from typing import Any

from versionlens.registries.base import RegistryClient


class CratesClient(RegistryClient):
    registry = "crates.io"
    url_template = "https://crates.io/api/v1/crates/{name}"

    def extract_version(self, package_name: str, data: Any) -> str:
        if not isinstance(data, dict):
            raise self._error(package_name, "unexpected response shape")
        errors = data.get("errors")
        if errors:
            detail = "unknown error"
            if isinstance(errors, list) and isinstance(errors[0], dict):
                detail = errors[0].get("detail") or detail
            raise self._error(package_name, f"crates.io error: {detail}")
        crate = data.get("crate")
        max_version = crate.get("max_version") if isinstance(crate, dict) else None
        return self._require_str(package_name, max_version, "max_version")
