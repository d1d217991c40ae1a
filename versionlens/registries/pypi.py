"""PyPI JSON API client."""

from __future__ import annotations

from typing import Any

from versionlens.registries.base import RegistryClient


class PyPIClient(RegistryClient):
    registry = "pypi"
    url_template = "https://pypi.org/pypi/{name}/json"

    def extract_version(self, package_name: str, data: Any) -> str:
        if not isinstance(data, dict):
            raise self._error(package_name, "unexpected response shape")
        if data.get("error") is not None:
            raise self._error(package_name, f"PyPI error: {data['error']}")
        info = data.get("info")
        version = info.get("version") if isinstance(info, dict) else None
        return self._require_str(package_name, version, "version")
