"""pub.dev API client."""

from __future__ import annotations

from typing import Any

from versionlens.registries.base import RegistryClient


class PubDevClient(RegistryClient):
    registry = "pub.dev"
    url_template = "https://pub.dev/api/packages/{name}"

    def extract_version(self, package_name: str, data: Any) -> str:
        if not isinstance(data, dict):
            raise self._error(package_name, "unexpected response shape")
        error = data.get("error")
        if error is not None:
            message = error.get("message") if isinstance(error, dict) else error
            raise self._error(package_name, f"pub.dev error: {message}")
        latest = data.get("latest")
        version = latest.get("version") if isinstance(latest, dict) else None
        return self._require_str(package_name, version, "latest version")
