"""RubyGems API client."""

from __future__ import annotations

from typing import Any

from versionlens.registries.base import RegistryClient


class RubyGemsClient(RegistryClient):
    registry = "rubygems"
    url_template = "https://rubygems.org/api/v1/gems/{name}.json"

    def extract_version(self, package_name: str, data: Any) -> str:
        if not isinstance(data, dict):
            raise self._error(package_name, "unexpected response shape")
        if data.get("error") is not None:
            raise self._error(package_name, f"RubyGems error: {data['error']}")
        return self._require_str(package_name, data.get("version"), "version")
