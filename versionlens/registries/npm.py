"""npm registry client."""

from __future__ import annotations

from typing import Any

from versionlens.registries.base import RegistryClient


class NpmClient(RegistryClient):
    registry = "npm"
    url_template = "https://registry.npmjs.org/{name}"

    def url_for(self, package_name: str) -> str:
        # scoped packages: @scope/name -> @scope%2Fname
        return self.url_template.format(name=package_name.replace("/", "%2F"))

    def extract_version(self, package_name: str, data: Any) -> str:
        if not isinstance(data, dict):
            raise self._error(package_name, "unexpected response shape")
        error = data.get("error")
        if isinstance(error, str):
            reason = data.get("reason") or ""
            raise self._error(package_name, f"npm error: {error} - {reason}".rstrip(" -"))
        dist_tags = data.get("dist-tags")
        latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
        return self._require_str(package_name, latest, "latest version")
