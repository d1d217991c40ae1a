"""Go module proxy client.

``/@v/list`` answers with plain text, one version per line, in no
particular order.
"""

from __future__ import annotations

import re

from versionlens.registries.base import RegistryClient

_UPPER_RE = re.compile(r"[A-Z]")


def escape_module_path(module_path: str) -> str:
    """Case-encode a module path for the proxy protocol (``Azure`` -> ``!azure``)."""
    return _UPPER_RE.sub(lambda m: "!" + m.group(0).lower(), module_path)


class GoProxyClient(RegistryClient):
    registry = "go"
    url_template = "https://proxy.golang.org/{name}/@v/list"

    def url_for(self, package_name: str) -> str:
        module_path = package_name.split("@", 1)[0]
        return self.url_template.format(name=escape_module_path(module_path))

    async def get_latest_version(self, package_name: str) -> str:
        response = await self._get(package_name)
        versions = [
            line.strip().removesuffix(".mod")
            for line in response.text.splitlines()
            if line.strip()
        ]
        if not versions:
            raise self._error(package_name, "no versions found for module")
        return max(versions)
