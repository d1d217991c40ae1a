"""Registry clients: latest published version per ecosystem."""

from __future__ import annotations

import httpx

from versionlens.registries.base import RegistryClient, build_http_client
from versionlens.registries.crates import CratesClient
from versionlens.registries.go import GoProxyClient
from versionlens.registries.npm import NpmClient
from versionlens.registries.pubdev import PubDevClient
from versionlens.registries.pypi import PyPIClient
from versionlens.registries.rubygems import RubyGemsClient

REGISTRY_CLIENTS: dict[str, type[RegistryClient]] = {
    cls.registry: cls
    for cls in (NpmClient, CratesClient, PyPIClient, GoProxyClient, RubyGemsClient, PubDevClient)
}

# Public package pages, used by the "open registry" command
REGISTRY_PAGES: dict[str, str] = {
    "npm": "https://www.npmjs.com/package/{name}",
    "crates.io": "https://crates.io/crates/{name}",
    "pypi": "https://pypi.org/project/{name}",
    "rubygems": "https://rubygems.org/gems/{name}",
    "pub.dev": "https://pub.dev/packages/{name}",
    "go": "https://pkg.go.dev/{name}",
}


def build_clients(
    registries: list[str] | tuple[str, ...],
    client: httpx.AsyncClient,
) -> dict[str, RegistryClient]:
    """Instantiate one client per known registry in *registries*, sharing *client*."""
    return {
        registry: REGISTRY_CLIENTS[registry](client)
        for registry in registries
        if registry in REGISTRY_CLIENTS
    }


__all__ = [
    "REGISTRY_CLIENTS",
    "REGISTRY_PAGES",
    "CratesClient",
    "GoProxyClient",
    "NpmClient",
    "PubDevClient",
    "PyPIClient",
    "RegistryClient",
    "RubyGemsClient",
    "build_clients",
    "build_http_client",
]
