"""Shared async HTTP plumbing for registry clients."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from versionlens import __version__
from versionlens.exceptions import RegistryLookupError

log = structlog.get_logger("versionlens.registry")

USER_AGENT = f"versionlens/{__version__} (+https://github.com/versionlens/versionlens)"

DEFAULT_TIMEOUT = 15.0


def build_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    # crates.io rejects requests without a descriptive User-Agent
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
    )


class RegistryClient:
    """One "latest version" lookup per package name against a single registry.

    Subclasses set :attr:`registry` and :attr:`url_template` and implement
    :meth:`extract_version`. Every failure surfaces as
    :class:`RegistryLookupError`.
    """

    registry: str = ""
    url_template: str = ""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client or build_http_client()

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    def url_for(self, package_name: str) -> str:
        return self.url_template.format(name=package_name)

    async def get_latest_version(self, package_name: str) -> str:
        response = await self._get(package_name)
        try:
            data = response.json()
        except ValueError as exc:
            raise self._error(package_name, "response is not valid JSON") from exc
        return self.extract_version(package_name, data)

    def extract_version(self, package_name: str, data: Any) -> str:
        raise NotImplementedError

    # ── internal ───────────────────────────────────────────────────────────

    async def _get(self, package_name: str) -> httpx.Response:
        url = self.url_for(package_name)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise self._error(package_name, f"HTTP request failed: {exc}") from exc

        if response.is_success:
            return response

        detail = self._error_detail(response)
        log.debug(
            "registry.http_error",
            registry=self.registry,
            package=package_name,
            status=response.status_code,
        )
        raise self._error(package_name, f"HTTP {response.status_code}{detail}")

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Best-effort human-readable reason pulled out of an error body."""
        try:
            data = response.json()
        except ValueError:
            text = response.text.strip().splitlines()
            return f": {text[0][:200]}" if text else ""
        if isinstance(data, dict):
            for key in ("error", "message", "detail"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    return f": {value}"
                if isinstance(value, dict) and isinstance(value.get("message"), str):
                    return f": {value['message']}"
            errors = data.get("errors")
            if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                return f": {errors[0].get('detail', 'unknown error')}"
        return ""

    def _error(self, package_name: str, reason: str) -> RegistryLookupError:
        return RegistryLookupError(self.registry, package_name, reason)

    def _require_str(self, package_name: str, value: Any, field: str) -> str:
        if isinstance(value, str) and value:
            return value
        raise self._error(package_name, f"no {field} found")
