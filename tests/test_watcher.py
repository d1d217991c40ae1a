"""Tests for BufferWatcher: parse, resolve, compare and publish."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from versionlens.cache import FileCache
from versionlens.core.config import Settings
from versionlens.events import BufferWatcher, Debouncer
from versionlens.exceptions import RegistryLookupError
from versionlens.ui import BadgeStyle


class FakeClient:
    """Stand-in registry client answering from a dict."""

    def __init__(self, registry: str, versions: dict[str, str], raises: dict | None = None):
        self.registry = registry
        self.versions = versions
        self.raises = raises or {}
        self.calls: list[str] = []

    async def get_latest_version(self, package_name: str) -> str:
        self.calls.append(package_name)
        if package_name in self.raises:
            raise self.raises[package_name]
        if package_name not in self.versions:
            raise RegistryLookupError(self.registry, package_name, "HTTP 404")
        return self.versions[package_name]


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _package_json(deps: dict[str, str], dev: dict[str, str] | None = None) -> str:
    doc = {"name": "app", "dependencies": deps}
    if dev:
        doc["devDependencies"] = dev
    return json.dumps(doc, indent=2)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def npm():
    return FakeClient("npm", {"react": "18.2.0", "lodash": "4.17.21", "@types/node": "20.10.0"})


@pytest.fixture
def settings(tmp_path):
    return Settings(cache_dir=tmp_path / "cache")


@pytest.fixture
def watcher(npm, settings, clock):
    return BufferWatcher({"npm": npm}, settings=settings, debouncer=Debouncer(500, clock=clock))


# ── on_change ────────────────────────────────────────────────────────────


class TestOnChange:
    @pytest.mark.anyio
    async def test_publishes_badges(self, watcher):
        content = _package_json({"react": "^17.0.0", "lodash": "^4.17.0"})
        badges = await watcher.on_change("/proj/package.json", content)

        assert [b.package_name for b in badges] == ["react", "lodash"]
        react, lodash = badges
        assert react.text == "^17.0.0 → 18.2.0 (major)"
        assert react.style is BadgeStyle.MAJOR_DIFF
        assert react.line_number == 4
        assert lodash.text == "^4.17.0 → 4.17.21"
        assert lodash.style is BadgeStyle.UP_TO_DATE
        assert watcher.get_annotations("/proj/package.json") == badges
        assert watcher.count("/proj/package.json") == 2

    @pytest.mark.anyio
    async def test_unsupported_file_ignored(self, watcher, npm):
        assert await watcher.on_change("/proj/README.md", "# hi") is None
        assert await watcher.on_change("/proj/package-lock.json", "{}") is None
        assert watcher.get_annotations("/proj/README.md") is None
        assert npm.calls == []

    @pytest.mark.anyio
    async def test_debounced_second_event(self, watcher, npm, clock):
        content = _package_json({"react": "^18.0.0"})
        first = await watcher.on_change("/proj/package.json", content)
        clock.now += 0.1
        second = await watcher.on_change("/proj/package.json", _package_json({"lodash": "1.0.0"}))

        assert first is not None
        assert second is None
        assert [b.package_name for b in watcher.get_annotations("/proj/package.json")] == ["react"]
        assert npm.calls == ["react"]

    @pytest.mark.anyio
    async def test_event_after_window(self, watcher, clock):
        await watcher.on_change("/proj/package.json", _package_json({"react": "^18.0.0"}))
        clock.now += 0.6
        badges = await watcher.on_change("/proj/package.json", _package_json({"lodash": "1.0.0"}))
        assert [b.package_name for b in badges] == ["lodash"]

    @pytest.mark.anyio
    async def test_partial_failure(self, watcher):
        content = _package_json({"react": "^18.0.0", "missing-pkg": "1.0.0"})
        badges = await watcher.on_change("/proj/package.json", content)
        assert [b.package_name for b in badges] == ["react"]

    @pytest.mark.anyio
    async def test_unexpected_client_error_skipped(self, settings, clock):
        npm = FakeClient("npm", {"react": "18.2.0"}, raises={"boom": RuntimeError("bug")})
        watcher = BufferWatcher({"npm": npm}, settings=settings, debouncer=Debouncer(500, clock=clock))
        badges = await watcher.on_change(
            "/proj/package.json", _package_json({"boom": "1.0.0", "react": "18.2.0"})
        )
        assert [b.package_name for b in badges] == ["react"]

    @pytest.mark.anyio
    async def test_unparseable_latest_version(self, settings, clock):
        npm = FakeClient("npm", {"odd": "not-a-version"})
        watcher = BufferWatcher({"npm": npm}, settings=settings, debouncer=Debouncer(500, clock=clock))
        badges = await watcher.on_change("/proj/package.json", _package_json({"odd": "1.0.0"}))
        assert len(badges) == 1
        assert badges[0].text.startswith("Error: ")
        assert badges[0].style is BadgeStyle.OUTDATED

    @pytest.mark.anyio
    async def test_duplicate_names_looked_up_once(self, watcher, npm):
        content = _package_json({"react": "^18.0.0"}, dev={"react": "^17.0.0"})
        badges = await watcher.on_change("/proj/package.json", content)
        assert len(badges) == 2
        assert npm.calls == ["react"]

    @pytest.mark.anyio
    async def test_parse_failure_keeps_previous_badges(self, watcher):
        await watcher.on_change("/proj/package.json", _package_json({"react": "^18.0.0"}))
        result = await watcher.refresh("/proj/package.json", '{"dependencies": {')
        assert result is None
        assert [b.package_name for b in watcher.get_annotations("/proj/package.json")] == ["react"]

    @pytest.mark.anyio
    async def test_empty_manifest_publishes_empty(self, watcher):
        badges = await watcher.on_change("/proj/package.json", '{"name": "x"}')
        assert badges == []
        assert watcher.get_annotations("/proj/package.json") == []
        assert not watcher.has_annotations("/proj/package.json")
        assert watcher.active_paths() == []

    @pytest.mark.anyio
    async def test_ignored_packages_skipped(self, npm, tmp_path, clock):
        settings = Settings(cache_dir=tmp_path / "cache", ignore_list=["@types/"])
        watcher = BufferWatcher({"npm": npm}, settings=settings, debouncer=Debouncer(500, clock=clock))
        content = _package_json({"react": "^18.0.0"}, dev={"@types/node": "^20.0.0"})
        badges = await watcher.on_change("/proj/package.json", content)
        assert [b.package_name for b in badges] == ["react"]
        assert "@types/node" not in npm.calls


    @pytest.mark.anyio
    async def test_pyproject_with_scalar_tool_key(self, settings, clock):
        pypi = FakeClient("pypi", {"requests": "2.31.0"})
        watcher = BufferWatcher(
            {"pypi": pypi}, settings=settings, debouncer=Debouncer(500, clock=clock)
        )
        content = 'tool = "x"\n[project]\ndependencies = ["requests>=2"]\n'
        badges = await watcher.on_change("/p/pyproject.toml", content)
        assert [(b.package_name, b.line_number) for b in badges] == [("requests", 3)]


# ── caching ──────────────────────────────────────────────────────────────


class TestCaching:
    @pytest.mark.anyio
    async def test_session_cache_reused(self, watcher, npm):
        content = _package_json({"react": "^18.0.0"})
        await watcher.on_change("/a/package.json", content)
        await watcher.on_change("/b/package.json", content)
        assert npm.calls == ["react"]
        assert watcher.get_cached_version("react", "npm") == "18.2.0"
        assert watcher.get_cached_version("react", "crates.io") is None

    @pytest.mark.anyio
    async def test_file_cache_shared_between_watchers(self, npm, settings, clock):
        file_cache = FileCache(settings.cache_dir, settings.cache_ttl_seconds)
        content = _package_json({"react": "^18.0.0"})

        first = BufferWatcher({"npm": npm}, settings=settings, file_cache=file_cache)
        await first.on_change("/proj/package.json", content)
        assert file_cache.get("npm@react") == "18.2.0"

        other_npm = FakeClient("npm", {})
        second = BufferWatcher({"npm": other_npm}, settings=settings, file_cache=file_cache)
        badges = await second.on_change("/proj/package.json", content)
        assert badges[0].text == "^18.0.0 → 18.2.0"
        assert other_npm.calls == []

    @pytest.mark.anyio
    async def test_clear_all_drops_session_cache(self, watcher, npm):
        content = _package_json({"react": "^18.0.0"})
        await watcher.on_change("/proj/package.json", content)
        watcher.clear_all()
        assert watcher.get_cached_version("react", "npm") is None
        await watcher.on_change("/proj/package.json", content)
        assert npm.calls == ["react", "react"]


# ── lifecycle ────────────────────────────────────────────────────────────


class TestLifecycle:
    @pytest.mark.anyio
    async def test_refresh_bypasses_debounce(self, watcher, npm):
        content = _package_json({"react": "^18.0.0"})
        await watcher.on_change("/proj/package.json", content)
        badges = await watcher.refresh("/proj/package.json", content)
        assert badges is not None
        assert len(badges) == 1

    @pytest.mark.anyio
    async def test_clear(self, watcher):
        await watcher.on_change("/proj/package.json", _package_json({"react": "^18.0.0"}))
        watcher.clear("/proj/package.json")
        assert watcher.get_annotations("/proj/package.json") is None
        watcher.clear("/proj/package.json")
        # debounce record is gone too
        assert await watcher.on_change("/proj/package.json", _package_json({"react": "^18.0.0"}))

    @pytest.mark.anyio
    async def test_clear_all(self, watcher):
        await watcher.on_change("/a/package.json", _package_json({"react": "^18.0.0"}))
        await watcher.on_change("/b/package.json", _package_json({"lodash": "^4.0.0"}))
        assert watcher.active_paths() == ["/a/package.json", "/b/package.json"]
        watcher.clear_all()
        watcher.clear_all()
        assert watcher.active_paths() == []
        assert watcher.get_annotations("/a/package.json") is None

    @pytest.mark.anyio
    async def test_on_file_change(self, watcher, tmp_path):
        manifest = tmp_path / "package.json"
        manifest.write_text(_package_json({"react": "^18.0.0"}))
        badges = await watcher.on_file_change(str(manifest))
        assert [b.package_name for b in badges] == ["react"]

    @pytest.mark.anyio
    async def test_on_file_change_missing_file(self, watcher, tmp_path):
        assert await watcher.on_file_change(str(tmp_path / "package.json")) is None


# ── introspection ────────────────────────────────────────────────────────


class TestIntrospection:
    def test_supported_file_types_follow_clients(self, npm, settings):
        crates = FakeClient("crates.io", {})
        watcher = BufferWatcher({"npm": npm, "crates.io": crates}, settings=settings)
        assert watcher.supported_file_types() == ["Cargo.toml", "package.json"]
        assert watcher.is_package_file("Cargo.toml")
        assert not watcher.is_package_file("go.mod")
        assert watcher.parser_for_file("package.json").ecosystem == "npm"

    def test_disabled_registry_not_tracked(self, npm, tmp_path):
        settings = Settings(cache_dir=tmp_path, enabled_registries=["crates.io"])
        crates = FakeClient("crates.io", {})
        watcher = BufferWatcher({"npm": npm, "crates.io": crates}, settings=settings)
        assert watcher.supported_file_types() == ["Cargo.toml"]
        assert not watcher.is_package_file("package.json")

    @pytest.mark.anyio
    async def test_process_dependency(self, watcher):
        badge = await watcher.process_dependency("react", "18.2.0", 7, "npm")
        assert badge.text == "18.2.0 → 18.2.0"
        assert badge.style is BadgeStyle.UP_TO_DATE
        assert badge.line_number == 7

    @pytest.mark.anyio
    async def test_process_dependency_unknown_registry(self, watcher):
        with pytest.raises(RegistryLookupError, match="registry is not enabled"):
            await watcher.process_dependency("serde", "1.0", 1, "crates.io")

    @pytest.mark.anyio
    async def test_process_dependency_populates_caches(self, settings):
        client = MagicMock()
        client.get_latest_version = AsyncMock(return_value="1.0.193")
        file_cache = FileCache(settings.cache_dir, settings.cache_ttl_seconds)
        watcher = BufferWatcher({"crates.io": client}, settings=settings, file_cache=file_cache)

        badge = await watcher.process_dependency("serde", "0.9.0", 3, "crates.io")
        await watcher.process_dependency("serde", "1.0.0", 4, "crates.io")

        client.get_latest_version.assert_awaited_once_with("serde")
        assert badge.style is BadgeStyle.MAJOR_DIFF
        assert watcher.get_cached_version("serde", "crates.io") == "1.0.193"
        assert file_cache.get("crates.io@serde") == "1.0.193"
