"""Shared pytest fixtures for VersionLens tests. No network access is needed."""

import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
