"""Shared test fixtures for issuekit tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from issuekit.core.contracts.config import StorageConfig
from issuekit.storage import StorageAdapter, create_storage


@pytest.fixture(params=["web", "mobile"])
def backend(request: pytest.FixtureRequest) -> str:
    """Every adapter-level test runs once per backend."""
    return request.param


@pytest_asyncio.fixture
async def storage(backend: str) -> AsyncIterator[StorageAdapter]:
    """An open, empty, in-memory adapter acting as ``u1``."""
    adapter = create_storage(StorageConfig(backend=backend))
    await adapter.open()
    try:
        yield adapter
    finally:
        await adapter.close()


@pytest_asyncio.fixture
async def seeded(storage: StorageAdapter) -> StorageAdapter:
    """The adapter loaded with the demo fixture set."""
    await storage.seed_demo()
    return storage
