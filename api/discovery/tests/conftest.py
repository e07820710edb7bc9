"""Shared pytest fixtures for API tests."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from discovery.api.deps import get_catalog_client, get_completion
from discovery.core.config import settings
from discovery.main import app
from discovery.tests.utils import FakeCatalog, FakeCompletion


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture()
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture()
def configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "tmdb_api_auth_header", "test-token")
    monkeypatch.setattr(settings, "openai_api_key", "sk-test-key-123456")
    monkeypatch.setattr(settings, "intent_assist_enabled", False)


@pytest_asyncio.fixture()
async def client(catalog: FakeCatalog, completion: FakeCompletion) -> AsyncClient:
    app.dependency_overrides[get_catalog_client] = lambda: catalog
    app.dependency_overrides[get_completion] = lambda: completion
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.pop(get_catalog_client, None)
    app.dependency_overrides.pop(get_completion, None)
