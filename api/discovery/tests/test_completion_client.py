"""Completion client tests for request shaping and response parsing."""

from __future__ import annotations

from collections import deque
from typing import Any

import httpx
import pytest

from discovery.core.config import settings
from discovery.upstream.base import CompletionRequest
from discovery.upstream.completion import OpenAICompletionClient
from discovery.upstream.http import ExternalAPIError
from discovery.upstream.observability import UpstreamMonitor

ENDPOINT = "https://completions.example.com/v1/chat/completions"


def _make_async_client(responses: deque[httpx.Response], call_log: list[dict[str, Any]]) -> type:
    class DummyAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            self._responses = responses

        async def __aenter__(self) -> DummyAsyncClient:
            return self

        async def __aexit__(self, *args: Any) -> bool:
            return False

        async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
            call_log.append({"method": method, "url": url, **kwargs})
            return self._responses.popleft()

    return DummyAsyncClient


def _response(json_data: Any) -> httpx.Response:
    return httpx.Response(status_code=200, json=json_data, request=httpx.Request("POST", ENDPOINT))


def _client(monkeypatch: pytest.MonkeyPatch, *payloads: Any) -> tuple[OpenAICompletionClient, list[dict[str, Any]]]:
    call_log: list[dict[str, Any]] = []
    responses = deque(_response(payload) for payload in payloads)
    monkeypatch.setattr("discovery.upstream.http.httpx.AsyncClient", _make_async_client(responses, call_log))
    client = OpenAICompletionClient("sk-test-key-123456", endpoint=ENDPOINT, monitor=UpstreamMonitor())
    return client, call_log


@pytest.mark.asyncio
async def test_complete_posts_history_and_json_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    client, call_log = _client(monkeypatch, {"choices": [{"message": {"content": ' {"genres": [35]} '}}]})
    request = CompletionRequest(
        system="extract",
        user="comedies please",
        model="intent-model",
        temperature=0.2,
        max_tokens=500,
        history=[{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
        json_mode=True,
    )

    assert await client.complete(request) == '{"genres": [35]}'

    body = call_log[0]["json"]
    assert call_log[0]["method"] == "POST"
    assert [message["role"] for message in body["messages"]] == ["system", "user", "assistant", "user"]
    assert body["response_format"] == {"type": "json_object"}
    assert body["max_tokens"] == 500
    assert call_log[0]["headers"]["Authorization"] == "Bearer sk-test-key-123456"


@pytest.mark.asyncio
async def test_complete_rejects_empty_choices(monkeypatch: pytest.MonkeyPatch) -> None:
    client, _ = _client(monkeypatch, {"choices": []})

    with pytest.raises(ExternalAPIError):
        await client.complete(CompletionRequest(system="s", user="u", model="m"))


@pytest.mark.asyncio
async def test_complete_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "openai_api_key", None)
    client = OpenAICompletionClient(monitor=UpstreamMonitor())

    with pytest.raises(ExternalAPIError):
        await client.complete(CompletionRequest(system="s", user="u", model="m"))
