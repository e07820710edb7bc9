"""Ensure log redaction prevents secret leakage."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from discovery.core.config import settings
from discovery.upstream.http import UpstreamRejectedError, fetch_json
from discovery.upstream.observability import UpstreamMonitor
from discovery.utils.redaction import redact_params, redact_secrets


def test_redact_secrets_masks_common_patterns() -> None:
    text = "GET https://user:pw@api.example.com/x?api_key=abc123&page=2 Bearer tok.en-1 sk-abcdefghijkl"

    redacted = redact_secrets(text)

    assert "pw@" not in redacted
    assert "abc123" not in redacted
    assert "tok.en-1" not in redacted
    assert "sk-abcdefghijkl" not in redacted
    assert "page=2" in redacted


def test_redact_params_masks_credentials() -> None:
    assert redact_params({"api_key": "abc", "query": "dune"}) == {"api_key": "***", "query": "dune"}
    assert redact_params(None) == {}


@pytest.mark.asyncio
async def test_rejected_request_log_hides_query_secret(monkeypatch, caplog):
    url = "https://api.example.com/3/movie/1?api_key=supersecret"

    class DummyAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            pass

        async def __aenter__(self) -> DummyAsyncClient:
            return self

        async def __aexit__(self, *args: Any) -> bool:
            return False

        async def request(self, method: str, target: str, **kwargs: Any) -> httpx.Response:
            return httpx.Response(status_code=401, json={}, request=httpx.Request(method, target))

    monkeypatch.setattr("discovery.upstream.http.httpx.AsyncClient", DummyAsyncClient)
    monkeypatch.setattr(settings, "http_retry_attempts", 0)
    caplog.set_level(logging.WARNING, logger="discovery.upstream.http")

    with pytest.raises(UpstreamRejectedError):
        await fetch_json(url)

    assert "supersecret" not in caplog.text
    assert "api_key=***" in caplog.text


@pytest.mark.asyncio
async def test_monitor_failure_log_hides_bearer_token(caplog):
    monitor = UpstreamMonitor()

    async def failing_call() -> None:
        raise RuntimeError("auth failed for Bearer secret-token-value")

    caplog.set_level(logging.WARNING, logger="discovery.upstream")
    with pytest.raises(RuntimeError):
        await monitor.track("openai", "completion", failing_call)

    assert "secret-token-value" not in caplog.text
    snapshot = await monitor.snapshot()
    assert snapshot["openai"]["operations"]["completion"]["last_error"] == "auth failed for Bearer ***"
