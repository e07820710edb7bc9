from __future__ import annotations

import asyncio

import pytest

from discovery.upstream.http import ExternalAPIError, UpstreamRejectedError
from discovery.upstream.observability import CircuitOpenError, UpstreamMonitor


@pytest.mark.asyncio
async def test_upstream_monitor_opens_circuit_after_repeated_failures() -> None:
    monitor = UpstreamMonitor(circuit_threshold=2, base_backoff_seconds=0.01, max_backoff_seconds=0.02)

    async def failing_call() -> None:
        raise ExternalAPIError("boom")

    with pytest.raises(ExternalAPIError):
        await monitor.track("tmdb", "discover", failing_call)
    with pytest.raises(ExternalAPIError):
        await monitor.track("tmdb", "discover", failing_call)

    assert monitor.allow_call("tmdb") is False
    with pytest.raises(CircuitOpenError):
        await monitor.track("tmdb", "discover", failing_call)

    snapshot = await monitor.snapshot()
    assert snapshot["tmdb"]["circuit"]["opened_count"] >= 1
    assert snapshot["tmdb"]["operations"]["discover"]["failed"] == 2
    assert snapshot["tmdb"]["operations"]["discover"]["skipped"] == 1

    await monitor.record_skip("tmdb", "discover", reason="circuit_open", context={"kind": "movie"})
    updated = await monitor.snapshot()
    assert updated["tmdb"]["operations"]["discover"]["skipped"] == 2


@pytest.mark.asyncio
async def test_upstream_monitor_recovers_after_cooldown_and_success() -> None:
    monitor = UpstreamMonitor(circuit_threshold=1, base_backoff_seconds=0.01, max_backoff_seconds=0.02)

    async def failing_call() -> None:
        raise ExternalAPIError("boom")

    with pytest.raises(ExternalAPIError):
        await monitor.track("openai", "completion", failing_call)

    assert monitor.allow_call("openai") is False
    await asyncio.sleep(0.02)

    async def ok_call() -> str:
        return "ok"

    assert await monitor.track("openai", "completion", ok_call, context={"model": "test"}) == "ok"
    snapshot = await monitor.snapshot()
    assert snapshot["openai"]["operations"]["completion"]["succeeded"] == 1
    assert snapshot["openai"]["operations"]["completion"]["last_error"] is None
    assert snapshot["openai"]["circuit"]["failure_streak"] == 0


@pytest.mark.asyncio
async def test_rejections_do_not_open_the_circuit() -> None:
    monitor = UpstreamMonitor(circuit_threshold=1, base_backoff_seconds=10.0, max_backoff_seconds=10.0)

    async def rejected_call() -> None:
        raise UpstreamRejectedError("Client error 404", status_code=404)

    with pytest.raises(UpstreamRejectedError):
        await monitor.track("tmdb", "title_details", rejected_call)

    assert monitor.allow_call("tmdb") is True
    snapshot = await monitor.snapshot()
    assert snapshot["tmdb"]["operations"]["title_details"]["failed"] == 1
    assert snapshot["tmdb"]["operations"]["title_details"]["last_error"] == "Client error 404"
