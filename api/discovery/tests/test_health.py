from __future__ import annotations

import pytest

from discovery.core.config import settings


@pytest.mark.asyncio
async def test_health_reports_ok_without_allowlist(client, monkeypatch):
    called = False

    async def _snapshot_stub() -> dict[str, object]:
        nonlocal called
        called = True
        return {}

    monkeypatch.setattr("discovery.main.upstream_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", [])

    response = await client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload == {"status": "ok"}
    assert called is False


@pytest.mark.asyncio
async def test_health_allows_allowlisted_clients(client, monkeypatch):
    async def _snapshot_stub() -> dict[str, object]:
        return {}

    monkeypatch.setattr("discovery.main.upstream_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", ["testserver"])

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["upstreams"]["sources"] == {}
    assert payload["upstreams"]["issues"] == []


@pytest.mark.asyncio
async def test_health_degrades_when_circuit_open(client, monkeypatch):
    async def _snapshot_stub() -> dict[str, object]:
        return {
            "tmdb": {
                "circuit": {
                    "failure_streak": 0,
                    "open_until": 0.0,
                    "remaining_cooldown": 12.25,
                    "current_backoff": 30.0,
                    "opened_count": 1,
                },
                "operations": {
                    "discover": {
                        "started": 2,
                        "succeeded": 1,
                        "failed": 1,
                        "skipped": 0,
                        "last_latency_ms": 220.13,
                        "last_error": "Server error 503",
                    }
                },
            }
        }

    monkeypatch.setattr("discovery.main.upstream_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", ["10.0.0.0/8", "testserver"])

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "degraded"
    telemetry = payload["upstreams"]
    assert telemetry["sources"]["tmdb"]["operations"]["discover"]["last_error"] == "Server error 503"
    assert telemetry["sources"]["tmdb"]["state"] == "degraded"
    assert telemetry["issues"][0]["source"] == "tmdb"
    assert telemetry["issues"][0]["reason"] in {"circuit_open", "last_error"}


@pytest.mark.asyncio
async def test_health_flags_repeated_failures(client, monkeypatch):
    async def _snapshot_stub() -> dict[str, object]:
        return {
            "openai": {
                "circuit": {
                    "failure_streak": 0,
                    "open_until": 0.0,
                    "remaining_cooldown": 0.0,
                    "current_backoff": 30.0,
                    "opened_count": 0,
                },
                "operations": {
                    "completion": {
                        "started": 3,
                        "succeeded": 0,
                        "failed": 3,
                        "skipped": 0,
                        "last_latency_ms": 120.0,
                        "last_error": None,
                    }
                },
            }
        }

    monkeypatch.setattr("discovery.main.upstream_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", ["testserver"])

    response = await client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "degraded"
    issues = payload["upstreams"]["issues"]
    assert any(issue["reason"] == "repeated_failures" for issue in issues)
    assert payload["upstreams"]["sources"]["openai"]["state"] == "degraded"
