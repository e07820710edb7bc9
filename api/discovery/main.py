"""FastAPI application entrypoint and health reporting utilities.

Invariants:
- Health detail is only exposed to allowlisted hosts.
- Every error leaves the service in the discovery envelope shape.
"""

import ipaddress
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from discovery.api.router import api_router
from discovery.api.routes.discover import error_response
from discovery.core.config import settings
from discovery.upstream.observability import upstream_monitor

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("discovery")

REPEATED_FAILURE_THRESHOLD = 3

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies with the discovery error envelope."""
    fields = {str(part) for error in exc.errors() for part in error.get("loc", ())}
    error = "Query is required" if "query" in fields or "body" in fields else "Invalid request"
    logger.info("Rejected request to %s: %s", request.url.path, error)
    return error_response(status.HTTP_400_BAD_REQUEST, error, "Please enter a search query.")


def _summarize_upstreams(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Condense upstream monitor state into health-friendly telemetry.

    Implementation notes:
    - Treat open circuits and repeated failures as degraded signals.
    - Preserve per-operation errors to aid ops troubleshooting.
    """
    issues: list[dict[str, Any]] = []
    sources: dict[str, Any] = {}
    for source, payload in snapshot.items():
        circuit = payload.get("circuit", {})
        remaining = float(circuit.get("remaining_cooldown") or 0.0)
        circuit_open = remaining > 0
        if circuit_open:
            issues.append({"source": source, "reason": "circuit_open", "remaining_cooldown": round(remaining, 2)})
        operations = payload.get("operations", {})
        failure_total = 0
        repeated_failure: dict[str, Any] | None = None
        last_error: str | None = None
        for operation, metrics in operations.items():
            if metrics.get("last_error"):
                last_error = metrics["last_error"]
                issues.append(
                    {"source": source, "operation": operation, "reason": "last_error", "error": last_error}
                )
            failed_count = int(metrics.get("failed") or 0)
            failure_total += failed_count
            if failed_count >= REPEATED_FAILURE_THRESHOLD:
                repeated_failure = {"operation": operation, "failed": failed_count}
        if repeated_failure:
            issues.append({"source": source, "reason": "repeated_failures", **repeated_failure})
        degraded = circuit_open or repeated_failure is not None or last_error is not None
        sources[source] = {
            "state": "degraded" if degraded else "ok",
            "circuit_open": circuit_open,
            "circuit": circuit,
            "operations": operations,
            "failure_total": failure_total,
            "last_error": last_error,
            "repeated_failure": repeated_failure,
        }
    return {"sources": sources, "issues": issues}


def _entry_matches(entry: str, candidate: str) -> bool:
    """Return True if an allowlist entry matches a candidate host/IP."""
    try:
        network = ipaddress.ip_network(entry, strict=False)
        return ipaddress.ip_address(candidate) in network
    except ValueError:
        return entry.casefold() == candidate.casefold()


def _ip_or_host_allowlisted(request: Request) -> bool:
    """Check request client/host headers against the health allowlist."""
    if not settings.health_allowlist:
        return False
    candidates: list[str] = []
    if request.client and request.client.host:
        candidates.append(request.client.host)
    host_header = request.headers.get("host")
    if host_header:
        candidates.append(host_header.split(":")[0])
    return any(
        entry and _entry_matches(entry, candidate)
        for candidate in candidates
        for entry in settings.health_allowlist
    )


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(request: Request) -> dict[str, Any]:
    """Return health status and, for allowlisted hosts, upstream telemetry."""
    if not _ip_or_host_allowlisted(request):
        return {"status": "ok"}

    snapshot = await upstream_monitor.snapshot()
    telemetry = _summarize_upstreams(snapshot)
    status_value = "ok" if not telemetry["issues"] else "degraded"
    return {"status": status_value, "upstreams": telemetry}
