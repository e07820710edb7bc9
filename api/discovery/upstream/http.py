from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from discovery.core.config import settings
from discovery.utils.redaction import redact_secrets

logger = logging.getLogger("discovery.upstream.http")


class ExternalAPIError(Exception):
    pass


class UpstreamServerError(ExternalAPIError):
    """Upstream answered 5xx or 429; eligible for retry."""


class UpstreamRejectedError(ExternalAPIError):
    """Upstream answered 4xx; never retried."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


async def fetch_json(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    method: str = "GET",
    json_body: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> dict:
    """Request a JSON document, retrying transport failures, 429 and 5xx answers.

    Once retries are exhausted every failure surfaces as ``ExternalAPIError``.
    """
    attempts = max(1, settings.http_retry_attempts + 1)
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(initial=0.5, max=settings.http_retry_max_wait_seconds),
            retry=retry_if_exception_type((httpx.TransportError, UpstreamServerError)),
            reraise=True,
        ):
            with attempt:
                async with httpx.AsyncClient(timeout=timeout or settings.http_timeout_seconds) as client:
                    response = await client.request(method, url, headers=headers, params=params, json=json_body)
                    if response.status_code >= 500:
                        raise UpstreamServerError(f"Server error {response.status_code}")
                    if response.status_code == 429:
                        raise UpstreamServerError("Rate limited (429)")
                    if response.status_code >= 400:
                        logger.warning(
                            "Upstream rejected %s %s with status %s",
                            method,
                            redact_secrets(url),
                            response.status_code,
                        )
                        raise UpstreamRejectedError(
                            f"Client error {response.status_code}", status_code=response.status_code
                        )
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise ExternalAPIError(f"Invalid JSON from {redact_secrets(url)}") from exc
    except httpx.HTTPError as exc:
        raise ExternalAPIError(redact_secrets(f"{type(exc).__name__}: {exc}")) from exc
    raise ExternalAPIError("Unreachable")
