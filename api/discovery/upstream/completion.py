"""Chat-completion client for an OpenAI-compatible endpoint."""

from __future__ import annotations

from typing import Any

from discovery.core.config import settings
from discovery.upstream.base import BaseCompletionClient, CompletionRequest
from discovery.upstream.http import ExternalAPIError, fetch_json
from discovery.upstream.observability import UpstreamMonitor, upstream_monitor


class OpenAICompletionClient(BaseCompletionClient):
    source_name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        endpoint: str | None = None,
        monitor: UpstreamMonitor | None = None,
    ) -> None:
        self.api_key = api_key or settings.openai_api_key
        self.endpoint = endpoint or settings.completion_endpoint
        self.monitor = monitor or upstream_monitor

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ExternalAPIError("Completion API key missing; set OPENAI_API_KEY")
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    def _body(self, request: CompletionRequest) -> dict[str, Any]:
        messages: list[dict[str, str]] = [{"role": "system", "content": request.system}]
        messages.extend(request.history or [])
        messages.append({"role": "user", "content": request.user})
        body: dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_mode:
            body["response_format"] = {"type": "json_object"}
        return body

    async def complete(self, request: CompletionRequest) -> str:
        headers = self._headers()
        payload = await self.monitor.track(
            self.source_name,
            "json_completion" if request.json_mode else "completion",
            lambda: fetch_json(self.endpoint, headers=headers, method="POST", json_body=self._body(request)),
            context={"model": request.model, "max_tokens": request.max_tokens},
        )
        choices = payload.get("choices") or []
        if not choices:
            raise ExternalAPIError("Completion response contained no choices")
        content = (choices[0].get("message") or {}).get("content")
        if not isinstance(content, str):
            raise ExternalAPIError("Completion response contained no message content")
        return content.strip()
