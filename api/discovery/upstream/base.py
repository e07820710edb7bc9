"""Interfaces for the catalog and completion upstreams."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from discovery.models.discovery import MediaKind


class BaseCatalog:
    """Movie/TV metadata catalog consumed by the search planner.

    Methods return the upstream's JSON documents; normalization happens in
    the planner so that fakes only need to serve plain dictionaries.
    """
    source_name: str

    async def discover(self, kind: MediaKind, params: dict[str, Any]) -> dict[str, Any]:
        """Run one filtered discovery page."""
        raise NotImplementedError

    async def trending(self, kind: MediaKind, *, language: str, window: str = "week") -> dict[str, Any]:
        raise NotImplementedError

    async def search_titles(self, kind: MediaKind, query: str, *, language: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def search_people(self, name: str, *, language: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def search_keywords(self, term: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def person_details(self, person_id: int, *, language: str) -> dict[str, Any]:
        raise NotImplementedError

    async def person_credits(self, person_id: int, kind: MediaKind, *, language: str) -> dict[str, Any]:
        """Return ``{"cast": [...], "crew": [...]}`` for one media kind."""
        raise NotImplementedError

    async def title_details(self, kind: MediaKind, title_id: int, *, language: str) -> dict[str, Any]:
        """Return title details with credits appended."""
        raise NotImplementedError

    async def similar_titles(self, kind: MediaKind, title_id: int, *, language: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def watch_providers(self, kind: MediaKind, title_id: int) -> dict[str, Any]:
        """Return watch-provider availability keyed by region code."""
        raise NotImplementedError


@dataclass(slots=True)
class CompletionRequest:
    """One chat-completion call."""
    system: str
    user: str
    model: str
    temperature: float = 0.1
    max_tokens: int = 100
    history: list[dict[str, str]] | None = None
    json_mode: bool = False


class BaseCompletionClient:
    """Conversational completion service used for parsing and replies."""
    source_name: str

    async def complete(self, request: CompletionRequest) -> str:
        """Return the assistant message text for a completion request."""
        raise NotImplementedError
