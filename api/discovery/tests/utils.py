"""Shared helpers for discovery tests: in-memory catalog and completion fakes."""

from __future__ import annotations

from collections import deque
from datetime import date
from typing import Any, Callable

from discovery.models.discovery import MediaKind
from discovery.upstream.base import BaseCatalog, BaseCompletionClient, CompletionRequest
from discovery.upstream.http import ExternalAPIError

TODAY = date(2026, 10, 19)


def movie(item_id: int, title: str, **extra: Any) -> dict[str, Any]:
    payload = {"id": item_id, "title": title, "popularity": 1.0, "vote_average": 7.0, "release_date": "2010-07-16"}
    payload.update(extra)
    return payload


def show(item_id: int, name: str, **extra: Any) -> dict[str, Any]:
    payload = {"id": item_id, "name": name, "popularity": 1.0, "vote_average": 7.0, "first_air_date": "2015-01-01"}
    payload.update(extra)
    return payload


class FakeCatalog(BaseCatalog):
    """Serves canned catalog documents and records every call."""

    source_name = "fake"

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.failing: set[str] = set()
        self.discover_handler: Callable[[MediaKind, dict[str, Any]], dict[str, Any]] = (
            lambda kind, params: {"results": [], "total_pages": 1}
        )
        self.trending_results: dict[MediaKind, list[dict[str, Any]]] = {}
        self.titles: dict[tuple[MediaKind, str], list[dict[str, Any]]] = {}
        self.people: dict[str, list[dict[str, Any]]] = {}
        self.keywords: dict[str, list[dict[str, Any]]] = {}
        self.person_payloads: dict[int, dict[str, Any]] = {}
        self.credits: dict[tuple[int, MediaKind], dict[str, Any]] = {}
        self.details: dict[tuple[MediaKind, int], dict[str, Any]] = {}
        self.similar: dict[tuple[MediaKind, int], list[dict[str, Any]]] = {}
        self.providers: dict[tuple[MediaKind, int], dict[str, Any]] = {}

    def _record(self, operation: str, payload: Any) -> None:
        self.calls.append((operation, payload))
        if operation in self.failing:
            raise ExternalAPIError(f"{operation} unavailable")

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]

    async def discover(self, kind: MediaKind, params: dict[str, Any]) -> dict[str, Any]:
        self._record("discover", (kind, dict(params)))
        if f"discover:{kind.value}" in self.failing:
            raise ExternalAPIError(f"discover {kind.value} unavailable")
        return self.discover_handler(kind, params)

    async def trending(self, kind: MediaKind, *, language: str, window: str = "week") -> dict[str, Any]:
        self._record("trending", (kind, language))
        return {"results": self.trending_results.get(kind, [])}

    async def search_titles(self, kind: MediaKind, query: str, *, language: str) -> list[dict[str, Any]]:
        self._record("search_titles", (kind, query))
        return self.titles.get((kind, query.lower()), [])

    async def search_people(self, name: str, *, language: str) -> list[dict[str, Any]]:
        self._record("search_people", name)
        return self.people.get(name.lower(), [])

    async def search_keywords(self, term: str) -> list[dict[str, Any]]:
        self._record("search_keywords", term)
        return self.keywords.get(term.lower(), [])

    async def person_details(self, person_id: int, *, language: str) -> dict[str, Any]:
        self._record("person_details", person_id)
        return self.person_payloads[person_id]

    async def person_credits(self, person_id: int, kind: MediaKind, *, language: str) -> dict[str, Any]:
        self._record("person_credits", (person_id, kind))
        return self.credits.get((person_id, kind), {"cast": [], "crew": []})

    async def title_details(self, kind: MediaKind, title_id: int, *, language: str) -> dict[str, Any]:
        self._record("title_details", (kind, title_id))
        return self.details[(kind, title_id)]

    async def similar_titles(self, kind: MediaKind, title_id: int, *, language: str) -> list[dict[str, Any]]:
        self._record("similar_titles", (kind, title_id))
        return self.similar.get((kind, title_id), [])

    async def watch_providers(self, kind: MediaKind, title_id: int) -> dict[str, Any]:
        self._record("watch_providers", (kind, title_id))
        return self.providers.get((kind, title_id), {})


class FakeCompletion(BaseCompletionClient):
    """Answers completion requests from a queue; an empty queue means the service is down."""

    source_name = "fake"

    def __init__(self, *answers: str) -> None:
        self.answers: deque[str] = deque(answers)
        self.requests: list[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> str:
        self.requests.append(request)
        if not self.answers:
            raise ExternalAPIError("completion unavailable")
        return self.answers.popleft()



async def no_sleep(_: float) -> None:
    return None
