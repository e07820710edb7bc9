from __future__ import annotations

from typing import Any

from discovery.core.config import settings
from discovery.models.discovery import MediaKind
from discovery.upstream.base import BaseCatalog
from discovery.upstream.http import ExternalAPIError, fetch_json
from discovery.upstream.observability import UpstreamMonitor, upstream_monitor
from discovery.utils.redaction import redact_params


class TMDBCatalog(BaseCatalog):
    source_name = "tmdb"

    def __init__(
        self,
        api_key: str | None = None,
        auth_token: str | None = None,
        *,
        base_url: str | None = None,
        monitor: UpstreamMonitor | None = None,
    ) -> None:
        self.api_key = api_key or settings.tmdb_api_key
        self.auth_token = auth_token or settings.tmdb_api_auth_header
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        self.monitor = monitor or upstream_monitor

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        headers: dict[str, str] = {"accept": "application/json"}
        params: dict[str, str] = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        elif self.api_key:
            params["api_key"] = self.api_key
        else:
            raise ExternalAPIError("TMDB API credentials missing; set TMDB_API_AUTH_HEADER or TMDB_API_KEY")
        return headers, params

    async def _get(self, operation: str, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        headers, auth_params = self._auth()
        query = {**auth_params, **(params or {})}
        url = f"{self.base_url}/{path.lstrip('/')}"
        return await self.monitor.track(
            self.source_name,
            operation,
            lambda: fetch_json(url, headers=headers, params=query),
            context={"path": path, "params": redact_params(params)},
        )

    async def discover(self, kind: MediaKind, params: dict[str, Any]) -> dict[str, Any]:
        return await self._get("discover", f"discover/{kind.value}", params)

    async def trending(self, kind: MediaKind, *, language: str, window: str = "week") -> dict[str, Any]:
        return await self._get("trending", f"trending/{kind.value}/{window}", {"language": language})

    async def search_titles(self, kind: MediaKind, query: str, *, language: str) -> list[dict[str, Any]]:
        payload = await self._get(
            "search_titles",
            f"search/{kind.value}",
            {"query": query, "language": language, "page": 1, "include_adult": "false"},
        )
        return payload.get("results", [])

    async def search_people(self, name: str, *, language: str) -> list[dict[str, Any]]:
        payload = await self._get(
            "search_people",
            "search/person",
            {"query": name, "language": language, "page": 1, "include_adult": "false"},
        )
        return payload.get("results", [])

    async def search_keywords(self, term: str) -> list[dict[str, Any]]:
        payload = await self._get("search_keywords", "search/keyword", {"query": term, "page": 1})
        return payload.get("results", [])

    async def person_details(self, person_id: int, *, language: str) -> dict[str, Any]:
        return await self._get("person_details", f"person/{person_id}", {"language": language})

    async def person_credits(self, person_id: int, kind: MediaKind, *, language: str) -> dict[str, Any]:
        path = f"person/{person_id}/{'movie_credits' if kind is MediaKind.MOVIE else 'tv_credits'}"
        return await self._get("person_credits", path, {"language": language})

    async def title_details(self, kind: MediaKind, title_id: int, *, language: str) -> dict[str, Any]:
        return await self._get(
            "title_details",
            f"{kind.value}/{title_id}",
            {"language": language, "append_to_response": "credits"},
        )

    async def similar_titles(self, kind: MediaKind, title_id: int, *, language: str) -> list[dict[str, Any]]:
        payload = await self._get(
            "similar_titles", f"{kind.value}/{title_id}/similar", {"language": language, "page": 1}
        )
        return payload.get("results", [])

    async def watch_providers(self, kind: MediaKind, title_id: int) -> dict[str, Any]:
        payload = await self._get("watch_providers", f"{kind.value}/{title_id}/watch/providers")
        return payload.get("results", {})
