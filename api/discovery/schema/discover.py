"""Request/response schemas for the discovery chat endpoint."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from discovery.models.discovery import MediaKind, Mood
from discovery.schema.base import CamelModel
from discovery.schema.intent import QueryIntent
from discovery.utils.datetime import release_year


class ChatTurn(CamelModel):
    """One prior message of the conversation."""
    role: Literal["user", "assistant", "system"]
    content: str


class DiscoverRequest(CamelModel):
    """Inbound discovery chat payload."""
    query: str
    conversation_history: list[ChatTurn] = Field(default_factory=list)
    country_code: str | None = None


class SearchResult(CamelModel):
    """Normalized catalog item returned to the caller."""
    id: int
    title: str | None = None
    name: str | None = None
    content_type: MediaKind
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    popularity: float | None = None
    genre_ids: list[int] = Field(default_factory=list)
    original_language: str | None = None

    @classmethod
    def from_catalog(cls, item: dict[str, Any], kind: MediaKind) -> "SearchResult":
        """Build a result from a raw catalog list entry."""
        media_type = item.get("media_type")
        if media_type in {MediaKind.MOVIE.value, MediaKind.TV.value}:
            kind = MediaKind(media_type)
        return cls(
            id=item["id"],
            title=item.get("title") if kind is MediaKind.MOVIE else None,
            name=item.get("name") if kind is MediaKind.TV else None,
            content_type=kind,
            overview=item.get("overview"),
            poster_path=item.get("poster_path"),
            backdrop_path=item.get("backdrop_path"),
            vote_average=item.get("vote_average"),
            vote_count=item.get("vote_count"),
            release_date=item.get("release_date") if kind is MediaKind.MOVIE else None,
            first_air_date=item.get("first_air_date") if kind is MediaKind.TV else None,
            popularity=item.get("popularity"),
            genre_ids=list(item.get("genre_ids") or []),
            original_language=item.get("original_language"),
        )

    @property
    def display_title(self) -> str:
        return self.title or self.name or ""

    @property
    def year(self) -> int | None:
        return release_year(self.release_date or self.first_air_date)


class PersonInfo(CamelModel):
    """Biographical details used to enrich a reply."""
    id: int
    name: str
    biography: str | None = None
    birthday: str | None = None
    deathday: str | None = None
    place_of_birth: str | None = None
    known_for_department: str | None = None
    profile_path: str | None = None


class ContentInfo(CamelModel):
    """Title details used to enrich a reply."""
    id: int
    title: str
    content_type: MediaKind
    overview: str | None = None
    release_date: str | None = None
    vote_average: float | None = None
    runtime: int | None = None
    number_of_seasons: int | None = None
    director: str | None = None
    cast: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    poster_path: str | None = None


class DiscoverResponse(CamelModel):
    """Successful discovery chat response."""
    success: bool = True
    results: list[SearchResult] = Field(default_factory=list)
    response_text: str
    is_off_topic: bool = False
    topic_changed: bool = False
    params: QueryIntent | None = None
    person_info: PersonInfo | None = None
    content_info: ContentInfo | None = None
    detected_mood: Mood | None = None
    mood_confidence: int = 0
    is_vague_query: bool = False


class ErrorResponse(CamelModel):
    """Failure envelope for validation, configuration and unexpected errors."""
    success: bool = False
    error: str
    results: list[SearchResult] = Field(default_factory=list)
    response_text: str
