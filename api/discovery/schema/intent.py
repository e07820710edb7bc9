"""Structured representation of a parsed discovery request."""

from __future__ import annotations

from pydantic import Field, field_validator

from discovery.models.discovery import Branch, ContentType, Mood, PersonRole, SortOrder
from discovery.schema.base import FrozenCamelModel


def _dedupe(values: list) -> list:
    seen: set = set()
    ordered = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


class QueryIntent(FrozenCamelModel):
    """Filters and branch flags extracted from one user query.

    List fields behave as ordered sets: duplicates are dropped and the first
    entry carries the highest priority (relaxation keeps ``genres[0]``).
    """

    content_type: ContentType = ContentType.BOTH
    genres: list[int] = Field(default_factory=list)
    providers: list[int] = Field(default_factory=list)
    min_rating: float = Field(default=0.0, ge=0, le=10)
    max_rating: float | None = Field(default=None, ge=0, le=10)
    year_start: int | None = None
    year_end: int | None = None
    sort_order: SortOrder = SortOrder.POPULARITY_DESC
    keywords: list[str] = Field(default_factory=list)
    location_keywords: list[str] = Field(default_factory=list)
    production_countries: list[str] = Field(default_factory=list)
    spoken_languages: list[str] = Field(default_factory=list)

    person_name: str | None = None
    person_role: PersonRole = PersonRole.ANY
    director_name: str | None = None
    actor_names: list[str] = Field(default_factory=list)
    specific_title: str | None = None

    detected_mood: Mood | None = None
    mood_confidence: int = Field(default=0, ge=0, le=100)

    is_vague_query: bool = False
    is_person_info_query: bool = False
    is_content_info_query: bool = False
    is_off_topic: bool = False
    use_trending_api: bool = Field(default=False, alias="useTrendingAPI")

    min_seasons: int | None = None
    max_seasons: int | None = None
    min_runtime: int | None = None
    max_runtime: int | None = None
    certification: str | None = None
    networks: list[int] = Field(default_factory=list)
    adult_content: bool = False
    max_results: int | None = None

    language: str = "en"

    @field_validator(
        "genres",
        "providers",
        "keywords",
        "location_keywords",
        "production_countries",
        "spoken_languages",
        "actor_names",
        "networks",
    )
    @classmethod
    def _ordered_unique(cls, value: list) -> list:
        return _dedupe(value)

    def branch(self) -> Branch:
        """Select the single primary execution path for this intent."""
        if self.is_off_topic:
            return Branch.OFF_TOPIC
        if self.use_trending_api:
            return Branch.TRENDING
        if self.specific_title and not self.is_content_info_query:
            return Branch.SPECIFIC_TITLE
        if self.person_name and not self.is_person_info_query and not self.director_name and not self.actor_names:
            return Branch.PERSON_CREDITS
        if self.person_name and self.is_person_info_query:
            return Branch.PERSON_INFO
        if self.specific_title and self.is_content_info_query:
            return Branch.CONTENT_INFO
        return Branch.DISCOVER

    def has_concrete_filter(self) -> bool:
        """Return True when any catalog constraint beyond content type was extracted."""
        return bool(
            self.genres
            or self.providers
            or self.min_rating > 0
            or self.max_rating is not None
            or self.year_start is not None
            or self.year_end is not None
            or self.keywords
            or self.location_keywords
            or self.production_countries
            or self.spoken_languages
            or self.min_seasons is not None
            or self.max_seasons is not None
            or self.min_runtime is not None
            or self.max_runtime is not None
            or self.certification
            or self.networks
        )
