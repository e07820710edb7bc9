"""Pre-search filter guard and the reactive relaxation ladder.

Every strategy here is a pure ``QueryIntent -> QueryIntent`` transform. A
ladder rung returns ``None`` when it has nothing to relax, so the planner
can skip it without issuing a catalog call that would repeat the previous
search.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from discovery.models.discovery import SortOrder
from discovery.schema.intent import QueryIntent

MAX_ACTIVE_FILTERS = 3
GUARD_RATING_FLOOR = 7.0
GUARD_GENRE_CAP = 2


def active_filter_count(intent: QueryIntent) -> int:
    """Count the constrained dimensions: genre, provider, rating, country, language, years, keywords."""
    return sum(
        (
            bool(intent.genres),
            bool(intent.providers),
            intent.min_rating > 0,
            bool(intent.production_countries),
            bool(intent.spoken_languages),
            intent.year_start is not None or intent.year_end is not None,
            bool(intent.keywords or intent.location_keywords),
        )
    )


def apply_filter_guard(intent: QueryIntent) -> QueryIntent:
    """Loosen an over-constrained intent before the first search runs."""
    update: dict = {}
    if intent.production_countries and intent.spoken_languages:
        update["spoken_languages"] = []
    if active_filter_count(intent) > MAX_ACTIVE_FILTERS:
        if 0 < intent.min_rating < GUARD_RATING_FLOOR:
            update["min_rating"] = 0.0
        if len(intent.genres) > GUARD_GENRE_CAP:
            update["genres"] = intent.genres[:GUARD_GENRE_CAP]
        if intent.keywords or intent.location_keywords:
            update["keywords"] = []
            update["location_keywords"] = []
    if not update:
        return intent
    return intent.model_copy(update=update)


def drop_rating_floor(intent: QueryIntent) -> QueryIntent | None:
    if intent.min_rating <= 0:
        return None
    return intent.model_copy(update={"min_rating": 0.0})


def drop_keywords(intent: QueryIntent) -> QueryIntent | None:
    if not (intent.keywords or intent.location_keywords):
        return None
    return intent.model_copy(update={"keywords": [], "location_keywords": []})


def keep_primary_genre(intent: QueryIntent) -> QueryIntent | None:
    if len(intent.genres) <= 1:
        return None
    return intent.model_copy(update={"genres": intent.genres[:1]})


def drop_providers(intent: QueryIntent) -> QueryIntent | None:
    if not intent.providers:
        return None
    return intent.model_copy(update={"providers": []})


def drop_year_range(intent: QueryIntent) -> QueryIntent | None:
    if intent.year_start is None and intent.year_end is None:
        return None
    return intent.model_copy(update={"year_start": None, "year_end": None})


def _bare(intent: QueryIntent, *, countries: list[str]) -> QueryIntent:
    return QueryIntent(
        content_type=intent.content_type,
        production_countries=countries,
        sort_order=SortOrder.POPULARITY_DESC,
        language=intent.language,
        max_results=intent.max_results,
        adult_content=intent.adult_content,
    )


def country_only(intent: QueryIntent) -> QueryIntent | None:
    if not intent.production_countries:
        return None
    relaxed = _bare(intent, countries=intent.production_countries)
    return None if relaxed == intent else relaxed


def content_type_only(intent: QueryIntent) -> QueryIntent | None:
    relaxed = _bare(intent, countries=[])
    return None if relaxed == intent else relaxed


@dataclass(frozen=True, slots=True)
class RelaxationStep:
    name: str
    apply: Callable[[QueryIntent], QueryIntent | None]


# Applied cumulatively, in order.
RELAXATION_LADDER: tuple[RelaxationStep, ...] = (
    RelaxationStep("drop_rating_floor", drop_rating_floor),
    RelaxationStep("drop_keywords", drop_keywords),
    RelaxationStep("keep_primary_genre", keep_primary_genre),
    RelaxationStep("drop_providers", drop_providers),
    RelaxationStep("drop_year_range", drop_year_range),
    RelaxationStep("country_only", country_only),
    RelaxationStep("content_type_only", content_type_only),
)
