"""Search Planner: turns a ``QueryIntent`` into catalog calls and results.

Each ``Branch`` has exactly one handler. Filtered discovery runs the
pre-search guard, then walks the relaxation ladder until a search returns
at least ``min_result_count`` results. Upstream failures never abort the
plan: a failing content type, page or lookup is logged and treated as
empty.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Iterable

from discovery.core.config import Settings, settings as default_settings
from discovery.models.discovery import Branch, ContentType, MediaKind, PersonRole
from discovery.schema.discover import ContentInfo, PersonInfo, SearchResult
from discovery.schema.intent import QueryIntent
from discovery.services.language import locale_for_country
from discovery.services.lexicon import DEFAULT_LEXICON, Lexicon
from discovery.services.relaxation import RELAXATION_LADDER, active_filter_count, apply_filter_guard
from discovery.upstream.base import BaseCatalog
from discovery.upstream.http import ExternalAPIError
from discovery.upstream.observability import CircuitOpenError
from discovery.utils.datetime import year_end_bound, year_start_bound

logger = logging.getLogger("discovery.services.search_planner")

UPSTREAM_ERRORS = (ExternalAPIError, CircuitOpenError)
SIMILAR_TITLE_LIMIT = 10
CONTENT_INFO_CAST_LIMIT = 5
AVAILABILITY_KINDS = ("flatrate", "buy", "rent")


@dataclass(slots=True)
class SearchContext:
    """Per-request values shared by every catalog call of one plan."""
    country: str
    locale: str
    keyword_ids: dict[str, int | None] = field(default_factory=dict)
    person_ids: dict[str, int | None] = field(default_factory=dict)


@dataclass(slots=True)
class PlanOutcome:
    branch: Branch
    intent: QueryIntent
    results: list[SearchResult] = field(default_factory=list)
    person_info: PersonInfo | None = None
    content_info: ContentInfo | None = None
    relaxation_steps: list[str] = field(default_factory=list)


class SearchPlanner:
    def __init__(
        self,
        catalog: BaseCatalog,
        *,
        lexicon: Lexicon = DEFAULT_LEXICON,
        config: Settings | None = None,
        today: Callable[[], date] = date.today,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.catalog = catalog
        self.lexicon = lexicon
        self.config = config or default_settings
        self.today = today
        self.sleep = sleep
        self._handlers: dict[Branch, Callable[[QueryIntent, SearchContext], Awaitable[PlanOutcome]]] = {
            Branch.OFF_TOPIC: self._plan_off_topic,
            Branch.TRENDING: self._plan_trending,
            Branch.SPECIFIC_TITLE: self._plan_specific_title,
            Branch.PERSON_CREDITS: self._plan_person_credits,
            Branch.PERSON_INFO: self._plan_person_info,
            Branch.CONTENT_INFO: self._plan_content_info,
            Branch.DISCOVER: self._plan_discover,
        }
        # Tried in order when a branch resolved info but has no results; the first non-empty list wins.
        self._related_lookups: tuple[Callable[[PlanOutcome, SearchContext], Awaitable[list[SearchResult]]], ...] = (
            self._related_by_person,
            self._related_by_content,
        )

    async def plan(self, intent: QueryIntent, country: str | None = None) -> PlanOutcome:
        country = (country or self.config.default_country).upper()
        context = SearchContext(country=country, locale=locale_for_country(country))
        branch = intent.branch()
        logger.info("Planning %s search for country %s", branch.value, country)
        outcome = await self._handlers[branch](intent, context)
        if not outcome.results and (outcome.person_info or outcome.content_info):
            for lookup in self._related_lookups:
                related = await lookup(outcome, context)
                if related:
                    outcome.results = related[: self.config.related_result_cap]
                    logger.info("Using %d related results from %s", len(outcome.results), lookup.__name__)
                    break
        return outcome

    async def lookup_title(self, title: str, content_type: ContentType, country: str | None = None) -> list[SearchResult]:
        """Resolve a title outside the branch flow, e.g. for a scene identification answer."""
        country = (country or self.config.default_country).upper()
        context = SearchContext(country=country, locale=locale_for_country(country))
        return await self._search_title(title, content_type, context)

    # -- branch handlers -----------------------------------------------

    async def _plan_off_topic(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        return PlanOutcome(branch=Branch.OFF_TOPIC, intent=intent)

    async def _plan_trending(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        results: list[SearchResult] = []
        for kind in intent.content_type.media_kinds():
            try:
                payload = await self.catalog.trending(kind, language=context.locale)
            except UPSTREAM_ERRORS as exc:
                logger.warning("Trending lookup for %s failed: %s", kind.value, exc)
                continue
            results.extend(_results(payload.get("results"), kind))
        results.sort(key=_popularity, reverse=True)
        if intent.providers:
            results = await self._filter_by_providers(results, intent.providers, context)
        cap = intent.max_results or self.config.trending_result_cap
        return PlanOutcome(branch=Branch.TRENDING, intent=intent, results=results[:cap])

    async def _plan_specific_title(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        results = await self._search_title(intent.specific_title or "", intent.content_type, context)
        if intent.providers and results:
            results = await self._filter_by_providers(results, intent.providers, context)
        return PlanOutcome(branch=Branch.SPECIFIC_TITLE, intent=intent, results=results)

    async def _plan_person_credits(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        results = await self._person_credits(intent.person_name or "", intent.content_type, intent.person_role, context)
        if intent.providers and results:
            results = await self._filter_by_providers(results, intent.providers, context)
        if intent.max_results:
            results = results[: intent.max_results]
        return PlanOutcome(branch=Branch.PERSON_CREDITS, intent=intent, results=results)

    async def _plan_person_info(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        """Resolve the biography only; the related lookups supply the person's titles."""
        person_info = await self._person_info(intent.person_name or "", context)
        return PlanOutcome(branch=Branch.PERSON_INFO, intent=intent, person_info=person_info)

    async def _plan_content_info(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        """Resolve the title details only; the related lookups supply similar titles."""
        content_info = await self._content_info(intent.specific_title or "", intent.content_type, context)
        return PlanOutcome(branch=Branch.CONTENT_INFO, intent=intent, content_info=content_info)

    async def _plan_discover(self, intent: QueryIntent, context: SearchContext) -> PlanOutcome:
        guarded = apply_filter_guard(intent)
        logger.info("Discovery with %d active filters", active_filter_count(guarded))
        current = best_intent = guarded
        results = best = await self._discover(current, context)
        applied: list[str] = []
        for step in RELAXATION_LADDER:
            if len(results) >= self.config.min_result_count:
                break
            relaxed = step.apply(current)
            if relaxed is None:
                continue
            current = relaxed
            results = await self._discover(current, context)
            applied.append(step.name)
            logger.info("Relaxation step %s returned %d results", step.name, len(results))
            if len(results) > len(best):
                best, best_intent = results, current
        if len(results) < self.config.min_result_count:
            results, current = best, best_intent
        return PlanOutcome(branch=Branch.DISCOVER, intent=current, results=results, relaxation_steps=applied)

    # -- related-content lookups ---------------------------------------

    async def _related_by_person(self, outcome: PlanOutcome, context: SearchContext) -> list[SearchResult]:
        if outcome.person_info is None:
            return []
        return await self._person_credits(
            outcome.person_info.name, outcome.intent.content_type, PersonRole.ANY, context
        )

    async def _related_by_content(self, outcome: PlanOutcome, context: SearchContext) -> list[SearchResult]:
        info = outcome.content_info
        if info is None:
            return []
        try:
            items = await self.catalog.similar_titles(info.content_type, info.id, language=context.locale)
        except UPSTREAM_ERRORS as exc:
            logger.warning("Similar titles for %s failed: %s", info.title, exc)
            return []
        return _results(items[:SIMILAR_TITLE_LIMIT], info.content_type)

    # -- discovery -----------------------------------------------------

    async def _discover(self, intent: QueryIntent, context: SearchContext) -> list[SearchResult]:
        keyword_ids = await self._keyword_ids([*intent.keywords, *intent.location_keywords], context)
        director_id = await self._person_id(intent.director_name, context) if intent.director_name else None
        cast_ids = [
            person_id
            for person_id in [await self._person_id(name, context) for name in intent.actor_names]
            if person_id is not None
        ]
        results: list[SearchResult] = []
        for kind in intent.content_type.media_kinds():
            params = self.build_discover_params(
                intent,
                kind,
                context,
                keyword_ids=keyword_ids,
                director_id=director_id,
                cast_ids=cast_ids,
            )
            try:
                results.extend(await self._discover_pages(kind, params, already=len(results)))
            except UPSTREAM_ERRORS as exc:
                logger.warning("Discovery for %s failed, skipping: %s", kind.value, exc)
        if intent.max_results:
            results = results[: intent.max_results]
        return results

    async def _discover_pages(self, kind: MediaKind, params: dict[str, Any], *, already: int) -> list[SearchResult]:
        payload = await self.catalog.discover(kind, params)
        results = _results(payload.get("results"), kind)
        total_pages = int(payload.get("total_pages") or 1)
        if total_pages <= 1 or already + len(results) >= self.config.discover_result_soft_cap:
            return results
        for page in range(2, min(self.config.discover_max_pages, total_pages) + 1):
            await self.sleep(self.config.discover_page_delay_seconds)
            try:
                page_payload = await self.catalog.discover(kind, {**params, "page": page})
            except UPSTREAM_ERRORS as exc:
                logger.warning("Discovery page %d for %s failed: %s", page, kind.value, exc)
            else:
                results.extend(_results(page_payload.get("results"), kind))
        return results

    def build_discover_params(
        self,
        intent: QueryIntent,
        kind: MediaKind,
        context: SearchContext,
        *,
        keyword_ids: Iterable[int] = (),
        director_id: int | None = None,
        cast_ids: Iterable[int] = (),
    ) -> dict[str, Any]:
        """Encode an intent as catalog discovery parameters for one media kind."""
        params: dict[str, Any] = {
            "language": context.locale,
            "sort_by": intent.sort_order.catalog_value(kind),
            "page": 1,
            "vote_count.gte": self.vote_count_floor(intent.min_rating),
        }
        if intent.genres:
            params["with_genres"] = ",".join(str(genre) for genre in self._genres_for(kind, intent.genres))
        if intent.providers:
            params["with_watch_providers"] = "|".join(str(provider) for provider in intent.providers)
            params["watch_region"] = context.country
        if intent.min_rating > 0:
            params["vote_average.gte"] = intent.min_rating
        if intent.max_rating is not None and intent.max_rating < 10:
            params["vote_average.lte"] = intent.max_rating

        date_field = "primary_release_date" if kind is MediaKind.MOVIE else "first_air_date"
        if intent.year_start is not None:
            params[f"{date_field}.gte"] = year_start_bound(intent.year_start)
        if intent.year_end is not None:
            params[f"{date_field}.lte"] = year_end_bound(intent.year_end, today=self.today())

        keyword_ids = list(keyword_ids)
        if keyword_ids:
            params["with_keywords"] = ",".join(str(keyword_id) for keyword_id in keyword_ids)
        if intent.production_countries:
            params["with_origin_country"] = "|".join(intent.production_countries)
        if intent.spoken_languages:
            params["with_original_language"] = "|".join(intent.spoken_languages)
        if kind is MediaKind.MOVIE and director_id is not None:
            params["with_crew"] = str(director_id)
        cast_ids = list(cast_ids)
        if cast_ids:
            params["with_cast"] = ",".join(str(cast_id) for cast_id in cast_ids)

        if kind is MediaKind.TV:
            if intent.max_seasons:
                params["with_number_of_seasons.lte"] = intent.max_seasons
            if intent.min_seasons:
                params["with_number_of_seasons.gte"] = intent.min_seasons
            if intent.networks:
                params["with_networks"] = "|".join(str(network) for network in intent.networks)
        else:
            if intent.min_runtime:
                params["with_runtime.gte"] = intent.min_runtime
            if intent.max_runtime:
                params["with_runtime.lte"] = intent.max_runtime

        if intent.certification:
            params["certification_country"] = context.country
            params["certification"] = intent.certification
        if not intent.adult_content:
            params["include_adult"] = "false"
        return params

    def vote_count_floor(self, min_rating: float) -> int:
        """Stricter rating floors require more votes."""
        if min_rating > 0:
            for threshold, votes in self.config.vote_count_floors:
                if min_rating >= threshold:
                    return votes
        return self.config.vote_count_base

    def _genres_for(self, kind: MediaKind, genres: list[int]) -> list[int]:
        if kind is MediaKind.MOVIE:
            return genres
        mapped = [self.lexicon.tv_genre_equivalents.get(genre, genre) for genre in genres]
        return list(dict.fromkeys(mapped))

    # -- lookups -------------------------------------------------------

    async def _keyword_ids(self, terms: list[str], context: SearchContext) -> list[int]:
        ids: list[int] = []
        for term in terms:
            key = term.lower()
            if key not in context.keyword_ids:
                try:
                    matches = await self.catalog.search_keywords(term)
                except UPSTREAM_ERRORS as exc:
                    logger.warning("Keyword lookup for %r failed: %s", term, exc)
                    matches = []
                context.keyword_ids[key] = matches[0]["id"] if matches else None
            keyword_id = context.keyword_ids[key]
            if keyword_id is not None and keyword_id not in ids:
                ids.append(keyword_id)
        return ids

    async def _person_id(self, name: str, context: SearchContext) -> int | None:
        key = name.lower()
        if key not in context.person_ids:
            try:
                matches = await self.catalog.search_people(name, language=context.locale)
            except UPSTREAM_ERRORS as exc:
                logger.warning("Person lookup for %r failed: %s", name, exc)
                matches = []
            context.person_ids[key] = matches[0]["id"] if matches else None
        return context.person_ids[key]

    async def _person_info(self, name: str, context: SearchContext) -> PersonInfo | None:
        person_id = await self._person_id(name, context)
        if person_id is None:
            logger.info("Person %r not found", name)
            return None
        try:
            details = await self.catalog.person_details(person_id, language=context.locale)
        except UPSTREAM_ERRORS as exc:
            logger.warning("Person details for %r failed: %s", name, exc)
            return None
        return PersonInfo(
            id=details.get("id", person_id),
            name=details.get("name") or name,
            biography=details.get("biography") or None,
            birthday=details.get("birthday"),
            deathday=details.get("deathday"),
            place_of_birth=details.get("place_of_birth"),
            known_for_department=details.get("known_for_department"),
            profile_path=details.get("profile_path"),
        )

    async def _person_credits(
        self, name: str, content_type: ContentType, role: PersonRole, context: SearchContext
    ) -> list[SearchResult]:
        person_id = await self._person_id(name, context)
        if person_id is None:
            return []
        results: list[SearchResult] = []
        for kind in content_type.media_kinds():
            try:
                credits = await self.catalog.person_credits(person_id, kind, language=context.locale)
            except UPSTREAM_ERRORS as exc:
                logger.warning("Credits for %r (%s) failed: %s", name, kind.value, exc)
                continue
            cast = credits.get("cast") or []
            crew = credits.get("crew") or []
            # Director filtering applies to movie credits only; series keep cast and crew.
            if role is PersonRole.DIRECTOR and kind is MediaKind.MOVIE:
                items = [item for item in crew if item.get("job") == "Director"]
            elif role is PersonRole.ACTOR:
                items = list(cast)
            else:
                items = [*cast, *crew]
            unique = {item["id"]: item for item in items if "id" in item}
            ordered = sorted(unique.values(), key=lambda item: item.get("popularity") or 0, reverse=True)
            results.extend(_results(ordered, kind))
        return results

    async def _search_title(
        self, title: str, content_type: ContentType, context: SearchContext
    ) -> list[SearchResult]:
        """Return the first title match, trying movies before series."""
        for kind in content_type.media_kinds():
            try:
                matches = await self.catalog.search_titles(kind, title, language=context.locale)
            except UPSTREAM_ERRORS as exc:
                logger.warning("Title search for %r (%s) failed: %s", title, kind.value, exc)
                continue
            if matches:
                return _results(matches[:1], kind)
        return []

    async def _content_info(self, title: str, content_type: ContentType, context: SearchContext) -> ContentInfo | None:
        for kind in content_type.media_kinds():
            try:
                matches = await self.catalog.search_titles(kind, title, language=context.locale)
                if not matches:
                    continue
                details = await self.catalog.title_details(kind, matches[0]["id"], language=context.locale)
            except UPSTREAM_ERRORS as exc:
                logger.warning("Content info for %r (%s) failed: %s", title, kind.value, exc)
                continue
            credits = details.get("credits") or {}
            director = next(
                (person.get("name") for person in credits.get("crew") or [] if person.get("job") == "Director"),
                None,
            )
            return ContentInfo(
                id=details.get("id", matches[0]["id"]),
                title=details.get("title") or details.get("name") or title,
                content_type=kind,
                overview=details.get("overview") or None,
                release_date=details.get("release_date") or details.get("first_air_date"),
                vote_average=details.get("vote_average"),
                runtime=details.get("runtime"),
                number_of_seasons=details.get("number_of_seasons"),
                director=director,
                cast=[person["name"] for person in (credits.get("cast") or [])[:CONTENT_INFO_CAST_LIMIT] if person.get("name")],
                genres=[genre["name"] for genre in details.get("genres") or [] if genre.get("name")],
                poster_path=details.get("poster_path"),
            )
        return None

    async def _filter_by_providers(
        self, results: list[SearchResult], providers: list[int], context: SearchContext
    ) -> list[SearchResult]:
        """Keep only results available on a requested provider in the viewer's country."""
        wanted = set(providers)
        kept: list[SearchResult] = []
        for result in results:
            available = await self._available_providers(result, context)
            if wanted & available:
                kept.append(result)
            else:
                logger.debug("%s not available on requested providers", result.display_title)
        return kept

    async def _available_providers(self, result: SearchResult, context: SearchContext) -> set[int]:
        try:
            regions = await self.catalog.watch_providers(result.content_type, result.id)
        except UPSTREAM_ERRORS as exc:
            logger.warning("Provider lookup for %s failed: %s", result.display_title, exc)
            return set()
        region = regions.get(context.country) or {}
        return {
            entry["provider_id"]
            for availability in AVAILABILITY_KINDS
            for entry in region.get(availability) or []
            if "provider_id" in entry
        }


def _results(items: Iterable[dict[str, Any]] | None, kind: MediaKind) -> list[SearchResult]:
    return [SearchResult.from_catalog(item, kind) for item in items or [] if item.get("id") is not None]


def _popularity(result: SearchResult) -> float:
    return result.popularity or 0.0
