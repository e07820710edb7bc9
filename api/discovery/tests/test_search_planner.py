from __future__ import annotations

from typing import Any

import pytest

from discovery.core.config import settings
from discovery.models.discovery import Branch, ContentType, MediaKind, PersonRole
from discovery.schema.intent import QueryIntent
from discovery.services.search_planner import SearchContext, SearchPlanner
from discovery.tests.utils import TODAY, FakeCatalog, movie, no_sleep, show
from discovery.upstream.http import ExternalAPIError


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_planner(catalog: FakeCatalog, **overrides: Any) -> SearchPlanner:
    options: dict[str, Any] = {"today": lambda: TODAY, "sleep": no_sleep}
    options.update(overrides)
    return SearchPlanner(catalog, **options)


def page(count: int, *, start: int = 1, total_pages: int = 1) -> dict[str, Any]:
    return {
        "results": [movie(item_id, f"Movie {item_id}") for item_id in range(start, start + count)],
        "total_pages": total_pages,
    }


def test_turkish_series_params(catalog: FakeCatalog) -> None:
    planner = make_planner(catalog)
    intent = QueryIntent(
        content_type=ContentType.TV,
        genres=[28, 878, 10759],
        providers=[8],
        min_rating=7.5,
        year_start=2020,
        year_end=2026,
    )

    params = planner.build_discover_params(intent, MediaKind.TV, SearchContext(country="TR", locale="tr-TR"))

    assert params == {
        "language": "tr-TR",
        "sort_by": "popularity.desc",
        "page": 1,
        "vote_count.gte": 10,
        "with_genres": "10759,10765",
        "with_watch_providers": "8",
        "watch_region": "TR",
        "vote_average.gte": 7.5,
        "first_air_date.gte": "2020-01-01",
        "first_air_date.lte": "2026-10-19",
        "include_adult": "false",
    }


def test_movie_params_with_people_and_runtime(catalog: FakeCatalog) -> None:
    planner = make_planner(catalog)
    intent = QueryIntent(
        content_type=ContentType.BOTH,
        genres=[28],
        year_end=1999,
        max_rating=6.0,
        max_runtime=100,
        max_seasons=2,
        production_countries=["KR", "JP"],
        certification="PG-13",
    )
    context = SearchContext(country="US", locale="en-US")

    movie_params = planner.build_discover_params(
        intent, MediaKind.MOVIE, context, keyword_ids=[101, 202], director_id=525, cast_ids=[31, 32]
    )
    tv_params = planner.build_discover_params(intent, MediaKind.TV, context, director_id=525)

    assert movie_params["with_genres"] == "28"
    assert movie_params["primary_release_date.lte"] == "1999-12-31"
    assert movie_params["vote_average.lte"] == 6.0
    assert movie_params["with_keywords"] == "101,202"
    assert movie_params["with_crew"] == "525"
    assert movie_params["with_cast"] == "31,32"
    assert movie_params["with_runtime.lte"] == 100
    assert movie_params["with_origin_country"] == "KR|JP"
    assert movie_params["certification_country"] == "US"
    assert "with_number_of_seasons.lte" not in movie_params
    assert tv_params["with_number_of_seasons.lte"] == 2
    assert "with_crew" not in tv_params
    assert "with_runtime.lte" not in tv_params


@pytest.mark.parametrize(("rating", "floor"), [(0.0, 3), (5.5, 3), (6.0, 5), (7.5, 10), (8.5, 20)])
def test_vote_count_floor(catalog: FakeCatalog, rating: float, floor: int) -> None:
    assert make_planner(catalog).vote_count_floor(rating) == floor


@pytest.mark.asyncio
async def test_trending_merges_kinds_and_filters_providers(catalog: FakeCatalog) -> None:
    catalog.trending_results[MediaKind.MOVIE] = [movie(1, "Low", popularity=5.0), movie(2, "High", popularity=50.0)]
    catalog.trending_results[MediaKind.TV] = [show(3, "Middle", popularity=20.0)]
    catalog.providers[(MediaKind.MOVIE, 2)] = {"US": {"flatrate": [{"provider_id": 8}]}}
    catalog.providers[(MediaKind.TV, 3)] = {"US": {"rent": [{"provider_id": 8}]}, "TR": {}}
    catalog.providers[(MediaKind.MOVIE, 1)] = {"TR": {"flatrate": [{"provider_id": 8}]}}
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(use_trending_api=True, providers=[8]), "us")

    assert outcome.branch is Branch.TRENDING
    assert [result.id for result in outcome.results] == [2, 3]
    assert outcome.results[1].content_type is MediaKind.TV


@pytest.mark.asyncio
async def test_trending_respects_requested_count(catalog: FakeCatalog) -> None:
    catalog.trending_results[MediaKind.MOVIE] = [movie(item_id, f"M{item_id}") for item_id in range(1, 30)]
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(use_trending_api=True, content_type=ContentType.MOVIE, max_results=10))

    assert len(outcome.results) == 10
    assert catalog.operations() == ["trending"]


@pytest.mark.asyncio
async def test_specific_title_falls_back_to_series(catalog: FakeCatalog) -> None:
    catalog.titles[(MediaKind.TV, "dark")] = [show(70523, "Dark"), show(1, "Dark Matter")]
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(specific_title="Dark"))

    assert outcome.branch is Branch.SPECIFIC_TITLE
    assert [result.display_title for result in outcome.results] == ["Dark"]
    assert catalog.operations() == ["search_titles", "search_titles"]


@pytest.mark.asyncio
async def test_person_credits_for_director(catalog: FakeCatalog) -> None:
    catalog.people["christopher nolan"] = [{"id": 525, "name": "Christopher Nolan"}]
    catalog.credits[(525, MediaKind.MOVIE)] = {
        "cast": [movie(900, "Cameo")],
        "crew": [
            movie(27205, "Inception", popularity=80.0, job="Director"),
            movie(157336, "Interstellar", popularity=90.0, job="Director"),
            movie(27205, "Inception", popularity=80.0, job="Writer"),
            movie(1, "Produced Only", job="Producer"),
        ],
    }
    planner = make_planner(catalog)
    intent = QueryIntent(person_name="Christopher Nolan", person_role=PersonRole.DIRECTOR)

    outcome = await planner.plan(intent)

    assert outcome.branch is Branch.PERSON_CREDITS
    assert [result.id for result in outcome.results] == [157336, 27205]
    assert ("person_credits", (525, MediaKind.TV)) in catalog.calls


@pytest.mark.asyncio
async def test_person_info_fills_results_from_credits(catalog: FakeCatalog) -> None:
    catalog.people["keanu reeves"] = [{"id": 6384, "name": "Keanu Reeves"}]
    catalog.person_payloads[6384] = {"id": 6384, "name": "Keanu Reeves", "birthday": "1964-09-02", "biography": ""}
    catalog.credits[(6384, MediaKind.MOVIE)] = {"cast": [movie(603, "The Matrix")], "crew": []}
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(person_name="Keanu Reeves", is_person_info_query=True))

    assert outcome.branch is Branch.PERSON_INFO
    assert outcome.person_info is not None
    assert outcome.person_info.birthday == "1964-09-02"
    assert outcome.person_info.biography is None
    assert [result.id for result in outcome.results] == [603]
    assert catalog.operations().count("search_people") == 1


@pytest.mark.asyncio
async def test_content_info_fills_results_from_similar_titles(catalog: FakeCatalog) -> None:
    catalog.titles[(MediaKind.MOVIE, "inception")] = [movie(27205, "Inception")]
    catalog.details[(MediaKind.MOVIE, 27205)] = {
        "id": 27205,
        "title": "Inception",
        "release_date": "2010-07-15",
        "runtime": 148,
        "genres": [{"id": 28, "name": "Action"}],
        "credits": {
            "cast": [{"name": f"Actor {index}"} for index in range(8)],
            "crew": [{"name": "Christopher Nolan", "job": "Director"}],
        },
    }
    catalog.similar[(MediaKind.MOVIE, 27205)] = [movie(item_id, f"Similar {item_id}") for item_id in range(1, 15)]
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(specific_title="Inception", is_content_info_query=True))

    assert outcome.branch is Branch.CONTENT_INFO
    assert outcome.content_info is not None
    assert outcome.content_info.director == "Christopher Nolan"
    assert len(outcome.content_info.cast) == 5
    assert outcome.content_info.genres == ["Action"]
    assert len(outcome.results) == 10


@pytest.mark.asyncio
async def test_unknown_person_yields_nothing(catalog: FakeCatalog) -> None:
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(person_name="Nobody Known", is_person_info_query=True))

    assert outcome.person_info is None
    assert outcome.results == []


@pytest.mark.asyncio
async def test_discover_without_relaxation(catalog: FakeCatalog) -> None:
    catalog.discover_handler = lambda kind, params: page(8)
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(content_type=ContentType.MOVIE, genres=[35], min_rating=7.0))

    assert len(outcome.results) == 8
    assert outcome.relaxation_steps == []
    assert outcome.intent.min_rating == 7.0


@pytest.mark.asyncio
async def test_discover_stops_relaxing_once_enough_results(catalog: FakeCatalog) -> None:
    catalog.discover_handler = lambda kind, params: page(0) if "vote_average.gte" in params else page(6)
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(content_type=ContentType.MOVIE, genres=[35, 18], min_rating=7.0))

    assert outcome.relaxation_steps == ["drop_rating_floor"]
    assert outcome.intent.genres == [35, 18]
    assert len(outcome.results) == 6


@pytest.mark.asyncio
async def test_exhausted_ladder_returns_largest_result_set(catalog: FakeCatalog) -> None:
    def handler(kind: MediaKind, params: dict[str, Any]) -> dict[str, Any]:
        if "vote_average.gte" in params:
            return page(0)
        if "," in params.get("with_genres", "") or "with_watch_providers" in params:
            return page(1)
        if "primary_release_date.gte" in params:
            return page(3)
        return page(2)

    catalog.discover_handler = handler
    planner = make_planner(catalog)
    intent = QueryIntent(
        content_type=ContentType.MOVIE,
        genres=[35, 18],
        providers=[8],
        min_rating=7.5,
        year_start=1990,
        year_end=1999,
    )

    outcome = await planner.plan(intent)

    assert outcome.relaxation_steps == [
        "drop_rating_floor",
        "keep_primary_genre",
        "drop_providers",
        "drop_year_range",
        "content_type_only",
    ]
    assert len(outcome.results) == 3
    assert outcome.intent.providers == []
    assert outcome.intent.year_start == 1990
    assert outcome.intent.genres == [35]
    assert catalog.operations().count("discover") == 6


@pytest.mark.asyncio
async def test_discover_pages_with_delay_and_skips_failed_page(catalog: FakeCatalog) -> None:
    def handler(kind: MediaKind, params: dict[str, Any]) -> dict[str, Any]:
        if params["page"] == 2:
            raise ExternalAPIError("page 2 timed out")
        return page(4, start=params["page"] * 10, total_pages=9)

    catalog.discover_handler = handler
    sleeper = SleepRecorder()
    planner = make_planner(catalog, sleep=sleeper)

    outcome = await planner.plan(QueryIntent(content_type=ContentType.MOVIE, genres=[35]))

    pages = [payload[1]["page"] for operation, payload in catalog.calls if operation == "discover"]
    assert pages == [1, 2, 3, 4, 5]
    assert sleeper.delays == [settings.discover_page_delay_seconds] * 4
    assert len(outcome.results) == 16


@pytest.mark.asyncio
async def test_discover_soft_cap_skips_extra_pages(catalog: FakeCatalog) -> None:
    catalog.discover_handler = lambda kind, params: page(settings.discover_result_soft_cap, total_pages=5)
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(content_type=ContentType.MOVIE, genres=[35]))

    assert catalog.operations().count("discover") == 1
    assert len(outcome.results) == settings.discover_result_soft_cap


@pytest.mark.asyncio
async def test_failing_kind_is_skipped(catalog: FakeCatalog) -> None:
    catalog.failing.add("discover:tv")
    catalog.discover_handler = lambda kind, params: page(6)
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(genres=[18]))

    assert len(outcome.results) == 6
    assert {result.content_type for result in outcome.results} == {MediaKind.MOVIE}


@pytest.mark.asyncio
async def test_keyword_ids_resolved_once_per_request(catalog: FakeCatalog) -> None:
    catalog.keywords["heist"] = [{"id": 10051, "name": "heist"}]
    catalog.discover_handler = lambda kind, params: page(0)
    planner = make_planner(catalog)

    await planner.plan(QueryIntent(content_type=ContentType.MOVIE, keywords=["heist"], min_rating=6.5))

    discover_params = [payload[1] for operation, payload in catalog.calls if operation == "discover"]
    assert discover_params[0]["with_keywords"] == "10051"
    assert discover_params[1]["with_keywords"] == "10051"
    assert catalog.operations().count("search_keywords") == 1


@pytest.mark.asyncio
async def test_max_results_truncates_discovery(catalog: FakeCatalog) -> None:
    catalog.discover_handler = lambda kind, params: page(12)
    planner = make_planner(catalog)

    outcome = await planner.plan(QueryIntent(content_type=ContentType.MOVIE, genres=[35], max_results=5))

    assert len(outcome.results) == 5


@pytest.mark.asyncio
async def test_specific_title_drops_match_unavailable_on_provider(catalog: FakeCatalog) -> None:
    catalog.titles[(MediaKind.TV, "dark")] = [show(70523, "Dark")]
    catalog.providers[(MediaKind.TV, 70523)] = {"TR": {"flatrate": [{"provider_id": 8}]}}
    planner = make_planner(catalog)
    intent = QueryIntent(specific_title="Dark", content_type=ContentType.TV, providers=[8])

    in_us = await planner.plan(intent, "US")
    in_tr = await planner.plan(intent, "TR")

    assert in_us.branch is Branch.SPECIFIC_TITLE
    assert in_us.results == []
    assert in_us.relaxation_steps == []
    assert [result.id for result in in_tr.results] == [70523]
    assert "discover" not in catalog.operations()


@pytest.mark.asyncio
async def test_person_credits_keep_only_titles_on_provider(catalog: FakeCatalog) -> None:
    catalog.people["tom hanks"] = [{"id": 31, "name": "Tom Hanks"}]
    catalog.credits[(31, MediaKind.MOVIE)] = {
        "cast": [
            movie(13, "Forrest Gump", popularity=60.0),
            movie(857, "Saving Private Ryan", popularity=40.0),
        ],
        "crew": [],
    }
    catalog.providers[(MediaKind.MOVIE, 13)] = {"US": {"flatrate": [{"provider_id": 8}]}}
    catalog.providers[(MediaKind.MOVIE, 857)] = {"US": {"rent": [{"provider_id": 337}]}}
    planner = make_planner(catalog)
    intent = QueryIntent(person_name="Tom Hanks", content_type=ContentType.MOVIE, providers=[8])

    outcome = await planner.plan(intent, "US")

    assert outcome.branch is Branch.PERSON_CREDITS
    assert [result.id for result in outcome.results] == [13]
    assert "discover" not in catalog.operations()


@pytest.mark.asyncio
async def test_director_credits_on_series_keep_cast_and_crew(catalog: FakeCatalog) -> None:
    catalog.people["vince gilligan"] = [{"id": 66633, "name": "Vince Gilligan"}]
    catalog.credits[(66633, MediaKind.TV)] = {
        "cast": [show(1396, "Breaking Bad", popularity=90.0)],
        "crew": [
            show(60059, "Better Call Saul", popularity=70.0, job="Executive Producer"),
            show(1396, "Breaking Bad", popularity=90.0, job="Creator"),
        ],
    }
    planner = make_planner(catalog)
    intent = QueryIntent(person_name="Vince Gilligan", person_role=PersonRole.DIRECTOR, content_type=ContentType.TV)

    outcome = await planner.plan(intent)

    assert [result.id for result in outcome.results] == [1396, 60059]
