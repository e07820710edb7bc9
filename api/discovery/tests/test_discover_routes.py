from __future__ import annotations

from typing import Any

import pytest

from discovery.core.config import settings
from discovery.models.discovery import MediaKind, Mood
from discovery.services.messages import DEFAULT_MESSAGES
from discovery.tests.utils import movie


def _discover_params(catalog) -> list[dict[str, Any]]:
    return [payload[1] for operation, payload in catalog.calls if operation == "discover"]


@pytest.mark.asyncio
async def test_blank_query_is_rejected(client, configured):
    response = await client.post("/api/discover", json={"query": "   "})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Query is required",
        "results": [],
        "responseText": "Please enter a search query.",
    }


@pytest.mark.asyncio
async def test_missing_query_field_is_rejected(client, configured):
    response = await client.post("/api/discover", json={"countryCode": "US"})

    assert response.status_code == 400
    assert response.json()["error"] == "Query is required"


@pytest.mark.asyncio
async def test_missing_credentials_return_configuration_error(client, catalog, monkeypatch):
    monkeypatch.setattr(settings, "tmdb_api_auth_header", None)
    monkeypatch.setattr(settings, "tmdb_api_key", None)
    monkeypatch.setattr(settings, "openai_api_key", None)

    response = await client.post("/api/discover", json={"query": "comedy movies"})

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "API keys not configured"
    assert payload["responseText"] == "Sorry, something went wrong. Please try again."
    assert catalog.calls == []


@pytest.mark.asyncio
async def test_off_topic_query_skips_catalog(client, catalog, configured):
    response = await client.post("/api/discover", json={"query": "what's the weather today", "countryCode": "US"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["isOffTopic"] is True
    assert payload["results"] == []
    assert payload["responseText"] == DEFAULT_MESSAGES.off_topic_message("en")
    assert catalog.calls == []


@pytest.mark.asyncio
async def test_vague_query_returns_trending(client, catalog, configured):
    catalog.trending_results[MediaKind.MOVIE] = [movie(1, "Dune: Part Two", popularity=90.0)]
    catalog.trending_results[MediaKind.TV] = [{"id": 2, "name": "Shogun", "popularity": 95.0}]

    response = await client.post("/api/discover", json={"query": "recommend something"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["isVagueQuery"] is True
    assert payload["params"]["useTrendingAPI"] is True
    assert [item["id"] for item in payload["results"]] == [2, 1]
    assert payload["results"][0]["contentType"] == "tv"
    assert payload["responseText"] == "I found 2 titles for you! Take a look at the results below."


@pytest.mark.asyncio
async def test_turkish_mood_query_end_to_end(client, catalog, configured):
    catalog.discover_handler = lambda kind, params: {
        "results": [movie(item_id, f"Film {item_id}") for item_id in range(1, 7)],
        "total_pages": 1,
    }

    response = await client.post("/api/discover", json={"query": "sıkılıyorum, film öner", "countryCode": "tr"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["detectedMood"] == "bored"
    assert payload["moodConfidence"] == 85
    assert payload["params"]["genres"] == [28, 53]
    assert len(payload["results"]) == 6
    assert payload["responseText"].startswith(DEFAULT_MESSAGES.mood_acknowledgment(Mood.BORED, "tr"))
    params = _discover_params(catalog)[0]
    assert params["language"] == "tr-TR"
    assert params["with_genres"] == "28,53"
    assert params["vote_average.gte"] == 6.5
    assert params["vote_count.gte"] == 5


@pytest.mark.asyncio
async def test_person_info_returns_biography_and_credits(client, catalog, configured):
    catalog.people["keanu reeves"] = [{"id": 6384, "name": "Keanu Reeves"}]
    catalog.person_payloads[6384] = {"id": 6384, "name": "Keanu Reeves", "birthday": "1964-09-02"}
    catalog.credits[(6384, MediaKind.MOVIE)] = {"cast": [movie(603, "The Matrix")], "crew": []}

    response = await client.post("/api/discover", json={"query": "who is Keanu Reeves"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["personInfo"]["name"] == "Keanu Reeves"
    assert payload["personInfo"]["birthday"] == "1964-09-02"
    assert [item["id"] for item in payload["results"]] == [603]


@pytest.mark.asyncio
async def test_topic_change_reported(client, configured):
    history = [
        {"role": "user", "content": "best comedy movies"},
        {"role": "assistant", "content": "I found 20 movies for you!"},
    ]

    response = await client.post(
        "/api/discover",
        json={"query": "what's trending on netflix", "conversationHistory": history},
    )

    assert response.status_code == 200
    assert response.json()["topicChanged"] is True


@pytest.mark.asyncio
async def test_unexpected_failure_is_redacted(client, catalog, configured):
    def explode(kind, params):
        raise RuntimeError("catalog exploded with key sk-abcdef1234567890")

    catalog.discover_handler = explode

    response = await client.post("/api/discover", json={"query": "best comedy movies"})

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert "sk-abcdef1234567890" not in payload["error"]
    assert "sk-***" in payload["error"]
    assert payload["results"] == []
