"""One discovery chat request: parse, plan, compose."""

from __future__ import annotations

import logging

from discovery.core.config import settings
from discovery.schema.discover import DiscoverRequest, DiscoverResponse
from discovery.services.query_parser import QueryParser
from discovery.services.response_composer import ResponseComposer
from discovery.services.search_planner import SearchPlanner

logger = logging.getLogger("discovery.services.discovery_service")


async def discover(
    request: DiscoverRequest,
    *,
    parser: QueryParser,
    planner: SearchPlanner,
    composer: ResponseComposer,
) -> DiscoverResponse:
    query = request.query.strip()
    country = (request.country_code or settings.default_country).upper()
    history = request.conversation_history[-settings.history_turn_limit :]

    intent = await parser.parse(query, history)
    if intent.is_off_topic:
        logger.info("Off-topic query answered without catalog calls: %r", query)
        return DiscoverResponse(
            results=[],
            response_text=composer.off_topic(query, country),
            is_off_topic=True,
            topic_changed=False,
            params=intent,
        )

    topic_changed = parser.detect_topic_change(query, history, intent)
    outcome = await planner.plan(intent, country)
    if outcome.relaxation_steps:
        logger.info("Relaxed %r via %s", query, ", ".join(outcome.relaxation_steps))

    reply = await composer.compose(
        query,
        outcome.intent,
        outcome.results,
        person_info=outcome.person_info,
        content_info=outcome.content_info,
        country=country,
    )
    logger.info(
        "Discovery for %r finished: branch=%s results=%d reply=%s",
        query,
        outcome.branch.value,
        len(reply.results),
        reply.path,
    )
    return DiscoverResponse(
        results=reply.results,
        response_text=reply.text,
        is_off_topic=False,
        topic_changed=topic_changed,
        params=outcome.intent,
        person_info=outcome.person_info,
        content_info=outcome.content_info,
        detected_mood=intent.detected_mood,
        mood_confidence=intent.mood_confidence,
        is_vague_query=intent.is_vague_query,
    )
