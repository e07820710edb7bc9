"""Response Composer: a short reply grounded in the results actually found.

The completion model only words the reply. Its answer is checked against
the supplied top results: any number or quoted title that does not come
from them rejects the answer in favor of the localized safe template.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, Sequence

from discovery.core.config import settings
from discovery.models.discovery import ContentType, MediaKind
from discovery.schema.discover import ContentInfo, PersonInfo, SearchResult
from discovery.schema.intent import QueryIntent
from discovery.services.language import detect_language, language_for_country
from discovery.services.lexicon import DEFAULT_LEXICON, Lexicon
from discovery.services.matching import contains_any, normalize
from discovery.services.messages import DEFAULT_MESSAGES, Messages
from discovery.upstream.base import BaseCompletionClient, CompletionRequest
from discovery.upstream.http import ExternalAPIError
from discovery.upstream.observability import CircuitOpenError, upstream_monitor
from discovery.utils.datetime import parse_date

logger = logging.getLogger("discovery.services.response_composer")

TOP_RESULT_LIMIT = 5
CONTEXT_CAST_LIMIT = 3
BIOGRAPHY_EXCERPT = 200
UNCERTAIN = "UNCERTAIN"

_NUMBER_RE = re.compile(r"(?<![\w.,])\d+(?:[.,]\d+)?(?![\w])")
_QUOTED_RE = re.compile(r"[\"“«]([^\"“”«»]+)[\"”»]|(?<!\w)['‘]([^'‘’]+)['’](?!\w)")

TitleLookup = Callable[[str, ContentType, str | None], Awaitable[list[SearchResult]]]

REPLY_SYSTEM_PROMPT = """You are a friendly streaming content assistant. Write a natural reply (1-2 sentences) to the user's query about the search results described in the message.

Rules:
- Only use the result count and the titles, years and ratings listed in the message.
- Never state any other number, and never compute totals yourself.
- Never mention a title that is not listed, and do not list titles unless there is exactly one result.
- Never invent cast, directors or other details that were not provided.
- Do not greet the user and do not comment on their mood; that is handled separately.
- Reply in the language with code {language}. Return only the message text without quotes around it.
- If unsure, say: "I found {count} {noun} for you! Take a look at the results below." in that language."""

SCENE_PROMPT = """You are a movie and TV show expert. Identify the exact title described by the user.
- Reply with only the title in its original language, without year or explanation.
- If you are not completely certain, reply with exactly: UNCERTAIN"""

KNOWLEDGE_PROMPT = """You are a movie and TV show expert. Answer the user's question from certain knowledge only.
- Answer only if you are completely certain about the facts (dates, names, numbers).
- Be concise: 1-2 sentences. Do not mention databases or searching.
- Reply in the same language as the question.
- If you are not completely certain, reply with exactly: UNCERTAIN"""


@dataclass(slots=True)
class ComposedReply:
    text: str
    path: str
    results: list[SearchResult] = field(default_factory=list)


class ResponseComposer:
    def __init__(
        self,
        completion: BaseCompletionClient | None = None,
        *,
        lexicon: Lexicon = DEFAULT_LEXICON,
        messages: Messages = DEFAULT_MESSAGES,
        title_lookup: TitleLookup | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.completion = completion
        self.lexicon = lexicon
        self.messages = messages
        self.title_lookup = title_lookup
        self.today = today

    def reply_language(self, query: str, country: str | None = None) -> str:
        """Heuristic query language; the viewer country's language when nothing matches."""
        return detect_language(query, self.lexicon, default=language_for_country(country))

    def off_topic(self, query: str, country: str | None = None) -> str:
        return self.messages.off_topic_message(self.reply_language(query, country))

    async def compose(
        self,
        query: str,
        intent: QueryIntent,
        results: Sequence[SearchResult],
        *,
        person_info: PersonInfo | None = None,
        content_info: ContentInfo | None = None,
        country: str | None = None,
    ) -> ComposedReply:
        language = self.reply_language(query, country)
        results = list(results)
        if intent.is_off_topic:
            return ComposedReply(self.messages.off_topic_message(language), "off_topic", results)
        if not results and person_info is None and content_info is None:
            return await self._knowledge_fallback(query, intent, language, country)

        body, path = await self._results_reply(query, intent, results, person_info, content_info, language)
        acknowledgment = None
        if intent.detected_mood is not None and intent.mood_confidence > 60:
            acknowledgment = self.messages.mood_acknowledgment(intent.detected_mood, language)
        text = f"{acknowledgment} {body}" if acknowledgment else body
        logger.info("Composed %s reply for %d results (language=%s)", path, len(results), language)
        return ComposedReply(text, path, results)

    # -- results reply -------------------------------------------------

    async def _results_reply(
        self,
        query: str,
        intent: QueryIntent,
        results: list[SearchResult],
        person_info: PersonInfo | None,
        content_info: ContentInfo | None,
        language: str,
    ) -> tuple[str, str]:
        safe = self.messages.found_count_message(len(results), intent.content_type, language)
        if self.completion is None:
            return safe, "template"
        if not upstream_monitor.allow_call(self.completion.source_name):
            await upstream_monitor.record_skip(
                self.completion.source_name, "completion", reason="circuit_open", context={"stage": "reply"}
            )
            return safe, "template"
        top = results[:TOP_RESULT_LIMIT]
        noun = self.messages.content_nouns["en"][intent.content_type]
        request = CompletionRequest(
            system=REPLY_SYSTEM_PROMPT.format(language=language, count=len(results), noun=noun),
            user=self._reply_context(query, intent, len(results), top, person_info, content_info),
            model=settings.response_model,
            temperature=0.1,
            max_tokens=100,
        )
        try:
            reply = (await self.completion.complete(request)).strip().strip('"')
        except (ExternalAPIError, CircuitOpenError) as exc:
            logger.warning("Reply generation failed, using safe template: %s", exc)
            return safe, "template"
        if not reply:
            return safe, "template"
        violation = find_guard_violation(reply, len(results), top, person_info, content_info, today=self.today())
        if violation:
            logger.warning("Generated reply rejected (%s); using safe template", violation)
            return safe, "template"
        return reply, "generated"

    def _reply_context(
        self,
        query: str,
        intent: QueryIntent,
        count: int,
        top: list[SearchResult],
        person_info: PersonInfo | None,
        content_info: ContentInfo | None,
    ) -> str:
        lines = [f'User asked: "{query}"', ""]
        if person_info is not None:
            age = _age(person_info, self.today())
            lines += [
                "Person info:",
                f"- Name: {person_info.name}",
                f"- Age: {age if age is not None else 'Unknown'}",
                f"- Birthday: {person_info.birthday or 'Unknown'}",
                f"- Birthplace: {person_info.place_of_birth or 'Unknown'}",
                f"- Known for: {person_info.known_for_department or 'Unknown'}",
                f"- Biography: {(person_info.biography or 'N/A')[:BIOGRAPHY_EXCERPT]}",
                "",
            ]
        if content_info is not None:
            lines += [
                "Title info:",
                f"- Title: {content_info.title}",
                f"- Type: {'Movie' if content_info.content_type is MediaKind.MOVIE else 'TV Show'}",
                f"- Rating: {_rating(content_info.vote_average) or 'N/A'}",
                f"- Release: {content_info.release_date or 'Unknown'}",
                f"- Runtime: {f'{content_info.runtime} min' if content_info.runtime else 'N/A'}",
                f"- Seasons: {content_info.number_of_seasons or 'N/A'}",
                f"- Director: {content_info.director or 'N/A'}",
                f"- Cast: {', '.join(content_info.cast[:CONTEXT_CAST_LIMIT]) or 'N/A'}",
                f"- Genres: {', '.join(content_info.genres) or 'N/A'}",
                f"- Overview: {(content_info.overview or 'N/A')[:BIOGRAPHY_EXCERPT]}",
                "",
            ]
        if intent.is_vague_query and intent.detected_mood is None:
            lines += ["The query was vague; these are trending titles. Invite the user to share preferences.", ""]
        elif intent.detected_mood is not None:
            lines += [f"The results match a {intent.detected_mood.value} mood.", ""]
        noun = self.messages.content_nouns["en"][intent.content_type]
        lines.append(f"Result count: {count} {noun}")
        for result in top:
            year = result.year or "?"
            rating = _rating(result.vote_average) or "N/A"
            lines.append(f'- "{result.display_title}" ({year}, rated {rating})')
        return "\n".join(lines)

    # -- knowledge fallback --------------------------------------------

    async def _knowledge_fallback(
        self, query: str, intent: QueryIntent, language: str, country: str | None
    ) -> ComposedReply:
        no_results = ComposedReply(self.messages.no_results_message(language), "no_results")
        if self.completion is None:
            return no_results
        text = normalize(query)

        if contains_any(text, self.lexicon.phrases("scene_terms")):
            title = await self._ask(SCENE_PROMPT, query, max_tokens=50)
            if title and UNCERTAIN.lower() not in title.lower():
                title = title.strip().strip("\"'“”«»")
                logger.info("Scene query identified as %r", title)
                found = await self._lookup(title, intent.content_type, country)
                if found:
                    reply = self.messages.found_title_message(found[0].display_title, language)
                    return ComposedReply(reply, "scene", found[:1])

        if contains_any(text, self.lexicon.phrases("informational_terms")):
            answer = await self._ask(KNOWLEDGE_PROMPT, query, max_tokens=150)
            if answer and not self.is_uncertain(answer):
                return ComposedReply(answer, "knowledge")
            logger.info("Knowledge fallback uncertain for query %r", query)

        return no_results

    def is_uncertain(self, answer: str) -> bool:
        lowered = answer.lower()
        return answer.strip() == UNCERTAIN or any(marker in lowered for marker in self.lexicon.uncertainty_markers)

    async def _ask(self, system: str, query: str, *, max_tokens: int) -> str | None:
        request = CompletionRequest(
            system=system,
            user=query,
            model=settings.response_model,
            temperature=0.1,
            max_tokens=max_tokens,
        )
        try:
            return (await self.completion.complete(request)).strip()
        except (ExternalAPIError, CircuitOpenError) as exc:
            logger.warning("Knowledge fallback unavailable: %s", exc)
            return None

    async def _lookup(self, title: str, content_type: ContentType, country: str | None) -> list[SearchResult]:
        if self.title_lookup is None:
            return []
        return await self.title_lookup(title, content_type, country)


def find_guard_violation(
    reply: str,
    count: int,
    top: Sequence[SearchResult],
    person_info: PersonInfo | None = None,
    content_info: ContentInfo | None = None,
    *,
    today: date | None = None,
) -> str | None:
    """Return a description of the first unsupported number or quoted title, or None."""
    titles = [result.display_title for result in top if result.display_title]
    if content_info is not None:
        titles.append(content_info.title)
    known_titles = {_title_key(title) for title in titles}

    for match in _QUOTED_RE.finditer(reply):
        quoted = match.group(1) or match.group(2)
        if _title_key(quoted) not in known_titles:
            return f"unknown title {quoted!r}"

    # Digits inside titles and names are not claims of their own.
    stripped = reply
    names = titles + ([person_info.name] if person_info else [])
    for name in sorted(names, key=len, reverse=True):
        stripped = re.sub(re.escape(name), " ", stripped, flags=re.IGNORECASE)

    allowed = _allowed_numbers(count, top, person_info, content_info, today or date.today())
    for token in _NUMBER_RE.findall(stripped):
        if _number_key(token) not in allowed:
            return f"unsupported number {token}"
    return None


def _allowed_numbers(
    count: int,
    top: Sequence[SearchResult],
    person_info: PersonInfo | None,
    content_info: ContentInfo | None,
    today: date,
) -> set[str]:
    allowed = {str(count)}
    for result in top:
        if result.year is not None:
            allowed.add(str(result.year))
        if result.vote_average:
            allowed.add(_rating(result.vote_average))
    if person_info is not None:
        age = _age(person_info, today)
        if age is not None:
            allowed.add(str(age))
        for value in (person_info.birthday, person_info.deathday):
            allowed.update(_date_parts(value))
    if content_info is not None:
        allowed.update(_date_parts(content_info.release_date))
        for value in (content_info.runtime, content_info.number_of_seasons):
            if value:
                allowed.add(str(value))
        if content_info.vote_average:
            allowed.add(_rating(content_info.vote_average))
    return allowed


def _date_parts(value: str | None) -> set[str]:
    parsed = parse_date(value)
    if parsed is None:
        return set()
    return {str(parsed.year), str(parsed.month), str(parsed.day)}


def _number_key(token: str) -> str:
    token = token.replace(",", ".")
    if "." in token:
        return f"{float(token):.1f}"
    return str(int(token))


def _title_key(title: str) -> str:
    return re.sub(r"[^\w]+", " ", title.casefold()).strip()


def _rating(value: float | None) -> str:
    return f"{value:.1f}" if value else ""


def _age(person: PersonInfo, today: date) -> int | None:
    born = parse_date(person.birthday)
    if born is None:
        return None
    end = parse_date(person.deathday) or today
    return end.year - born.year - ((end.month, end.day) < (born.month, born.day))
