"""Query Parser: free text plus recent turns to a ``QueryIntent``.

Rules run in a fixed priority order (off-topic, mood, person info vs.
person credits, content info, trending, title availability, content type,
filters). When a completion client is configured its JSON answer only fills
fields the rules left empty, and the merged draft passes through the same
normalization step so the intent invariants hold either way.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Sequence

from discovery.core.config import settings
from discovery.models.discovery import ContentType, PersonRole, SortOrder
from discovery.schema.discover import ChatTurn
from discovery.schema.intent import QueryIntent
from discovery.services.language import detect_language
from discovery.services.lexicon import DEFAULT_LEXICON, Lexicon
from discovery.services.matching import Hit, compiled, contains, contains_any, find_hits, normalize, without_spans
from discovery.services.mood import MoodDetector, MoodSignal
from discovery.services.years import extract_year_range
from discovery.upstream.base import BaseCompletionClient, CompletionRequest
from discovery.upstream.http import ExternalAPIError
from discovery.upstream.observability import CircuitOpenError, upstream_monitor

logger = logging.getLogger("discovery.services.query_parser")

CLASSIC_YEAR_END = 1999
SHORT_RUNTIME_MINUTES = 90
MINI_SERIES_MAX_SEASONS = 1
LONG_SERIES_MIN_SEASONS = 3
KIDS_GENRES = (10751, 16)
MAX_NAME_WORDS = 4

_EDGE_CHARS = " ?!.…,;:\"'“”«»"
_TOKEN_RE = re.compile(r"\S+")
_NAME_SPLIT_RE = re.compile(r"\s*(?:,|&|\band\b|\bve\b|\bund\b|\bet\b|\by\b)\s*", re.IGNORECASE)
_APOSTROPHE_SUFFIX_RE = re.compile(r"['’].*$")
_QUOTED_RE = re.compile(r"[\"“«](?P<title>[^\"“”«»]{2,80})[\"”»]")
_MIN_RATING_RE = re.compile(
    r"\b(?:rated|rating|imdb|score|puanı|puan)\s*(?:above|over|at least|of|en az)?\s*"
    r"(?P<value>\d(?:[.,]\d)?)(?!\d)"
)
_MIN_RATING_PLUS_RE = re.compile(r"(?<![\d.,])(?P<value>\d(?:[.,]\d)?)\s*(?:\+|ve üzeri|üstü)(?=\s|$)")
_MAX_RATING_RE = re.compile(
    r"\b(?:rated|rating|imdb|score)\s*(?:below|under|less than)\s*(?P<value>\d(?:[.,]\d)?)"
    r"|\b(?:puanı|puan)\s*(?P<value_tr>\d(?:[.,]\d)?)\s*(?:altı|altında)"
)
_RUNTIME_RE = re.compile(
    r"\b(?:under|less than|shorter than|max|at most)\s*(?P<value>\d{2,3})\s*(?:minutes|minute|mins|min)\b"
    r"|(?P<value_tr>\d{2,3})\s*(?:dakikadan kısa|dakika altı|dk altı)"
)
_TOPIC_RE = re.compile(r"\b(?:movies|films|shows|series|something|anything) about (?P<topic>.+)$")
_TOPIC_TR_RE = re.compile(r"(?P<topic>\S+(?: \S+)?) (?:konulu|temalı) (?:film|dizi)")
_LOCATION_RE = re.compile(r"\b(?:set in|takes place in|taking place in) (?P<place>.+)$")
_LOCATION_TR_RE = re.compile(r"(?P<place>[^\s']+?)'?(?:da|de|ta|te) geçen\b")

# Words that end a name or title span.
_BOUNDARY_WORDS = frozenset(
    {"on", "in", "from", "at", "with", "for", "that", "which", "who", "where", "but",
     "auf", "bei", "sur", "dans", "en", "de", "da", "the", "and", "or"}
)

ASSIST_SYSTEM_PROMPT = """You extract search intent for a movie and TV discovery assistant.
Return ONLY a JSON object with these optional keys:
isOffTopic (bool, true only when the message has nothing to do with movies or TV),
isPersonInfoQuery (bool, biographical questions such as "who is X" or "how old is X"),
isContentInfoQuery (bool, factual questions about one title such as release date or plot),
personName (string, a person whose movies or shows are wanted, or who is asked about),
personRole ("director" | "actor" | "any"),
directorName (string, only when combined with other filters),
actorNames (array of strings, only when several actors are named),
specificTitle (string, exact title the user asks about or wants to watch),
contentType ("movie" | "tv" | "both"),
genres (array of TMDB genre ids), providers (array of TMDB watch provider ids),
keywords (array of short English catalog keywords for themes),
locationKeywords (array of places the story is set in),
productionCountries (array of ISO 3166-1 codes),
certification (string), withNetworks (array of TMDB network ids),
maxResults (int), minSeasons (int), maxSeasons (int), minRuntime (int), maxRuntime (int).
Never invent people or titles that do not appear in the message.
In Turkish "dizi film" means TV series only. Omit keys you are not sure about."""


@dataclass
class _Draft:
    """Mutable working state for one parse."""
    language: str = "en"
    content_type: ContentType = ContentType.BOTH
    content_type_explicit: bool = False
    genres: list[int] = field(default_factory=list)
    providers: list[int] = field(default_factory=list)
    min_rating: float = 0.0
    max_rating: float | None = None
    quality_explicit: bool = False
    year_start: int | None = None
    year_end: int | None = None
    sort_order: SortOrder = SortOrder.POPULARITY_DESC
    keywords: list[str] = field(default_factory=list)
    location_keywords: list[str] = field(default_factory=list)
    production_countries: list[str] = field(default_factory=list)
    spoken_languages: list[str] = field(default_factory=list)
    person_name: str | None = None
    person_role: PersonRole = PersonRole.ANY
    director_name: str | None = None
    actor_names: list[str] = field(default_factory=list)
    specific_title: str | None = None
    mood: MoodSignal | None = None
    is_person_info_query: bool = False
    is_content_info_query: bool = False
    is_off_topic: bool = False
    trending_requested: bool = False
    media_vocabulary: bool = False
    min_seasons: int | None = None
    max_seasons: int | None = None
    min_runtime: int | None = None
    max_runtime: int | None = None
    certification: str | None = None
    networks: list[int] = field(default_factory=list)
    max_results: int | None = None
    consumed: list[Hit] = field(default_factory=list)

    @property
    def has_subject(self) -> bool:
        return bool(self.person_name or self.actor_names or self.director_name or self.specific_title)


class QueryParser:
    def __init__(
        self,
        lexicon: Lexicon = DEFAULT_LEXICON,
        completion: BaseCompletionClient | None = None,
        *,
        today: Callable[[], date] = date.today,
        history_limit: int | None = None,
    ) -> None:
        self.lexicon = lexicon
        self.completion = completion
        self.today = today
        self.history_limit = history_limit or settings.history_turn_limit
        self.moods = MoodDetector(lexicon)

    async def parse(self, query: str, history: Sequence[ChatTurn] = ()) -> QueryIntent:
        """Parse a query, consulting the completion service when one is configured."""
        draft = self._rules(query, history)
        if self.completion is not None and settings.intent_assist_enabled and not draft.is_off_topic:
            hint = await self._assist(query, history)
            if hint:
                self._merge_hint(draft, hint, query)
        intent = self._finalize(draft)
        logger.info(
            "Parsed query into %s branch (language=%s, type=%s, mood=%s, vague=%s)",
            intent.branch().value,
            intent.language,
            intent.content_type.value,
            intent.detected_mood.value if intent.detected_mood else None,
            intent.is_vague_query,
        )
        return intent

    def parse_rules(self, query: str, history: Sequence[ChatTurn] = ()) -> QueryIntent:
        """Rule-only parse; deterministic for a given query, history and date."""
        return self._finalize(self._rules(query, history))

    def detect_topic_change(self, query: str, history: Sequence[ChatTurn], intent: QueryIntent) -> bool:
        """Return True when the query starts a new search instead of refining the previous one."""
        if len(history) < 2:
            return False
        previous = _last_user_turn(history)
        if previous is None:
            return False
        text = normalize(query)
        if contains_any(text, self.lexicon.phrases("new_topic")):
            return True
        if intent.specific_title:
            return True
        prior = self._finalize(self._draft(previous))
        changed = bool(
            (intent.genres and set(intent.genres) != set(prior.genres))
            or (intent.providers and set(intent.providers) != set(prior.providers))
            or (intent.person_name and intent.person_name != prior.person_name)
        )
        return changed and not contains_any(text, self.lexicon.phrases("refining"))

    # -- rule pass -----------------------------------------------------

    def _rules(self, query: str, history: Sequence[ChatTurn]) -> _Draft:
        draft = self._draft(query)
        if not draft.is_off_topic and not draft.content_type_explicit:
            self._inherit_content_type(draft, query, history)
        return draft

    def _draft(self, query: str) -> _Draft:
        original = query.strip()
        text = normalize(original)
        draft = _Draft(language=detect_language(original, self.lexicon))
        draft.media_vocabulary = self._has_media_vocabulary(text)

        if contains_any(text, self.lexicon.phrases("off_topic")) and not draft.media_vocabulary:
            draft.is_off_topic = True
            return draft

        draft.mood = self.moods.detect(original)

        core = text.rstrip(_EDGE_CHARS)
        self._match_person_info(draft, core, original)
        if not draft.is_person_info_query:
            self._match_person_credits(draft, core, original)
        if not draft.has_subject:
            self._match_title(draft, core, original, "content_info_patterns", content_info=True)
        draft.trending_requested = contains_any(text, self.lexicon.phrases("trending"))
        if not draft.has_subject:
            self._match_title(draft, core, original, "availability_patterns", content_info=False)
        if not draft.has_subject:
            self._match_quoted_title(draft, original)

        self._match_content_type(draft, text)
        self._match_filters(draft, text)
        return draft

    def _has_media_vocabulary(self, text: str) -> bool:
        lexicon = self.lexicon
        return any(
            contains_any(text, phrases)
            for phrases in (
                lexicon.phrases("tv_terms"),
                lexicon.phrases("movie_terms"),
                lexicon.phrases("request_terms"),
                lexicon.phrases("trending"),
                lexicon.mapping("genres").keys(),
                lexicon.providers.keys(),
            )
        )

    def _match_person_info(self, draft: _Draft, core: str, original: str) -> None:
        for pattern in self.lexicon.phrases("person_info_patterns"):
            match = compiled(pattern).match(core)
            if not match:
                continue
            names, span = self._names(core, original, match.span("name"), minimum_words=1, whole=True)
            if not names:
                continue
            draft.person_name = names[0]
            draft.is_person_info_query = True
            draft.consumed.append(span)
            return

    def _match_person_credits(self, draft: _Draft, core: str, original: str) -> None:
        for patterns in self.lexicon.person_credit_patterns.values():
            for role, pattern in patterns:
                match = compiled(pattern).search(core)
                if not match:
                    continue
                # A bare "<name> movies" needs at least two words to read as a person.
                minimum = 2 if role == PersonRole.ANY.value else 1
                names, span = self._names(
                    core, original, match.span("name"), minimum_words=minimum, skip_leading=minimum > 1
                )
                if not names:
                    continue
                draft.consumed.append(span)
                if role == PersonRole.DIRECTOR.value:
                    draft.person_name = names[0]
                    draft.person_role = PersonRole.DIRECTOR
                elif len(names) > 1:
                    draft.actor_names = names
                else:
                    draft.person_name = names[0]
                    draft.person_role = PersonRole(role)
                return

    def _match_title(self, draft: _Draft, core: str, original: str, table: str, *, content_info: bool) -> None:
        for pattern in self.lexicon.phrases(table):
            match = compiled(pattern).match(core)
            if not match:
                continue
            title, span = self._title(core, original, match.span("title"))
            if not title:
                continue
            draft.specific_title = title
            draft.is_content_info_query = content_info
            draft.consumed.append(span)
            return

    def _match_quoted_title(self, draft: _Draft, original: str) -> None:
        match = _QUOTED_RE.search(original)
        if not match:
            return
        title = match.group("title").strip()
        if title and not self._only_known_words(normalize(title)):
            draft.specific_title = title
            draft.consumed.append(Hit(match.start(), match.end(), "title"))

    def _match_content_type(self, draft: _Draft, text: str) -> None:
        lexicon = self.lexicon
        if contains_any(text, lexicon.phrases("both_types")):
            draft.content_type = ContentType.BOTH
            draft.content_type_explicit = True
            return
        for idioms in lexicon.content_type_idioms.values():
            for phrase, content_type in idioms.items():
                if contains(text, phrase):
                    draft.content_type = content_type
                    draft.content_type_explicit = True
                    return
        has_tv = contains_any(text, lexicon.phrases("tv_terms")) or contains_any(text, lexicon.phrases("mini_series"))
        has_movie = contains_any(text, lexicon.phrases("movie_terms"))
        if has_tv and has_movie:
            draft.content_type = ContentType.BOTH
        elif has_tv:
            draft.content_type = ContentType.TV
        elif has_movie:
            draft.content_type = ContentType.MOVIE
        else:
            return
        draft.content_type_explicit = True

    def _match_filters(self, draft: _Draft, text: str) -> None:
        lexicon = self.lexicon
        consumed = draft.consumed

        provider_hits = without_spans(find_hits(text, lexicon.providers.keys()), consumed)
        draft.providers = [lexicon.providers[hit.phrase] for hit in provider_hits]

        spoken = self._mapped_hits(text, "spoken_languages", consumed)
        draft.spoken_languages = [value for _, value in spoken]
        countries = self._mapped_hits(text, "countries", consumed + [hit for hit, _ in spoken])
        draft.production_countries = [value for _, value in countries]

        draft.genres = [value for _, value in self._mapped_hits(text, "genres", consumed)]
        if contains_any(text, lexicon.phrases("kids")):
            draft.genres.extend(KIDS_GENRES)

        for phrase, floor in lexicon.quality_pairs():
            if contains(text, phrase):
                draft.min_rating = floor
                draft.quality_explicit = True
                break
        numeric = _MIN_RATING_RE.search(text) or _MIN_RATING_PLUS_RE.search(text)
        if numeric:
            draft.min_rating = _rating_value(numeric.group("value"))
            draft.quality_explicit = True
        ceiling = _MAX_RATING_RE.search(text)
        if ceiling:
            draft.max_rating = _rating_value(ceiling.group("value") or ceiling.group("value_tr"))

        if contains_any(text, lexicon.phrases("top_rated_sort")):
            draft.sort_order = SortOrder.RATING_DESC
        elif contains_any(text, lexicon.phrases("newest_sort")):
            draft.sort_order = SortOrder.RELEASE_DATE_DESC

        current_year = self.today().year
        years = extract_year_range(text, current_year=current_year)
        if years and not any(Hit(*years.span, "year").overlaps(hit) for hit in consumed):
            draft.year_start, draft.year_end = years.start, years.end
        elif contains_any(text, lexicon.phrases("recent")):
            draft.year_start = current_year - 1
        elif contains_any(text, lexicon.phrases("classic")):
            draft.year_end = CLASSIC_YEAR_END

        runtime = _RUNTIME_RE.search(text)
        if runtime:
            draft.max_runtime = int(runtime.group("value") or runtime.group("value_tr"))
        elif contains_any(text, lexicon.phrases("short_runtime")):
            draft.max_runtime = SHORT_RUNTIME_MINUTES

        if contains_any(text, lexicon.phrases("mini_series")):
            draft.max_seasons = MINI_SERIES_MAX_SEASONS
        elif contains_any(text, lexicon.phrases("long_series")):
            draft.min_seasons = LONG_SERIES_MIN_SEASONS

        draft.keywords = [value for _, value in self._mapped_hits(text, "themes", consumed)]
        if not draft.keywords:
            topic = _TOPIC_RE.search(text) or _TOPIC_TR_RE.search(text)
            if topic:
                draft.keywords = self._free_phrase(topic.group("topic"))

        location = _LOCATION_RE.search(text) or _LOCATION_TR_RE.search(text)
        if location:
            draft.location_keywords = self._free_phrase(location.group("place"))

    def _mapped_hits(self, text: str, table: str, blocked: list[Hit]) -> list[tuple[Hit, Any]]:
        mapping = self.lexicon.mapping(table)
        hits = without_spans(find_hits(text, mapping.keys()), blocked)
        return [(hit, mapping[hit.phrase]) for hit in hits]

    # -- names and titles ----------------------------------------------

    def _names(
        self,
        core: str,
        original: str,
        span: tuple[int, int],
        *,
        minimum_words: int,
        whole: bool = False,
        skip_leading: bool = False,
    ) -> tuple[list[str], Hit]:
        """Split a captured span into person names, keeping the user's capitalization.

        Returns the names and the span they actually cover, so trailing
        filters ("... on Netflix") stay visible to the filter pass. With
        ``whole`` the names must account for the entire captured span; with
        ``skip_leading`` request words before the first name are ignored.
        """
        start, end = span
        empty = ([], Hit(start, start, "name"))
        names: list[str] = []
        first = covered = cursor = start
        for part in _NAME_SPLIT_RE.split(core[start:end]):
            offset = core.find(part, cursor) if part else -1
            if offset < 0:
                break
            tokens, begin, reached = self._leading_name_tokens(
                core, original, offset, offset + len(part), skip_known=skip_leading and not names
            )
            if not tokens or len(tokens) > MAX_NAME_WORDS:
                break
            if not names:
                first = begin
            names.append(" ".join(tokens))
            covered = reached
            cursor = offset + len(part)
            if reached < cursor:
                break
        if not names or len(names[0].split()) < minimum_words:
            return empty
        if whole and core[covered:end].strip(_EDGE_CHARS):
            return empty
        return names, Hit(first, covered, "name")

    def _leading_name_tokens(
        self, core: str, original: str, start: int, end: int, *, skip_known: bool = False
    ) -> tuple[list[str], int, int]:
        tokens: list[str] = []
        begin = reached = start
        for match in _TOKEN_RE.finditer(core, start, end):
            lowered = match.group().strip(_EDGE_CHARS)
            bare = _APOSTROPHE_SUFFIX_RE.sub("", lowered)
            known = not bare or self._is_known(lowered) or self._is_known(bare) or any(char.isdigit() for char in bare)
            if known and skip_known and not tokens and bare == lowered:
                continue
            if known:
                break
            token_start = match.start() + match.group().find(bare[0])
            if not tokens:
                begin = token_start
            tokens.append(_capitalize(original[token_start : token_start + len(bare)]))
            reached = token_start + len(bare)
            if bare != lowered:
                # An apostrophe suffix ("Nolan's", "Şen'in") closes the name.
                reached = match.end()
                break
        return tokens, begin, reached

    def _title(self, core: str, original: str, span: tuple[int, int]) -> tuple[str | None, Hit]:
        """Trim a captured title span and reject spans made only of known words."""
        empty = (None, Hit(span[0], span[0], "title"))
        tokens = list(_TOKEN_RE.finditer(core, *span))
        while tokens and self._is_title_tail(tokens[-1].group().strip(_EDGE_CHARS)):
            tokens.pop()
        if not tokens:
            return empty
        start, end = tokens[0].start(), tokens[-1].end()
        last = tokens[-1].group()
        if "'" in last or "’" in last:
            end = tokens[-1].start() + len(_APOSTROPHE_SUFFIX_RE.sub("", last))
        title = original[start:end].strip(_EDGE_CHARS)
        if not title or self._only_known_words(normalize(title)):
            return empty
        return title, Hit(start, end, "title")

    def _is_title_tail(self, token: str) -> bool:
        bare = _APOSTROPHE_SUFFIX_RE.sub("", token)
        return (
            not bare
            or bare in _BOUNDARY_WORDS
            or bare in self.lexicon.providers
            or contains_any(token, self.lexicon.phrases("tv_terms"))
            or contains_any(token, self.lexicon.phrases("movie_terms"))
        )

    def _is_known(self, word: str) -> bool:
        return word in _BOUNDARY_WORDS or self.lexicon.is_known_word(word)

    def _only_known_words(self, text: str) -> bool:
        words = [_APOSTROPHE_SUFFIX_RE.sub("", word.strip(_EDGE_CHARS)) for word in text.split()]
        return all(not word or word.isdigit() or self._is_known(word) for word in words)

    def _free_phrase(self, raw: str) -> list[str]:
        """Keep the leading run of unknown words from a topic or place phrase."""
        kept: list[str] = []
        for token in raw.split():
            bare = _APOSTROPHE_SUFFIX_RE.sub("", token.strip(_EDGE_CHARS))
            if not bare or self._is_known(bare) or bare in self.lexicon.providers:
                if kept:
                    break
                continue
            kept.append(bare)
        return [" ".join(kept[:MAX_NAME_WORDS])] if kept else []

    # -- history and completion assist ---------------------------------

    def _inherit_content_type(self, draft: _Draft, query: str, history: Sequence[ChatTurn]) -> None:
        previous = _last_user_turn(history)
        if previous is None:
            return
        text = normalize(query)
        if contains_any(text, self.lexicon.phrases("new_topic")):
            return
        if not contains_any(text, self.lexicon.phrases("refining")):
            return
        prior = self._draft(previous)
        if prior.content_type_explicit:
            draft.content_type = prior.content_type

    async def _assist(self, query: str, history: Sequence[ChatTurn]) -> dict[str, Any] | None:
        source = self.completion.source_name
        if not upstream_monitor.allow_call(source):
            await upstream_monitor.record_skip(
                source, "json_completion", reason="circuit_open", context={"stage": "intent"}
            )
            return None
        turns = [{"role": turn.role, "content": turn.content} for turn in history[-self.history_limit :]]
        request = CompletionRequest(
            system=ASSIST_SYSTEM_PROMPT,
            user=query,
            model=settings.intent_model,
            temperature=0.2,
            max_tokens=500,
            history=turns,
            json_mode=True,
        )
        try:
            raw = await self.completion.complete(request)
        except (ExternalAPIError, CircuitOpenError) as exc:
            logger.warning("Intent assist unavailable, keeping rule-based intent: %s", exc)
            return None
        try:
            hint = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Intent assist returned non-JSON content; ignoring it")
            return None
        return hint if isinstance(hint, dict) else None

    def _merge_hint(self, draft: _Draft, hint: dict[str, Any], query: str) -> None:
        """Fill gaps left by the rules; rule signals and rating floors are never overridden."""
        if hint.get("isOffTopic") is True:
            if not (draft.media_vocabulary or draft.mood or draft.has_subject):
                draft.is_off_topic = True
            return

        text = normalize(query)
        if not draft.has_subject:
            person = _clean_string(hint.get("personName"))
            title = _clean_string(hint.get("specificTitle"))
            actors = [name for name in map(_clean_string, hint.get("actorNames") or []) if name]
            if person and _mentioned(person, text):
                draft.person_name = person
                draft.person_role = _role(hint.get("personRole"))
                draft.is_person_info_query = hint.get("isPersonInfoQuery") is True
            elif len(actors) > 1 and all(_mentioned(name, text) for name in actors):
                draft.actor_names = actors
            elif title:
                draft.specific_title = title
                draft.is_content_info_query = hint.get("isContentInfoQuery") is True
        director = _clean_string(hint.get("directorName"))
        if director and _mentioned(director, text) and not (draft.director_name or draft.person_name):
            draft.director_name = director

        if not draft.content_type_explicit and hint.get("contentType") in {item.value for item in ContentType}:
            draft.content_type = ContentType(hint["contentType"])
        if not draft.genres:
            known_genres = set(self.lexicon.mapping("genres").values())
            draft.genres = [item for item in _int_list(hint.get("genres")) if item in known_genres]
        if not draft.providers:
            known_providers = set(self.lexicon.providers.values())
            draft.providers = [item for item in _int_list(hint.get("providers")) if item in known_providers]
        if not draft.keywords:
            draft.keywords = _string_list(hint.get("keywords"))
        if not draft.location_keywords:
            draft.location_keywords = _string_list(hint.get("locationKeywords"))
        if not draft.production_countries:
            draft.production_countries = [
                code.upper() for code in _string_list(hint.get("productionCountries")) if len(code) == 2
            ]
        if not draft.certification:
            draft.certification = _clean_string(hint.get("certification"))
        if not draft.networks:
            draft.networks = _int_list(hint.get("withNetworks"))
        for key, attribute in (
            ("maxResults", "max_results"),
            ("minSeasons", "min_seasons"),
            ("maxSeasons", "max_seasons"),
            ("minRuntime", "min_runtime"),
            ("maxRuntime", "max_runtime"),
        ):
            value = hint.get(key)
            if getattr(draft, attribute) is None and type(value) is int and value > 0:
                setattr(draft, attribute, value)

    # -- normalization -------------------------------------------------

    def _finalize(self, draft: _Draft) -> QueryIntent:
        if draft.is_off_topic:
            return QueryIntent(is_off_topic=True, language=draft.language)

        mood = draft.mood
        # A lone trailing "..." is too weak to steer a search.
        if mood is not None and mood.confidence < self.lexicon.implicit_mood_floor:
            mood = None
        genres = list(draft.genres)
        min_rating = draft.min_rating if draft.quality_explicit else 0.0
        max_runtime = draft.max_runtime
        year_start, year_end = draft.year_start, draft.year_end
        if mood is not None:
            profile = self.moods.profile(mood.mood)
            if not genres:
                genres = list(profile.genres)
            if not draft.quality_explicit and mood.confidence >= self.lexicon.mood_rating_confidence:
                min_rating = profile.min_rating
            if max_runtime is None and profile.max_runtime and draft.content_type is not ContentType.TV:
                max_runtime = profile.max_runtime
            if year_start is None and year_end is None:
                year_start, year_end = profile.year_start, profile.year_end
        if year_start is not None and year_end is not None and year_start > year_end:
            year_start, year_end = year_end, year_start

        max_rating = draft.max_rating
        if max_rating is not None and max_rating < min_rating:
            max_rating = None

        intent = QueryIntent(
            content_type=draft.content_type,
            genres=genres,
            providers=draft.providers,
            min_rating=min_rating,
            max_rating=max_rating,
            year_start=year_start,
            year_end=year_end,
            sort_order=draft.sort_order,
            keywords=draft.keywords,
            location_keywords=draft.location_keywords,
            production_countries=draft.production_countries,
            spoken_languages=[] if draft.production_countries else draft.spoken_languages,
            person_name=draft.person_name,
            person_role=draft.person_role,
            director_name=draft.director_name,
            actor_names=draft.actor_names,
            specific_title=draft.specific_title,
            detected_mood=mood.mood if mood else None,
            mood_confidence=mood.confidence if mood else 0,
            is_person_info_query=draft.is_person_info_query,
            is_content_info_query=draft.is_content_info_query,
            use_trending_api=draft.trending_requested and mood is None,
            min_seasons=draft.min_seasons,
            max_seasons=draft.max_seasons,
            min_runtime=draft.min_runtime,
            max_runtime=max_runtime,
            certification=draft.certification,
            networks=draft.networks,
            max_results=draft.max_results,
            language=draft.language,
        )

        # A person combined with other filters becomes a discovery constraint.
        if intent.person_name and not intent.is_person_info_query and intent.has_concrete_filter():
            if intent.person_role is PersonRole.DIRECTOR:
                intent = intent.model_copy(update={"director_name": intent.person_name, "person_name": None})
            else:
                intent = intent.model_copy(update={"actor_names": [intent.person_name], "person_name": None})

        vague = not (
            mood
            or intent.person_name
            or intent.director_name
            or intent.actor_names
            or intent.specific_title
            or intent.has_concrete_filter()
        )
        if vague:
            intent = intent.model_copy(update={"is_vague_query": True, "use_trending_api": True})
        return intent


def _last_user_turn(history: Sequence[ChatTurn]) -> str | None:
    for turn in reversed(history):
        if turn.role == "user" and turn.content.strip():
            return turn.content
    return None


def _rating_value(raw: str) -> float:
    return max(0.0, min(10.0, float(raw.replace(",", "."))))


def _capitalize(token: str) -> str:
    return token[:1].upper() + token[1:] if token[:1].islower() else token


def _clean_string(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _int_list(value: Any) -> list[int]:
    if not isinstance(value, list):
        return []
    return [item for item in value if type(item) is int]


def _role(value: Any) -> PersonRole:
    try:
        return PersonRole(value)
    except ValueError:
        return PersonRole.ANY


def _mentioned(name: str, text: str) -> bool:
    """Names suggested by the completion service must appear in the query."""
    return all(contains(text, token + "*") for token in normalize(name).split())
