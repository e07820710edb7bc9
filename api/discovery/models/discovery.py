"""Enumerations shared by the parser, planner and composer."""

from __future__ import annotations

import enum


class ContentType(str, enum.Enum):
    """Requested content scope for a query."""
    MOVIE = "movie"
    TV = "tv"
    BOTH = "both"

    def media_kinds(self) -> tuple["MediaKind", ...]:
        if self is ContentType.MOVIE:
            return (MediaKind.MOVIE,)
        if self is ContentType.TV:
            return (MediaKind.TV,)
        return (MediaKind.MOVIE, MediaKind.TV)


class MediaKind(str, enum.Enum):
    """Catalog media kind of a single result."""
    MOVIE = "movie"
    TV = "tv"


class SortOrder(str, enum.Enum):
    POPULARITY_DESC = "popularity_desc"
    RATING_DESC = "rating_desc"
    RELEASE_DATE_DESC = "release_date_desc"

    def catalog_value(self, kind: MediaKind) -> str:
        """Translate the sort order into the catalog's ``sort_by`` value."""
        if self is SortOrder.RATING_DESC:
            return "vote_average.desc"
        if self is SortOrder.RELEASE_DATE_DESC:
            return "primary_release_date.desc" if kind is MediaKind.MOVIE else "first_air_date.desc"
        return "popularity.desc"


class Mood(str, enum.Enum):
    SAD = "sad"
    HAPPY = "happy"
    BORED = "bored"
    EXCITED = "excited"
    TIRED = "tired"
    RELAXED = "relaxed"
    STRESSED = "stressed"
    ROMANTIC = "romantic"
    NOSTALGIC = "nostalgic"
    ANGRY = "angry"


class PersonRole(str, enum.Enum):
    DIRECTOR = "director"
    ACTOR = "actor"
    ANY = "any"


class Branch(str, enum.Enum):
    """Primary execution path selected for a parsed intent."""
    OFF_TOPIC = "off_topic"
    TRENDING = "trending"
    SPECIFIC_TITLE = "specific_title"
    PERSON_CREDITS = "person_credits"
    PERSON_INFO = "person_info"
    CONTENT_INFO = "content_info"
    DISCOVER = "discover"
