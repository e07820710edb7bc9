"""Word-boundary phrase matching over normalized query text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable


@dataclass(frozen=True, slots=True)
class Hit:
    start: int
    end: int
    phrase: str

    def overlaps(self, other: "Hit") -> bool:
        return self.start < other.end and other.start < self.end


def normalize(text: str) -> str:
    """Lower-case text without changing its length.

    Dotted capital I is mapped first because ``str.lower`` would expand it to
    two code points and break span alignment with the original text.
    """
    return text.replace("İ", "i").lower()


@lru_cache(maxsize=4096)
def phrase_regex(phrase: str) -> re.Pattern[str]:
    body = re.escape(phrase.rstrip("*"))
    tail = r"\w*" if phrase.endswith("*") else ""
    return re.compile(rf"(?<!\w){body}{tail}(?!\w)")


@lru_cache(maxsize=1024)
def compiled(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def contains(text: str, phrase: str) -> bool:
    return phrase_regex(phrase).search(text) is not None


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(contains(text, phrase) for phrase in phrases)


def find_hits(text: str, phrases: Iterable[str]) -> list[Hit]:
    """Return non-overlapping phrase hits ordered by position; longer phrases win ties."""
    candidates: list[Hit] = []
    for phrase in phrases:
        for match in phrase_regex(phrase).finditer(text):
            candidates.append(Hit(match.start(), match.end(), phrase))
    candidates.sort(key=lambda hit: (hit.start, -(hit.end - hit.start)))
    accepted: list[Hit] = []
    for hit in candidates:
        if any(hit.overlaps(existing) for existing in accepted):
            continue
        accepted.append(hit)
    return accepted


def without_spans(hits: list[Hit], blocked: Iterable[Hit]) -> list[Hit]:
    blocked = list(blocked)
    return [hit for hit in hits if not any(hit.overlaps(other) for other in blocked)]
