"""Year-range extraction: explicit years, ranges, decades, before/after."""

from __future__ import annotations

import re
from dataclasses import dataclass

_YEAR = r"(19\d{2}|20\d{2})"
_RANGE_RE = re.compile(rf"\b{_YEAR}\s*(?:-|–|to|and|ile|bis|à|a|y)\s*{_YEAR}\b")
_BETWEEN_RE = re.compile(rf"\bbetween\s+{_YEAR}\s+and\s+{_YEAR}\b")
_DECADE_EN_RE = re.compile(r"\b(?:(early|mid|late)\s+)?(19|20)?(\d)0'?s\b")
_DECADE_TR_RE = re.compile(r"(?<!\w)(?:(19|20)?(\d)0)'?(?:lar|ler|lı|li|lu|lü)\b")
_DECADE_DE_RE = re.compile(r"\b(19|20)?(\d)0er\b")
_DECADE_FR_ES_RE = re.compile(r"\b(?:années|años)\s+(19|20)?(\d)0\b")
_BEFORE_RE = re.compile(rf"\b(?:before|prior to|vor|avant|antes de)\s+{_YEAR}\b")
_BEFORE_TR_RE = re.compile(rf"\b{_YEAR}'?(?:den|dan|ten|tan) önce")
_AFTER_RE = re.compile(rf"\b(?:after|since|from|seit|nach|après|depuis|desde|después de)\s+{_YEAR}\b")
_AFTER_TR_RE = re.compile(rf"\b{_YEAR}'?(?:den|dan|ten|tan) (?:sonra|beri)")
_SINGLE_RE = re.compile(rf"(?<![\d.,]){_YEAR}(?!\d)(?![.,]\d)")

_DECADE_PARTS = {"early": (0, 3), "mid": (3, 6), "late": (6, 9)}


@dataclass(frozen=True, slots=True)
class YearRange:
    start: int | None = None
    end: int | None = None
    span: tuple[int, int] | None = None


def _decade_start(century: str | None, digit: str, current_year: int) -> int:
    if century:
        return int(f"{century}{digit}0")
    two_digit = int(digit) * 10
    # "20s" means the 2020s once we are in them, "90s" the 1990s.
    if 2000 + two_digit <= current_year:
        return 2000 + two_digit
    return 1900 + two_digit


def extract_year_range(text: str, *, current_year: int) -> YearRange | None:
    """Return the first year constraint found in normalized text."""
    for pattern in (_BETWEEN_RE, _RANGE_RE):
        match = pattern.search(text)
        if match:
            start, end = sorted((int(match.group(1)), int(match.group(2))))
            return YearRange(start, end, match.span())

    match = _DECADE_EN_RE.search(text)
    if match:
        start = _decade_start(match.group(2), match.group(3), current_year)
        part = match.group(1)
        if part:
            low, high = _DECADE_PARTS[part]
            return YearRange(start + low, start + high, match.span())
        return YearRange(start, start + 9, match.span())

    for pattern in (_DECADE_TR_RE, _DECADE_DE_RE, _DECADE_FR_ES_RE):
        match = pattern.search(text)
        if match:
            start = _decade_start(match.group(1), match.group(2), current_year)
            return YearRange(start, start + 9, match.span())

    for pattern in (_BEFORE_RE, _BEFORE_TR_RE):
        match = pattern.search(text)
        if match:
            return YearRange(None, int(match.group(1)) - 1, match.span())
    for pattern in (_AFTER_RE, _AFTER_TR_RE):
        match = pattern.search(text)
        if match:
            return YearRange(int(match.group(1)), None, match.span())

    match = _SINGLE_RE.search(text)
    if match:
        year = int(match.group(1))
        return YearRange(year, year, match.span())
    return None
