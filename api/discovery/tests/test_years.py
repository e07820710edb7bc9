from __future__ import annotations

import pytest

from discovery.services.years import extract_year_range


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("movies between 1995 and 2005", (1995, 2005)),
        ("films 2005-1995", (1995, 2005)),
        ("90s comedies", (1990, 1999)),
        ("late 80s horror", (1986, 1989)),
        ("early 2000s dramas", (2000, 2003)),
        ("20s thrillers", (2020, 2029)),
        ("90'lar aksiyon filmleri", (1990, 1999)),
        ("filme aus den 80er", (1980, 1989)),
        ("films des années 70", (1970, 1979)),
        ("movies before 2000", (None, 1999)),
        ("movies from 2010", (2010, None)),
        ("2000'den sonra çıkan filmler", (2000, None)),
        ("best movies of 2019", (2019, 2019)),
    ],
)
def test_extract_year_range(text: str, expected: tuple[int | None, int | None]) -> None:
    found = extract_year_range(text, current_year=2026)

    assert found is not None
    assert (found.start, found.end) == expected


def test_extract_year_range_without_year() -> None:
    assert extract_year_range("funny movies for tonight", current_year=2026) is None


def test_decimal_number_is_not_a_year() -> None:
    assert extract_year_range("rated 2019.5 points", current_year=2026) is None


def test_span_points_at_matched_text() -> None:
    text = "comedies from the 90s please"
    found = extract_year_range(text, current_year=2026)

    assert found is not None and found.span is not None
    assert text[found.span[0] : found.span[1]] == "90s"
