"""Country locales and heuristic query-language detection."""

from __future__ import annotations

from types import MappingProxyType

from discovery.services.lexicon import DEFAULT_LEXICON, Lexicon
from discovery.services.matching import contains, normalize

DEFAULT_LOCALE = "en-US"

COUNTRY_LOCALES = MappingProxyType(
    {
        "TR": "tr-TR",
        "US": "en-US",
        "GB": "en-GB",
        "FR": "fr-FR",
        "DE": "de-DE",
        "ES": "es-ES",
        "IT": "it-IT",
        "PT": "pt-PT",
        "BR": "pt-BR",
        "JP": "ja-JP",
        "KR": "ko-KR",
        "CN": "zh-CN",
        "RU": "ru-RU",
        "NL": "nl-NL",
        "PL": "pl-PL",
        "SE": "sv-SE",
        "NO": "nb-NO",
        "DK": "da-DK",
        "FI": "fi-FI",
        "GR": "el-GR",
        "AR": "es-AR",
        "MX": "es-MX",
        "IN": "hi-IN",
    }
)

# A character hint outweighs a couple of shared function words.
CHARACTER_WEIGHT = 3


def locale_for_country(country_code: str | None) -> str:
    """Return the catalog locale for a viewer country, defaulting to US English."""
    if not country_code:
        return DEFAULT_LOCALE
    return COUNTRY_LOCALES.get(country_code.upper(), DEFAULT_LOCALE)


def language_for_country(country_code: str | None) -> str:
    return locale_for_country(country_code).split("-")[0]


def detect_language(text: str, lexicon: Lexicon = DEFAULT_LEXICON, *, default: str = "en") -> str:
    """Guess the query language from marker characters and words.

    Known limitation: short or mixed-language queries can tie or score zero;
    ties keep the marker table order and zero falls back to ``default``.
    """
    normalized = normalize(text)
    best_language = default
    best_score = 0
    for language, markers in lexicon.language_markers.items():
        score = 0
        if markers.characters and any(char in text for char in markers.characters):
            score += CHARACTER_WEIGHT
        score += sum(1 for word in markers.words if contains(normalized, word))
        if score > best_score:
            best_language = language
            best_score = score
    return best_language
