"""Upstream registry for the catalog and completion services."""

from __future__ import annotations

from typing import Dict

from discovery.upstream.base import BaseCatalog, BaseCompletionClient
from discovery.upstream.completion import OpenAICompletionClient
from discovery.upstream.tmdb import TMDBCatalog

_CATALOGS: Dict[str, BaseCatalog] = {}
_COMPLETION_CLIENTS: Dict[str, BaseCompletionClient] = {}


def get_catalog(source: str = "tmdb") -> BaseCatalog:
    """Return a catalog instance for the given source name."""
    key = source.lower()
    if key not in _CATALOGS:
        if key == "tmdb":
            _CATALOGS[key] = TMDBCatalog()
        else:
            raise ValueError(f"Unsupported catalog {source}")
    return _CATALOGS[key]


def get_completion_client(source: str = "openai") -> BaseCompletionClient:
    """Return a completion client instance for the given source name."""
    key = source.lower()
    if key not in _COMPLETION_CLIENTS:
        if key == "openai":
            _COMPLETION_CLIENTS[key] = OpenAICompletionClient()
        else:
            raise ValueError(f"Unsupported completion source {source}")
    return _COMPLETION_CLIENTS[key]
