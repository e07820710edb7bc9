from fastapi import Depends

from discovery.services.query_parser import QueryParser
from discovery.services.response_composer import ResponseComposer
from discovery.services.search_planner import SearchPlanner
from discovery.upstream import get_catalog, get_completion_client
from discovery.upstream.base import BaseCatalog, BaseCompletionClient


def get_catalog_client() -> BaseCatalog:
    return get_catalog("tmdb")


def get_completion() -> BaseCompletionClient:
    return get_completion_client("openai")


def get_query_parser(completion: BaseCompletionClient = Depends(get_completion)) -> QueryParser:
    return QueryParser(completion=completion)


def get_search_planner(catalog: BaseCatalog = Depends(get_catalog_client)) -> SearchPlanner:
    return SearchPlanner(catalog)


def get_response_composer(
    completion: BaseCompletionClient = Depends(get_completion),
    planner: SearchPlanner = Depends(get_search_planner),
) -> ResponseComposer:
    return ResponseComposer(completion, title_lookup=planner.lookup_title)
