from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from discovery.api.deps import get_query_parser, get_response_composer, get_search_planner
from discovery.core.config import settings
from discovery.schema.discover import DiscoverRequest, DiscoverResponse, ErrorResponse
from discovery.services import discovery_service
from discovery.services.query_parser import QueryParser
from discovery.services.response_composer import ResponseComposer
from discovery.services.search_planner import SearchPlanner
from discovery.utils.redaction import redact_secrets

logger = logging.getLogger("discovery.api.discover")

GENERIC_FAILURE = "Sorry, something went wrong. Please try again."

router = APIRouter()


def error_response(status_code: int, error: str, response_text: str) -> JSONResponse:
    payload = ErrorResponse(error=error, response_text=response_text)
    return JSONResponse(status_code=status_code, content=payload.model_dump(by_alias=True))


@router.post(
    "",
    response_model=DiscoverResponse,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def discover(
    payload: DiscoverRequest,
    parser: QueryParser = Depends(get_query_parser),
    planner: SearchPlanner = Depends(get_search_planner),
    composer: ResponseComposer = Depends(get_response_composer),
) -> DiscoverResponse | JSONResponse:
    if not payload.query.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, "Query is required", "Please enter a search query.")

    missing = settings.missing_credentials()
    if missing:
        logger.error("Discovery request rejected; missing configuration: %s", ", ".join(missing))
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "API keys not configured", GENERIC_FAILURE)

    try:
        return await discovery_service.discover(payload, parser=parser, planner=planner, composer=composer)
    except Exception as exc:
        logger.exception("Discovery request failed for query %r", payload.query)
        error = redact_secrets(str(exc)) or exc.__class__.__name__
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error, GENERIC_FAILURE)
