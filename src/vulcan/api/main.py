"""
FastAPI adapter for Vulcan.

Vulcan only consumes a URL and query parameters; this module extracts them
from a Starlette request and maps InvalidRequest to HTTP 400.

Example:
    app = create_app(vulcan, path="/fugazi", to_dto=lambda e: {"name": e["name"]})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.vulcan import Vulcan
from ..errors import InvalidRequest
from ..request import SearchRequest
from .models import ErrorResponse, HealthResponse, SearchResponse

logger = logging.getLogger("vulcan.api")

__version__ = "0.1.0"


def search_request_from(request: Request) -> SearchRequest:
    """Request URL without its query string, plus every query parameter value."""
    parameters: dict[str, list[str]] = {}
    for name, value in request.query_params.multi_items():
        parameters.setdefault(name, []).append(value)
    url = str(request.url.replace(query="", fragment=""))
    return SearchRequest(url=url, parameters=parameters)


def install_exception_handlers(app: FastAPI) -> None:
    """Report InvalidRequest as 400 Bad Request."""

    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
        logger.info(f"[API] Bad request {request.url}: {exc}")
        body = ErrorResponse(error="Bad Request", detail=str(exc), code="invalid-request")
        return JSONResponse(status_code=400, content=body.model_dump())


def create_app(
    vulcan: Vulcan,
    path: str = "/search",
    to_dto: Callable[[Any], Any] | None = None,
    title: str = "Vulcan Search API",
) -> FastAPI:
    """
    Create a FastAPI application exposing one search route.

    Args:
        vulcan: Configured request processor
        path: Route of the search endpoint
        to_dto: Converts each found record for the response (default: as is)
        title: OpenAPI title
    """
    app = FastAPI(
        title=title,
        description="FHIR style search parameters compiled to filters",
        version=__version__,
    )
    install_exception_handlers(app)
    register_routes(app, vulcan, path, to_dto or (lambda entity: entity))
    return app


def register_routes(
    app: FastAPI, vulcan: Vulcan, path: str, to_dto: Callable[[Any], Any]
) -> None:
    """Register the search and health routes."""

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Check system health."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get(
        path,
        response_model=SearchResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["search"],
    )
    def search(request: Request) -> SearchResponse:
        """Search using FHIR style query parameters."""
        result = vulcan.search(search_request_from(request))
        return SearchResponse(
            entries=[to_dto(entity) for entity in result.entities],
            paging=result.paging,
        )
