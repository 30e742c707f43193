"""
Pydantic models for API responses.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from ..core.paging import Paging


class SearchResponse(BaseModel):
    """One page of search results."""

    entries: list[Any] = Field(default_factory=list)
    paging: Paging = Field(default_factory=Paging)

    model_config = {
        "json_schema_extra": {
            "example": {
                "entries": [{"name": "tacos2006", "food": "TACOS"}],
                "paging": {
                    "total_records": 6,
                    "total_pages": 3,
                    "first_page": 1,
                    "first_page_url": "http://localhost/fugazi?name=taco&count=2&page=1",
                    "this_page": 1,
                    "this_page_url": "http://localhost/fugazi?name=taco&count=2&page=1",
                    "next_page": 2,
                    "next_page_url": "http://localhost/fugazi?name=taco&count=2&page=2",
                    "last_page": 3,
                    "last_page_url": "http://localhost/fugazi?name=taco&count=2&page=3",
                },
            }
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
    code: str
