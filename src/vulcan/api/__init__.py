"""
Vulcan FastAPI adapter.
"""

from .main import create_app, install_exception_handlers, search_request_from
from .models import ErrorResponse, HealthResponse, SearchResponse

__all__ = [
    "create_app",
    "install_exception_handlers",
    "search_request_from",
    "SearchResponse",
    "HealthResponse",
    "ErrorResponse",
]
