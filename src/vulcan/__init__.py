"""
Vulcan - FHIR style search parameters compiled to composable filters.

This package provides:
- Typed parsers for token, date and reference search values
- Mappings from request parameters to MongoDB style filter documents
- Parameter combination rules
- Paging with first/previous/next/last links
- Query executors for MongoDB and in-memory data

Quick Start:
    ```python
    from vulcan import (
        Mappings, MemoryQueryExecutor, PagingConfiguration, SearchRequest,
        Vulcan, VulcanConfiguration, return_nothing,
    )

    config = VulcanConfiguration(
        paging=PagingConfiguration(default_count=10, max_count=100),
        mappings=Mappings().string("name").date_as_instant("xdate", "date").get(),
        default_query=return_nothing(),
    )
    vulcan = Vulcan(executor=MemoryQueryExecutor(records), config=config)
    result = vulcan.search(SearchRequest.from_url("http://localhost/fugazi?xdate=gt2006"))
    ```

For the CLI:
    ```bash
    vulcan date ap2005-01-21 --zone UTC
    ```
"""

# Core exports
from .core import (
    Aborted,
    PageLinkBuilder,
    Paging,
    PagingConfiguration,
    Ready,
    Rejected,
    RequestContext,
    Vulcan,
    VulcanConfiguration,
    VulcanResult,
    reject_request,
    return_everything,
    return_nothing,
    use_request_url,
    use_url,
)
from .config.settings import Settings, get_settings
from .errors import CircuitBreak, ConfigurationError, InvalidRequest
from .request import SearchRequest

# Parameter exports
from .parameters import (
    DateFidelity,
    DateOperator,
    ReferenceParameter,
    ReferenceParameterParser,
    SearchableDate,
    TokenMode,
    TokenParameter,
)

# Mapping exports
from .mappings import Mapping, Mappings, SystemIdFields

# Executor exports
from .executors import MemoryQueryExecutor, MongoQueryExecutor, Page, QueryExecutor

from . import rules
from .sorting import Direction, Sort, SortParameter, SortRequest

__version__ = "0.1.0"

__all__ = [
    # Core
    "Vulcan",
    "VulcanResult",
    "VulcanConfiguration",
    "PagingConfiguration",
    "RequestContext",
    "Ready",
    "Aborted",
    "Rejected",
    "PageLinkBuilder",
    "Paging",
    "use_request_url",
    "use_url",
    "return_nothing",
    "reject_request",
    "return_everything",
    "SearchRequest",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "InvalidRequest",
    "ConfigurationError",
    "CircuitBreak",
    # Parameters
    "TokenParameter",
    "TokenMode",
    "SearchableDate",
    "DateOperator",
    "DateFidelity",
    "ReferenceParameter",
    "ReferenceParameterParser",
    # Mappings
    "Mapping",
    "Mappings",
    "SystemIdFields",
    # Executors
    "QueryExecutor",
    "Page",
    "MemoryQueryExecutor",
    "MongoQueryExecutor",
    # Rules and sorting
    "rules",
    "Sort",
    "Direction",
    "SortParameter",
    "SortRequest",
    # Version
    "__version__",
]
