"""
Request compilation and orchestration.
"""

from .configuration import (
    PagingConfiguration,
    VulcanConfiguration,
    reject_request,
    return_everything,
    return_nothing,
    use_request_url,
    use_url,
)
from .context import Aborted, Outcome, Ready, Rejected, RequestContext
from .paging import PageLinkBuilder, Paging
from .vulcan import Vulcan, VulcanResult

__all__ = [
    "Vulcan",
    "VulcanResult",
    "VulcanConfiguration",
    "PagingConfiguration",
    "RequestContext",
    "Ready",
    "Aborted",
    "Rejected",
    "Outcome",
    "PageLinkBuilder",
    "Paging",
    "use_request_url",
    "use_url",
    "return_nothing",
    "reject_request",
    "return_everything",
]
