"""
The request processor.

Vulcan accepts a search request, compiles it into a filter using the
configured mappings, then asks the QueryExecutor for the records. Fragments
from different parameters are combined with AND semantics.

Why it matters:
    The three request outcomes are values, not control flow. ``plan`` shows
    what a request compiles to without touching storage; ``search`` executes it.

Example:
    vulcan = Vulcan(executor=MemoryQueryExecutor(records), config=config)
    result = vulcan.search(SearchRequest.from_url("http://localhost/fugazi?name=taco"))
    result.paging.total_records
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..errors import InvalidRequest
from ..executors.base import QueryExecutor
from ..request import SearchRequest
from .configuration import VulcanConfiguration
from .context import Aborted, Outcome, Ready, Rejected, RequestContext
from .paging import Paging, count_only_paging, empty_paging, paging_for

logger = logging.getLogger("vulcan.search")


@dataclass(frozen=True)
class VulcanResult:
    entities: Sequence[Any] = field(default_factory=tuple)
    paging: Paging = field(default_factory=Paging)


@dataclass(frozen=True)
class Vulcan:
    executor: QueryExecutor
    config: VulcanConfiguration

    def context(self, request: SearchRequest) -> RequestContext:
        return RequestContext.build(self.config, request)

    def plan(self, request: SearchRequest) -> Outcome:
        """Compile the request without executing it. Invalid requests become Rejected."""
        try:
            return self.context(request).outcome()
        except InvalidRequest as e:
            return Rejected(e)

    def search(self, request: SearchRequest) -> VulcanResult:
        """
        Process the request.

        Returns:
            Matching entities, never None, and paging details

        Raises:
            InvalidRequest: If the request is malformed or breaks a rule
        """
        context = self.context(request)
        outcome = context.outcome()
        if isinstance(outcome, Aborted):
            logger.info(f"[VULCAN] search aborted: {outcome.circuit_break}")
            return VulcanResult(entities=(), paging=empty_paging())
        if outcome.count_only:
            return self._count_only_result(context, outcome)
        return self._page_of_records(context, outcome)

    def _count_only_result(self, context: RequestContext, ready: Ready) -> VulcanResult:
        total_records = self.executor.count(ready.predicate)
        logger.info(f"[VULCAN] count only: {total_records} records")
        return VulcanResult(entities=(), paging=count_only_paging(context, total_records))

    def _page_of_records(self, context: RequestContext, ready: Ready) -> VulcanResult:
        page = self.executor.find_page(ready.predicate, ready.page, ready.count, ready.sort)
        logger.info(
            f"[VULCAN] page {ready.page} of {page.total_pages}, "
            f"{len(page.rows)} of {page.total_records} records"
        )
        return VulcanResult(
            entities=list(page.rows),
            paging=paging_for(context, page.total_records, page.total_pages),
        )
