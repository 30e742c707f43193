"""
Per-request processing state.

Building a RequestContext runs the whole compile pipeline:

    parse page and count -> check rules -> evaluate mappings -> resolve sort

and ends in one of three outcomes:

- Ready: a filter plus the page to fetch
- Aborted: the request is valid but a CircuitBreak guarantees no results
- Rejected: InvalidRequest, raised to the caller (``Vulcan.plan`` returns it
  as a value instead)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from ..errors import CircuitBreak, InvalidRequest
from ..filters.predicates import Predicate, all_of
from ..request import SearchRequest, is_blank
from ..rules import RuleContext
from ..sorting import Sort, SortRequest
from .configuration import VulcanConfiguration

logger = logging.getLogger("vulcan.request")


@dataclass(frozen=True)
class Ready:
    predicate: Predicate
    page: int
    count: int
    sort: Sort

    @property
    def count_only(self) -> bool:
        return self.count == 0


@dataclass(frozen=True)
class Aborted:
    circuit_break: CircuitBreak


@dataclass(frozen=True)
class Rejected:
    error: InvalidRequest


Outcome = Union[Ready, Aborted, Rejected]


@dataclass(frozen=True)
class RequestContext:
    """
    Configuration plus everything derived from one request. Immutable.

    Exactly one of ``predicate`` and ``circuit_break`` is set.
    """

    config: VulcanConfiguration
    request: SearchRequest
    page: int
    count: int
    sort: Sort
    predicate: Predicate | None
    circuit_break: CircuitBreak | None = None

    @property
    def abort_search(self) -> bool:
        return self.circuit_break is not None

    @property
    def count_only(self) -> bool:
        return self.count == 0

    def outcome(self) -> Ready | Aborted:
        if self.circuit_break is not None:
            return Aborted(self.circuit_break)
        return Ready(predicate=self.predicate, page=self.page, count=self.count, sort=self.sort)

    @classmethod
    def build(cls, config: VulcanConfiguration, request: SearchRequest) -> RequestContext:
        """
        Process a request.

        Raises:
            InvalidRequest: If paging values are malformed, a rule fails, or a
                mapping cannot parse its parameter
        """
        page = _page_value_of(config, request)
        count = _count_value_of(config, request)
        try:
            _check_rules(config, request)
            fragment = _predicate_of(config, request)
        except InvalidRequest as e:
            logger.info(f"[REQUEST] Rejecting request: {e}")
            raise
        sort = _sort_of(config, request)
        if isinstance(fragment, CircuitBreak):
            logger.info(f"[REQUEST] Circuit breaker thrown, skipping search: {fragment}")
            return cls(
                config=config,
                request=request,
                page=page,
                count=count,
                sort=sort,
                predicate=None,
                circuit_break=fragment,
            )
        logger.debug(f"[REQUEST] predicate {fragment}")
        return cls(
            config=config, request=request, page=page, count=count, sort=sort, predicate=fragment
        )


def _page_value_of(config: VulcanConfiguration, request: SearchRequest) -> int:
    """Requested page, 1 when absent."""
    name = config.paging.page_parameter
    value = request.parameter(name)
    if is_blank(value):
        return 1
    try:
        page = int(value)
    except ValueError:
        page = 0
    if page < 1:
        raise InvalidRequest.bad_parameter(
            name, value, "Expected number greater than or equal to 1"
        )
    return page


def _count_value_of(config: VulcanConfiguration, request: SearchRequest) -> int:
    """Requested page size, the default when absent and never above the maximum."""
    paging = config.paging
    value = request.parameter(paging.count_parameter)
    if is_blank(value):
        return paging.default_count
    minimum = 0 if paging.count_zero_means_count_only else 1
    try:
        count = int(value)
    except ValueError:
        count = -1
    if count < minimum:
        raise InvalidRequest.bad_parameter(
            paging.count_parameter,
            value,
            f"Expected number between {minimum} and {paging.max_count}",
        )
    return min(count, paging.max_count)


def _check_rules(config: VulcanConfiguration, request: SearchRequest) -> None:
    context = RuleContext(config=config, request=request)
    for rule in config.rules:
        rule(context)


def _predicate_of(
    config: VulcanConfiguration, request: SearchRequest
) -> Predicate | CircuitBreak:
    fragments = []
    for mapping in config.mappings:
        if not mapping.applies_to(request):
            continue
        logger.info(f"[REQUEST] Applying {mapping}")
        fragment = mapping.predicate_for(request)
        if isinstance(fragment, CircuitBreak):
            return fragment
        fragments.append(fragment)
    predicate = all_of(fragments)
    if predicate is None:
        return config.default_query(request)
    return predicate


def _sort_of(config: VulcanConfiguration, request: SearchRequest) -> Sort:
    paging = config.paging
    value = request.parameter(paging.sort_parameter)
    if value is None or paging.sortable_parameters is None:
        return paging.sort
    sort = paging.sortable_parameters(SortRequest.parse(value))
    return sort if sort is not None else paging.sort
