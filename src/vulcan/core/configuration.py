"""
Runtime configuration.

Everything here is frozen and built once at startup, then shared read-only
by every request.

    paging = PagingConfiguration.from_settings(get_settings(), sort=Sort.by("id"))
    config = VulcanConfiguration(
        paging=paging,
        mappings=Mappings().string("name").date_as_instant("xdate", "date").get(),
        rules=(rules.forbid_unknown_parameters(),),
        default_query=return_nothing(),
    )
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Union

from ..config.settings import Settings
from ..errors import CircuitBreak, ConfigurationError, InvalidRequest
from ..filters.predicates import MATCH_ALL, Predicate
from ..mappings.base import Mapping
from ..request import SearchRequest, is_blank
from ..rules import Rule
from ..sorting import Sort, SortRequest

BaseUrlStrategy = Callable[[SearchRequest], str]
SortableParameters = Callable[[SortRequest], Union[Sort, None]]
DefaultQuery = Callable[[SearchRequest], Union[Predicate, CircuitBreak]]


def use_request_url() -> BaseUrlStrategy:
    """Paging links point back at the URL the request was made against."""
    return lambda request: request.url


def use_url(url: str) -> BaseUrlStrategy:
    """Paging links use a fixed base URL, e.g. the public URL behind a gateway."""
    return lambda _request: url


def return_nothing() -> DefaultQuery:
    """When no mapping produces a fragment, the search finds nothing."""
    return lambda _request: CircuitBreak("No search parameters were specified.")


def reject_request() -> DefaultQuery:
    """When no mapping produces a fragment, the request is rejected."""

    def default_query(_request: SearchRequest) -> Predicate:
        raise InvalidRequest.no_parameters_specified()

    return default_query


def return_everything() -> DefaultQuery:
    """When no mapping produces a fragment, every record matches."""
    return lambda _request: dict(MATCH_ALL)


@dataclass(frozen=True)
class PagingConfiguration:
    """
    Paging and sorting behavior.

    Attributes:
        page_parameter: Request parameter holding the 1-based page number
        count_parameter: Request parameter holding the page size
        sort_parameter: Request parameter holding the CSV sort specification
        default_count: Page size when none is requested
        max_count: Requests for larger pages are reduced to this
        sort: Default sort
        base_url_strategy: Base of generated paging links
        sortable_parameters: Resolves a SortRequest to a Sort, None for the default
        count_zero_means_count_only: True to answer count=0 with the total only,
            False to reject it
    """

    page_parameter: str = "page"
    count_parameter: str = "count"
    sort_parameter: str = "_sort"
    default_count: int = 10
    max_count: int = 20
    sort: Sort = field(default_factory=Sort.unsorted)
    base_url_strategy: BaseUrlStrategy = field(default_factory=use_request_url, repr=False)
    sortable_parameters: SortableParameters | None = field(default=None, repr=False)
    count_zero_means_count_only: bool = True

    def __post_init__(self) -> None:
        names = (self.page_parameter, self.count_parameter, self.sort_parameter)
        if any(is_blank(name) for name in names):
            raise ConfigurationError(f"Paging parameter names must not be blank: {names}")
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Paging parameter names must be distinct: {names}")
        if self.max_count < 0 or self.default_count < 0:
            raise ConfigurationError("Paging counts must not be negative")
        if self.default_count > self.max_count:
            raise ConfigurationError(
                f"default_count ({self.default_count}) exceeds max_count ({self.max_count})"
            )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        sort: Sort | None = None,
        sortable_parameters: SortableParameters | None = None,
    ) -> PagingConfiguration:
        """Build paging configuration from environment backed settings."""
        base_url_strategy = (
            use_url(settings.base_url) if settings.base_url else use_request_url()
        )
        return cls(
            page_parameter=settings.page_parameter,
            count_parameter=settings.count_parameter,
            sort_parameter=settings.sort_parameter,
            default_count=settings.default_count,
            max_count=settings.max_count,
            sort=sort or Sort.unsorted(),
            base_url_strategy=base_url_strategy,
            sortable_parameters=sortable_parameters,
            count_zero_means_count_only=settings.count_zero_means_count_only,
        )

    def is_paging_related_parameter(self, parameter: str) -> bool:
        """True if the given parameter is either the page or count parameter."""
        return parameter in (self.page_parameter, self.count_parameter)


@dataclass(frozen=True)
class VulcanConfiguration:
    """
    Attributes:
        paging: Paging and sorting behavior
        mappings: Evaluated in order for every request
        rules: Checked in order before any mapping
        parameters: Parameters accepted in addition to those of the mappings
        default_query: Used when no mapping produces a fragment
    """

    paging: PagingConfiguration
    mappings: Sequence[Mapping] = ()
    rules: Sequence[Rule] = ()
    parameters: Sequence[str] = ()
    default_query: DefaultQuery = field(default_factory=return_nothing, repr=False)

    def __post_init__(self) -> None:
        # Callers may pass lists; freeze them so the configuration can be shared.
        object.__setattr__(self, "mappings", tuple(self.mappings))
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "parameters", tuple(self.parameters))

    def supported_parameters(self) -> list[str]:
        """All supported parameters, learned from mappings and declared explicitly."""
        names = [n for m in self.mappings for n in m.supported_parameter_names()]
        return list(dict.fromkeys([*names, *self.parameters]))

    def allowed_parameters(self) -> list[str]:
        """Parameters carried into paging links: the supported ones plus sorting."""
        return [*self.supported_parameters(), self.paging.sort_parameter]
