"""
Paging results and navigation links.

Links are rebuilt from the request: the base URL (per the configured
strategy), then every allowed parameter sorted by name with URL-encoded
values, then ``count=N&page=P``. Parameters the configuration does not know
are left out of the links; the request itself is not changed.

    http://localhost/fugazi?name:contains=a&count=3&page=2
"""

from __future__ import annotations

from urllib.parse import quote_plus

from pydantic import BaseModel, Field

from .context import RequestContext


class Paging(BaseModel):
    """Page numbers and links for one search. Absent pages are None."""

    total_records: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)
    first_page: int | None = None
    first_page_url: str | None = None
    previous_page: int | None = None
    previous_page_url: str | None = None
    this_page: int | None = None
    this_page_url: str | None = None
    next_page: int | None = None
    next_page_url: str | None = None
    last_page: int | None = None
    last_page_url: str | None = None

    model_config = {"frozen": True}


class PageLinkBuilder:
    """Generates links to pages of the same search."""

    def __init__(self, context: RequestContext):
        self.context = context
        self._url_without_paging = self._determine_url_without_paging()

    @classmethod
    def of(cls, context: RequestContext) -> PageLinkBuilder:
        return cls(context)

    def _determine_url_without_paging(self) -> str:
        config = self.context.config
        request = self.context.request
        allowed = set(config.allowed_parameters())
        query = "&".join(
            f"{name}={quote_plus(value)}"
            for name in sorted(request.parameter_names())
            if name in allowed and not config.paging.is_paging_related_parameter(name)
            for value in request.parameter_values(name)
        )
        url = config.paging.base_url_strategy(request) + "?"
        if query:
            url += query + "&"
        return url

    def url_for_page(self, page: int | None) -> str | None:
        if page is None:
            return None
        paging = self.context.config.paging
        return (
            f"{self._url_without_paging}"
            f"{paging.count_parameter}={self.context.count}&{paging.page_parameter}={page}"
        )


def paging_for(context: RequestContext, total_records: int, total_pages: int) -> Paging:
    """
    Compute page numbers and links.

    first and last are only present when there are records; previous only
    when this page is past the first and not beyond the last; next only when
    this page is before the last.
    """
    links = PageLinkBuilder.of(context)
    has_pages = total_records > 0
    this_page = context.page
    first_page = 1 if has_pages else None
    last_page = total_pages if has_pages else None
    previous_page = this_page - 1 if has_pages and 1 < this_page <= last_page else None
    next_page = this_page + 1 if has_pages and this_page < last_page else None
    return Paging(
        total_records=total_records,
        total_pages=total_pages,
        first_page=first_page,
        first_page_url=links.url_for_page(first_page),
        previous_page=previous_page,
        previous_page_url=links.url_for_page(previous_page),
        this_page=this_page,
        this_page_url=links.url_for_page(this_page),
        next_page=next_page,
        next_page_url=links.url_for_page(next_page),
        last_page=last_page,
        last_page_url=links.url_for_page(last_page),
    )


def count_only_paging(context: RequestContext, total_records: int) -> Paging:
    """Paging for count=0: the total is known but there are no pages to link."""
    links = PageLinkBuilder.of(context)
    return Paging(
        total_records=total_records,
        total_pages=0,
        this_page=context.page,
        this_page_url=links.url_for_page(context.page),
    )


def empty_paging() -> Paging:
    """Paging for a search that was never executed."""
    return Paging(total_records=0, total_pages=0)
