"""
The query execution collaborator.

Vulcan never runs a query itself. It hands the composed filter to a
QueryExecutor, which owns storage, timeouts and cancellation.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..filters.predicates import Predicate
from ..sorting import Sort


@dataclass(frozen=True)
class Page:
    """One page of rows plus the totals for the whole result."""

    rows: Sequence[Any] = field(default_factory=tuple)
    total_records: int = 0
    total_pages: int = 0


def total_pages_for(total_records: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total_records / page_size)


class QueryExecutor(Protocol):
    def count(self, predicate: Predicate) -> int:
        """Number of records matching the filter."""
        ...

    def find_page(self, predicate: Predicate, page_number: int, page_size: int, sort: Sort) -> Page:
        """
        One page of matching records.

        Args:
            predicate: Filter document
            page_number: 1-based page number
            page_size: Records per page, greater than zero
            sort: Requested ordering, possibly unsorted
        """
        ...
