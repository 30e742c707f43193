"""
In-memory query executor.

Evaluates filter documents against a list of dicts with the same matcher the
tests use. Good for tests, examples and small reference data sets.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import cmp_to_key
from typing import Any

from ..filters.matcher import matches
from ..filters.predicates import Predicate
from ..sorting import Direction, Sort
from .base import Page, total_pages_for

logger = logging.getLogger("vulcan.executors.memory")


def _order(a: Any, b: Any) -> int:
    try:
        return -1 if a < b else 1
    except TypeError:
        # Mixed types order by type, as MongoDB orders by BSON type.
        return -1 if type(a).__name__ < type(b).__name__ else 1


def _compare_records(sort: Sort):
    def compare(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
        for name, direction in sort.orders:
            a, b = left.get(name), right.get(name)
            if a == b:
                continue
            # Nulls sort first, as they do in MongoDB.
            if a is None:
                result = -1
            elif b is None:
                result = 1
            else:
                result = _order(a, b)
            return result if direction is Direction.ASC else -result
        return 0

    return compare


class MemoryQueryExecutor:
    """Executes filters against records held in memory, in insertion order."""

    def __init__(self, records: Iterable[Mapping[str, Any]] = ()):
        self.records: list[Mapping[str, Any]] = list(records)

    def _matching(self, predicate: Predicate) -> list[Mapping[str, Any]]:
        return [record for record in self.records if matches(record, predicate)]

    def count(self, predicate: Predicate) -> int:
        return len(self._matching(predicate))

    def find_page(self, predicate: Predicate, page_number: int, page_size: int, sort: Sort) -> Page:
        found = self._matching(predicate)
        if sort.is_sorted():
            found.sort(key=cmp_to_key(_compare_records(sort)))
        start = (page_number - 1) * page_size
        rows = found[start : start + page_size]
        logger.debug(f"[MEMORY] {len(found)} matches, returning {len(rows)} from {start}")
        return Page(
            rows=rows,
            total_records=len(found),
            total_pages=total_pages_for(len(found), page_size),
        )
