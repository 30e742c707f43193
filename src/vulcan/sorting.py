"""
Sorting.

The request carries a CSV sort parameter (``_sort`` by default) of field
names, each optionally prefixed with ``-`` for descending order:

    ?_sort=date,-name

That becomes a SortRequest. The caller resolves it to a concrete Sort over
stored fields; parameters it does not recognize fall back to the default sort.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pymongo


class Direction(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    def to_pymongo(self) -> int:
        return pymongo.ASCENDING if self is Direction.ASC else pymongo.DESCENDING


@dataclass(frozen=True)
class Sort:
    """Ordered (field, direction) pairs. An empty Sort means unsorted."""

    orders: tuple[tuple[str, Direction], ...] = ()

    @classmethod
    def by(cls, *field_names: str, direction: Direction = Direction.ASC) -> Sort:
        return cls(orders=tuple((name, direction) for name in field_names))

    @classmethod
    def unsorted(cls) -> Sort:
        return cls()

    def and_then(self, other: Sort) -> Sort:
        return Sort(orders=self.orders + other.orders)

    def is_sorted(self) -> bool:
        return bool(self.orders)

    def to_pymongo(self) -> list[tuple[str, int]]:
        """Sort specification accepted by ``Cursor.sort``."""
        return [(name, direction.to_pymongo()) for name, direction in self.orders]


@dataclass(frozen=True)
class SortParameter:
    parameter_name: str
    direction: Direction

    @classmethod
    def for_rule(cls, rule: str) -> SortParameter:
        """``-name`` sorts descending, anything else ascending."""
        if rule.startswith("-"):
            return cls(parameter_name=rule[1:], direction=Direction.DESC)
        return cls(parameter_name=rule, direction=Direction.ASC)


@dataclass(frozen=True)
class SortRequest:
    sorting: tuple[SortParameter, ...] = ()

    @classmethod
    def parse(cls, value: str) -> SortRequest:
        """Parse the sort parameter, skipping empty entries."""
        rules = [part.strip() for part in value.split(",")]
        return cls(sorting=tuple(SortParameter.for_rule(rule) for rule in rules if rule))
