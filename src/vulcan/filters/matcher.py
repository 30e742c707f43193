"""
In-memory evaluation of filter documents.

Supports exactly the STANDARD operator subset that vulcan.filters.predicates
produces, so the same composed filter can be checked against plain dicts
without a database. Dotted field paths walk nested dicts.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

_MISSING = object()


def _resolve(record: Mapping[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _compare(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(actual: Any, expected: Any) -> bool:
        # Missing and null values never satisfy range comparisons.
        if actual is _MISSING or actual is None:
            return False
        try:
            return compare(actual, expected)
        except TypeError:
            return False

    return check


def _eq(actual: Any, expected: Any) -> bool:
    if actual is _MISSING:
        return expected is None
    return actual == expected


def _ne(actual: Any, expected: Any) -> bool:
    return not _eq(actual, expected)


def _in(actual: Any, expected: list[Any]) -> bool:
    return any(_eq(actual, candidate) for candidate in expected)


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": _eq,
    "$ne": _ne,
    "$in": _in,
    "$gt": _compare(lambda a, b: a > b),
    "$gte": _compare(lambda a, b: a >= b),
    "$lt": _compare(lambda a, b: a < b),
    "$lte": _compare(lambda a, b: a <= b),
}


def _regex(actual: Any, pattern: str, options: str) -> bool:
    if not isinstance(actual, str):
        return False
    flags = re.IGNORECASE if "i" in options else 0
    return re.search(pattern, actual, flags) is not None


def _matches_field(actual: Any, condition: Any) -> bool:
    if not isinstance(condition, Mapping) or not any(k.startswith("$") for k in condition):
        return _eq(actual, condition)
    for operator, expected in condition.items():
        if operator == "$options":
            continue
        if operator == "$regex":
            if not _regex(actual, expected, condition.get("$options", "")):
                return False
            continue
        check = _OPERATORS.get(operator)
        if check is None:
            raise ValueError(f"Unsupported filter operator: {operator}")
        if not check(actual, expected):
            return False
    return True


def matches(record: Mapping[str, Any], predicate: Mapping[str, Any] | None) -> bool:
    """
    Check a record against a filter document.

    Args:
        record: The record, a (possibly nested) mapping
        predicate: Filter document, or None for no constraint

    Returns:
        True if the record satisfies every clause of the filter
    """
    if not predicate:
        return True
    for key, condition in predicate.items():
        if key == "$and":
            if not all(matches(record, c) for c in condition):
                return False
        elif key == "$or":
            if not any(matches(record, c) for c in condition):
                return False
        elif key.startswith("$"):
            raise ValueError(f"Unsupported filter operator: {key}")
        elif not _matches_field(_resolve(record, key), condition):
            return False
    return True
