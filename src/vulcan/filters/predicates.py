"""
Filter fragments and the algebra that combines them.

Fragments are MongoDB filter documents built only from STANDARD operators
($eq, $ne, $in, $gt, $gte, $lt, $lte, $regex, $and, $or). Any backend that
can evaluate field comparisons and boolean combinators can run them.

Example composed filter for ``?name=tac&xdate=gt2006``:
{
    "$and": [
        {"name": {"$regex": "^tac", "$options": "i"}},
        {"date": {"$gt": datetime(2006, 12, 31, 23, 59, 59, 999000)}}
    ]
}

The null fragment (None) imposes no constraint. It is the identity of both
all_of and any_of and is dropped during composition.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..errors import CircuitBreak

Predicate = dict[str, Any]

# Explicit "every record" filter. Unlike None this is a real fragment.
# Shared, so hand out copies.
MATCH_ALL: Predicate = {}

AND = "$and"
OR = "$or"


def _fold(operator: str, fragments: Iterable[Predicate | None]) -> Predicate | None:
    operands: list[Predicate] = []
    for fragment in fragments:
        if fragment is None:
            continue
        if isinstance(fragment, CircuitBreak):
            raise TypeError(f"CircuitBreak cannot be combined with {operator}: {fragment}")
        # Flatten nested operands of the same combinator so grouping never
        # changes the shape of the result.
        if len(fragment) == 1 and operator in fragment:
            operands.extend(fragment[operator])
        else:
            operands.append(fragment)
    if not operands:
        return None
    if len(operands) == 1:
        return operands[0]
    return {operator: operands}


def all_of(fragments: Iterable[Predicate | None]) -> Predicate | None:
    """Combine fragments with AND semantics. No fragments means no constraint."""
    return _fold(AND, fragments)


def any_of(fragments: Iterable[Predicate | None]) -> Predicate | None:
    """Combine fragments with OR semantics. No fragments means no constraint."""
    return _fold(OR, fragments)


def first_circuit_break(values: Iterable[Any]) -> CircuitBreak | None:
    for value in values:
        if isinstance(value, CircuitBreak):
            return value
    return None


def select(field_name: str, value: Any) -> Predicate:
    """Exact equality on one field."""
    return {field_name: {"$eq": value}}


def select_in_list(field_name: str, values: Iterable[Any] | None) -> Predicate | None:
    """
    Membership in a set of values, explicitly handling lists of 0 and 1.

    Duplicates are removed, keeping first-seen order so the filter is
    deterministic.
    """
    if values is None:
        return None
    unique = list(dict.fromkeys(values))
    if not unique:
        return None
    if len(unique) == 1:
        return select(field_name, unique[0])
    return {field_name: {"$in": unique}}


def select_not_null(field_name: str) -> Predicate:
    return {field_name: {"$ne": None}}


def starts_with(field_name: str, value: str) -> Predicate:
    """Case insensitive prefix match."""
    return {field_name: {"$regex": "^" + re.escape(value), "$options": "i"}}


def contains(field_name: str, value: str) -> Predicate:
    """Case insensitive substring match."""
    return {field_name: {"$regex": re.escape(value), "$options": "i"}}


def greater_than(field_name: str, value: Any) -> Predicate:
    return {field_name: {"$gt": value}}


def greater_than_or_equal(field_name: str, value: Any) -> Predicate:
    return {field_name: {"$gte": value}}


def less_than(field_name: str, value: Any) -> Predicate:
    return {field_name: {"$lt": value}}


def less_than_or_equal(field_name: str, value: Any) -> Predicate:
    return {field_name: {"$lte": value}}


def between(field_name: str, lower: Any, upper: Any) -> Predicate:
    """Inclusive range."""
    return {field_name: {"$gte": lower, "$lte": upper}}


def outside(field_name: str, lower: Any, upper: Any) -> Predicate:
    """Strictly below lower or strictly above upper."""
    return any_of([less_than(field_name, lower), greater_than(field_name, upper)])
