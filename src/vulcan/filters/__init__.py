"""
Filter builders for Vulcan.

Fragments are MongoDB filter documents using STANDARD operators
($eq, $in, $gte, $lte, ...). The matcher evaluates the same documents in
memory.
"""

from .matcher import matches
from .predicates import (
    MATCH_ALL,
    Predicate,
    all_of,
    any_of,
    between,
    contains,
    first_circuit_break,
    greater_than,
    greater_than_or_equal,
    less_than,
    less_than_or_equal,
    outside,
    select,
    select_in_list,
    select_not_null,
    starts_with,
)

__all__ = [
    # Algebra
    "Predicate",
    "MATCH_ALL",
    "all_of",
    "any_of",
    "first_circuit_break",
    # Selectors
    "select",
    "select_in_list",
    "select_not_null",
    "starts_with",
    "contains",
    "greater_than",
    "greater_than_or_equal",
    "less_than",
    "less_than_or_equal",
    "between",
    "outside",
    # In-memory evaluation
    "matches",
]
