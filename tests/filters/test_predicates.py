"""Tests for the filter algebra."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from vulcan.errors import CircuitBreak
from vulcan.filters import (
    MATCH_ALL,
    all_of,
    any_of,
    between,
    contains,
    first_circuit_break,
    outside,
    select,
    select_in_list,
    select_not_null,
    starts_with,
)

fragments = st.one_of(
    st.none(),
    st.builds(select, st.sampled_from(["name", "food", "base"]), st.integers(0, 5)),
)


class TestAlgebra:
    """Combinators over fragments, with None as the identity."""

    def test_empty_is_no_constraint(self):
        assert all_of([]) is None
        assert any_of([]) is None

    def test_nulls_are_dropped(self):
        assert all_of([None, None]) is None
        assert all_of([None, select("a", 1), None]) == select("a", 1)

    def test_single_fragment_is_not_wrapped(self):
        assert any_of([select("a", 1)]) == {"a": {"$eq": 1}}

    def test_combines(self):
        assert all_of([select("a", 1), select("b", 2)]) == {
            "$and": [{"a": {"$eq": 1}}, {"b": {"$eq": 2}}]
        }
        assert any_of([select("a", 1), select("b", 2)]) == {
            "$or": [{"a": {"$eq": 1}}, {"b": {"$eq": 2}}]
        }

    def test_mixed_combinators_are_not_flattened(self):
        inner = any_of([select("a", 1), select("a", 2)])
        assert all_of([inner, select("b", 3)]) == {"$and": [inner, {"b": {"$eq": 3}}]}

    @given(st.lists(fragments), st.lists(fragments), st.lists(fragments))
    def test_all_of_is_associative(self, a, b, c):
        left = all_of([all_of([all_of(a), all_of(b)]), all_of(c)])
        right = all_of([all_of(a), all_of([all_of(b), all_of(c)])])
        assert left == right == all_of(a + b + c)

    @given(st.lists(fragments), st.lists(fragments))
    def test_any_of_is_associative(self, a, b):
        assert any_of([any_of(a), any_of(b)]) == any_of(a + b)

    def test_circuit_break_cannot_be_combined(self):
        with pytest.raises(TypeError):
            all_of([select("a", 1), CircuitBreak("nope")])

    def test_first_circuit_break(self):
        stop = CircuitBreak("stop")
        assert first_circuit_break([None, select("a", 1), stop, CircuitBreak("x")]) is stop
        assert first_circuit_break([None, select("a", 1)]) is None


class TestSelectors:
    """Single field fragments."""

    def test_select_in_list_sizes(self):
        assert select_in_list("food", None) is None
        assert select_in_list("food", []) is None
        assert select_in_list("food", ["TACOS"]) == {"food": {"$eq": "TACOS"}}
        assert select_in_list("food", ["TACOS", "NACHOS", "TACOS"]) == {
            "food": {"$in": ["TACOS", "NACHOS"]}
        }

    def test_select_not_null(self):
        assert select_not_null("food") == {"food": {"$ne": None}}

    def test_text_matches_escape_input(self):
        assert starts_with("name", "a.b") == {"name": {"$regex": r"^a\.b", "$options": "i"}}
        assert contains("name", "(x)") == {"name": {"$regex": r"\(x\)", "$options": "i"}}

    def test_ranges(self):
        assert between("n", 1, 5) == {"n": {"$gte": 1, "$lte": 5}}
        assert outside("n", 1, 5) == {"$or": [{"n": {"$lt": 1}}, {"n": {"$gt": 5}}]}

    def test_match_all_is_empty_document(self):
        assert MATCH_ALL == {}
