"""Tests for the individual mapping kinds."""

from datetime import datetime, timezone

import pytest

from vulcan.errors import CircuitBreak, InvalidRequest
from vulcan.mappings import (
    CsvListMapping,
    DateMapping,
    EpochMillisPredicateFactory,
    Mapping,
    Mappings,
)
from vulcan.mappings.base import field_names_selector, split_csv
from vulcan.request import SearchRequest

UTC = timezone.utc


def only(mappings: Mappings):
    (mapping,) = mappings.get()
    return mapping


class TestBase:
    """Shared helpers."""

    @pytest.mark.parametrize(
        "value, expected",
        [(None, []), ("", []), ("a", ["a"]), (" a , b ", ["a", "b"]), ("a,,b,", ["a", "b"])],
    )
    def test_split_csv(self, value, expected):
        assert split_csv(value) == expected

    def test_field_names_selector(self):
        assert list(field_names_selector("name")("x")) == ["name"]
        assert sorted(field_names_selector({"food", "base"})("x")) == ["base", "food"]
        assert field_names_selector(lambda v: [v])("food") == ["food"]

    def test_mappings_satisfy_protocol(self):
        mappings = Mappings().string("name").csv_list("food").date_as_instant("xdate").get()
        assert all(isinstance(m, Mapping) for m in mappings)

    def test_get_is_immutable_snapshot(self):
        builder = Mappings().string("name")
        snapshot = builder.get()
        builder.csv_list("food")
        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)


class TestStringMapping:
    """Starts with, contains and exact."""

    def test_supported_names(self):
        mapping = only(Mappings().string("name"))
        assert mapping.supported_parameter_names() == ["name:exact", "name:contains", "name"]

    def test_applies_to_any_non_blank_variant(self):
        mapping = only(Mappings().string("name"))
        assert mapping.applies_to(SearchRequest.of(**{"name:contains": "a"}))
        assert not mapping.applies_to(SearchRequest.of(name=" "))
        assert not mapping.applies_to(SearchRequest.of(other="a"))

    def test_starts_with(self):
        mapping = only(Mappings().string("name"))
        assert mapping.predicate_for(SearchRequest.of(name="tac")) == {
            "name": {"$regex": "^tac", "$options": "i"}
        }

    def test_starts_with_wins_over_contains(self):
        mapping = only(Mappings().string("name"))
        request = SearchRequest.of(**{"name": "tac", "name:contains": "x"})
        assert mapping.predicate_for(request) == {"name": {"$regex": "^tac", "$options": "i"}}

    def test_exact(self):
        mapping = only(Mappings().string("name"))
        request = SearchRequest.of(**{"name:exact": "Tacos"})
        assert mapping.predicate_for(request) == {"name": {"$eq": "Tacos"}}

    def test_several_fields_any_may_match(self):
        mapping = only(Mappings().string("foodOrBase", {"food", "base"}))
        request = SearchRequest.of(**{"foodOrBase:contains": "ch"})
        assert mapping.predicate_for(request) == {
            "$or": [
                {"base": {"$regex": "ch", "$options": "i"}},
                {"food": {"$regex": "ch", "$options": "i"}},
            ]
        }

    def test_no_fields_breaks_circuit(self):
        mapping = only(Mappings().string("name", lambda value: []))
        result = mapping.predicate_for(SearchRequest.of(name="a"))
        assert isinstance(result, CircuitBreak)
        assert "No database field defined." in str(result)


class TestValueMapping:
    """Strict equality with conversion."""

    def test_single_field(self):
        mapping = only(Mappings().value("namevalue", "name"))
        assert mapping.predicate_for(SearchRequest.of(namevalue="tacos2005")) == {
            "name": {"$eq": "tacos2005"}
        }

    def test_csv_values_are_ored(self):
        mapping = only(Mappings().value("id", converter=int))
        assert mapping.predicate_for(SearchRequest.of(id="1,2")) == {
            "$or": [{"id": {"$eq": 1}}, {"id": {"$eq": 2}}]
        }

    def test_fields_of_one_value_are_anded(self):
        mapping = only(
            Mappings().values("nameAndFood", lambda v: dict(zip(("name", "food"), v.split(":"))))
        )
        assert mapping.predicate_for(SearchRequest.of(nameAndFood="a:TACOS")) == {
            "$and": [{"name": {"$eq": "a"}}, {"food": {"$eq": "TACOS"}}]
        }

    def test_converter_failure_is_bad_parameter(self):
        mapping = only(Mappings().value("id", converter=int))
        with pytest.raises(InvalidRequest, match="bad parameter: id = nope"):
            mapping.predicate_for(SearchRequest.of(id="nope"))

    def test_converter_invalid_request_propagates(self):
        def reject(value):
            raise InvalidRequest("custom")

        mapping = only(Mappings().value("id", converter=reject))
        with pytest.raises(InvalidRequest, match="^custom$"):
            mapping.predicate_for(SearchRequest.of(id="1"))

    def test_no_fields_breaks_circuit(self):
        mapping = only(Mappings().values("x", lambda v: {}))
        assert isinstance(mapping.predicate_for(SearchRequest.of(x="1")), CircuitBreak)

    def test_only_commas_breaks_circuit(self):
        mapping = only(Mappings().value("x"))
        assert isinstance(mapping.predicate_for(SearchRequest.of(x=",")), CircuitBreak)


class TestCsvListMapping:
    def test_in(self):
        mapping = CsvListMapping("food", "food")
        assert mapping.predicate_for(SearchRequest.of(food="TACOS, NACHOS")) == {
            "food": {"$in": ["TACOS", "NACHOS"]}
        }

    def test_field_defaults_to_parameter(self):
        assert only(Mappings().csv_list("food")).field_name == "food"


class TestDateMapping:
    """Operator dispatch and value limits."""

    def mapping(self):
        return only(Mappings().date_as_instant("xdate", "date", zone=UTC))

    def test_eq_is_inclusive_range(self):
        result = self.mapping().predicate_for(SearchRequest.of(xdate="2005"))
        assert result == {
            "date": {
                "$gte": datetime(2005, 1, 1, tzinfo=UTC),
                "$lte": datetime(2005, 12, 31, 23, 59, 59, 999000, tzinfo=UTC),
            }
        }

    @pytest.mark.parametrize(
        "value, operator, bound",
        [
            ("gt2005", "$gt", datetime(2005, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)),
            ("sa2005", "$gt", datetime(2005, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)),
            ("lt2005", "$lt", datetime(2005, 1, 1, tzinfo=UTC)),
            ("eb2005", "$lt", datetime(2005, 1, 1, tzinfo=UTC)),
            ("ge2005", "$gte", datetime(2005, 1, 1, tzinfo=UTC)),
            ("le2005", "$lte", datetime(2005, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)),
        ],
    )
    def test_one_sided_operators(self, value, operator, bound):
        result = self.mapping().predicate_for(SearchRequest.of(xdate=value))
        assert result == {"date": {operator: bound}}

    def test_ne(self):
        result = self.mapping().predicate_for(SearchRequest.of(xdate="ne2005"))
        assert result == {
            "$or": [
                {"date": {"$lt": datetime(2005, 1, 1, tzinfo=UTC)}},
                {"date": {"$gt": datetime(2005, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)}},
            ]
        }

    def test_ap_expands_bounds(self):
        result = self.mapping().predicate_for(SearchRequest.of(xdate="ap2005-01-22"))
        assert result == {
            "date": {
                "$gte": datetime(2005, 1, 19, tzinfo=UTC),
                "$lte": datetime(2005, 1, 25, 23, 59, 59, 999000, tzinfo=UTC),
            }
        }

    def test_two_values_are_anded(self):
        request = SearchRequest.of(xdate=["gt2005-01-20", "lt2005-02"])
        result = self.mapping().predicate_for(request)
        assert list(result) == ["$and"]
        assert len(result["$and"]) == 2

    def test_three_values_are_rejected(self):
        request = SearchRequest.of(xdate=["gt2005", "lt2007", "ne2006"])
        with pytest.raises(InvalidRequest, match="too many times"):
            self.mapping().predicate_for(request)

    def test_epoch_millis(self):
        mapping = DateMapping("ydate", "millis", EpochMillisPredicateFactory(), UTC)
        result = mapping.predicate_for(SearchRequest.of(ydate="ge1970-01-02"))
        assert result == {"millis": {"$gte": 86_400_000}}
        upper = mapping.predicate_for(SearchRequest.of(ydate="le1970-01-01"))
        assert upper == {"millis": {"$lte": 86_399_999}}


class TestTokenMappings:
    """Single token, token specification and token CSV list."""

    def test_token(self):
        mapping = only(
            Mappings().token(
                "food",
                lambda t: t.is_system_explicitly_set_and_one_of("http://food"),
                lambda t: [t.code.upper()],
            )
        )
        assert mapping.predicate_for(SearchRequest.of(food="http://food|tacos")) == {
            "food": {"$eq": "TACOS"}
        }

    def test_token_unsupported_breaks_circuit(self):
        mapping = only(Mappings().token("food", lambda t: False, lambda t: [t.code]))
        result = mapping.predicate_for(SearchRequest.of(food="TACOS"))
        assert isinstance(result, CircuitBreak)

    def test_token_without_values_breaks_circuit(self):
        mapping = only(Mappings().token("food", lambda t: True, lambda t: []))
        assert isinstance(mapping.predicate_for(SearchRequest.of(food="TACOS")), CircuitBreak)

    def test_malformed_token_is_rejected(self):
        mapping = only(Mappings().token("food", lambda t: True, lambda t: [t.code]))
        with pytest.raises(InvalidRequest):
            mapping.predicate_for(SearchRequest.of(food="|"))

    def test_tokens_drop_unsupported(self):
        mapping = only(
            Mappings().tokens(
                "food",
                lambda t: t.code != "PIZZA",
                lambda t: {"food": {"$eq": t.code}},
            )
        )
        assert mapping.predicate_for(SearchRequest.of(food="PIZZA,TACOS")) == {
            "food": {"$eq": "TACOS"}
        }

    def test_tokens_drop_circuit_breaks(self):
        mapping = only(
            Mappings().tokens("food", lambda t: True, lambda t: CircuitBreak("never"))
        )
        result = mapping.predicate_for(SearchRequest.of(food="TACOS,NACHOS"))
        assert isinstance(result, CircuitBreak)
        assert "No supported tokens were specified." in str(result)

    def test_token_list(self):
        mapping = only(Mappings().token_list("food", lambda t: True, lambda t: [t.code]))
        assert mapping.predicate_for(SearchRequest.of(food="TACOS,http://x|NACHOS")) == {
            "$or": [{"food": {"$eq": "TACOS"}}, {"food": {"$eq": "NACHOS"}}]
        }

    def test_token_list_field_per_token(self):
        mapping = only(
            Mappings().token_list(
                "id",
                lambda t: t.has_explicit_system(),
                lambda t: [t.code],
                lambda t: "food" if t.system == "http://food" else "base",
            )
        )
        result = mapping.predicate_for(SearchRequest.of(id="http://food|TACOS,http://base|CHIPS"))
        assert result == {"$or": [{"food": {"$eq": "TACOS"}}, {"base": {"$eq": "CHIPS"}}]}

    def test_token_list_nothing_supported(self):
        mapping = only(Mappings().token_list("food", lambda t: False, lambda t: [t.code]))
        assert isinstance(mapping.predicate_for(SearchRequest.of(food="TACOS")), CircuitBreak)


class TestReferenceMapping:
    """Bare and typed reference parameters."""

    def mapping(self, **kwargs):
        return only(
            Mappings().reference(
                "subject", "subjectId", {"Patient", "Group"}, "Patient", **kwargs
            )
        )

    def test_supported_names(self):
        assert self.mapping().supported_parameter_names() == [
            "subject",
            "subject:Group",
            "subject:Patient",
        ]

    def test_applies_to_typed_parameter(self):
        assert self.mapping().applies_to(SearchRequest.of(**{"subject:Group": "1"}))
        assert not self.mapping().applies_to(SearchRequest.of(**{"subject:Device": "1"}))

    def test_typed(self):
        request = SearchRequest.of(**{"subject:Patient": "123"})
        assert self.mapping().predicate_for(request) == {"subjectId": {"$eq": "123"}}

    def test_relative_url(self):
        request = SearchRequest.of(subject="Group/9")
        assert self.mapping().predicate_for(request) == {"subjectId": {"$eq": "9"}}

    def test_bare_value_is_ambiguous(self):
        with pytest.raises(InvalidRequest, match="ambiguous"):
            self.mapping().predicate_for(SearchRequest.of(subject="123"))

    def test_unsupported_breaks_circuit(self):
        mapping = self.mapping(is_supported=lambda r: r.type == "Patient")
        result = mapping.predicate_for(SearchRequest.of(subject="Group/9"))
        assert isinstance(result, CircuitBreak)

    def test_value_selector(self):
        mapping = self.mapping(value_selector=lambda r: f"{r.type}/{r.public_id}")
        assert mapping.predicate_for(SearchRequest.of(subject="Group/9")) == {
            "subjectId": {"$eq": "Group/9"}
        }
