"""Tests for date search parameters."""

from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil import tz
from hypothesis import given
from hypothesis import strategies as st

from vulcan.errors import ConfigurationError, InvalidRequest
from vulcan.parameters.date import (
    EARLIEST,
    LATEST,
    DateFidelity,
    DateOperator,
    FixedAmountDateApproximation,
    SearchableDate,
    default_graduated_approximation,
)

UTC = timezone.utc


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


def parse(value: str) -> SearchableDate:
    return SearchableDate.parse("xdate", value, UTC)


class TestSearchableDateParse:
    """Prefix, fidelity and bounds."""

    def test_year(self):
        d = parse("2005")
        assert d.operator is DateOperator.EQ
        assert d.fidelity is DateFidelity.YEAR
        assert d.lower_bound == utc(2005, 1, 1)
        assert d.upper_bound == utc(2005, 12, 31, 23, 59, 59, 999000)

    def test_month_uses_calendar_length(self):
        d = parse("gt2004-02")
        assert d.operator is DateOperator.GT
        assert d.fidelity is DateFidelity.MONTH
        assert d.lower_bound == utc(2004, 2, 1)
        assert d.upper_bound == utc(2004, 2, 29, 23, 59, 59, 999000)

    def test_day(self):
        d = parse("ap2005-01-21")
        assert d.operator is DateOperator.AP
        assert d.fidelity is DateFidelity.DAY
        assert d.lower_bound == utc(2005, 1, 21)
        assert d.upper_bound == utc(2005, 1, 21, 23, 59, 59, 999000)

    def test_instant_with_z(self):
        d = parse("le2005-01-21T07:57:00Z")
        assert d.fidelity is DateFidelity.LESS_THAN_A_DAY
        assert d.lower_bound == utc(2005, 1, 21, 7, 57)
        assert d.upper_bound == utc(2005, 1, 21, 7, 57, 0, 999000)

    def test_instant_with_offset(self):
        d = parse("2005-01-21T07:57:00+05:00")
        assert d.lower_bound == utc(2005, 1, 21, 2, 57)

    def test_instant_without_zone_uses_given_zone(self):
        d = SearchableDate.parse("xdate", "2005-01-21T07:57:00", timezone(timedelta(hours=-5)))
        assert d.lower_bound == utc(2005, 1, 21, 12, 57)

    def test_bounds_are_utc(self):
        d = SearchableDate.parse("xdate", "2005", tz.gettz("America/New_York"))
        assert d.lower_bound.tzinfo == UTC
        assert d.lower_bound == utc(2005, 1, 1, 5)

    def test_default_zone_is_local(self):
        d = SearchableDate.parse("xdate", "2005-06-15")
        expected = datetime(2005, 6, 15, tzinfo=tz.tzlocal()).astimezone(UTC)
        assert d.lower_bound == expected

    @pytest.mark.parametrize("prefix", ["eq", "EQ", "Ne", "gT", "lt", "ge", "le", "sa", "eb", "ap"])
    def test_prefixes_are_case_insensitive(self, prefix):
        assert parse(f"{prefix}2005").operator is DateOperator(prefix.upper())

    @pytest.mark.parametrize(
        "value",
        [None, "", " ", "x", "nope", "no2006", "xx2005", "2005-1", "2005-13", "200a",
         "2005-02-30", "2005-01-21T25:00:00Z", "20050121", "2005-01-21T07:57Z"],
    )
    def test_invalid_values(self, value):
        with pytest.raises(InvalidRequest, match="Expected"):
            SearchableDate.parse("xdate", value, UTC)

    @given(
        day=st.dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31)),
        length=st.sampled_from([4, 7, 10, 20]),
        operator=st.sampled_from(list(DateOperator)),
    )
    def test_bounds_are_ordered_and_fidelity_follows_length(self, day, length, operator):
        text = f"{day.isoformat()}T12:30:15Z"[:length]
        d = parse(operator.value.lower() + text)
        assert d.lower_bound <= d.upper_bound
        assert d.date == text
        assert d.fidelity is {
            4: DateFidelity.YEAR,
            7: DateFidelity.MONTH,
            10: DateFidelity.DAY,
            20: DateFidelity.LESS_THAN_A_DAY,
        }[length]


class TestDateApproximation:
    """Fixed amounts per fidelity for the ap prefix."""

    def test_default_graduated_amounts(self):
        approximation = default_graduated_approximation()
        d = parse("ap2005-01-22")
        assert approximation.expand_lower_bound(d) == utc(2005, 1, 19)
        assert approximation.expand_upper_bound(d) == utc(2005, 1, 25, 23, 59, 59, 999000)

    def test_year_amount(self):
        approximation = default_graduated_approximation()
        assert approximation.amount_for(DateFidelity.YEAR) == timedelta(days=365)

    def test_missing_amount_is_configuration_error(self):
        approximation = FixedAmountDateApproximation({DateFidelity.YEAR: timedelta(days=1)})
        with pytest.raises(ConfigurationError, match="DAY"):
            approximation.expand_lower_bound(parse("ap2005-01-22"))


class TestDateRangeLimits:
    """Dates at the edge of the representable range."""

    def test_last_year_caps_upper_bound(self):
        d = parse("le9999")
        assert d.lower_bound == utc(9999, 1, 1)
        assert d.upper_bound == LATEST

    def test_last_day_caps_upper_bound(self):
        assert parse("9999-12-31").upper_bound == LATEST

    def test_approximation_caps_both_ends(self):
        approximation = default_graduated_approximation()
        assert approximation.expand_upper_bound(parse("ap9999")) == LATEST
        assert approximation.expand_lower_bound(parse("ap0001")) == EARLIEST

    @pytest.mark.parametrize("value", ["２００５", "2005-０1", "٢٠٠٥"])
    def test_only_ascii_digits(self, value):
        with pytest.raises(InvalidRequest, match="Expected"):
            parse(value)
