"""
Date mappings.

The parameter may be given up to twice to express a range, e.g.
``?xdate=gt2005-01-20&xdate=lt2005-02``. Each value is parsed into a
SearchableDate and the resulting fragments are combined with AND.

How a bound is compared depends on how the field is stored, so the
comparison is delegated to a DatePredicateFactory:

- InstantPredicateFactory: the field holds timezone aware datetimes
- EpochMillisPredicateFactory: the field holds integer epoch milliseconds
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Protocol

from ..errors import InvalidRequest
from ..filters import predicates
from ..filters.predicates import Predicate, all_of
from ..parameters.date import (
    DateApproximation,
    DateOperator,
    SearchableDate,
    default_graduated_approximation,
)
from ..request import SearchRequest
from .base import MappingResult, SingleParameterMapping

logger = logging.getLogger("vulcan.mappings.date")

MAXIMUM_DATE_VALUES = 2

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MILLISECOND = timedelta(milliseconds=1)


class DatePredicateFactory(Protocol):
    def predicate(self, date: SearchableDate, field_name: str) -> Predicate: ...


@dataclass(frozen=True)
class _BoundPredicateFactory:
    """Operator dispatch shared by the concrete factories."""

    approximation: DateApproximation = field(default_factory=default_graduated_approximation)

    def convert(self, value: datetime) -> Any:
        return value

    def predicate(self, date: SearchableDate, field_name: str) -> Predicate:
        lower = self.convert(date.lower_bound)
        upper = self.convert(date.upper_bound)
        operator = date.operator
        if operator is DateOperator.EQ:
            return predicates.between(field_name, lower, upper)
        if operator is DateOperator.NE:
            return predicates.outside(field_name, lower, upper)
        if operator in (DateOperator.GT, DateOperator.SA):
            return predicates.greater_than(field_name, upper)
        if operator in (DateOperator.LT, DateOperator.EB):
            return predicates.less_than(field_name, lower)
        if operator is DateOperator.GE:
            return predicates.greater_than_or_equal(field_name, lower)
        if operator is DateOperator.LE:
            return predicates.less_than_or_equal(field_name, upper)
        if operator is DateOperator.AP:
            return predicates.between(
                field_name,
                self.convert(self.approximation.expand_lower_bound(date)),
                self.convert(self.approximation.expand_upper_bound(date)),
            )
        raise InvalidRequest.bad_parameter(
            date.parameter_name, date.operator_and_date, f"Unknown search prefix: {operator}"
        )


@dataclass(frozen=True)
class InstantPredicateFactory(_BoundPredicateFactory):
    """Compares against datetime fields."""


@dataclass(frozen=True)
class EpochMillisPredicateFactory(_BoundPredicateFactory):
    """Compares against integer epoch millisecond fields."""

    def convert(self, value: datetime) -> Any:
        return (value - EPOCH) // ONE_MILLISECOND


@dataclass(frozen=True)
class DateMapping(SingleParameterMapping):
    """
    Date search on a single field.

    Attributes:
        parameter_name: Request parameter, e.g. ``xdate``
        field_name: Field holding the date
        predicates: Bound comparison strategy for the field's representation
        zone: Zone used to interpret partial dates (default: local zone)
    """

    parameter_name: str
    field_name: str
    predicates: DatePredicateFactory = field(default_factory=InstantPredicateFactory)
    zone: tzinfo | None = None

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        values = request.parameter_values(self.parameter_name)
        if len(values) > MAXIMUM_DATE_VALUES:
            raise InvalidRequest.repeated_too_many_times(
                self.parameter_name, MAXIMUM_DATE_VALUES, len(values)
            )
        dates = [SearchableDate.parse(self.parameter_name, value, self.zone) for value in values]
        for date in dates:
            logger.debug(
                f"[DATE] {self.parameter_name} {date.operator.value} "
                f"{date.lower_bound.isoformat()}..{date.upper_bound.isoformat()}"
            )
        return all_of(self.predicates.predicate(date, self.field_name) for date in dates)
