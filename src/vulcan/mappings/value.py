"""
Value equality mappings.

Unlike StringMapping, a value mapping provides only strict equality. It does
provide a conversion function that can target several fields at once;
fields produced by one conversion are combined with AND, e.g.
``nameAndFood=nachos2005:NACHOS`` -> name == nachos2005 AND food == NACHOS.
Comma separated values are converted independently and combined with OR.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import CircuitBreak
from ..filters.predicates import all_of, any_of, select
from ..request import SearchRequest
from .base import MappingResult, SingleParameterMapping, convert, split_csv

logger = logging.getLogger("vulcan.mappings.value")

FieldValueConverter = Callable[[str], Mapping[str, Any]]


def single_field_value(
    field_name: str, converter: Callable[[str], Any] | None = None
) -> FieldValueConverter:
    """Converter mapping the (optionally converted) parameter value to one field."""
    if converter is None:
        return lambda value: {field_name: value}
    return lambda value: {field_name: converter(value)}


@dataclass(frozen=True)
class ValueMapping(SingleParameterMapping):
    parameter_name: str
    converter: FieldValueConverter = field(repr=False)

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        parameter_value = request.parameter(self.parameter_name)
        clauses = []
        for value in split_csv(parameter_value):
            fields_to_value = convert(self.parameter_name, value, self.converter)
            if not fields_to_value:
                return CircuitBreak.no_results_will_be_found(
                    self.parameter_name, parameter_value, "No fields were identified to search"
                )
            clauses.append(all_of(select(name, v) for name, v in fields_to_value.items()))
        if not clauses:
            return CircuitBreak.no_results_will_be_found(
                self.parameter_name, parameter_value, "No values were specified"
            )
        return any_of(clauses)
