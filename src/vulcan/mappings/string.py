"""
FHIR string searches. See http://hl7.org/fhir/R4/search.html#string

    name=xxx            case insensitive "starts with"
    name:contains=xxx   case insensitive "contains"
    name:exact=xxx      case sensitive equality

The first non-blank of these, in that order, is used. The field selector may
name several fields, any of which may match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import CircuitBreak
from ..filters.predicates import any_of, contains, select, starts_with
from ..request import SearchRequest, is_blank
from .base import FieldNameSelector, MappingResult

logger = logging.getLogger("vulcan.mappings.string")

CONTAINS = "contains"
EXACT = "exact"


@dataclass(frozen=True)
class StringMapping:
    parameter_name: str
    field_name_selector: FieldNameSelector = field(repr=False)

    @property
    def starts_with_parameter_name(self) -> str:
        return self.parameter_name

    @property
    def contains_parameter_name(self) -> str:
        return f"{self.parameter_name}:{CONTAINS}"

    @property
    def exact_parameter_name(self) -> str:
        return f"{self.parameter_name}:{EXACT}"

    def applies_to(self, request: SearchRequest) -> bool:
        return any(
            not is_blank(request.parameter(name)) for name in self.supported_parameter_names()
        )

    def supported_parameter_names(self) -> list[str]:
        return [
            self.exact_parameter_name,
            self.contains_parameter_name,
            self.starts_with_parameter_name,
        ]

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        for parameter_name, clause in (
            (self.starts_with_parameter_name, starts_with),
            (self.contains_parameter_name, contains),
            (self.exact_parameter_name, select),
        ):
            value = request.parameter(parameter_name)
            if is_blank(value):
                continue
            field_names = self.field_name_selector(value)
            if not field_names:
                return CircuitBreak.no_results_will_be_found(
                    parameter_name, value, "No database field defined."
                )
            logger.debug(f"[STRING] {parameter_name}={value} on {sorted(field_names)}")
            return any_of(clause(name, value) for name in sorted(field_names))
        raise ValueError("query parameters do not match any clause type")
