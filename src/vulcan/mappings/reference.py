"""
Reference mappings, e.g. ``?patient=123`` or ``?subject:Patient=123``.

The mapping answers to the bare parameter and to one ``param:Type`` variant
per allowed resource type. Parsing is delegated to ReferenceParameterParser,
so ambiguous or illegal references are rejected there.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from ..errors import CircuitBreak
from ..filters.predicates import any_of, select
from ..parameters.reference import ReferenceParameter, ReferenceParameterParser
from ..request import SearchRequest, is_blank
from .base import MappingResult

logger = logging.getLogger("vulcan.mappings.reference")


def _public_id(reference: ReferenceParameter) -> str:
    return reference.public_id


@dataclass(frozen=True)
class ReferenceMapping:
    """
    Attributes:
        parameter_name: Base request parameter, e.g. ``patient``
        default_resource_type: Type used for bare ``?patient=123`` values
        allowed_reference_types: Types the parameter may refer to
        field_name_selector: Fields to search for a parsed reference
        is_supported: False when the reference can never match, e.g. an
            unsupported type or a foreign host
        value_selector: Stored value for a parsed reference (default: public id)
    """

    parameter_name: str
    default_resource_type: str | None
    allowed_reference_types: frozenset[str]
    field_name_selector: Callable[[ReferenceParameter], Collection[str]] = field(repr=False)
    is_supported: Callable[[ReferenceParameter], bool] = field(
        default=lambda _reference: True, repr=False
    )
    value_selector: Callable[[ReferenceParameter], str] = field(default=_public_id, repr=False)

    def _typed_parameter_names(self) -> list[str]:
        return [f"{self.parameter_name}:{t}" for t in sorted(self.allowed_reference_types)]

    def supported_parameter_names(self) -> list[str]:
        return [self.parameter_name, *self._typed_parameter_names()]

    def _first_specified(self, request: SearchRequest) -> tuple[str, str] | None:
        for name in self.supported_parameter_names():
            value = request.parameter(name)
            if not is_blank(value):
                return name, value
        return None

    def applies_to(self, request: SearchRequest) -> bool:
        return self._first_specified(request) is not None

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        specified = self._first_specified(request)
        if specified is None:
            return None
        name, value = specified
        reference = ReferenceParameterParser(
            allowed_reference_types=self.allowed_reference_types,
            default_resource_type=self.default_resource_type,
        ).parse(name, value)
        if not self.is_supported(reference):
            return CircuitBreak.no_results_will_be_found(name, value, "Reference is not supported.")
        field_names = self.field_name_selector(reference)
        if not field_names:
            return CircuitBreak.no_results_will_be_found(name, value, "No database field defined.")
        stored_value = self.value_selector(reference)
        logger.debug(f"[REFERENCE] {name}={value} -> {reference.type}/{stored_value}")
        return any_of(select(f, stored_value) for f in sorted(field_names))
