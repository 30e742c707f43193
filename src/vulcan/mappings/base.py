"""
The Mapping contract.

A mapping turns request parameters into a filter fragment. Vulcan always asks
``applies_to`` first; only mappings that apply are asked for a predicate.
A mapping returns one of:

- a filter document (dict), combined with the others using AND
- None, contributing no constraint
- a CircuitBreak, meaning no record can possibly match

Mappings are built once at configuration time, never mutated, and shared
across concurrent requests.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from typing import Any, Protocol, Union, runtime_checkable

from ..errors import CircuitBreak, InvalidRequest
from ..filters.predicates import Predicate
from ..request import SearchRequest, is_blank

MappingResult = Union[Predicate, CircuitBreak, None]

FieldNameSelector = Callable[[str], Collection[str]]


@runtime_checkable
class Mapping(Protocol):
    """Generates a filter fragment from a search request."""

    def applies_to(self, request: SearchRequest) -> bool:
        """True if this mapping should participate. Always invoked before predicate_for."""
        ...

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        """
        Produce the fragment for this request.

        The fragment may be combined with others using AND or OR semantics,
        implementations must not assume which.
        """
        ...

    def supported_parameter_names(self) -> list[str]:
        ...


class SingleParameterMapping:
    """Applies when ``parameter_name`` is present with a non-blank value."""

    parameter_name: str

    def applies_to(self, request: SearchRequest) -> bool:
        return not is_blank(request.parameter(self.parameter_name))

    def supported_parameter_names(self) -> list[str]:
        return [self.parameter_name]


def split_csv(value: str | None) -> list[str]:
    """Split on commas, trimming whitespace and dropping empty segments."""
    if value is None:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def field_names_selector(field_names: str | Iterable[str] | FieldNameSelector) -> FieldNameSelector:
    """Normalize a field name, several field names, or a selector into a selector."""
    if callable(field_names):
        return field_names
    if isinstance(field_names, str):
        names: tuple[str, ...] = (field_names,)
    else:
        names = tuple(field_names)
    return lambda _value: names


def convert(parameter_name: str, value: str, converter: Callable[[str], Any]) -> Any:
    """Run a caller supplied converter, reporting conversion failures as bad parameters."""
    try:
        return converter(value)
    except InvalidRequest:
        raise
    except (ValueError, TypeError) as e:
        raise InvalidRequest.bad_parameter(parameter_name, value, str(e)) from e
