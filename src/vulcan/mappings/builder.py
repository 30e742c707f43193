"""
Fluent builder for the common mapping types.

Example:
    mappings = (
        Mappings()
        .string("name")
        .string("foodOrBase", {"food", "base"})
        .value("millis", converter=to_epoch_millis)
        .date_as_instant("xdate", "date")
        .date_as_epoch_millis("ydate", "millis")
        .csv_list("food")
        .get()
    )

``get()`` returns an immutable tuple that can be shared across requests.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from datetime import tzinfo
from typing import Any

from ..parameters.reference import ReferenceParameter
from .base import FieldNameSelector, Mapping, field_names_selector
from .csv_list import CsvListMapping
from .date import (
    DateMapping,
    DatePredicateFactory,
    EpochMillisPredicateFactory,
    InstantPredicateFactory,
)
from .reference import ReferenceMapping
from .string import StringMapping
from .token import (
    SupportedToken,
    TokenCsvListMapping,
    TokenMapping,
    TokenPredicate,
    TokenSpecificationMapping,
    TokenValueSelector,
)
from .value import FieldValueConverter, ValueMapping, single_field_value


class Mappings:
    """Accumulates mappings in declaration order."""

    def __init__(self) -> None:
        self._mappings: list[Mapping] = []

    def add(self, mapping: Mapping) -> Mappings:
        """Add any mapping."""
        self._mappings.append(mapping)
        return self

    def get(self) -> tuple[Mapping, ...]:
        return tuple(self._mappings)

    def csv_list(self, parameter_name: str, field_name: str | None = None) -> Mappings:
        """CSV list mapping. The field defaults to the parameter name."""
        return self.add(CsvListMapping(parameter_name, field_name or parameter_name))

    def date(
        self,
        parameter_name: str,
        field_name: str,
        predicates: DatePredicateFactory,
        zone: tzinfo | None = None,
    ) -> Mappings:
        """Date mapping with a custom predicate factory for precise control of the comparison."""
        return self.add(DateMapping(parameter_name, field_name, predicates, zone))

    def date_as_instant(
        self, parameter_name: str, field_name: str | None = None, zone: tzinfo | None = None
    ) -> Mappings:
        """Date mapping for datetime fields with the default graduated approximation."""
        return self.date(
            parameter_name, field_name or parameter_name, InstantPredicateFactory(), zone
        )

    def date_as_epoch_millis(
        self, parameter_name: str, field_name: str | None = None, zone: tzinfo | None = None
    ) -> Mappings:
        """Date mapping for integer epoch millisecond fields."""
        return self.date(
            parameter_name, field_name or parameter_name, EpochMillisPredicateFactory(), zone
        )

    def string(
        self,
        parameter_name: str,
        field_names: str | Iterable[str] | FieldNameSelector | None = None,
    ) -> Mappings:
        """
        String mapping.

        Args:
            parameter_name: Request parameter
            field_names: A field, several fields (any may match) or a selector
                from the value to fields. Defaults to the parameter name.
        """
        return self.add(
            StringMapping(parameter_name, field_names_selector(field_names or parameter_name))
        )

    def token(
        self,
        parameter_name: str,
        supported_token: SupportedToken,
        value_selector: TokenValueSelector,
        field_names: str | Iterable[str] | Callable[[Any], Collection[str]] | None = None,
    ) -> Mappings:
        """Single token mapping. The field defaults to the parameter name."""
        return self.add(
            TokenMapping(
                parameter_name,
                supported_token,
                field_names_selector(field_names or parameter_name),
                value_selector,
            )
        )

    def tokens(
        self,
        parameter_name: str,
        supported_token: SupportedToken,
        to_predicate: TokenPredicate,
    ) -> Mappings:
        """CSV token list where the caller builds each token's fragment."""
        return self.add(TokenSpecificationMapping(parameter_name, supported_token, to_predicate))

    def token_list(
        self,
        parameter_name: str,
        supported_token: SupportedToken,
        value_selector: TokenValueSelector,
        field_name: str | Callable[[Any], str] | None = None,
    ) -> Mappings:
        """CSV token list, each token selecting values on one field."""
        field_name = field_name or parameter_name
        if isinstance(field_name, str):
            name = field_name

            def selector(_token: Any) -> str:
                return name

        else:
            selector = field_name
        return self.add(
            TokenCsvListMapping(parameter_name, supported_token, selector, value_selector)
        )

    def reference(
        self,
        parameter_name: str,
        field_names: str | Iterable[str] | Callable[[ReferenceParameter], Collection[str]],
        allowed_reference_types: Collection[str],
        default_resource_type: str | None = None,
        is_supported: Callable[[ReferenceParameter], bool] | None = None,
        value_selector: Callable[[ReferenceParameter], str] | None = None,
    ) -> Mappings:
        """
        Reference mapping.

        Args:
            parameter_name: Base request parameter
            field_names: Field(s) holding the referenced id, or a selector
            allowed_reference_types: Resource types the parameter may refer to
            default_resource_type: Type used for bare values
            is_supported: False for references that can never match
            value_selector: Stored value for a reference (default: public id)
        """
        options: dict[str, Any] = {}
        if is_supported is not None:
            options["is_supported"] = is_supported
        if value_selector is not None:
            options["value_selector"] = value_selector
        return self.add(
            ReferenceMapping(
                parameter_name=parameter_name,
                default_resource_type=default_resource_type,
                allowed_reference_types=frozenset(allowed_reference_types),
                field_name_selector=field_names_selector(field_names),
                **options,
            )
        )

    def value(
        self,
        parameter_name: str,
        field_name: str | None = None,
        converter: Callable[[str], Any] | None = None,
    ) -> Mappings:
        """Equality on one field, optionally converting the raw value first."""
        return self.add(
            ValueMapping(parameter_name, single_field_value(field_name or parameter_name, converter))
        )

    def values(self, parameter_name: str, converter: FieldValueConverter) -> Mappings:
        """Equality on every field the converter produces, combined with AND."""
        return self.add(ValueMapping(parameter_name, converter))
