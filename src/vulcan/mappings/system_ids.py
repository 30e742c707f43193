"""
Shortcuts for tokens whose system decides which field holds the code.

Example:
    ids = (
        SystemIdFields()
        .add("http://food.com", "food")
        .add("http://base.com", "base", str.upper)
    )
    Mappings().tokens(
        "foodOrBase",
        lambda t: t.has_explicit_system(),
        lambda t: t.behavior()
            .on_explicit_system_and_explicit_code(ids.match_system_and_code())
            .on_explicit_system_and_any_code(ids.match_system_only())
            .execute(),
    )
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import CircuitBreak
from ..filters.predicates import Predicate, select, select_not_null

SystemAndCodeHandler = Callable[[str, str], "Predicate | CircuitBreak"]
SystemOnlyHandler = Callable[[str], "Predicate | CircuitBreak"]


@dataclass(frozen=True)
class SystemIdField:
    """One system, either mapped to a field or handled by a custom function."""

    system: str
    field_name: str | None = None
    converter: Callable[[str], object] | None = field(default=None, repr=False)
    custom: SystemAndCodeHandler | None = field(default=None, repr=False)

    def with_system_and_code(self, system: str, code: str) -> Predicate | CircuitBreak:
        if self.custom is not None:
            return self.custom(system, code)
        value = self.converter(code) if self.converter is not None else code
        return select(self.field_name, value)

    def with_system(self, system: str) -> Predicate | CircuitBreak:
        if self.field_name is None:
            return CircuitBreak.no_results_will_be_found(
                "system", system, "System has no field to search."
            )
        return select_not_null(self.field_name)


@dataclass(frozen=True)
class SystemIdFields:
    """Ordered system to field mappings. ``add`` returns a new instance."""

    fields: tuple[SystemIdField, ...] = ()

    def add(
        self,
        system: str,
        field_name: str,
        converter: Callable[[str], object] | None = None,
    ) -> SystemIdFields:
        """Codes of this system are stored in field_name, optionally converted first."""
        mapping = SystemIdField(system=system, field_name=field_name, converter=converter)
        return SystemIdFields(fields=(*self.fields, mapping))

    def add_with_custom_system_and_code_handler(
        self, system: str, field_name: str, handler: SystemAndCodeHandler
    ) -> SystemIdFields:
        """Codes of this system are matched by handler; system-only searches use field_name."""
        mapping = SystemIdField(system=system, field_name=field_name, custom=handler)
        return SystemIdFields(fields=(*self.fields, mapping))

    def _find(self, system: str) -> SystemIdField | None:
        for mapping in self.fields:
            if mapping.system == system:
                return mapping
        return None

    def match_system_and_code(self) -> SystemAndCodeHandler:
        def handler(system: str, code: str) -> Predicate | CircuitBreak:
            mapping = self._find(system)
            if mapping is None:
                return CircuitBreak.no_results_will_be_found("system", system, "Unknown system.")
            return mapping.with_system_and_code(system, code)

        return handler

    def match_system_only(self) -> SystemOnlyHandler:
        def handler(system: str) -> Predicate | CircuitBreak:
            mapping = self._find(system)
            if mapping is None:
                return CircuitBreak.no_results_will_be_found("system", system, "Unknown system.")
            return mapping.with_system(system)

        return handler
