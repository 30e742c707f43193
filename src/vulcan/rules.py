"""
Standard rules for request validation.

A rule inspects the parameter names of a request and raises InvalidRequest if
they are not acceptable. Rules run before any mapping, in declaration order,
and the first failure stops the request.

Rules are aware of FHIR style modifiers: ``name:exact`` counts as ``name``
being specified.

Example:
    rules = [
        rules.at_least_one_parameter_of("patient", "_id"),
        rules.parameters_never_specified_together("patient", "_id"),
        rules.if_parameter("name").then_allow_only_known_modifiers("text"),
        rules.forbid_unknown_parameters(),
    ]
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InvalidRequest
from .request import SearchRequest, is_blank, is_modified_parameter

if TYPE_CHECKING:
    from .core.configuration import VulcanConfiguration


@dataclass(frozen=True)
class RuleContext:
    """What a rule may look at. Rules never see predicates or field names."""

    config: VulcanConfiguration
    request: SearchRequest


Rule = Callable[[RuleContext], None]


def _is_modified_version_of(parameter: str, base_parameter: str) -> bool:
    return parameter.startswith(base_parameter + ":")


def _is_parameter_or_modified_parameter_specified(
    specified_parameters: Collection[str], parameter: str
) -> bool:
    if parameter in specified_parameters:
        return True
    return any(_is_modified_version_of(p, parameter) for p in specified_parameters)


def _count_specified(specified_parameters: Collection[str], parameters: tuple[str, ...]) -> int:
    return sum(
        1 for p in parameters if _is_parameter_or_modified_parameter_specified(specified_parameters, p)
    )


def at_least_one_parameter_of(*parameters: str) -> Rule:
    """Requires that at least one of the parameters be specified."""

    def rule(ctx: RuleContext) -> None:
        if _count_specified(ctx.request.parameter_names(), parameters) == 0:
            raise InvalidRequest.because("At least one of %s must be specified", list(parameters))

    return rule


def forbidden_parameters(*parameters: str) -> Rule:
    """Requires that none of these parameters, modified or not, be specified."""

    def rule(ctx: RuleContext) -> None:
        specified = ctx.request.parameter_names()
        for p in parameters:
            if p in specified:
                raise InvalidRequest.because("No parameter of %s can be specified", list(parameters))
            for name in specified:
                if _is_modified_version_of(name, p):
                    raise InvalidRequest.because(
                        "No parameter of %s can be specified. Found modified parameter %s",
                        list(parameters),
                        name,
                    )

    return rule


def parameters_always_specified_together(*parameters: str) -> Rule:
    """Requires parameters be specified together, e.g. latitude and longitude."""

    def rule(ctx: RuleContext) -> None:
        specified = _count_specified(ctx.request.parameter_names(), parameters)
        if 0 < specified != len(parameters):
            raise InvalidRequest.because(
                "Parameters %s must be specified together", list(parameters)
            )

    return rule


def parameters_never_specified_together(*parameters: str) -> Rule:
    """Prevents more than one of the parameters being specified."""

    def rule(ctx: RuleContext) -> None:
        if _count_specified(ctx.request.parameter_names(), parameters) > 1:
            raise InvalidRequest.because(
                "Parameters %s cannot be specified together", list(parameters)
            )

    return rule


def forbid_unknown_parameters() -> Rule:
    """
    Requires that all parameters be known.

    Known parameters are those supported by some mapping, any extra declared
    parameters, and the paging and sort parameters. Modified parameters are
    left to ``if_parameter(...).then_allow_only_known_modifiers``.
    """

    def rule(ctx: RuleContext) -> None:
        known = ctx.config.supported_parameters()
        paging = ctx.config.paging
        unknown = [
            p
            for p in ctx.request.parameter_names()
            if not paging.is_paging_related_parameter(p)
            and p != paging.sort_parameter
            and p not in known
            and not is_modified_parameter(p)
        ]
        if unknown:
            raise InvalidRequest.because("Unknown parameters %s, expecting %s", unknown, known)

    return rule


def if_parameter(parameter: str) -> IfParameterRuleBuilder:
    """Start a rule that only applies when ``parameter`` is specified."""
    return IfParameterRuleBuilder(parameter)


@dataclass(frozen=True)
class IfParameterRuleBuilder:
    parameter: str

    def then_allow_only_known_modifiers(self, *additional_supported_modifiers: str) -> Rule:
        """
        Forbid unknown modifiers of the parameter.

        Known modifiers come from the mappings' supported parameter names plus
        any given here.
        """
        base = self.parameter

        def rule(ctx: RuleContext) -> None:
            allowed = {
                p for p in ctx.config.supported_parameters() if _is_modified_version_of(p, base)
            }
            allowed.update(f"{base}:{m}" for m in additional_supported_modifiers)
            for p in ctx.request.parameter_names():
                if _is_modified_version_of(p, base) and p not in allowed:
                    raise InvalidRequest.bad_parameter(
                        p, ctx.request.parameter(p), "Modifier not allowed."
                    )

        return rule

    def then_also_at_least_one_parameter_of(self, *required_parameters: str) -> Rule:
        """Require at least one of the given parameters whenever this one is given."""
        required = at_least_one_parameter_of(*required_parameters)

        def rule(ctx: RuleContext) -> None:
            if not is_blank(ctx.request.parameter(self.parameter)):
                required(ctx)

        return rule

    def then_forbid_parameters(self, *forbidden: str) -> Rule:
        """Forbid the given parameters whenever this one is given."""
        forbid = forbidden_parameters(*forbidden)

        def rule(ctx: RuleContext) -> None:
            if not is_blank(ctx.request.parameter(self.parameter)):
                forbid(ctx)

        return rule
