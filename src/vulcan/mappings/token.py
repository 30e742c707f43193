"""
Token mappings.

Each takes a ``supported_token`` predicate. Tokens the caller does not
recognize (an unknown system, an unmapped code) are well formed but can never
match, so they produce a CircuitBreak rather than an error.

    TokenMapping               one token, values looked up per token
    TokenSpecificationMapping  CSV of tokens, fragments from a caller function
    TokenCsvListMapping        CSV of tokens, values looked up per token
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from ..errors import CircuitBreak
from ..filters.predicates import Predicate, any_of, select_in_list
from ..parameters.token import TokenParameter
from ..request import SearchRequest
from .base import MappingResult, SingleParameterMapping, split_csv

logger = logging.getLogger("vulcan.mappings.token")

SupportedToken = Callable[[TokenParameter], bool]
TokenFieldSelector = Callable[[TokenParameter], Collection[str]]
TokenValueSelector = Callable[[TokenParameter], Collection[str]]
TokenPredicate = Callable[[TokenParameter], "Predicate | CircuitBreak | None"]


def _fields_and_values(
    token: TokenParameter,
    field_name_selector: TokenFieldSelector,
    value_selector: TokenValueSelector,
) -> Predicate | None:
    values = value_selector(token)
    return any_of(select_in_list(name, values) for name in field_name_selector(token))


@dataclass(frozen=True)
class TokenMapping(SingleParameterMapping):
    """
    ``?food=http://food.com|TACOS`` style searches on a single token.

    Attributes:
        parameter_name: Request parameter
        supported_token: Predicate deciding whether the token can match anything
        field_name_selector: Fields to search for the token, any of which may match
        value_selector: Values stored in those fields for the token
    """

    parameter_name: str
    supported_token: SupportedToken = field(repr=False)
    field_name_selector: TokenFieldSelector = field(repr=False)
    value_selector: TokenValueSelector = field(repr=False)

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        value = request.parameter(self.parameter_name)
        token = TokenParameter.parse(self.parameter_name, value)
        if not self.supported_token(token):
            return CircuitBreak.no_results_will_be_found(
                self.parameter_name, value, "Token is not supported."
            )
        if not self.field_name_selector(token):
            return CircuitBreak.no_results_will_be_found(
                self.parameter_name, value, "No database field defined."
            )
        predicate = _fields_and_values(token, self.field_name_selector, self.value_selector)
        if predicate is None:
            return CircuitBreak.no_results_will_be_found(
                self.parameter_name, value, "No values map to this token."
            )
        return predicate


@dataclass(frozen=True)
class TokenSpecificationMapping(SingleParameterMapping):
    """
    CSV list of tokens where the caller builds each token's fragment, typically
    with ``token.behavior()``.

    Unsupported tokens are dropped. A token whose fragment is a CircuitBreak
    cannot match, so it is dropped as well. The remaining fragments are
    combined with OR; if nothing remains no result can be found.
    """

    parameter_name: str
    supported_token: SupportedToken = field(repr=False)
    to_predicate: TokenPredicate = field(repr=False)

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        value = request.parameter(self.parameter_name)
        tokens = [TokenParameter.parse(self.parameter_name, t) for t in split_csv(value)]
        fragments = []
        for token in tokens:
            if not self.supported_token(token):
                logger.debug(f"[TOKEN] {self.parameter_name} ignoring {token.serialize()}")
                continue
            fragment = self.to_predicate(token)
            if isinstance(fragment, CircuitBreak):
                logger.debug(f"[TOKEN] {self.parameter_name} {token.serialize()}: {fragment}")
                continue
            fragments.append(fragment)
        if not fragments:
            return CircuitBreak.no_results_will_be_found(
                self.parameter_name, value, "No supported tokens were specified."
            )
        return any_of(fragments)


@dataclass(frozen=True)
class TokenCsvListMapping(SingleParameterMapping):
    """CSV list of tokens, e.g. ``?foodList=TACOS,http://food.com|NACHOS``, combined with OR."""

    parameter_name: str
    supported_token: SupportedToken = field(repr=False)
    field_name_selector: Callable[[TokenParameter], str] = field(repr=False)
    value_selector: TokenValueSelector = field(repr=False)

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        value = request.parameter(self.parameter_name)
        tokens = [TokenParameter.parse(self.parameter_name, t) for t in split_csv(value)]
        predicate = any_of(
            select_in_list(self.field_name_selector(token), self.value_selector(token))
            for token in tokens
            if self.supported_token(token)
        )
        if predicate is None:
            return CircuitBreak.no_results_will_be_found(
                self.parameter_name, value, "No supported tokens were specified."
            )
        return predicate
