"""Comma separated list of values, e.g. ``?food=TACOS,NACHOS`` -> food IN (TACOS, NACHOS)."""

from __future__ import annotations

from dataclasses import dataclass

from ..filters.predicates import select_in_list
from ..request import SearchRequest
from .base import MappingResult, SingleParameterMapping, split_csv


@dataclass(frozen=True)
class CsvListMapping(SingleParameterMapping):
    parameter_name: str
    field_name: str

    def predicate_for(self, request: SearchRequest) -> MappingResult:
        return select_in_list(self.field_name, split_csv(request.parameter(self.parameter_name)))
