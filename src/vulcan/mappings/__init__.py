"""
Mappings from request parameters to filter fragments.

Use the ``Mappings`` builder for the common kinds, or implement the
``Mapping`` protocol directly for anything else.
"""

from .base import Mapping, MappingResult, SingleParameterMapping, split_csv
from .builder import Mappings
from .csv_list import CsvListMapping
from .date import DateMapping, DatePredicateFactory, EpochMillisPredicateFactory, InstantPredicateFactory
from .reference import ReferenceMapping
from .string import StringMapping
from .system_ids import SystemIdField, SystemIdFields
from .token import TokenCsvListMapping, TokenMapping, TokenSpecificationMapping
from .value import ValueMapping, single_field_value

__all__ = [
    "Mapping",
    "MappingResult",
    "SingleParameterMapping",
    "split_csv",
    "Mappings",
    "CsvListMapping",
    "DateMapping",
    "DatePredicateFactory",
    "InstantPredicateFactory",
    "EpochMillisPredicateFactory",
    "ReferenceMapping",
    "StringMapping",
    "SystemIdField",
    "SystemIdFields",
    "TokenMapping",
    "TokenSpecificationMapping",
    "TokenCsvListMapping",
    "ValueMapping",
    "single_field_value",
]
