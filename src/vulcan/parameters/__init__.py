"""
Typed parsers for FHIR search parameter values.

- token:     system|code
- date:      [prefix]YYYY[-MM][-DD]['T'HH:MM:SS][zone]
- reference: absolute URL, Type/id, param:Type=id or bare id
"""

from .date import (
    DateApproximation,
    DateFidelity,
    DateOperator,
    FixedAmountDateApproximation,
    SearchableDate,
    default_graduated_approximation,
)
from .reference import (
    DEFAULT_FORMATS,
    AbsoluteUrlFormat,
    ReferenceFormat,
    ReferenceParameter,
    ReferenceParameterParser,
    RelativeUrlFormat,
    ResourceTypeAndValueFormat,
    ValueOnlyFormat,
    parse_reference,
)
from .token import TokenBehavior, TokenMode, TokenParameter

__all__ = [
    # Token
    "TokenParameter",
    "TokenMode",
    "TokenBehavior",
    # Date
    "SearchableDate",
    "DateOperator",
    "DateFidelity",
    "DateApproximation",
    "FixedAmountDateApproximation",
    "default_graduated_approximation",
    # Reference
    "ReferenceParameter",
    "ReferenceParameterParser",
    "ReferenceFormat",
    "AbsoluteUrlFormat",
    "RelativeUrlFormat",
    "ResourceTypeAndValueFormat",
    "ValueOnlyFormat",
    "DEFAULT_FORMATS",
    "parse_reference",
]
