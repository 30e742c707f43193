"""
FHIR reference search parameters.

See http://hl7.org/fhir/R4/search.html#reference

A reference can be written several ways. Formats are tried in priority order
and the first one that recognizes the value wins:

    AbsoluteUrl           ?subject=https://example.com/fhir/Patient/123
    RelativeUrl           ?subject=Patient/123
    ResourceTypeAndValue  ?subject:Patient=123
    ValueOnly             ?patient=123  (default resource type)
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urlsplit

from ..errors import InvalidRequest
from ..request import is_blank

_RELATIVE_URL = re.compile(r"[A-Za-z]+/[A-Za-z0-9\-.]+")
_TYPE_MODIFIER = re.compile(r"[A-Za-z-]+:[A-Za-z]+")


@dataclass(frozen=True)
class ReferenceParameter:
    """A parsed reference value."""

    parameter_name: str
    value: str
    type: str
    public_id: str
    url: str | None = None


@dataclass(frozen=True)
class ReferenceRequest:
    """What a format needs to know to attempt a parse."""

    parameter_name: str
    parameter_value: str
    allowed_reference_types: frozenset[str]
    default_resource_type: str | None


class ReferenceFormat(Protocol):
    """One way of writing a reference. Returns None if the value is not in this format."""

    def help(self) -> str: ...

    def try_parse(self, request: ReferenceRequest) -> ReferenceParameter | None: ...


class AbsoluteUrlFormat:
    def help(self) -> str:
        return "AbsoluteUrl format: ?param=http(s)://reference.com/ReferencePath/ReferenceResource/123"

    def try_parse(self, request: ReferenceRequest) -> ReferenceParameter | None:
        value = request.parameter_value
        if not value.startswith("http"):
            return None
        parts = urlsplit(value)
        segments = [s for s in parts.path.split("/") if s]
        if parts.scheme not in ("http", "https") or not parts.netloc or len(segments) < 2:
            raise InvalidRequest.bad_parameter(
                request.parameter_name, value, "Reference URL is not parsable."
            )
        return ReferenceParameter(
            parameter_name=request.parameter_name,
            value=value,
            type=segments[-2],
            public_id=segments[-1],
            url=value,
        )


class RelativeUrlFormat:
    def help(self) -> str:
        return "RelativeUrl format: ?parameter=ReferenceResource/id"

    def try_parse(self, request: ReferenceRequest) -> ReferenceParameter | None:
        value = request.parameter_value
        if not _RELATIVE_URL.fullmatch(value):
            return None
        resource_type, public_id = value.split("/", 1)
        return ReferenceParameter(
            parameter_name=request.parameter_name,
            value=value,
            type=resource_type,
            public_id=public_id,
        )


class ResourceTypeAndValueFormat:
    def help(self) -> str:
        return "ResourceTypeAndValue format: ?param:ReferencedResource=id"

    def try_parse(self, request: ReferenceRequest) -> ReferenceParameter | None:
        if not _TYPE_MODIFIER.fullmatch(request.parameter_name):
            return None
        return ReferenceParameter(
            parameter_name=request.parameter_name,
            value=request.parameter_value,
            type=request.parameter_name.split(":", 1)[1],
            public_id=request.parameter_value,
        )


class ValueOnlyFormat:
    def help(self) -> str:
        return "ValueOnly format: ?resource=id"

    def try_parse(self, request: ReferenceRequest) -> ReferenceParameter | None:
        if len(request.allowed_reference_types) > 1:
            raise InvalidRequest.bad_parameter(
                request.parameter_name,
                request.parameter_value,
                "Reference type is ambiguous, one of "
                f"{sorted(request.allowed_reference_types)} is allowed. "
                f"Use {request.parameter_name}:ResourceType={request.parameter_value}",
            )
        resource_type = request.default_resource_type
        if resource_type is None and request.allowed_reference_types:
            (resource_type,) = request.allowed_reference_types
        if resource_type is None:
            return None
        return ReferenceParameter(
            parameter_name=request.parameter_name,
            value=request.parameter_value,
            type=resource_type,
            public_id=request.parameter_value,
        )


DEFAULT_FORMATS: tuple[ReferenceFormat, ...] = (
    AbsoluteUrlFormat(),
    RelativeUrlFormat(),
    ResourceTypeAndValueFormat(),
    ValueOnlyFormat(),
)


@dataclass(frozen=True)
class ReferenceParameterParser:
    """
    Parse reference values, checking the resolved type against the allowed set.

    Attributes:
        allowed_reference_types: Resource types the parameter may refer to
        default_resource_type: Type used for bare ``?param=id`` values
        formats: Formats in priority order
    """

    allowed_reference_types: frozenset[str] = frozenset()
    default_resource_type: str | None = None
    formats: Sequence[ReferenceFormat] = field(default=DEFAULT_FORMATS)

    def parse(self, parameter_name: str, parameter_value: str | None) -> ReferenceParameter:
        """
        Create a ReferenceParameter from a reference search parameter.

        Raises:
            InvalidRequest: If the value is blank, no format accepts it, or the
                resolved type is not allowed
        """
        if is_blank(parameter_value):
            raise InvalidRequest.no_parameters_specified()
        request = ReferenceRequest(
            parameter_name=parameter_name,
            parameter_value=parameter_value,
            allowed_reference_types=frozenset(self.allowed_reference_types),
            default_resource_type=self.default_resource_type,
        )
        help_text: list[str] = []
        for reference_format in self.formats:
            reference = reference_format.try_parse(request)
            if reference is not None:
                self._check_type(reference)
                return reference
            help_text.append(reference_format.help())
        raise InvalidRequest.because(
            "Reference parameter not parsable. Use one of the following formats: %s", help_text
        )

    def _check_type(self, reference: ReferenceParameter) -> None:
        if self.allowed_reference_types and reference.type not in self.allowed_reference_types:
            raise InvalidRequest.because(
                "Reference type [%s] is not legal for %s. Allowed types are: %s",
                reference.type,
                reference.parameter_name,
                sorted(self.allowed_reference_types),
            )


def parse_reference(
    parameter_name: str,
    parameter_value: str | None,
    allowed_reference_types: Collection[str] = (),
    default_resource_type: str | None = None,
) -> ReferenceParameter:
    """Parse a reference using the default formats."""
    return ReferenceParameterParser(
        allowed_reference_types=frozenset(allowed_reference_types),
        default_resource_type=default_resource_type,
    ).parse(parameter_name, parameter_value)
