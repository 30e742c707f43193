"""
The search request as Vulcan sees it.

Only two things are consumed from an inbound HTTP request: the URL it was
made against (used to build paging links) and its multi-valued query
parameters. Everything else about HTTP belongs to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlsplit, urlunsplit


def is_blank(value: str | None) -> bool:
    """True if the value is None, empty or only whitespace."""
    return value is None or not value.strip()


def is_modified_parameter(parameter: str) -> bool:
    """True for FHIR style modified parameters, e.g. ``name:exact``."""
    return parameter.find(":") > 0


@dataclass(frozen=True)
class SearchRequest:
    """
    Request URL plus query parameters.

    Attributes:
        url: Scheme, host and path of the request, without a query string.
        parameters: Parameter name to every value given for it, in request order.
    """

    url: str = ""
    parameters: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_query_string(cls, url: str, query_string: str) -> SearchRequest:
        """Parse a raw query string. Blank values are kept, e.g. ``?name=``."""
        parameters: dict[str, list[str]] = {}
        for name, value in parse_qsl(query_string, keep_blank_values=True):
            parameters.setdefault(name, []).append(value)
        return cls(url=url, parameters=parameters)

    @classmethod
    def from_url(cls, url: str) -> SearchRequest:
        """Split a full URL into its base and its query parameters."""
        parts = urlsplit(url)
        base = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        return cls.from_query_string(base, parts.query)

    @classmethod
    def of(cls, url: str = "", **parameters: str | list[str]) -> SearchRequest:
        """Convenience constructor, mostly for tests and scripts."""
        return cls(
            url=url,
            parameters={
                name: list(value) if isinstance(value, list) else [value]
                for name, value in parameters.items()
            },
        )

    def parameter(self, name: str) -> str | None:
        """First value of the parameter, or None if it was not given."""
        values = self.parameters.get(name)
        if not values:
            return None
        return values[0]

    def parameter_values(self, name: str) -> list[str]:
        return list(self.parameters.get(name, []))

    def parameter_names(self) -> list[str]:
        return list(self.parameters)

    def has_parameter(self, name: str) -> bool:
        return name in self.parameters
