"""
Error taxonomy for Vulcan.

Three kinds of failure are kept apart:

- InvalidRequest: the client sent something we cannot use (bad syntax,
  rule violation, a parameter repeated too often). Surfaces as HTTP 400.
- CircuitBreak: not an error. A well formed parameter that can never match
  anything. It is a plain value returned by mappings, and the request
  context turns it into an empty result.
- ConfigurationError: the caller wired Vulcan up incorrectly. Never caught
  per request.
"""

from __future__ import annotations

from dataclasses import dataclass


class InvalidRequest(ValueError):
    """The request cannot be processed, e.g. a date that cannot be parsed."""

    @classmethod
    def because(cls, message: str, *args: object) -> InvalidRequest:
        """Create a new exception, formatting the message with %-style args."""
        return cls(message % args if args else message)

    @classmethod
    def bad_parameter(cls, parameter: str, value: str | None, message: str) -> InvalidRequest:
        """Create a new exception for bad value, like a number that cannot be parsed."""
        return cls(f"bad parameter: {parameter} = {value} : {message}")

    @classmethod
    def no_parameters_specified(cls) -> InvalidRequest:
        return cls("No parameters specified.")

    @classmethod
    def repeated_too_many_times(cls, parameter: str, maximum: int, actual: int) -> InvalidRequest:
        """Create a new exception for a parameter that has been repeated too much."""
        return cls(
            f"{parameter} specified too many times ({actual}), up to {maximum} is allowed"
        )


class ConfigurationError(RuntimeError):
    """Vulcan was configured incorrectly, e.g. a token behavior is missing a handler."""


@dataclass(frozen=True)
class CircuitBreak:
    """
    Signal that a parameter guarantees zero matches.

    Mappings return this instead of a filter fragment. It is never AND'ed or
    OR'ed with other fragments: the first one seen aborts the whole search.
    """

    reason: str

    @classmethod
    def no_results_will_be_found(cls, parameter: str, value: str | None, message: str) -> CircuitBreak:
        return cls(f"No results will be found for {parameter} = {value} : {message}")

    def __str__(self) -> str:
        return self.reason
