"""
FHIR token search parameters.

See http://hl7.org/fhir/R4/search.html#token

    code            any system, explicit code
    system|         explicit system, any code
    system|code     explicit system, explicit code
    |code           no system, explicit code

Consumers should handle every mode. ``token.behavior()`` builds a dispatcher
with one handler per mode; running it against a mode without a handler is a
configuration error.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, TypeVar

from ..errors import ConfigurationError, InvalidRequest
from ..request import is_blank

T = TypeVar("T")


class TokenMode(str, Enum):
    """How system and code were specified."""

    ANY_SYSTEM_EXPLICIT_CODE = "ANY_SYSTEM_EXPLICIT_CODE"  # e.g. cool
    EXPLICIT_SYSTEM_ANY_CODE = "EXPLICIT_SYSTEM_ANY_CODE"  # e.g. http://fonzy.com|
    EXPLICIT_SYSTEM_EXPLICIT_CODE = "EXPLICIT_SYSTEM_EXPLICIT_CODE"  # e.g. http://fonzy.com|cool
    NO_SYSTEM_EXPLICIT_CODE = "NO_SYSTEM_EXPLICIT_CODE"  # e.g. |cool


def _as_strings(values: tuple[object, ...]) -> list[str]:
    return [v.value if isinstance(v, Enum) else str(v) for v in values]


@dataclass(frozen=True)
class TokenParameter:
    """A parsed token value."""

    mode: TokenMode
    system: str | None = None
    code: str | None = None

    @classmethod
    def parse(cls, parameter_name: str, value: str | None) -> TokenParameter:
        """Create a TokenParameter from a token search parameter value."""
        if is_blank(value) or value == "|":
            raise InvalidRequest.bad_parameter(
                parameter_name, value, "Expected value, system|value, |value, or system|"
            )
        if value.startswith("|"):
            return cls(mode=TokenMode.NO_SYSTEM_EXPLICIT_CODE, code=value[1:])
        if value.endswith("|"):
            return cls(mode=TokenMode.EXPLICIT_SYSTEM_ANY_CODE, system=value[:-1])
        if "|" in value:
            system, code = value.split("|", 1)
            return cls(mode=TokenMode.EXPLICIT_SYSTEM_EXPLICIT_CODE, system=system, code=code)
        return cls(mode=TokenMode.ANY_SYSTEM_EXPLICIT_CODE, code=value)

    def serialize(self) -> str:
        """The raw parameter text this token was (or would be) parsed from."""
        if self.mode is TokenMode.NO_SYSTEM_EXPLICIT_CODE:
            return f"|{self.code}"
        if self.mode is TokenMode.EXPLICIT_SYSTEM_ANY_CODE:
            return f"{self.system}|"
        if self.mode is TokenMode.EXPLICIT_SYSTEM_EXPLICIT_CODE:
            return f"{self.system}|{self.code}"
        return self.code or ""

    def behavior(self) -> TokenBehavior:
        """Start building a per-mode dispatcher for this token."""
        return TokenBehavior(token=self)

    def has_any_code(self) -> bool:
        return self.mode is TokenMode.EXPLICIT_SYSTEM_ANY_CODE

    def has_any_system(self) -> bool:
        return self.mode is TokenMode.ANY_SYSTEM_EXPLICIT_CODE

    def has_explicit_code(self) -> bool:
        return self.mode is not TokenMode.EXPLICIT_SYSTEM_ANY_CODE

    def has_explicit_system(self) -> bool:
        return self.mode in (
            TokenMode.EXPLICIT_SYSTEM_ANY_CODE,
            TokenMode.EXPLICIT_SYSTEM_EXPLICIT_CODE,
        )

    def has_explicitly_no_system(self) -> bool:
        return self.mode is TokenMode.NO_SYSTEM_EXPLICIT_CODE

    def has_supported_code(self, *supported_codes: str | Enum) -> bool:
        """True if the code equals one of the given codes (enum members compare by value)."""
        return self.code in _as_strings(supported_codes)

    def has_supported_system(self, *supported_systems: str) -> bool:
        return self.system in supported_systems

    def is_code_explicit_and_unsupported(self, *supported_codes: str | Enum) -> bool:
        return self.has_explicit_code() and not self.has_supported_code(*supported_codes)

    def is_code_explicitly_set_and_one_of(self, *supported_codes: str | Enum) -> bool:
        return self.has_explicit_code() and self.has_supported_code(*supported_codes)

    def is_system_explicit_and_unsupported(self, *supported_systems: str) -> bool:
        return self.has_explicit_system() and not self.has_supported_system(*supported_systems)

    def is_system_explicitly_set_and_one_of(self, *supported_systems: str) -> bool:
        return self.has_explicit_system() and self.has_supported_system(*supported_systems)


@dataclass(frozen=True)
class TokenBehavior(Generic[T]):
    """
    Fluent dispatcher with one handler slot per token mode.

    Example:
        token.behavior()
            .on_explicit_system_and_explicit_code(lambda s, c: select("food", c))
            .on_any_system_and_explicit_code(lambda c: select("food", c))
            .on_no_system_and_explicit_code(lambda c: select("food", c))
            .on_explicit_system_and_any_code(lambda s: select_not_null("food"))
            .execute()
    """

    token: TokenParameter
    any_system_and_explicit_code: Callable[[str], T] | None = None
    explicit_system_and_any_code: Callable[[str], T] | None = None
    explicit_system_and_explicit_code: Callable[[str, str], T] | None = None
    no_system_and_explicit_code: Callable[[str], T] | None = None

    def on_any_system_and_explicit_code(self, handler: Callable[[str], T]) -> TokenBehavior[T]:
        return replace(self, any_system_and_explicit_code=handler)

    def on_explicit_system_and_any_code(self, handler: Callable[[str], T]) -> TokenBehavior[T]:
        return replace(self, explicit_system_and_any_code=handler)

    def on_explicit_system_and_explicit_code(
        self, handler: Callable[[str, str], T]
    ) -> TokenBehavior[T]:
        return replace(self, explicit_system_and_explicit_code=handler)

    def on_no_system_and_explicit_code(self, handler: Callable[[str], T]) -> TokenBehavior[T]:
        return replace(self, no_system_and_explicit_code=handler)

    def _check(self, handler: Callable[..., T] | None) -> Callable[..., T]:
        if handler is None:
            raise ConfigurationError(f"no handler specified for {self.token.mode.value}")
        return handler

    def execute(self) -> T:
        """Run the handler matching the token's mode."""
        token = self.token
        if token.mode is TokenMode.ANY_SYSTEM_EXPLICIT_CODE:
            return self._check(self.any_system_and_explicit_code)(token.code)
        if token.mode is TokenMode.EXPLICIT_SYSTEM_ANY_CODE:
            return self._check(self.explicit_system_and_any_code)(token.system)
        if token.mode is TokenMode.EXPLICIT_SYSTEM_EXPLICIT_CODE:
            return self._check(self.explicit_system_and_explicit_code)(token.system, token.code)
        if token.mode is TokenMode.NO_SYSTEM_EXPLICIT_CODE:
            return self._check(self.no_system_and_explicit_code)(token.code)
        raise ConfigurationError(f"TokenParameter in unsupported mode: {token.mode}")
