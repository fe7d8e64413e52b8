"""Declarative field specifications.

A schema is a list of ``Field`` objects evaluated by one generic validation
routine (see ``_schema``)::

    Field("JWT_SECRET", Kind.STRING, constraints=(MinLength(32),), secret=True)
    Field("PORT", Kind.INTEGER, required=False, default=8000, constraints=(Range(1, 65535),))
    Field("NODE_ENV", Kind.ENUM, choices=("development", "test", "production"))
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from ._casters import Choices, cast_bool, cast_int, cast_url, parse_url
from ._types import UNDEFINED, SchemaError, Secret


class Kind(str, enum.Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    ENUM = "enum"
    URL = "url"


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------
#
# A constraint is a callable that raises ``ValueError`` when the coerced value
# violates it, and exposes ``expected`` for error reports.


class MinLength:
    def __init__(self, length: int) -> None:
        self.length = length

    @property
    def expected(self) -> str:
        return f"at least {self.length} characters"

    def __call__(self, value: str) -> None:
        if len(value) < self.length:
            raise ValueError(f"length {len(value)} is shorter than {self.length}")


class MaxLength:
    def __init__(self, length: int) -> None:
        self.length = length

    @property
    def expected(self) -> str:
        return f"at most {self.length} characters"

    def __call__(self, value: str) -> None:
        if len(value) > self.length:
            raise ValueError(f"length {len(value)} is longer than {self.length}")


class Prefix:
    """Require the value to start with one of the given prefixes."""

    def __init__(self, *prefixes: str) -> None:
        if not prefixes:
            raise SchemaError("Prefix() needs at least one prefix")
        self.prefixes = prefixes

    @property
    def expected(self) -> str:
        return "prefix " + " or ".join(repr(p) for p in self.prefixes)

    def __call__(self, value: str) -> None:
        if not value.startswith(self.prefixes):
            raise ValueError(f"value does not start with {self.expected}")


class Range:
    """Inclusive integer bounds; either side may be ``None``."""

    def __init__(self, minimum: int | None = None, maximum: int | None = None) -> None:
        self.minimum = minimum
        self.maximum = maximum

    @property
    def expected(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            return f"between {self.minimum} and {self.maximum}"
        if self.minimum is not None:
            return f">= {self.minimum}"
        return f"<= {self.maximum}"

    def __call__(self, value: int) -> None:
        if self.minimum is not None and value < self.minimum:
            raise ValueError(f"{value} is below {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            raise ValueError(f"{value} is above {self.maximum}")


class UrlScheme:
    """Restrict a URL field to the given schemes (compared lower-case)."""

    def __init__(self, *schemes: str) -> None:
        if not schemes:
            raise SchemaError("UrlScheme() needs at least one scheme")
        self.schemes = tuple(s.lower() for s in schemes)

    @property
    def expected(self) -> str:
        return "scheme " + " or ".join(repr(s) for s in self.schemes)

    def __call__(self, value: str) -> None:
        scheme = parse_url(value).scheme.lower()
        if scheme not in self.schemes:
            raise ValueError(f"scheme {scheme!r} is not allowed")


Constraint = Callable[[Any], None]


# ---------------------------------------------------------------------------
# Field / Derived
# ---------------------------------------------------------------------------

_EMPTY: dict[Kind, Any] = {
    Kind.STRING: "",
    Kind.BOOLEAN: False,
    Kind.INTEGER: None,
    Kind.ENUM: None,
    Kind.URL: None,
}

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_BASE_TYPES: dict[Kind, type] = {
    Kind.STRING: str,
    Kind.BOOLEAN: bool,
    Kind.INTEGER: int,
    Kind.ENUM: str,
    Kind.URL: str,
}


@dataclass(frozen=True)
class Field:
    """Specification for one environment variable."""

    name: str
    kind: Kind = Kind.STRING
    required: bool = True
    default: Any = UNDEFINED
    constraints: tuple[Constraint, ...] = ()
    choices: tuple[str, ...] = ()
    secret: bool = False
    requires: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not _NAME_RE.fullmatch(self.name):
            raise SchemaError(f"Invalid environment variable name {self.name!r}")
        if self.name.startswith("_"):
            raise SchemaError(f"Variable name {self.name!r} may not start with '_'")
        if self.kind is Kind.ENUM and not self.choices:
            raise SchemaError(f"Enum field {self.name!r} declares no choices")
        if self.kind is not Kind.ENUM and self.choices:
            raise SchemaError(f"Only enum fields take choices ({self.name!r})")
        if self.requires is not None and self.kind is not Kind.BOOLEAN:
            raise SchemaError(f"'requires' is only supported on boolean fields ({self.name!r})")
        if self.default is not UNDEFINED and self.default is not None:
            self._check_default()

    def _check_default(self) -> None:
        """Hold the declared default to the same rules as a raw value."""
        default = self.default
        base = _BASE_TYPES[self.kind]
        # bool is an int subclass; PORT=True is not a port.
        if not isinstance(default, base) or (base is int and isinstance(default, bool)):
            raise SchemaError(
                f"Default {default!r} of {self.name!r} is not a {self.kind.value}"
            )
        try:
            if self.kind in (Kind.ENUM, Kind.URL):
                self.cast(default)
            for constraint in self.constraints:
                constraint(default)
        except ValueError as exc:
            raise SchemaError(f"Default {default!r} of {self.name!r} is invalid: {exc}") from exc

    @property
    def attr(self) -> str:
        """Attribute name on the validated record."""
        return self.name.lower()

    @property
    def expected(self) -> str:
        if self.kind is Kind.ENUM:
            return "one of " + ", ".join(repr(c) for c in self.choices)
        return self.kind.value

    def cast(self, raw: str) -> Any:
        if self.kind is Kind.BOOLEAN:
            return cast_bool(raw)
        if self.kind is Kind.INTEGER:
            return cast_int(raw)
        if self.kind is Kind.URL:
            return cast_url(raw)
        if self.kind is Kind.ENUM:
            return Choices(self.choices)(raw)
        return raw

    def fallback(self) -> Any:
        """Value used when the variable is absent and that is allowed."""
        if self.default is not UNDEFINED:
            return self.default
        return _EMPTY[self.kind]

    def annotation(self) -> Any:
        base: Any = _BASE_TYPES[self.kind]
        if self.secret:
            base = Secret[base]
        if self.fallback() is None:
            return Optional[base]
        return base


@dataclass(frozen=True)
class Derived:
    """A record value computed from the resolved fields.

    ``compute`` receives a read-only mapping of variable name to resolved
    value (plus earlier derived values under their own names).
    """

    name: str
    compute: Callable[[Mapping[str, Any]], Any]
    type: Any = bool
    description: str = field(default="", compare=False)

    @property
    def attr(self) -> str:
        return self.name.lower()
