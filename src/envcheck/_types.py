"""Foundation types for envcheck.

Provides the ``UNDEFINED`` sentinel, the ``Secret`` wrapper, the field-level
error record and the exception hierarchy.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

T = TypeVar("T")

REDACTED = "***"


# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Undefined:
    """Sentinel for "no default declared" (distinct from a ``None`` default)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


# ---------------------------------------------------------------------------
# Field-level errors
# ---------------------------------------------------------------------------


class ErrorKind(str, enum.Enum):
    MISSING_REQUIRED = "MissingRequired"
    INVALID_FORMAT = "InvalidFormat"
    CONSTRAINT_VIOLATION = "ConstraintViolation"


@dataclass(frozen=True)
class FieldError:
    """One problem found with one environment variable."""

    name: str
    kind: ErrorKind
    expected: str
    raw_value: str | None = None
    secret: bool = False

    @property
    def display_value(self) -> str | None:
        if self.raw_value is None:
            return None
        return REDACTED if self.secret else self.raw_value

    def __str__(self) -> str:
        if self.kind is ErrorKind.MISSING_REQUIRED:
            return f"{self.name}: required but not set (expected {self.expected})"
        if self.kind is ErrorKind.INVALID_FORMAT:
            return f"{self.name}: invalid value {self.display_value!r} (expected {self.expected})"
        return f"{self.name}: constraint violated (expected {self.expected})"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Base exception for envcheck errors."""


class SchemaError(ConfigError):
    """Raised when a schema declaration is inconsistent."""


class ValidationFailure(ConfigError):
    """Raised when an environment does not satisfy a schema.

    Carries every field-level error found in a single pass, in field order.
    """

    def __init__(self, errors: tuple[FieldError, ...] | list[FieldError], schema: str = "") -> None:
        self.errors: tuple[FieldError, ...] = tuple(errors)
        self.schema = schema
        where = f" for {schema!r}" if schema else ""
        lines = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(
            f"Environment validation failed{where} ({len(self.errors)} problem(s)):\n{lines}"
        )

    @property
    def names(self) -> list[str]:
        """Variable names with at least one error, first-seen order."""
        return list(dict.fromkeys(error.name for error in self.errors))

    def by_kind(self, kind: ErrorKind) -> list[FieldError]:
        return [error for error in self.errors if error.kind is kind]


# ---------------------------------------------------------------------------
# Secret
# ---------------------------------------------------------------------------


class Secret(Generic[T]):
    """Wraps a value so it is redacted in ``repr`` / ``str`` output.

    Access the real value via ``.secret_value``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)

    @property
    def secret_value(self) -> T:
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Secret('{REDACTED}')"

    def __str__(self) -> str:
        return REDACTED

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Secret):
            return bool(self._value == other._value)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        args = get_args(source_type)
        handler.generate_schema(args[0] if args else Any)

        def _validate(value: Any) -> "Secret[Any]":
            if isinstance(value, Secret):
                return value
            return Secret(value)

        def _serialize(value: "Secret[Any]", _info: Any) -> str:
            return REDACTED

        return core_schema.no_info_plain_validator_function(
            _validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize,
                info_arg=True,
            ),
            metadata={"pydantic_js_functions": []},
        )
