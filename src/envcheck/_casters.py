"""Cast helpers for raw environment values.

Each caster takes the raw string read from the environment and returns the
typed value, or raises ``ValueError`` when the string cannot be coerced.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


# ---------------------------------------------------------------------------
# Bool caster
# ---------------------------------------------------------------------------

_TRUTHY = frozenset({"1", "true", "yes", "on", "t", "y"})
_FALSY = frozenset({"0", "false", "no", "off", "f", "n"})


def cast_bool(value: str) -> bool:
    """Cast a string to ``bool`` using the conventional truthy/falsy spellings.

    Raises ``ValueError`` for unrecognised strings.
    """
    lower = value.strip().lower()
    if lower in _TRUTHY:
        return True
    if lower in _FALSY:
        return False
    raise ValueError(f"Cannot cast {value!r} to bool")


# ---------------------------------------------------------------------------
# Integer caster
# ---------------------------------------------------------------------------

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def cast_int(value: str) -> int:
    """Cast a base-10 integer string.

    Stricter than ``int()``: underscores, other bases and floats are rejected.
    """
    stripped = value.strip()
    if not _INTEGER_RE.fullmatch(stripped):
        raise ValueError(f"Cannot cast {value!r} to int")
    return int(stripped, 10)


# ---------------------------------------------------------------------------
# URL caster
# ---------------------------------------------------------------------------

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def parse_url(value: str) -> AnyUrl:
    """Parse an absolute URL with a scheme and a host."""
    try:
        url = _URL_ADAPTER.validate_python(value.strip())
    except PydanticValidationError as exc:
        raise ValueError(f"{value!r} is not a valid URL") from exc
    if not url.host:
        raise ValueError(f"{value!r} is not an absolute URL with a host")
    return url


def cast_url(value: str) -> str:
    """Validate *value* as an absolute URL and return it unmodified.

    The original spelling is kept so connection strings are passed through
    byte-for-byte (pydantic would otherwise normalise trailing slashes).
    """
    parse_url(value)
    return value.strip()


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class Choices:
    """Validate that a value is one of a fixed set of choices.

    Membership is exact: ``"Production"`` does not match ``"production"``.

    >>> Choices(["debug", "info", "warning"])("info")
    'info'
    """

    def __init__(self, choices: Sequence[Any]) -> None:
        self.choices = tuple(choices)

    def __call__(self, value: str) -> str:
        if value not in self.choices:
            raise ValueError(
                f"{value!r} is not a valid choice. Must be one of {list(self.choices)}"
            )
        return value

    def __repr__(self) -> str:
        return f"Choices({list(self.choices)!r})"
