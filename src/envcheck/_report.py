"""Operator-facing output: failure reports and ``.env.example`` templates."""

from __future__ import annotations

from ._fields import Field, Kind
from ._schema import EnvSchema
from ._types import UNDEFINED, ErrorKind, ValidationFailure

_KIND_LABELS = {
    ErrorKind.MISSING_REQUIRED: "missing",
    ErrorKind.INVALID_FORMAT: "invalid format",
    ErrorKind.CONSTRAINT_VIOLATION: "constraint violated",
}


def format_failure(failure: ValidationFailure) -> str:
    """Render every field error of *failure*, one per line.

    Raw values are included for format and constraint errors, except for
    secret fields which show ``***``.
    """
    count = len(failure.errors)
    where = f" ({failure.schema})" if failure.schema else ""
    lines = [f"Invalid environment{where}: {count} problem{'s' if count != 1 else ''}"]
    width = max((len(error.name) for error in failure.errors), default=0)
    for error in failure.errors:
        line = f"  {error.name.ljust(width)}  {_KIND_LABELS[error.kind]}: expected {error.expected}"
        if error.display_value is not None:
            line += f", got {error.display_value!r}"
        lines.append(line)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# .env.example
# ---------------------------------------------------------------------------


def _example_value(spec: Field) -> str:
    if spec.secret or spec.default is UNDEFINED or spec.default is None:
        return ""
    if spec.kind is Kind.BOOLEAN:
        return "true" if spec.default else "false"
    return str(spec.default)


def render_env_example(schema: EnvSchema) -> str:
    """Render a ``.env.example`` body for *schema*, in field order.

    Secrets and values without a default are left empty so the template can
    be committed.
    """
    blocks: list[str] = []
    for spec in schema:
        lines = []
        if spec.description:
            lines.append(f"# {spec.description}")

        needs_value = spec.required and spec.default is UNDEFINED
        detail = f"# {'required' if needs_value else 'optional'}, {spec.expected}"
        if spec.requires:
            detail += f", needs {spec.requires}"
        lines.append(detail)
        lines.append(f'{spec.name}="{_example_value(spec)}"')
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"
