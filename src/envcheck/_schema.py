"""Schema container and the generic validation routine.

``EnvSchema.validate`` is a pure function of its input mapping: it never
reads ``os.environ``, never logs and never caches. Caching and reporting
happen in ``ConfigHolder``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, create_model

from ._fields import Derived, Field, Kind
from ._types import UNDEFINED, ErrorKind, FieldError, SchemaError, ValidationFailure


class ValidatedConfig(BaseModel):
    """Base class of every generated configuration record.

    Instances are frozen: assigning to an attribute raises.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        protected_namespaces=(),
    )


class EnvSchema:
    """An ordered set of field specifications plus derived fields.

    >>> schema = EnvSchema([Field("PORT", Kind.INTEGER, required=False, default=8000)])
    >>> schema.validate({"PORT": "9000"}).port
    9000
    """

    def __init__(
        self,
        fields: Sequence[Field],
        derived: Sequence[Derived] = (),
        *,
        name: str = "Env",
        empty_as_missing: bool = True,
    ) -> None:
        self.name = name
        self.fields: tuple[Field, ...] = tuple(fields)
        self.derived: tuple[Derived, ...] = tuple(derived)
        self.empty_as_missing = empty_as_missing

        self._check()
        self.model: type[ValidatedConfig] = self._build_model()

    # -- declaration checks ---------------------------------------------------

    def _check(self) -> None:
        seen: dict[str, Field] = {}
        attrs: set[str] = set()
        for spec in self.fields:
            if spec.name in seen:
                raise SchemaError(f"Duplicate field {spec.name!r} in schema {self.name!r}")
            if spec.attr in attrs:
                raise SchemaError(f"Fields collide on attribute {spec.attr!r} in {self.name!r}")
            seen[spec.name] = spec
            attrs.add(spec.attr)

        for spec in self.fields:
            if spec.requires is None:
                continue
            if spec.requires not in seen:
                raise SchemaError(f"{spec.name!r} requires unknown field {spec.requires!r}")
            if spec.requires == spec.name:
                raise SchemaError(f"{spec.name!r} cannot require itself")

        # Prerequisites are settled before their dependents: order by chain depth.
        depths: dict[str, int] = {}
        for spec in self.fields:
            chain = [spec.name]
            current = spec
            while current.requires is not None:
                if current.requires in chain:
                    cycle = " -> ".join(chain + [current.requires])
                    raise SchemaError(f"Circular 'requires' chain: {cycle}")
                chain.append(current.requires)
                current = seen[current.requires]
            depths[spec.name] = len(chain) - 1
        self._dependents: tuple[Field, ...] = tuple(
            sorted(
                (spec for spec in self.fields if spec.requires is not None),
                key=lambda spec: depths[spec.name],
            )
        )
        self._by_name = seen

        for item in self.derived:
            if item.name in seen or item.attr in attrs:
                raise SchemaError(f"Derived field {item.name!r} shadows a declared field")
            attrs.add(item.attr)

    def _build_model(self) -> type[ValidatedConfig]:
        definitions: dict[str, Any] = {}
        for spec in self.fields:
            definitions[spec.attr] = (spec.annotation(), ...)
        for item in self.derived:
            definitions[item.attr] = (item.type, ...)
        return create_model(f"{self.name}Config", __base__=ValidatedConfig, **definitions)

    # -- container protocol ---------------------------------------------------

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __repr__(self) -> str:
        return f"EnvSchema({self.name!r}, fields={list(self.names)!r})"

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def field(self, name: str) -> Field:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    # -- validation -----------------------------------------------------------

    def _raw(self, raw_env: Mapping[str, str], name: str) -> str | None:
        value = raw_env.get(name)
        if value is None:
            return None
        if self.empty_as_missing and value.strip() == "":
            return None
        return value

    def _resolve(self, spec: Field, raw: str | None, errors: list[FieldError]) -> Any:
        if raw is None:
            if spec.required and spec.default is UNDEFINED:
                errors.append(FieldError(spec.name, ErrorKind.MISSING_REQUIRED, spec.expected))
                return None
            return spec.fallback()

        try:
            value = spec.cast(raw)
        except ValueError:
            errors.append(
                FieldError(
                    spec.name,
                    ErrorKind.INVALID_FORMAT,
                    spec.expected,
                    raw_value=raw,
                    secret=spec.secret,
                )
            )
            return None

        for constraint in spec.constraints:
            try:
                constraint(value)
            except ValueError:
                expected = getattr(constraint, "expected", repr(constraint))
                errors.append(
                    FieldError(
                        spec.name,
                        ErrorKind.CONSTRAINT_VIOLATION,
                        expected,
                        raw_value=raw,
                        secret=spec.secret,
                    )
                )
        return value

    def validate(self, raw_env: Mapping[str, str]) -> ValidatedConfig:
        """Validate *raw_env* and return the typed record.

        Every field is evaluated; if any of them fails, ``ValidationFailure``
        is raised with the complete, field-ordered list of errors.
        """
        errors: list[FieldError] = []
        resolved: dict[str, Any] = {}

        for spec in self.fields:
            resolved[spec.name] = self._resolve(spec, self._raw(raw_env, spec.name), errors)

        if errors:
            raise ValidationFailure(errors, schema=self.name)

        # A dependent flag is switched off when its prerequisite is empty (or
        # an off flag), whatever the raw value of the flag says.
        for spec in self._dependents:
            prerequisite = self._by_name[spec.requires]
            if not _satisfied(prerequisite, resolved[prerequisite.name]):
                resolved[spec.name] = False

        view = MappingProxyType(resolved)
        computed: dict[str, Any] = {}
        for item in self.derived:
            computed[item.name] = item.compute(MappingProxyType({**view, **computed}))

        data = {spec.attr: resolved[spec.name] for spec in self.fields}
        data.update({item.attr: computed[item.name] for item in self.derived})
        return self.model.model_validate(data)


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _satisfied(prerequisite: Field, value: Any) -> bool:
    if prerequisite.kind is Kind.BOOLEAN:
        return value is True
    return _present(value)


def is_set(values: Mapping[str, Any], name: str) -> bool:
    """Helper for ``Derived`` callables: whether *name* resolved to a value."""
    return _present(values.get(name))
