"""Typed, fail-fast environment validation.

Declare the environment as a list of fields, validate it once at startup and
get back an immutable typed record, or a single error listing every problem.
"""

from ._version import __version__
from ._casters import Choices
from ._fields import Derived, Field, Kind, MaxLength, MinLength, Prefix, Range, UrlScheme
from ._holder import ConfigHolder
from ._report import format_failure, render_env_example
from ._schema import EnvSchema, ValidatedConfig, is_set
from ._sources import EnvSource, FakeEnvSource, ProcessEnvSource
from ._surfaces import ClientSurface, DualSchema, SurfaceConfigs
from ._testing import override_env
from ._types import (
    ConfigError,
    ErrorKind,
    FieldError,
    SchemaError,
    Secret,
    ValidationFailure,
)

__all__ = [
    "__version__",
    # Schema
    "EnvSchema",
    "Field",
    "Kind",
    "Derived",
    "is_set",
    "ValidatedConfig",
    # Constraints
    "MinLength",
    "MaxLength",
    "Prefix",
    "Range",
    "UrlScheme",
    "Choices",
    # Surfaces
    "DualSchema",
    "ClientSurface",
    "SurfaceConfigs",
    # Runtime
    "ConfigHolder",
    "EnvSource",
    "ProcessEnvSource",
    # Errors
    "ConfigError",
    "SchemaError",
    "ValidationFailure",
    "FieldError",
    "ErrorKind",
    "Secret",
    # Reporting
    "format_failure",
    "render_env_example",
    # Testing
    "override_env",
    "FakeEnvSource",
]
