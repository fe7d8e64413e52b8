"""Public/client vs private/server configuration surfaces.

Frontends ship part of their configuration to the browser. ``DualSchema``
keeps the two halves in separate schemas so the client surface can be
validated without ever touching the server-only values::

    env = DualSchema(client=client_schema, server=server_schema, client_prefix="NEXT_PUBLIC_")
    env.validate_client(os.environ)    # only NEXT_PUBLIC_* is read
    env.validate(os.environ)           # SurfaceConfigs(client=..., server=...)
"""

from __future__ import annotations

from typing import Mapping, NamedTuple

from ._holder import ConfigHolder
from ._schema import EnvSchema, ValidatedConfig
from ._sources import EnvSource
from ._types import SchemaError, ValidationFailure


class SurfaceConfigs(NamedTuple):
    client: ValidatedConfig
    server: ValidatedConfig


class ClientSurface:
    """Validator view over the client half of a ``DualSchema``."""

    def __init__(self, dual: DualSchema) -> None:
        self._dual = dual
        self.name = dual.client.name

    def validate(self, raw_env: Mapping[str, str]) -> ValidatedConfig:
        return self._dual.validate_client(raw_env)


class DualSchema:
    """Two disjoint schemas: one safe to expose, one server-only."""

    def __init__(
        self,
        client: EnvSchema,
        server: EnvSchema,
        *,
        client_prefix: str = "",
        name: str = "",
    ) -> None:
        self.client = client
        self.server = server
        self.client_prefix = client_prefix
        self.name = name or f"{client.name}+{server.name}"
        self._check()

    def _check(self) -> None:
        shared = sorted(set(self.client.names) & set(self.server.names))
        if shared:
            raise SchemaError(f"Variables declared on both surfaces: {', '.join(shared)}")
        if not self.client_prefix:
            return
        for name in self.client.names:
            if not name.startswith(self.client_prefix):
                raise SchemaError(f"Client variable {name!r} lacks prefix {self.client_prefix!r}")
        for name in self.server.names:
            if name.startswith(self.client_prefix):
                raise SchemaError(
                    f"Server variable {name!r} uses the public prefix {self.client_prefix!r}"
                )

    def validate_client(self, raw_env: Mapping[str, str]) -> ValidatedConfig:
        """Validate only the client schema.

        The input is narrowed to client variable names first, so server
        values are never handed to the client validation path.
        """
        public = {name: raw_env[name] for name in self.client.names if name in raw_env}
        return self.client.validate(public)

    def validate(self, raw_env: Mapping[str, str]) -> SurfaceConfigs:
        """Validate both surfaces, reporting the errors of both in one failure."""
        errors = []
        client = server = None
        try:
            client = self.validate_client(raw_env)
        except ValidationFailure as exc:
            errors.extend(exc.errors)
        try:
            server = self.server.validate(raw_env)
        except ValidationFailure as exc:
            errors.extend(exc.errors)
        if errors:
            raise ValidationFailure(errors, schema=self.name)
        return SurfaceConfigs(client=client, server=server)

    # -- holders --------------------------------------------------------------

    def client_holder(self, source: EnvSource | None = None) -> ConfigHolder[ValidatedConfig]:
        return ConfigHolder(ClientSurface(self), source)

    def server_holder(self, source: EnvSource | None = None) -> ConfigHolder[SurfaceConfigs]:
        return ConfigHolder(self, source)
