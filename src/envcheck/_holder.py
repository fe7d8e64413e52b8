"""Validate-once configuration holder.

A ``ConfigHolder`` is created at process start and passed to whatever needs
configuration::

    holder = ConfigHolder(SAAS_ENV.server, ProcessEnvSource([".env"]))
    settings = holder.get()     # validates on first call, cached afterwards

There is no module-level config: every consumer gets the holder (or the
record it returns) explicitly.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Generic, Mapping, Protocol, TypeVar

from ._report import format_failure
from ._sources import EnvSource, ProcessEnvSource
from ._types import ValidationFailure

logger = logging.getLogger(__name__)

C = TypeVar("C", covariant=True)


class Validator(Protocol[C]):
    """Anything that turns a raw env mapping into a config (``EnvSchema``,
    ``DualSchema``, ``ClientSurface``)."""

    name: str

    def validate(self, raw_env: Mapping[str, str]) -> C:
        ...


class ConfigHolder(Generic[C]):
    """Caches the result of validating one environment source.

    ``get()`` is safe to call from several threads: concurrent first calls
    run a single validation and all receive the same record.
    """

    def __init__(self, schema: Validator[C], source: EnvSource | None = None) -> None:
        self._schema = schema
        self._source: EnvSource = source if source is not None else ProcessEnvSource()
        self._lock = threading.Lock()
        self._config: Any = None

    @property
    def schema(self) -> Validator[C]:
        return self._schema

    @property
    def source(self) -> EnvSource:
        return self._source

    @property
    def loaded(self) -> bool:
        return self._config is not None

    def get(self) -> C:
        """Return the validated config, validating on first use.

        Raises ``ValidationFailure`` (after logging the full report) when the
        environment is invalid; startup must not continue in that case.
        """
        config = self._config
        if config is not None:
            return config
        with self._lock:
            if self._config is None:
                self._config = self._load()
            return self._config

    def _load(self) -> C:
        raw = self._source.snapshot()
        try:
            config = self._schema.validate(raw)
        except ValidationFailure as exc:
            logger.error("%s", format_failure(exc))
            raise
        logger.info("Environment %r validated", self._schema.name)
        return config

    # -- test support -------------------------------------------------------

    def reset(self) -> None:
        """Drop the cached config so the next ``get()`` re-validates.

        For test isolation; production code never calls this.
        """
        with self._lock:
            self._config = None

    def swap_source(self, source: EnvSource) -> EnvSource:
        """Replace the source and drop the cache; returns the previous source."""
        with self._lock:
            previous, self._source = self._source, source
            self._config = None
        return previous
