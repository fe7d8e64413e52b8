"""Where raw environment values come from.

``ProcessEnvSource`` reads the live process environment on top of optional
``.env`` files; ``FakeEnvSource`` is its dict-backed stand-in for tests.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Protocol, Sequence, runtime_checkable

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


@runtime_checkable
class EnvSource(Protocol):
    """Abstraction over where raw environment values come from."""

    def snapshot(self) -> dict[str, str]:
        """Return a point-in-time copy of every available variable."""
        ...


def read_env_files(paths: Sequence[str | Path]) -> dict[str, str]:
    """Merge ``.env`` files; a key from an earlier file wins over later ones.

    Missing files are skipped. Keys declared without a value (``KEY`` on its
    own line) are ignored.
    """
    merged: dict[str, str] = {}
    for path in paths:
        path = Path(path)
        if not path.is_file():
            logger.debug("Skipping missing env file %s", path)
            continue
        values = dotenv_values(path)
        loaded = 0
        for key, value in values.items():
            if value is None or key in merged:
                continue
            merged[key] = value
            loaded += 1
        logger.debug("Loaded %d value(s) from %s", loaded, path)
    return merged


class ProcessEnvSource:
    """Reads ``os.environ`` (or an explicit mapping) over ``.env`` file defaults.

    File values only fill gaps: a variable set in the environment is never
    overridden by a file.
    """

    def __init__(
        self,
        env_files: Sequence[str | Path] = (),
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.env_files = tuple(Path(p) for p in env_files)
        self._environ = environ

    def snapshot(self) -> dict[str, str]:
        merged = read_env_files(self.env_files)
        merged.update(os.environ if self._environ is None else self._environ)
        return merged


class FakeEnvSource:
    """Dict-backed env source for tests.

    >>> source = FakeEnvSource(env={"PORT": "9000"}, file={"PORT": "8000", "DEBUG": "1"})
    >>> source.snapshot()
    {'PORT': '9000', 'DEBUG': '1'}
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        file: Mapping[str, str] | None = None,
    ) -> None:
        self._env: dict[str, str] = dict(env or {})
        self._file: dict[str, str] = dict(file or {})

    def snapshot(self) -> dict[str, str]:
        return {**self._file, **self._env}

    # -- Mutation helpers for test setup ------------------------------------

    def set_env(self, key: str, value: str) -> None:
        self._env[key] = value

    def unset_env(self, key: str) -> None:
        self._env.pop(key, None)

    def set_file(self, key: str, value: str) -> None:
        self._file[key] = value
