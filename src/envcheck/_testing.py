"""Test utilities."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Mapping

from ._holder import ConfigHolder
from ._sources import FakeEnvSource


@contextmanager
def override_env(
    holder: ConfigHolder,
    *,
    env: Mapping[str, str] | None = None,
    file: Mapping[str, str] | None = None,
) -> Iterator[FakeEnvSource]:
    """Temporarily point *holder* at a ``FakeEnvSource``.

    The cached config is dropped on entry and on exit, so the next ``get()``
    inside (or after) the block validates against the right source::

        with override_env(holder, env={"JWT_SECRET": "x" * 32}) as source:
            assert holder.get().jwt_secret.secret_value == "x" * 32
            source.set_env("PORT", "9000")
            holder.reset()
            assert holder.get().port == 9000
    """
    fake = FakeEnvSource(env=env, file=file)
    previous = holder.swap_source(fake)
    try:
        yield fake
    finally:
        holder.swap_source(previous)
