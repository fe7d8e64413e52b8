"""``envcheck`` command line."""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

import click

from .._report import format_failure, render_env_example
from .._schema import EnvSchema
from .._sources import ProcessEnvSource
from .._surfaces import ClientSurface, DualSchema, SurfaceConfigs
from .._types import ValidationFailure

DEFAULT_SCHEMA = "envcheck.presets:SAAS_ENV"


def load_schema(path: str) -> EnvSchema | DualSchema:
    """Import ``module:attribute`` and return the schema it names."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"expected 'module:attribute', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}") from e
    schema = getattr(module, attr, None)
    if not isinstance(schema, (EnvSchema, DualSchema)):
        raise click.BadParameter(f"{path!r} is not an EnvSchema or DualSchema")
    return schema


def _validator(schema: EnvSchema | DualSchema, surface: str):
    if isinstance(schema, EnvSchema):
        return schema
    return ClientSurface(schema) if surface == "client" else schema


def check_command(
    schema: EnvSchema | DualSchema,
    *,
    surface: str = "server",
    env_files: tuple[Path, ...] = (),
) -> int:
    """Validate the live environment and print the outcome. Returns the exit code.

    The failure report is printed exactly once, on stderr.
    """
    validator = _validator(schema, surface)
    raw = ProcessEnvSource(env_files).snapshot()
    try:
        config = validator.validate(raw)
    except ValidationFailure as e:
        click.secho(format_failure(e), fg="red", err=True)
        return 1

    configs = config if isinstance(config, SurfaceConfigs) else (config,)
    count = sum(len(type(c).model_fields) for c in configs)
    click.secho(f"Environment OK ({validator.name}, {count} values)", fg="green")
    return 0


@click.group("envcheck")
@click.version_option(package_name="envcheck")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level for envcheck's own messages.",
)
def envcheck_group(log_level: str) -> None:
    """Validate environment configuration against a declared schema."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


_schema_option = click.option(
    "--schema",
    "schema_path",
    default=DEFAULT_SCHEMA,
    envvar="ENVCHECK_SCHEMA",
    show_default=True,
    help="Schema to validate against, as 'module:attribute'.",
)
_surface_option = click.option(
    "--surface",
    type=click.Choice(["server", "client"]),
    default="server",
    show_default=True,
    help="For dual schemas: validate both surfaces (server) or the public one only (client).",
)


@envcheck_group.command("check")
@_schema_option
@_surface_option
@click.option(
    "--env-file",
    "env_files",
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="ENVCHECK_ENV_FILE",
    help="`.env` file supplying defaults; repeatable, earlier files win.",
)
def check_cli(schema_path: str, surface: str, env_files: tuple[Path, ...]) -> None:
    """Validate the current environment.

    Examples:\n
        envcheck check --env-file .env\n
        envcheck check --surface client --env-file apps/web/.env.local\n
    """
    schema = load_schema(schema_path)
    sys.exit(check_command(schema, surface=surface, env_files=env_files))


@envcheck_group.command("example")
@_schema_option
@_surface_option
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
def example_cli(schema_path: str, surface: str, output: Path | None) -> None:
    """Print a `.env.example` template for the schema."""
    schema = load_schema(schema_path)
    if isinstance(schema, DualSchema):
        schema = schema.client if surface == "client" else schema.server
    text = render_env_example(schema)
    if output is None:
        click.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    click.secho(f"Wrote {output}", fg="green")


def main() -> None:
    envcheck_group()
