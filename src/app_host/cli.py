"""Command line interface for the application host.

Commands:

- ``init``     -- write a template composition file
- ``describe`` -- show the resources (and optionally environments) of a composition
- ``resolve``  -- print the Godot executable that would be launched
- ``run``      -- build and launch everything, then wait for Ctrl+C
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from src.app_host import __version__
from src.app_host.builder import DistributedApplicationBuilder
from src.app_host.config import compose, load_apphost_config
from src.app_host.display import (
    print_environment,
    print_error_panel,
    print_header,
    print_resource_table,
)
from src.app_host.exceptions import AppHostError
from src.app_host.executable import get_godot_executable_path
from src.shared.config import HostSettings
from src.shared.logging import setup_logging

app = typer.Typer(
    name="apphost",
    help="Build and launch Godot projects alongside the services they use.",
    no_args_is_help=True,
)

DEFAULT_CONFIG = "apphost.yaml"

_DEFAULT_CONFIG_TEMPLATE = """\
# Application host composition
services:
  - name: leaderboard
    endpoints:
      https: https://localhost:7001

godot:
  - project: ../Snakes/Snakes.csproj
    name: snakes
    args: []
    references: [leaderboard]
"""


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"godot-apphost {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Godot application host."""


def _load_builder(config: Path) -> DistributedApplicationBuilder:
    if not config.exists():
        print_error_panel(f"Composition file not found: {config}")
        raise typer.Exit(code=1)
    settings = HostSettings()
    try:
        return compose(load_apphost_config(config), DistributedApplicationBuilder(settings=settings))
    except AppHostError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=1) from exc


@app.command()
def init(
    output: Path = typer.Option(Path(DEFAULT_CONFIG), "--output", "-o", help="File to write."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a template composition file."""
    if output.exists() and not force:
        print_error_panel(f"{output} already exists (use --force to overwrite)")
        raise typer.Exit(code=1)
    output.write_text(_DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    typer.echo(f"Wrote {output}")


@app.command()
def describe(
    config: Path = typer.Argument(Path(DEFAULT_CONFIG), help="Composition file."),
    env: bool = typer.Option(False, "--env", help="Also show each resource's environment."),
) -> None:
    """Show the resources declared in a composition file."""
    builder = _load_builder(config)
    print_header(str(config))
    print_resource_table(builder.model, builder.hooks)
    if env:
        for resource in builder.model.resources:
            print_environment(resource.name, builder.model.materialize_environment(resource.name))


@app.command()
def resolve() -> None:
    """Print the Godot executable that would be launched."""
    try:
        typer.echo(get_godot_executable_path())
    except AppHostError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    config: Path = typer.Argument(Path(DEFAULT_CONFIG), help="Composition file."),
    once: bool = typer.Option(
        False, "--once", help="Exit after startup instead of waiting for Ctrl+C."
    ),
) -> None:
    """Build and launch every resource in a composition file."""
    settings = HostSettings()
    setup_logging("apphost", settings.log_level)
    builder = _load_builder(config)
    application = builder.build()
    print_header(str(config))
    try:
        if once:
            asyncio.run(application.start())
        else:
            application.run()
    except AppHostError as exc:
        print_error_panel(exc)
        raise typer.Exit(code=1) from exc
    finally:
        print_resource_table(application.model, application.hooks)
