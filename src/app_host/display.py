"""Rich-based terminal display for the application host.

Uses a module-level :class:`~rich.console.Console` singleton for
consistent output.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.app_host import __version__
from src.app_host.model import DistributedApplicationModel, GodotResource, ServiceResource

_console = Console()

_STATE_STYLES = {
    "not_started": "dim",
    "building": "yellow",
    "build_succeeded": "yellow",
    "launching": "yellow",
    "launched": "green",
    "build_failed": "red",
    "launch_failed": "red",
    "cancelled": "magenta",
}


def print_header(config_path: str | None = None) -> None:
    """Print a panel identifying the host."""
    header = Text()
    header.append("Godot App Host", style="bold white")
    header.append(f" v{__version__}\n", style="dim")
    if config_path:
        header.append("Composition: ", style="bold")
        header.append(config_path, style="green")
    _console.print(Panel(header, border_style="blue", expand=False))


def print_resource_table(
    model: DistributedApplicationModel, hooks: list[Any] | None = None
) -> None:
    """Print one row per resource with its kind, location and hook state.

    Args:
        model: The application model to describe.
        hooks: Lifecycle hooks; any hook with ``resource`` and ``state``
            attributes contributes a status to its resource's row.
    """
    states = {
        hook.resource.name: hook.state
        for hook in hooks or []
        if hasattr(hook, "resource") and hasattr(hook, "state")
    }

    table = Table(title="Resources", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", min_width=12)
    table.add_column("Kind", min_width=8)
    table.add_column("Location")
    table.add_column("References")
    table.add_column("State", justify="center", min_width=12)

    for resource in model.resources:
        if isinstance(resource, GodotResource):
            kind = "godot"
            location = resource.project_path
        elif isinstance(resource, ServiceResource):
            kind = "service"
            location = ", ".join(ep.url for ep in model.endpoints(resource.name)) or "\u2014"
        else:
            kind = type(resource).__name__
            location = "\u2014"
        refs = ", ".join(model.references(resource.name)) or "\u2014"
        state = states.get(resource.name)
        if state is None:
            state_str = "\u2014"
        else:
            style = _STATE_STYLES.get(state, "white")
            state_str = f"[{style}]{state.upper()}[/{style}]"
        table.add_row(resource.name, kind, location, refs, state_str)

    _console.print(table)


def print_environment(name: str, env: dict[str, str]) -> None:
    """Print the materialized environment of one resource."""
    table = Table(title=f"Environment: {name}", show_header=True, header_style="bold")
    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    for key in sorted(env):
        table.add_row(key, env[key])
    _console.print(table)


def print_error_panel(error: str | Exception) -> None:
    """Print an error message in a red Rich panel."""
    _console.print(
        Panel(
            Text(str(error), style="bold white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            expand=False,
        )
    )
