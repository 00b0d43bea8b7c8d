"""Composition file dataclasses and loader.

A composition file declares the resources of an application::

    services:
      - name: leaderboard
        endpoints:
          https: https://localhost:7001
        connection_string: Host=localhost;Database=leaderboard
    godot:
      - project: ../Snakes/Snakes.csproj
        name: snakes
        args: ["--verbose"]
        references: [leaderboard]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.app_host.builder import DistributedApplicationBuilder
from src.app_host.exceptions import ConfigurationError


@dataclass
class ServiceConfig:
    """An externally hosted service."""

    name: str = ""
    endpoints: dict[str, str | list[str]] = field(default_factory=dict)
    connection_string: str | None = None


@dataclass
class GodotProjectConfig:
    """A Godot project to build and launch."""

    project: str = ""
    name: str | None = None
    args: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)


@dataclass
class AppHostConfig:
    """Top-level composition."""

    services: list[ServiceConfig] = field(default_factory=list)
    godot: list[GodotProjectConfig] = field(default_factory=list)


def _pick(data: dict[str, Any], cls: type) -> dict[str, Any]:
    """Filter *data* to only keys accepted by *cls*."""
    valid = {f.name for f in cls.__dataclass_fields__.values()}
    return {k: v for k, v in data.items() if k in valid}


def _entries(path: Path, raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """Return the list under *key*, checking that every entry is a mapping."""
    entries = raw.get(key) or []
    if not isinstance(entries, list):
        raise ConfigurationError(f"{path}: '{key}' must be a list")
    for entry in entries:
        if entry is not None and not isinstance(entry, dict):
            raise ConfigurationError(f"{path}: every '{key}' entry must be a mapping")
    return [entry or {} for entry in entries]


def _check_shape(path: Path, owner: str, fields: dict[str, Any], **expected: type) -> None:
    """Reject fields whose YAML value is not of the *expected* container type.

    A null value is replaced by an empty container.
    """
    for key, kind in expected.items():
        if fields.get(key) is None:
            fields.pop(key, None)
        elif not isinstance(fields[key], kind):
            expected_name = "list" if kind is list else "mapping"
            raise ConfigurationError(
                f"{path}: '{key}' of {owner} must be a {expected_name}, "
                f"got {type(fields[key]).__name__}"
            )


def load_apphost_config(path: Path | str | None = None) -> AppHostConfig:
    """Load a composition from a YAML file.

    Unknown keys are silently ignored so that forward-compatible files
    work.

    Args:
        path: Path to the YAML file.  If ``None`` or the file does not
              exist, returns an empty composition.

    Returns:
        Populated configuration dataclass.

    Raises:
        ConfigurationError: If the file is not a mapping, an entry is
            missing its required key, or a list or mapping field holds a
            value of another type.
    """
    if path is None:
        return AppHostConfig()

    path = Path(path)
    if not path.exists():
        return AppHostConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")

    services = []
    for entry in _entries(path, raw, "services"):
        fields = _pick(entry, ServiceConfig)
        _check_shape(path, f"service '{fields.get('name', '')}'", fields, endpoints=dict)
        for scheme, urls in fields.get("endpoints", {}).items():
            if not isinstance(urls, (str, list)):
                raise ConfigurationError(
                    f"{path}: endpoint '{scheme}' must be a URL or a list of URLs"
                )
        services.append(ServiceConfig(**fields))

    projects = []
    for entry in _entries(path, raw, "godot"):
        fields = _pick(entry, GodotProjectConfig)
        _check_shape(
            path,
            f"godot project '{fields.get('project', '')}'",
            fields,
            args=list,
            references=list,
            environment=dict,
        )
        projects.append(GodotProjectConfig(**fields))

    for svc in services:
        if not svc.name:
            raise ConfigurationError(f"{path}: every service needs a 'name'")
    for proj in projects:
        if not proj.project:
            raise ConfigurationError(f"{path}: every godot entry needs a 'project'")

    return AppHostConfig(services=services, godot=projects)


def compose(config: AppHostConfig, builder: DistributedApplicationBuilder) -> DistributedApplicationBuilder:
    """Register every resource of *config* on *builder*.

    References are wired after all resources exist, so declaration order
    in the file does not matter.
    """
    for svc in config.services:
        handle = builder.add_service(svc.name, connection_string=svc.connection_string)
        for scheme, urls in svc.endpoints.items():
            for url in urls if isinstance(urls, list) else [urls]:
                handle.with_endpoint(scheme, url)

    pending: list[tuple[Any, GodotProjectConfig]] = []
    for proj in config.godot:
        handle = builder.add_godot(proj.project, proj.name, *[str(a) for a in proj.args])
        for key, value in proj.environment.items():
            handle.with_environment(key, str(value))
        pending.append((handle, proj))

    for handle, proj in pending:
        for target in proj.references:
            handle.with_reference(target)

    return builder
