"""Application model: named resources and their annotations.

Resources are immutable descriptors.  Everything attached to a resource
after creation (endpoints, references, environment bindings) lives in the
model, keyed by resource name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.app_host.environment import (
    EnvironmentBinding,
    connection_string_variable,
    service_discovery_variables,
)
from src.app_host.exceptions import (
    AppHostError,
    DuplicateResourceError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resource:
    """A named, addressable unit in the application model."""

    name: str


@dataclass(frozen=True)
class ServiceResource(Resource):
    """A resource hosted outside this process that others can reference.

    The host does not start service resources; it only publishes their
    endpoints and connection string to resources that reference them.
    """

    connection_string: str | None = None


@dataclass(frozen=True)
class GodotResource(Resource):
    """A Godot project built with the .NET toolchain and run by the engine.

    Attributes:
        project_path: Path to the project's ``.csproj`` file.
        working_directory: Parent directory of *project_path*.
        args: Extra arguments appended to the engine command line.
    """

    project_path: str
    working_directory: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class EndpointAnnotation:
    """An endpoint exposed by a resource."""

    scheme: str
    url: str


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class DistributedApplicationModel:
    """Ordered registry of resources and their annotations."""

    def __init__(self) -> None:
        self._resources: dict[str, Resource] = {}
        self._endpoints: dict[str, list[EndpointAnnotation]] = {}
        self._references: dict[str, list[str]] = {}
        self._bindings: dict[str, EnvironmentBinding] = {}
        self.frozen = False

    # -- registration ------------------------------------------------------

    def add(self, resource: Resource) -> Resource:
        self._check_mutable()
        if resource.name in self._resources:
            raise DuplicateResourceError(resource.name)
        self._resources[resource.name] = resource
        self._bindings[resource.name] = EnvironmentBinding(resource.name)
        logger.debug("Registered resource %s (%s)", resource.name, type(resource).__name__)
        return resource

    def add_endpoint(self, name: str, scheme: str, url: str) -> None:
        self._check_mutable()
        self.get(name)
        self._endpoints.setdefault(name, []).append(EndpointAnnotation(scheme, url))

    def add_reference(self, source: str, target: str) -> None:
        self._check_mutable()
        self.get(source)
        self.get(target)
        refs = self._references.setdefault(source, [])
        if target not in refs:
            refs.append(target)

    def freeze(self) -> None:
        self.frozen = True

    def _check_mutable(self) -> None:
        if self.frozen:
            raise AppHostError("Application model is frozen; the application was already built")

    # -- queries -----------------------------------------------------------

    @property
    def resources(self) -> list[Resource]:
        return list(self._resources.values())

    def get(self, name: str) -> Resource:
        try:
            return self._resources[name]
        except KeyError:
            raise ResourceNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def endpoints(self, name: str) -> list[EndpointAnnotation]:
        self.get(name)
        return list(self._endpoints.get(name, []))

    def references(self, name: str) -> list[str]:
        self.get(name)
        return list(self._references.get(name, []))

    def binding(self, name: str) -> EnvironmentBinding:
        self.get(name)
        return self._bindings[name]

    # -- materialization ---------------------------------------------------

    def materialize_environment(self, name: str) -> dict[str, str]:
        """Return the environment overlay for resource *name*.

        Copies the resource's binding, then adds service-discovery
        variables for every referenced resource.  Referenced endpoints
        are read at this point, so endpoints added after the reference
        was recorded are still published.
        """
        env = self.binding(name).materialize()
        for target in self.references(name):
            env.update(
                service_discovery_variables(
                    target,
                    ((ep.scheme, ep.url) for ep in self._endpoints.get(target, [])),
                )
            )
            resource = self._resources[target]
            connection_string = getattr(resource, "connection_string", None)
            if connection_string:
                env[connection_string_variable(target)] = connection_string
        return env
