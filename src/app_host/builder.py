"""Application builder and chainable resource handles."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import TYPE_CHECKING

from src.app_host.executable import get_godot_executable_path
from src.app_host.hooks import LifecycleHook
from src.app_host.model import DistributedApplicationModel, Resource, ServiceResource
from src.app_host.process import ProcessSupervisor
from src.shared.config import HostSettings

if TYPE_CHECKING:
    from src.app_host.application import DistributedApplication

logger = logging.getLogger(__name__)


class ResourceBuilder:
    """Handle returned by registration calls, used for chaining."""

    def __init__(self, app_builder: DistributedApplicationBuilder, resource: Resource) -> None:
        self.app_builder = app_builder
        self.resource = resource

    @property
    def name(self) -> str:
        return self.resource.name

    def with_endpoint(self, scheme: str, url: str) -> ResourceBuilder:
        self.app_builder.model.add_endpoint(self.name, scheme, url)
        return self

    def with_reference(self, target: ResourceBuilder | str) -> ResourceBuilder:
        """Publish *target*'s endpoints to this resource's environment."""
        target_name = target if isinstance(target, str) else target.name
        self.app_builder.model.add_reference(self.name, target_name)
        return self

    def with_environment(self, key: str, value: str) -> ResourceBuilder:
        self.app_builder.model.binding(self.name).set(key, value)
        return self


class DistributedApplicationBuilder:
    """Assembles an application model and its lifecycle hooks.

    Usage::

        builder = DistributedApplicationBuilder()
        leaderboard = builder.add_service("leaderboard").with_endpoint(
            "https", "https://localhost:7001"
        )
        builder.add_godot("../Snakes/Snakes.csproj", "snakes").with_reference(leaderboard)
        builder.build().run()
    """

    def __init__(
        self,
        settings: HostSettings | None = None,
        supervisor: ProcessSupervisor | None = None,
        executable_resolver: Callable[[], str] = get_godot_executable_path,
    ) -> None:
        self.settings = settings or HostSettings()
        self.supervisor = supervisor or ProcessSupervisor()
        self.executable_resolver = executable_resolver
        self.model = DistributedApplicationModel()
        self.hooks: list[LifecycleHook] = []

    def add_resource(self, resource: Resource) -> ResourceBuilder:
        self.model.add(resource)
        return ResourceBuilder(self, resource)

    def add_service(self, name: str, connection_string: str | None = None) -> ResourceBuilder:
        """Register an externally hosted service others can reference."""
        return self.add_resource(ServiceResource(name=name, connection_string=connection_string))

    def add_godot(
        self,
        project_path: str | os.PathLike[str],
        name: str | None = None,
        *args: str,
    ) -> ResourceBuilder:
        from src.app_host.godot import add_godot

        return add_godot(self, project_path, name, *args)

    def add_lifecycle_hook(self, hook: LifecycleHook) -> None:
        self.hooks.append(hook)

    def build(self) -> DistributedApplication:
        from src.app_host.application import DistributedApplication

        self.model.freeze()
        logger.info(
            "Built application model: %d resources, %d lifecycle hooks",
            len(self.model),
            len(self.hooks),
        )
        return DistributedApplication(self.model, list(self.hooks))
