"""Godot project resources.

:func:`add_godot` registers a Godot project in the application model and
attaches a :class:`GodotBuildHook` that, before the application starts,
builds the project's .NET assembly and then launches the Godot engine on
it as a detached process.

Failure policy: anything that keeps the build or the engine process from
starting is logged and contained in the hook, so sibling resources keep
starting.  Cancellation and :class:`UnsupportedPlatformError` propagate.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from src.app_host.environment import GODOT_PROJECT_DIR, GODOT_PROJECT_PATH
from src.app_host.exceptions import (
    BuildFailure,
    LaunchFault,
    OperationCancelledError,
    ProcessTimeoutError,
)
from src.app_host.executable import get_godot_executable_path
from src.app_host.hooks import LifecycleHook
from src.app_host.model import DistributedApplicationModel, GodotResource
from src.app_host.process import (
    LaunchedProcessHandle,
    ProcessOutcome,
    ProcessSupervisor,
)
from src.app_host.state_machine import create_hook_machine
from src.shared.config import HostSettings
from src.shared.logging import resource_var

if TYPE_CHECKING:
    from src.app_host.builder import DistributedApplicationBuilder, ResourceBuilder

logger = logging.getLogger(__name__)


def add_godot(
    builder: DistributedApplicationBuilder,
    project_path: str | os.PathLike[str],
    name: str | None = None,
    *args: str,
) -> ResourceBuilder:
    """Add a Godot project to the application model.

    Args:
        builder: The application builder to register with.
        project_path: Path to the Godot project's ``.csproj`` file.
        name: Resource name.  Defaults to the project file's stem.
        *args: Extra arguments passed to the Godot executable.

    Returns:
        A chainable handle to the new resource.

    Raises:
        UnsupportedPlatformError: If no Godot executable can be resolved
            for this platform.
        DuplicateResourceError: If *name* is already registered.
    """
    project_path = os.fspath(project_path)
    name = name or Path(project_path).stem
    working_directory = os.path.dirname(project_path) or "."

    # Fail model assembly early on platforms without a default.
    builder.executable_resolver()

    resource = GodotResource(
        name=name,
        project_path=project_path,
        working_directory=working_directory,
        args=tuple(args),
    )
    handle = builder.add_resource(resource)

    binding = builder.model.binding(name)
    binding.set(GODOT_PROJECT_PATH, os.path.abspath(project_path))
    binding.set(GODOT_PROJECT_DIR, os.path.abspath(working_directory))

    builder.add_lifecycle_hook(
        GodotBuildHook(
            resource,
            supervisor=builder.supervisor,
            settings=builder.settings,
            executable_resolver=builder.executable_resolver,
        )
    )
    return handle


class GodotBuildHook(LifecycleHook):
    """Builds and launches one Godot resource before application start.

    The hook is the model of its own ``transitions`` state machine; the
    current state is available as ``hook.state``.
    """

    def __init__(
        self,
        resource: GodotResource,
        *,
        supervisor: ProcessSupervisor | None = None,
        settings: HostSettings | None = None,
        executable_resolver: Callable[[], str] = get_godot_executable_path,
    ) -> None:
        self.resource = resource
        self.supervisor = supervisor or ProcessSupervisor()
        self.settings = settings or HostSettings()
        self.executable_resolver = executable_resolver
        self.build_outcome: ProcessOutcome | None = None
        self.handle: LaunchedProcessHandle | None = None
        self.machine = create_hook_machine(self)

    def __repr__(self) -> str:
        return f"GodotBuildHook({self.resource.name!r}, state={getattr(self, 'state', None)!r})"

    async def before_start(
        self,
        model: DistributedApplicationModel,
        cancellation: asyncio.Event | None = None,
    ) -> None:
        token = resource_var.set(self.resource.name)
        try:
            await self._build_then_launch(model, cancellation)
        finally:
            resource_var.reset(token)

    async def _build_then_launch(
        self,
        model: DistributedApplicationModel,
        cancellation: asyncio.Event | None,
    ) -> None:
        project_path = self.resource.project_path

        await self.begin_build()
        logger.info("Building Godot project: %s", project_path)
        try:
            await self._build(cancellation)
        except BuildFailure as exc:
            logger.error("Failed to build Godot project: %s", project_path)
            logger.error("Build errors: %s", exc.stderr)
            await self.reject_build()
            return
        except (OperationCancelledError, asyncio.CancelledError):
            logger.warning("Build of Godot project cancelled: %s", project_path)
            await self.abort_build()
            raise
        await self.accept_build()
        logger.info("Successfully built Godot project: %s", project_path)

        try:
            await self._launch(model)
        except LaunchFault as exc:
            logger.error("Failed to start Godot project: %s (%s)", project_path, exc.reason)
            await self.reject_launch()
            return
        await self.confirm_launch()
        logger.info(
            "Godot project started: %s (pid %d)", project_path, self.handle.pid
        )

    async def _build(self, cancellation: asyncio.Event | None) -> None:
        command = self.settings.build_command
        args = [
            "build",
            os.path.abspath(self.resource.project_path),
            "--configuration",
            self.settings.build_configuration,
        ]
        try:
            outcome = await self.supervisor.run(
                command,
                args,
                cwd=self.resource.working_directory,
                capture_output=True,
                cancellation=cancellation,
                timeout=self.settings.build_timeout,
            )
        except (OSError, ProcessTimeoutError) as exc:
            raise BuildFailure(self.resource.name, -1, str(exc)) from exc

        self.build_outcome = outcome
        if outcome.exit_code != 0:
            raise BuildFailure(self.resource.name, outcome.exit_code, outcome.stderr)

    async def _launch(self, model: DistributedApplicationModel) -> None:
        executable = self.executable_resolver()
        working_directory = self.resource.working_directory
        args = ["--path", working_directory, *self.resource.args]

        env = model.materialize_environment(self.resource.name)
        env[self.settings.launch_mode_variable] = self.settings.launch_mode

        await self.begin_launch()
        logger.info(
            "Starting Godot project: %s in directory %s using executable: %s",
            self.resource.project_path,
            working_directory,
            executable,
        )
        try:
            self.handle = self.supervisor.start_detached(
                executable,
                args,
                cwd=working_directory,
                env=env,
                capture_output=False,
            )
        except OSError as exc:
            raise LaunchFault(self.resource.name, executable, str(exc)) from exc
