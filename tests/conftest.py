"""Shared test fixtures for the application host test suite."""
from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from src.app_host.builder import DistributedApplicationBuilder
from src.app_host.exceptions import OperationCancelledError
from src.app_host.process import LaunchedProcessHandle, ProcessOutcome
from src.shared.config import HostSettings
from src.shared.logging import resource_var


@dataclass
class FakeSupervisor:
    """Records process invocations instead of starting processes.

    ``block_build`` makes ``run`` wait until its cancellation event is set
    (or forever when none is given), to exercise cancellation.
    """

    build_exit_code: int = 0
    build_stderr: str = ""
    run_error: BaseException | None = None
    launch_error: BaseException | None = None
    block_build: bool = False
    runs: list[dict[str, Any]] = field(default_factory=list)
    launches: list[dict[str, Any]] = field(default_factory=list)

    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: Any = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = True,
        cancellation: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> ProcessOutcome:
        self.runs.append({
            "command": command,
            "args": list(args),
            "cwd": cwd,
            "env": dict(env) if env else None,
            "capture_output": capture_output,
            "timeout": timeout,
            "resource": resource_var.get(),
        })
        if self.run_error is not None:
            raise self.run_error
        if self.block_build:
            await (cancellation or asyncio.Event()).wait()
            raise OperationCancelledError(f"Wait for '{command}' was cancelled")
        await asyncio.sleep(0)
        return ProcessOutcome(exit_code=self.build_exit_code, stderr=self.build_stderr)

    def start_detached(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: Any = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = False,
    ) -> LaunchedProcessHandle:
        self.launches.append({
            "command": command,
            "args": list(args),
            "cwd": cwd,
            "env": dict(env) if env else {},
            "capture_output": capture_output,
        })
        if self.launch_error is not None:
            raise self.launch_error
        return LaunchedProcessHandle(pid=4242, argv=(command, *args))


@pytest.fixture
def fake_supervisor() -> FakeSupervisor:
    return FakeSupervisor()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> HostSettings:
    """Default settings, isolated from the developer's environment."""
    for var in (
        "APPHOST_BUILD_COMMAND",
        "APPHOST_BUILD_CONFIGURATION",
        "APPHOST_BUILD_TIMEOUT",
        "APPHOST_LAUNCH_MODE_VARIABLE",
        "APPHOST_LAUNCH_MODE",
    ):
        monkeypatch.delenv(var, raising=False)
    return HostSettings()


@pytest.fixture
def app_builder(fake_supervisor: FakeSupervisor, settings: HostSettings) -> DistributedApplicationBuilder:
    """Builder wired to a fake supervisor and a fixed executable."""
    return DistributedApplicationBuilder(
        settings=settings,
        supervisor=fake_supervisor,
        executable_resolver=lambda: "/opt/godot/godot",
    )
