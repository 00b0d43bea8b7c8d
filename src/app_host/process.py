"""OS process supervision for lifecycle hooks.

Two modes are provided:

- :meth:`ProcessSupervisor.run` -- awaited.  Starts the process with
  ``asyncio.create_subprocess_exec`` and waits for it to exit, honouring a
  cancellation event, task cancellation and an optional timeout.  A process
  whose wait is abandoned is killed and reaped before the error propagates.
- :meth:`ProcessSupervisor.start_detached` -- fire-and-forget.  Starts the
  process with ``subprocess.Popen`` and returns a handle carrying only the
  pid; nothing waits on the process afterwards.

Both accept an environment overlay merged on top of ``os.environ`` and a
working-directory override.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from src.app_host.exceptions import OperationCancelledError, ProcessTimeoutError

logger = logging.getLogger(__name__)


@dataclass
class ProcessOutcome:
    """Result of an awaited process run."""

    exit_code: int = -1
    stdout: str = ""
    stderr: str = ""
    duration_s: float = 0.0

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class LaunchedProcessHandle:
    """Identity of a detached process.  Holds no OS resources."""

    pid: int
    argv: tuple[str, ...] = field(default_factory=tuple)


def merged_env(overlay: Mapping[str, str] | None) -> dict[str, str]:
    """Return ``os.environ`` with *overlay* applied on top."""
    env = dict(os.environ)
    if overlay:
        env.update({k: str(v) for k, v in overlay.items()})
    return env


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()


class ProcessSupervisor:
    """Starts OS processes for lifecycle hooks."""

    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: str | os.PathLike[str] | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = True,
        cancellation: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> ProcessOutcome:
        """Start *command* and wait for it to exit.

        Args:
            command: Executable to run.
            args: Argument vector (without the executable).
            cwd: Working directory for the process.
            env: Variables merged over the inherited environment.
            capture_output: Capture stdout/stderr into the outcome instead
                of letting them reach the parent's console.
            cancellation: Event that, once set, abandons the wait.
            timeout: Seconds to wait before giving up.

        Returns:
            A :class:`ProcessOutcome` with the exit code and captured text.

        Raises:
            OSError: If the process cannot be started.
            OperationCancelledError: If *cancellation* is set first.
            ProcessTimeoutError: If *timeout* elapses first.
        """
        pipe = asyncio.subprocess.PIPE if capture_output else None
        logger.debug("Running: %s %s (cwd=%s)", command, " ".join(args), cwd)
        start = time.monotonic()
        proc = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdout=pipe,
            stderr=pipe,
            cwd=cwd,
            env=merged_env(env),
        )

        communicate = asyncio.ensure_future(proc.communicate())
        waiters: set[asyncio.Future] = {communicate}
        cancel_wait: asyncio.Future | None = None
        if cancellation is not None:
            cancel_wait = asyncio.ensure_future(cancellation.wait())
            waiters.add(cancel_wait)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
            if communicate not in done:
                communicate.cancel()
                await _kill(proc)
                if cancel_wait is not None and cancel_wait in done:
                    logger.info("Wait for '%s' cancelled; process killed", command)
                    raise OperationCancelledError(f"Wait for '{command}' was cancelled")
                logger.warning("'%s' timed out after %ss; process killed", command, timeout)
                raise ProcessTimeoutError(command, timeout or 0.0)
            stdout_bytes, stderr_bytes = communicate.result()
        except asyncio.CancelledError:
            communicate.cancel()
            await _kill(proc)
            raise
        finally:
            if cancel_wait is not None:
                cancel_wait.cancel()

        return ProcessOutcome(
            exit_code=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout_bytes.decode(errors="replace") if stdout_bytes else "",
            stderr=stderr_bytes.decode(errors="replace") if stderr_bytes else "",
            duration_s=time.monotonic() - start,
        )

    def start_detached(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        cwd: str | os.PathLike[str] | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = False,
    ) -> LaunchedProcessHandle:
        """Start *command* without tracking it.

        Output is inherited from the parent unless *capture_output* is set,
        in which case it is discarded (no one reads a detached process's
        pipes).  The child runs in its own session, so a Ctrl+C aimed at
        the host does not reach it.

        The ``Popen`` object is dropped on return; under ``-W default`` its
        finalizer reports a "subprocess is still running" ``ResourceWarning``,
        which is expected for a process nobody waits on.

        Raises:
            OSError: If the process cannot be started.
        """
        argv = (command, *args)
        sink = subprocess.DEVNULL if capture_output else None
        logger.debug("Starting detached: %s (cwd=%s)", " ".join(argv), cwd)
        proc = subprocess.Popen(
            list(argv),
            cwd=cwd,
            env=merged_env(env),
            stdout=sink,
            stderr=sink,
            start_new_session=True,
        )
        return LaunchedProcessHandle(pid=proc.pid, argv=argv)
