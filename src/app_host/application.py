"""Application start pipeline.

``start()`` runs every hook's ``before_start`` concurrently, then every
``after_start``.  A hook that raises aborts startup; hooks contain their
own recoverable failures.
"""

from __future__ import annotations

import asyncio
import logging

from src.app_host.exceptions import OperationCancelledError
from src.app_host.hooks import LifecycleHook
from src.app_host.model import DistributedApplicationModel
from src.app_host.shutdown import GracefulShutdown

logger = logging.getLogger(__name__)


class DistributedApplication:
    """A built application model plus the hooks that start it."""

    def __init__(
        self,
        model: DistributedApplicationModel,
        hooks: list[LifecycleHook],
    ) -> None:
        self.model = model
        self.hooks = hooks
        self.started = False

    async def start(self, cancellation: asyncio.Event | None = None) -> None:
        """Run the lifecycle hooks.

        Raises:
            AppHostError: Propagated from a hook (e.g. an unsupported
                platform); the remaining hooks are cancelled.
            OperationCancelledError: If *cancellation* fires during a build.
        """
        if self.started:
            raise RuntimeError("Application already started")
        self.started = True

        logger.info("Starting application (%d hooks)", len(self.hooks))
        await self._gather(
            hook.before_start(self.model, cancellation) for hook in self.hooks
        )
        await self._gather(
            hook.after_start(self.model, cancellation) for hook in self.hooks
        )
        logger.info("Application started")

    @staticmethod
    async def _gather(coros) -> None:
        tasks = [asyncio.ensure_future(c) for c in coros]
        if not tasks:
            return
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def run_async(self, shutdown: GracefulShutdown | None = None) -> None:
        """Start the application and block until a shutdown signal.

        A signal that arrives while a build is running cancels the build
        and skips every launch that has not happened yet.
        """
        shutdown = shutdown or GracefulShutdown()
        shutdown.install()
        try:
            await self.start(cancellation=shutdown.event)
        except OperationCancelledError:
            logger.warning("Shutdown requested during startup; remaining launches skipped")
            return
        logger.info("Application running; press Ctrl+C to stop")
        await shutdown.wait()
        logger.info("Application host stopped")

    def run(self) -> None:
        asyncio.run(self.run_async())
