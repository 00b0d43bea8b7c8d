"""Graceful shutdown handler for a running application.

Handles both Windows (``signal.signal``) and Unix
(``loop.add_signal_handler``) signal registration with a reentrancy guard.
Detached processes started by hooks are left running.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Any

logger = logging.getLogger(__name__)


class GracefulShutdown:
    """Manages graceful shutdown on SIGINT / SIGTERM.

    Usage::

        shutdown = GracefulShutdown()
        shutdown.install()
        await shutdown.wait()
    """

    def __init__(self) -> None:
        self._should_stop = False
        self._event: asyncio.Event | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handling = False  # reentrancy guard

    @property
    def should_stop(self) -> bool:
        """Whether a shutdown signal has been received."""
        return self._should_stop

    @should_stop.setter
    def should_stop(self, value: bool) -> None:
        self._should_stop = value
        if value and self._event is not None:
            self._event.set()

    @property
    def event(self) -> asyncio.Event:
        """Event set once a shutdown signal arrives.

        Can be handed to awaited process waits as their cancellation token.
        """
        if self._event is None:
            self._event = asyncio.Event()
            if self._should_stop:
                self._event.set()
        return self._event

    def install(self) -> None:
        """Register signal handlers for SIGINT and SIGTERM.

        On Windows, uses ``signal.signal`` directly.
        On Unix, uses ``loop.add_signal_handler`` if a running event loop
        is available, falling back to ``signal.signal``.
        """
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None
        if self._event is None:
            self._event = asyncio.Event()

        if sys.platform == "win32":
            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)
            return
        if self._loop is None:
            # No running loop -- fall back to signal.signal
            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)
            return
        for sig in (signal.SIGINT, signal.SIGTERM):
            self._loop.add_signal_handler(sig, self._async_handler)

    async def wait(self) -> None:
        """Block until a shutdown signal arrives."""
        event = self.event
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        if self._should_stop:
            event.set()
        await event.wait()

    def _signal_handler(self, signum: int, frame: Any) -> None:
        """Synchronous signal handler (Windows / fallback)."""
        if self._handling:
            return  # reentrancy guard
        self._handling = True
        logger.warning("Received signal %s -- initiating graceful shutdown", signum)
        self._should_stop = True
        if self._event is not None and self._loop is not None:
            self._loop.call_soon_threadsafe(self._event.set)
        self._handling = False

    def _async_handler(self) -> None:
        """Async-compatible signal handler (Unix)."""
        if self._handling:
            return  # reentrancy guard
        self._handling = True
        logger.warning("Received shutdown signal -- initiating graceful shutdown")
        self.should_stop = True
        self._handling = False
