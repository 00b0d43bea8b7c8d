"""Lifecycle hook contract."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.app_host.model import DistributedApplicationModel


class LifecycleHook:
    """Base for orchestration logic run around application start.

    Both methods default to no-ops; subclasses override what they need.
    """

    async def before_start(
        self,
        model: DistributedApplicationModel,
        cancellation: asyncio.Event | None = None,
    ) -> None:
        """Run once before any resource of *model* starts."""
        return None

    async def after_start(
        self,
        model: DistributedApplicationModel,
        cancellation: asyncio.Event | None = None,
    ) -> None:
        """Run once after every ``before_start`` has returned."""
        return None
