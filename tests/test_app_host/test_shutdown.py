"""Tests for GracefulShutdown."""

from __future__ import annotations

import asyncio
import signal
from unittest.mock import MagicMock, patch

import pytest

from src.app_host.shutdown import GracefulShutdown


class TestGracefulShutdown:
    """Test GracefulShutdown class."""

    def test_initial_should_stop_false(self) -> None:
        gs = GracefulShutdown()
        assert gs.should_stop is False

    def test_set_should_stop(self) -> None:
        gs = GracefulShutdown()
        gs.should_stop = True
        assert gs.should_stop is True

    def test_signal_handler_sets_should_stop(self) -> None:
        gs = GracefulShutdown()
        gs._signal_handler(signal.SIGINT, None)
        assert gs.should_stop is True

    def test_reentrancy_guard(self) -> None:
        gs = GracefulShutdown()
        gs._handling = True
        gs._signal_handler(signal.SIGINT, None)
        # should_stop should NOT be set because handler returned early
        assert gs.should_stop is False

    def test_async_handler_sets_should_stop(self) -> None:
        gs = GracefulShutdown()
        gs._async_handler()
        assert gs.should_stop is True

    def test_install_windows(self) -> None:
        gs = GracefulShutdown()
        with patch("sys.platform", "win32"):
            with patch("signal.signal") as mock_signal:
                gs.install()
                assert mock_signal.call_count >= 2

    def test_install_without_loop_falls_back(self) -> None:
        gs = GracefulShutdown()
        with patch("sys.platform", "linux"):
            with patch("signal.signal") as mock_signal:
                gs.install()
                assert mock_signal.call_count == 2

    @pytest.mark.asyncio
    async def test_install_with_loop_uses_add_signal_handler(self) -> None:
        gs = GracefulShutdown()
        loop = asyncio.get_running_loop()
        with patch("sys.platform", "linux"):
            with patch.object(loop, "add_signal_handler") as mock_add:
                gs.install()
        assert mock_add.call_count == 2

    @pytest.mark.asyncio
    async def test_wait_returns_after_async_handler(self) -> None:
        gs = GracefulShutdown()
        asyncio.get_running_loop().call_later(0.05, gs._async_handler)
        await asyncio.wait_for(gs.wait(), timeout=5)
        assert gs.should_stop is True

    @pytest.mark.asyncio
    async def test_wait_returns_after_sync_handler(self) -> None:
        gs = GracefulShutdown()
        asyncio.get_running_loop().call_later(0.05, gs._signal_handler, signal.SIGTERM, MagicMock())
        await asyncio.wait_for(gs.wait(), timeout=5)

    @pytest.mark.asyncio
    async def test_wait_when_already_stopped(self) -> None:
        gs = GracefulShutdown()
        gs.should_stop = True
        await asyncio.wait_for(gs.wait(), timeout=5)

    @pytest.mark.asyncio
    async def test_install_creates_event_before_wait(self) -> None:
        gs = GracefulShutdown()
        with patch.object(asyncio.get_running_loop(), "add_signal_handler"):
            with patch("sys.platform", "linux"):
                gs.install()
        event = gs.event
        assert not event.is_set()
        gs._async_handler()
        assert event.is_set()

    def test_event_set_when_already_stopped(self) -> None:
        gs = GracefulShutdown()
        gs.should_stop = True
        assert gs.event.is_set()
