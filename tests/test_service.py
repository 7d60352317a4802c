"""Tests for pizzeria.utils.service: BaseBackgroundService lifecycle."""

import asyncio

import pytest

from pizzeria.utils.service import BaseBackgroundService


class _ConcreteService(BaseBackgroundService):
    """Concrete implementation for testing the abstract base class."""

    def __init__(self, interval: float = 1.0):
        super().__init__(interval)
        self.tick_count = 0

    async def tick(self):
        self.tick_count += 1


class _ErrorService(BaseBackgroundService):
    """Service that raises on first tick, then succeeds."""

    def __init__(self):
        super().__init__(0.01)
        self.calls = 0

    async def tick(self):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("first tick fails")


class TestBaseBackgroundService:
    def test_init_state(self):
        svc = _ConcreteService(interval=60.0)
        assert svc.interval == 60.0
        assert svc.is_running is False
        assert svc._task is None

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        """Service starts, runs ticks, and stops cleanly."""
        svc = _ConcreteService(interval=0.01)
        loop = asyncio.get_running_loop()

        svc.start(loop)
        assert svc.is_running is True
        assert svc._task is not None

        await asyncio.sleep(0.05)
        assert svc.tick_count >= 1

        await svc.stop()
        assert svc.is_running is False
        assert svc._task is None

    @pytest.mark.asyncio
    async def test_no_tick_before_first_interval(self):
        svc = _ConcreteService(interval=3600)
        svc.start()
        await asyncio.sleep(0.01)
        assert svc.tick_count == 0
        await svc.stop()

    @pytest.mark.asyncio
    async def test_stop_when_not_running(self):
        """Calling stop on a non-started service is a no-op."""
        svc = _ConcreteService()
        await svc.stop()
        assert svc.is_running is False

    @pytest.mark.asyncio
    async def test_start_idempotent(self):
        """Calling start twice does not create a second task."""
        svc = _ConcreteService(interval=0.01)
        loop = asyncio.get_running_loop()

        svc.start(loop)
        first_task = svc._task
        svc.start(loop)
        assert svc._task is first_task

        await svc.stop()

    @pytest.mark.asyncio
    async def test_error_recovery(self):
        """Service continues running after a tick error."""
        svc = _ErrorService()
        svc.start()
        await asyncio.sleep(0.15)

        assert svc.calls >= 2
        await svc.stop()

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        svc = _ConcreteService(interval=0.01)
        svc.start()
        await svc.stop()
        svc.start()
        await asyncio.sleep(0.05)
        assert svc.tick_count >= 1
        await svc.stop()
