"""Tests for async utilities: circuit breaker, timeouts, background tasks."""

from __future__ import annotations

import asyncio
import logging

import pytest

from flashfind.shared.async_utils import BackgroundTasks, CircuitBreaker, timeout_with_fallback
from flashfind.shared.exceptions import TransportFailure

# =============================================================================
# CircuitBreaker
# =============================================================================


class TestCircuitBreaker:
    async def test_success_keeps_closed(self):
        breaker = CircuitBreaker(failure_threshold=2)
        async with breaker:
            pass
        assert breaker.state == "closed"

    async def test_opens_after_threshold(self):
        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60.0)
        for _ in range(2):
            with pytest.raises(RuntimeError):
                async with breaker:
                    raise RuntimeError("boom")

        assert breaker.state == "open"
        assert breaker.is_open
        with pytest.raises(TransportFailure):
            async with breaker:
                pass

    async def test_recovers_through_half_open(self):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0.01)
        with pytest.raises(RuntimeError):
            async with breaker:
                raise RuntimeError("boom")

        await asyncio.sleep(0.02)
        async with breaker:
            assert breaker.state == "half_open"

        assert breaker.state == "closed"

    async def test_failure_while_half_open_reopens(self):
        breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=0.01)
        for _ in range(3):
            with pytest.raises(RuntimeError):
                async with breaker:
                    raise RuntimeError("boom")

        await asyncio.sleep(0.02)
        assert breaker.state == "half_open"
        with pytest.raises(RuntimeError):
            async with breaker:
                raise RuntimeError("still down")

        assert breaker.is_open
        with pytest.raises(TransportFailure) as exc_info:
            async with breaker:
                pass
        assert exc_info.value.context.metadata["retry_after"] <= 0.01

    async def test_success_resets_failure_count(self):
        breaker = CircuitBreaker(failure_threshold=2)
        for fail in (True, False, True):
            try:
                async with breaker:
                    if fail:
                        raise RuntimeError("boom")
            except RuntimeError:
                pass

        assert breaker.state == "closed"


# =============================================================================
# timeout_with_fallback
# =============================================================================


class TestTimeoutWithFallback:
    async def test_result_in_time(self):
        async def quick():
            return 42

        assert await timeout_with_fallback(quick(), 1.0, 0) == 42

    async def test_fallback_value(self):
        async def slow():
            await asyncio.sleep(1)
            return 42

        assert await timeout_with_fallback(slow(), 0.01, -1) == -1

    async def test_fallback_callable(self):
        async def slow():
            await asyncio.sleep(1)

        assert await timeout_with_fallback(slow(), 0.01, lambda: "late") == "late"


# =============================================================================
# BackgroundTasks
# =============================================================================


class TestBackgroundTasks:
    async def test_spawn_and_drain(self):
        tasks = BackgroundTasks()
        done = []

        async def work(n):
            await asyncio.sleep(0)
            done.append(n)

        tasks.spawn(work(1))
        tasks.spawn(work(2), name="second")
        assert len(tasks) == 2

        await tasks.drain()

        assert sorted(done) == [1, 2]
        assert len(tasks) == 0

    async def test_failure_logged(self, caplog):
        tasks = BackgroundTasks()

        async def fail():
            raise RuntimeError("upload broke")

        with caplog.at_level(logging.WARNING):
            tasks.spawn(fail(), name="upload:x.jpg")
            await tasks.drain()

        assert "upload:x.jpg" in caplog.text
        assert "upload broke" in caplog.text
