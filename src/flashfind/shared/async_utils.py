"""
Async Utilities for catalog calls.

Provides:
- Circuit breaker guarding the catalog HTTP client
- Timeout with fallback for bounded remote calls
- Background task tracking for fire-and-forget work
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import ErrorContext, TransportFailure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Circuit Breaker Pattern
# =============================================================================

@dataclass
class CircuitBreaker:
    """
    Stops calling the catalog after repeated failures.

    ``closed`` lets every call through. ``failure_threshold`` consecutive
    failures open the breaker, and calls are refused with ``TransportFailure``
    for ``recovery_timeout`` seconds. After that the breaker is ``half_open``:
    the next call is let through, and its outcome closes or reopens it.

    Example:
        breaker = CircuitBreaker(failure_threshold=5)

        async with breaker:
            response = await client.request("GET", "/catalog")
    """
    failure_threshold: int = 5
    recovery_timeout: float = 30.0

    _failures: int = field(init=False, default=0)
    _opened_at: float | None = field(init=False, default=None)

    @property
    def state(self) -> str:
        if self._opened_at is None:
            return "closed"
        if time.monotonic() - self._opened_at >= self.recovery_timeout:
            return "half_open"
        return "open"

    @property
    def is_open(self) -> bool:
        """True while calls are being refused."""
        return self.state == "open"

    async def __aenter__(self) -> CircuitBreaker:
        if self.is_open:
            remaining = self.recovery_timeout - (time.monotonic() - self._opened_at)
            raise TransportFailure(
                "Circuit breaker is open",
                context=ErrorContext(metadata={"retry_after": round(remaining, 1)}),
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_val is None:
            if self._opened_at is not None:
                logger.info("Circuit breaker closed (recovered)")
            self._failures = 0
            self._opened_at = None
            return

        if self.state == "half_open":
            self._opened_at = time.monotonic()
            logger.warning("Circuit breaker reopened (recovery call failed)")
            return

        self._failures += 1
        if self._failures >= self.failure_threshold:
            self._opened_at = time.monotonic()
            self._failures = 0
            logger.warning(f"Circuit breaker opened after {self.failure_threshold} failures")


# =============================================================================
# Utility Functions
# =============================================================================

async def timeout_with_fallback(
    coro: Awaitable[T],
    timeout: float,
    fallback: T | Callable[[], T],
) -> T:
    """
    Execute coroutine with timeout and fallback.

    The coroutine is cancelled when the timeout expires.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds
        fallback: Value or callable to return on timeout

    Returns:
        Result or fallback value
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except TimeoutError:
        if callable(fallback):
            return fallback()
        return fallback


class BackgroundTasks:
    """
    Keeps strong references to fire-and-forget tasks.

    Example:
        tasks = BackgroundTasks()
        tasks.spawn(client.upload(...), name="upload:cat.jpg")
        await tasks.drain()
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"Background task {task.get_name()} failed: {exc}")

    async def drain(self) -> None:
        """Wait for all currently pending tasks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
