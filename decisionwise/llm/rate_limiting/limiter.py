"""
Sliding-window rate limiting for decision requests.

The decision itself is a pure function over an explicit history of request
timestamps (milliseconds since epoch). ``SlidingWindowRateLimiter`` owns that
history for one session, and ``RetryCountdown`` drives the advisory
"try again in N seconds" display.
"""

from __future__ import annotations

import asyncio
import contextlib
import math
import time
from collections.abc import Awaitable, Callable, Iterable

import structlog

from .models import DEFAULT_RATE_LIMIT, RateLimitConfig, RateLimitResult

logger = structlog.get_logger(__name__)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def try_acquire(
    now: int,
    history: Iterable[int],
    config: RateLimitConfig = DEFAULT_RATE_LIMIT,
) -> RateLimitResult:
    """
    Decide whether a request at ``now`` may proceed.

    Args:
        now: Current time in epoch milliseconds
        history: Previously recorded request timestamps, oldest first
        config: Window length and request ceiling

    Returns:
        RateLimitResult with the decision, the wait in whole seconds and the
        pruned history. An allowed result does NOT include ``now``; record it
        with ``record_request`` once the request is actually dispatched.
    """
    recent = tuple(ts for ts in history if now - ts < config.window_ms)

    if len(recent) < config.max_requests:
        return RateLimitResult(allowed=True, retry_after_seconds=0, history=recent)

    # Wait until the oldest request in the window expires
    remaining_ms = config.window_ms - (now - recent[0])
    retry_after = max(0, math.ceil(remaining_ms / 1000))

    return RateLimitResult(
        allowed=False, retry_after_seconds=retry_after, history=recent
    )


def record_request(history: Iterable[int], now: int) -> tuple[int, ...]:
    """Return a new history with the dispatch timestamp appended."""
    return (*history, now)


class SlidingWindowRateLimiter:
    """
    Session-scoped owner of the request history.

    Checking never records; the caller records a timestamp only after the
    request has been dispatched, so validation failures never consume a slot.
    """

    def __init__(
        self,
        config: RateLimitConfig = DEFAULT_RATE_LIMIT,
        clock: Callable[[], int] = now_ms,
    ):
        self.config = config
        self._clock = clock
        self._history: tuple[int, ...] = ()

    @property
    def history(self) -> tuple[int, ...]:
        return self._history

    def check(self, now: int | None = None) -> RateLimitResult:
        """Prune expired entries and decide whether a request may proceed."""
        current = self._clock() if now is None else now
        result = try_acquire(current, self._history, self.config)
        self._history = result.history

        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                requests_in_window=result.current_usage,
                limit=self.config.max_requests,
                retry_after_seconds=result.retry_after_seconds,
            )
        return result

    def record(self, now: int | None = None) -> int:
        """Record a dispatched request and return its timestamp."""
        timestamp = self._clock() if now is None else now
        self._history = record_request(self._history, timestamp)
        return timestamp

    def get_statistics(self) -> dict[str, int | float]:
        """Get current rate limiting statistics."""
        result = try_acquire(self._clock(), self._history, self.config)
        return {
            "requests_in_window": result.current_usage,
            "limit": self.config.max_requests,
            "window_seconds": self.config.window_seconds,
            "utilization": result.current_usage / self.config.max_requests,
            "retry_after_seconds": result.retry_after_seconds,
        }


class RetryCountdown:
    """
    Advisory countdown shown after a rate-limit denial.

    Ticks once per second on its own task. Reaching zero only re-enables
    submission; the next submit still re-checks the window.
    """

    def __init__(
        self,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_tick: Callable[[int], None] | None = None,
    ):
        self._sleep = sleep
        self._on_tick = on_tick
        self._task: asyncio.Task | None = None
        self.remaining = 0

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def start(self, seconds: int) -> None:
        """(Re)start the countdown from ``seconds``."""
        self.cancel()
        self.remaining = max(0, seconds)
        if self.remaining > 0:
            self._task = asyncio.create_task(self._run())

    def cancel(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None
        self.remaining = 0

    async def wait(self) -> None:
        """Wait for the running countdown to reach zero."""
        if self._task:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def _run(self) -> None:
        while self.remaining > 0:
            await self._sleep(1.0)
            self.remaining -= 1
            if self._on_tick:
                try:
                    self._on_tick(self.remaining)
                except Exception:
                    logger.exception(
                        "Countdown tick callback failed", remaining=self.remaining
                    )
