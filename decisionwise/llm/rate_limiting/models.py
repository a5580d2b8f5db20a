"""
Rate limiting models and dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass

# Session limits, fixed for the client
MAX_REQUESTS = 5
WINDOW_MS = 6 * 60 * 1000


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for the sliding-window limiter."""
    max_requests: int = MAX_REQUESTS
    window_ms: int = WINDOW_MS

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000


DEFAULT_RATE_LIMIT = RateLimitConfig()


@dataclass(frozen=True)
class RateLimitResult:
    """Result of rate limit check."""
    allowed: bool
    retry_after_seconds: int
    # Pruned window, oldest first. The caller records the next timestamp.
    history: tuple[int, ...]

    @property
    def current_usage(self) -> int:
        return len(self.history)
