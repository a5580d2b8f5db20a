"""
Client-side rate limiting for decision requests.
"""

from .limiter import (
    RetryCountdown,
    SlidingWindowRateLimiter,
    now_ms,
    record_request,
    try_acquire,
)
from .models import (
    DEFAULT_RATE_LIMIT,
    MAX_REQUESTS,
    WINDOW_MS,
    RateLimitConfig,
    RateLimitResult,
)

__all__ = [
    "DEFAULT_RATE_LIMIT",
    "MAX_REQUESTS",
    "WINDOW_MS",
    "RateLimitConfig",
    "RateLimitResult",
    "RetryCountdown",
    "SlidingWindowRateLimiter",
    "now_ms",
    "record_request",
    "try_acquire",
]
