"""
Error handling for DecisionWise operations.

Every error carries the text shown to the user:
- Local validation failures (not enough options)
- Client-side rate limiting with retry guidance
- Opaque flow failures (provider outage, malformed output, schema mismatch)
"""

from __future__ import annotations

from typing import Any


class DecisionWiseError(Exception):
    """Base error with a user-facing title and description."""

    title: str = "An error occurred"
    user_message: str = "Something went wrong. Please try again later."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class OptionValidationError(DecisionWiseError):
    """Fewer than two usable options were submitted."""

    title = "Not enough options"
    user_message = "Please provide at least two options to choose from."

    def __init__(self, message: str | None = None, option_count: int = 0):
        super().__init__(message)
        self.option_count = option_count


class RateLimitError(DecisionWiseError):
    """Rate limit error with retry information."""

    title = "Too many requests"

    def __init__(self, retry_after: int, message: str | None = None):
        self.retry_after = retry_after
        super().__init__(message or self.wait_message(retry_after))

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return self.wait_message(self.retry_after)

    @staticmethod
    def wait_message(retry_after: int) -> str:
        unit = "second" if retry_after == 1 else "seconds"
        return f"Please wait {retry_after} {unit} before trying again."


class FlowError(DecisionWiseError):
    """A flow invocation failed. The cause is deliberately not exposed to users."""

    def __init__(self, message: str, flow_name: str = "unknown"):
        super().__init__(message)
        self.flow_name = flow_name


class ProviderError(FlowError):
    """The completion provider returned an error or an unusable response."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
        flow_name: str = "unknown",
    ):
        super().__init__(message, flow_name=flow_name)
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.response_data = response_data or {}
