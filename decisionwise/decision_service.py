"""
Decision service for DecisionWise.

This module holds the business logic behind the decision form:
- Option filtering and local validation
- Invoking the best-option and summarize flows
- Session state (options, loading flag, result, error, retry countdown)
- Client-side rate limiting of submissions
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from decisionwise.flows import (
    AnalyzeOptionsInput,
    AnalyzeOptionsOutput,
    Flow,
    SummarizeOptionsInput,
    SummarizeOptionsOutput,
)
from decisionwise.llm.exceptions import (
    DecisionWiseError,
    FlowError,
    OptionValidationError,
    RateLimitError,
)
from decisionwise.llm.rate_limiting import RetryCountdown, SlidingWindowRateLimiter
from decisionwise.logging_utils import FlowErrorHandler, log_operation

logger = structlog.get_logger(__name__)

MIN_OPTIONS = 2


def filter_options(options: Iterable[str]) -> list[str]:
    """Trim every option and drop the empty ones, keeping order and duplicates."""
    return [stripped for option in options if (stripped := option.strip())]


class DecisionClient:
    """Validates options and forwards them to the flows."""

    def __init__(
        self,
        best_option_flow: Flow[AnalyzeOptionsInput, AnalyzeOptionsOutput],
        summarize_flow: Flow[SummarizeOptionsInput, SummarizeOptionsOutput] | None = None,
    ):
        self.best_option_flow = best_option_flow
        self.summarize_flow = summarize_flow

    @staticmethod
    def validate_options(options: Iterable[str]) -> list[str]:
        """
        Build the option set to submit.

        Raises:
            OptionValidationError: If fewer than two options survive filtering
        """
        option_set = filter_options(options)
        if len(option_set) < MIN_OPTIONS:
            raise OptionValidationError(option_count=len(option_set))
        return option_set

    @log_operation("decide")
    async def decide(self, options: Iterable[str]) -> AnalyzeOptionsOutput:
        """
        Ask the model to pick the best option.

        ``best_option`` is returned as the model wrote it; it is not matched
        against the submitted options.

        Raises:
            OptionValidationError: Before any network call, for < 2 options
            FlowError: For any failure of the flow itself
        """
        option_set = self.validate_options(options)
        return await self._invoke(
            self.best_option_flow, AnalyzeOptionsInput(options=option_set)
        )

    @log_operation("summarize")
    async def summarize(self, options: Iterable[str]) -> SummarizeOptionsOutput:
        """Summarize the options. No minimum count is enforced."""
        if self.summarize_flow is None:
            raise RuntimeError("DecisionClient was created without a summarize flow")
        return await self._invoke(
            self.summarize_flow, SummarizeOptionsInput(options=list(options))
        )

    @staticmethod
    async def _invoke(flow: Flow, flow_input):
        try:
            return await flow.invoke(flow_input)
        except FlowError:
            raise
        except Exception as e:
            logger.error(
                "Flow raised an unexpected error",
                flow=flow.name,
                error_category=FlowErrorHandler.classify_error(e),
            )
            raise FlowError(f"{flow.name} failed: {e!s}", flow_name=flow.name) from e


@dataclass(frozen=True)
class UserFacingError:
    """Title and description shown to the user."""
    title: str
    description: str

    @classmethod
    def from_exception(cls, error: DecisionWiseError) -> UserFacingError:
        return cls(title=error.title, description=error.user_message)


class DecisionSession:
    """
    State of one decision form.

    Submissions are gated by the rate limiter first, then validated. The
    request timestamp is recorded at dispatch, so it counts against the window
    whether the flow succeeds or fails.
    """

    def __init__(
        self,
        client: DecisionClient,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        countdown: RetryCountdown | None = None,
    ):
        self.client = client
        self.rate_limiter = rate_limiter or SlidingWindowRateLimiter()
        self.countdown = countdown or RetryCountdown()
        self.options: list[str] = [""] * MIN_OPTIONS
        self.is_loading = False
        self.result: AnalyzeOptionsOutput | None = None
        self.error: UserFacingError | None = None

    def add_option(self) -> None:
        self.options.append("")

    def update_option(self, index: int, value: str) -> None:
        self.options[index] = value

    def remove_option(self, index: int) -> None:
        """Remove an option field; the form always keeps at least two."""
        if len(self.options) > MIN_OPTIONS:
            del self.options[index]

    def set_options(self, options: Iterable[str]) -> None:
        self.options = list(options)
        while len(self.options) < MIN_OPTIONS:
            self.options.append("")

    async def submit(self) -> AnalyzeOptionsOutput | None:
        """
        Submit the current options.

        Returns:
            The decision, or None if a request is already in flight or the
            retry countdown is still running

        Raises:
            RateLimitError: Too many requests in the trailing window
            OptionValidationError: Fewer than two usable options
            FlowError: The flow failed
        """
        if self.is_loading or self.countdown.active:
            return None

        gate = self.rate_limiter.check()
        if not gate.allowed:
            error = RateLimitError(gate.retry_after_seconds)
            self.error = UserFacingError.from_exception(error)
            self.countdown.start(gate.retry_after_seconds)
            raise error

        try:
            option_set = self.client.validate_options(self.options)
        except OptionValidationError as e:
            self.error = UserFacingError.from_exception(e)
            raise

        self.rate_limiter.record()
        self.is_loading = True
        self.result = None
        self.error = None

        try:
            self.result = await self.client.decide(option_set)
            return self.result
        except FlowError as e:
            self.error = UserFacingError.from_exception(e)
            raise
        finally:
            self.is_loading = False
