"""
Tests for DecisionClient and DecisionSession.
"""

import asyncio
import json

import pytest

from decisionwise.decision_service import (
    DecisionClient,
    DecisionSession,
    UserFacingError,
    filter_options,
)
from decisionwise.flows import best_option_flow, summarize_flow
from decisionwise.llm.exceptions import (
    FlowError,
    OptionValidationError,
    RateLimitError,
)
from decisionwise.llm.rate_limiting import RetryCountdown, SlidingWindowRateLimiter


class FakeBackend:
    """Completion backend that replays a canned reply."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply or json.dumps(
            {"bestOption": "Pizza", "reasoning": "Cheese is destiny 🧀"}
        )
        self.error = error
        self.calls: list[list[dict]] = []

    async def complete(self, messages):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.reply


class FakeClock:
    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


async def instant_sleep(_seconds: float) -> None:
    await asyncio.sleep(0)


def make_session(backend: FakeBackend, clock: FakeClock | None = None):
    client = DecisionClient(best_option_flow(backend), summarize_flow(backend))
    limiter = SlidingWindowRateLimiter(clock=clock or FakeClock())
    return DecisionSession(client, limiter, RetryCountdown(sleep=instant_sleep))


class TestFilterOptions:

    def test_trims_and_drops_blank(self):
        assert filter_options(["Pizza", "  ", "Tacos"]) == ["Pizza", "Tacos"]

    def test_keeps_duplicates_and_order(self):
        assert filter_options([" b", "a ", "b"]) == ["b", "a", "b"]

    def test_empty(self):
        assert filter_options([]) == []


class TestDecisionClient:

    @pytest.mark.asyncio
    async def test_two_options_pass(self):
        backend = FakeBackend()
        client = DecisionClient(best_option_flow(backend))
        result = await client.decide(["Pizza", "  ", "Tacos"])
        assert result.best_option == "Pizza"
        assert "- Pizza\n- Tacos\n" in backend.calls[0][1]["content"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("options", [[], ["OnlyOne"], ["OnlyOne", "   ", ""]])
    async def test_too_few_options_no_call(self, options):
        backend = FakeBackend()
        client = DecisionClient(best_option_flow(backend))
        with pytest.raises(OptionValidationError) as exc_info:
            await client.decide(options)
        assert backend.calls == []
        assert exc_info.value.title == "Not enough options"
        assert exc_info.value.user_message == (
            "Please provide at least two options to choose from."
        )

    @pytest.mark.asyncio
    async def test_flow_failure_is_flow_error(self):
        backend = FakeBackend(error=ConnectionError("unreachable"))
        client = DecisionClient(best_option_flow(backend))
        with pytest.raises(FlowError) as exc_info:
            await client.decide(["a", "b"])
        assert exc_info.value.user_message == (
            "Something went wrong. Please try again later."
        )

    @pytest.mark.asyncio
    async def test_summarize_has_no_minimum(self):
        backend = FakeBackend(json.dumps({"summary": "Just one thing."}))
        client = DecisionClient(best_option_flow(backend), summarize_flow(backend))
        result = await client.summarize(["OnlyOne"])
        assert result.summary == "Just one thing."

    @pytest.mark.asyncio
    async def test_summarize_requires_flow(self):
        client = DecisionClient(best_option_flow(FakeBackend()))
        with pytest.raises(RuntimeError):
            await client.summarize(["a"])


class TestDecisionSessionOptions:

    def test_starts_with_two_blank_options(self):
        session = make_session(FakeBackend())
        assert session.options == ["", ""]

    def test_add_update_remove(self):
        session = make_session(FakeBackend())
        session.add_option()
        session.update_option(0, "Pizza")
        session.update_option(2, "Sushi")
        assert session.options == ["Pizza", "", "Sushi"]

        session.remove_option(1)
        assert session.options == ["Pizza", "Sushi"]

    def test_cannot_remove_below_two(self):
        session = make_session(FakeBackend())
        session.remove_option(0)
        assert session.options == ["", ""]

    def test_set_options_pads_to_two(self):
        session = make_session(FakeBackend())
        session.set_options(["Pizza"])
        assert session.options == ["Pizza", ""]


class TestDecisionSessionSubmit:

    @pytest.mark.asyncio
    async def test_successful_submit(self):
        backend = FakeBackend()
        clock = FakeClock(1000)
        session = make_session(backend, clock)
        session.set_options(["Pizza", "  ", "Tacos"])

        result = await session.submit()

        assert result.best_option == "Pizza"
        assert session.result is result
        assert session.error is None
        assert session.is_loading is False
        assert session.rate_limiter.history == (1000,)

    @pytest.mark.asyncio
    async def test_validation_error_leaves_window_unchanged(self):
        backend = FakeBackend()
        session = make_session(backend)
        session.set_options(["OnlyOne"])

        with pytest.raises(OptionValidationError):
            await session.submit()

        assert backend.calls == []
        assert session.rate_limiter.history == ()
        assert session.error == UserFacingError(
            "Not enough options",
            "Please provide at least two options to choose from.",
        )

    @pytest.mark.asyncio
    async def test_failed_flow_still_records_timestamp(self):
        backend = FakeBackend(error=RuntimeError("boom"))
        clock = FakeClock(42)
        session = make_session(backend, clock)
        session.set_options(["a", "b"])

        with pytest.raises(FlowError):
            await session.submit()

        assert session.rate_limiter.history == (42,)
        assert session.result is None
        assert session.is_loading is False
        assert session.error == UserFacingError(
            "An error occurred", "Something went wrong. Please try again later."
        )

    @pytest.mark.asyncio
    async def test_sixth_submit_is_rate_limited(self):
        backend = FakeBackend()
        clock = FakeClock(0)
        session = make_session(backend, clock)
        session.set_options(["a", "b"])

        for i in range(5):
            clock.now = i * 1000
            await session.submit()

        clock.now = 5000
        with pytest.raises(RateLimitError) as exc_info:
            await session.submit()

        assert exc_info.value.retry_after == 356
        assert len(backend.calls) == 5
        assert session.rate_limiter.history == (0, 1000, 2000, 3000, 4000)
        assert session.error.title == "Too many requests"
        assert "356 seconds" in session.error.description
        assert session.countdown.remaining == 356
        session.countdown.cancel()

    @pytest.mark.asyncio
    async def test_rate_limit_checked_before_validation(self):
        backend = FakeBackend()
        clock = FakeClock(0)
        session = make_session(backend, clock)
        for _ in range(5):
            session.rate_limiter.record()

        session.set_options(["OnlyOne"])
        with pytest.raises(RateLimitError):
            await session.submit()
        session.countdown.cancel()

    @pytest.mark.asyncio
    async def test_window_reopens_after_expiry(self):
        backend = FakeBackend()
        clock = FakeClock(0)
        session = make_session(backend, clock)
        session.set_options(["a", "b"])
        for _ in range(5):
            await session.submit()

        clock.now = 360_000
        result = await session.submit()
        assert result is not None
        assert session.rate_limiter.history == (360_000,)

    @pytest.mark.asyncio
    async def test_finished_countdown_still_rechecks_window(self):
        backend = FakeBackend()
        clock = FakeClock(0)
        session = make_session(backend, clock)
        session.set_options(["a", "b"])
        for _ in range(5):
            await session.submit()

        with pytest.raises(RateLimitError):
            await session.submit()

        await session.countdown.wait()
        assert session.countdown.remaining == 0

        with pytest.raises(RateLimitError) as exc_info:
            await session.submit()
        assert exc_info.value.retry_after == 360
        assert len(backend.calls) == 5
        session.countdown.cancel()

    @pytest.mark.asyncio
    async def test_submit_during_countdown_is_ignored(self):
        backend = FakeBackend()
        clock = FakeClock(0)
        session = make_session(backend, clock)
        session.countdown = RetryCountdown()
        session.set_options(["a", "b"])
        for _ in range(5):
            await session.submit()

        clock.now = 5000
        with pytest.raises(RateLimitError):
            await session.submit()
        error = session.error
        assert session.countdown.remaining == 356

        clock.now = 6000
        assert await session.submit() is None
        assert session.error is error
        assert session.countdown.remaining == 356
        assert len(backend.calls) == 5
        session.countdown.cancel()

    @pytest.mark.asyncio
    async def test_submit_while_loading_is_ignored(self):
        backend = FakeBackend()
        session = make_session(backend)
        session.set_options(["a", "b"])
        session.is_loading = True

        assert await session.submit() is None
        assert backend.calls == []
        assert session.rate_limiter.history == ()
