"""
DecisionWise: let a language model pick between your options.
"""

from __future__ import annotations

from .decision_service import (
    DecisionClient,
    DecisionSession,
    UserFacingError,
    filter_options,
)
from .flows import (
    AnalyzeOptionsOutput,
    SummarizeOptionsOutput,
    best_option_flow,
    summarize_flow,
)
from .llm import (
    FlowError,
    LLMClient,
    OptionValidationError,
    ProviderError,
    RateLimitError,
)
from .llm.rate_limiting import SlidingWindowRateLimiter, try_acquire

__all__ = [
    "AnalyzeOptionsOutput",
    "DecisionClient",
    "DecisionSession",
    "FlowError",
    "LLMClient",
    "OptionValidationError",
    "ProviderError",
    "RateLimitError",
    "SlidingWindowRateLimiter",
    "SummarizeOptionsOutput",
    "UserFacingError",
    "best_option_flow",
    "filter_options",
    "summarize_flow",
    "try_acquire",
]
