"""
LLM integration for DecisionWise.

This package provides:
- An httpx client for OpenAI-compatible chat completions
- Provider and message dataclasses
- The error taxonomy surfaced to users
- Client-side rate limiting
"""

from __future__ import annotations

from .client import CompletionBackend, LLMClient
from .exceptions import (
    DecisionWiseError,
    FlowError,
    OptionValidationError,
    ProviderError,
    RateLimitError,
)
from .models import (
    LLMMessage,
    MessageRole,
    ProviderConfig,
    ProviderType,
    TokenUsage,
    detect_provider,
)

__all__ = [
    # Client
    "CompletionBackend",
    # Exceptions
    "DecisionWiseError",
    "FlowError",
    "LLMClient",
    # Core models
    "LLMMessage",
    "MessageRole",
    "OptionValidationError",
    "ProviderConfig",
    "ProviderError",
    "ProviderType",
    "RateLimitError",
    "TokenUsage",
    "detect_provider",
]
