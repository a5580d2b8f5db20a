"""
Core LLM dataclasses for provider configuration and chat messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ProviderType(Enum):
    """Supported OpenAI-compatible providers."""
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    GROQ = "groq"
    GEMINI = "gemini"


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class LLMMessage:
    """OpenAI-compatible message structure."""
    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class TokenUsage:
    """Token usage statistics."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    @classmethod
    def from_dict(cls, usage: dict[str, Any] | None) -> TokenUsage | None:
        """Build from an OpenAI-style ``usage`` object, if the provider sent one."""
        if not usage:
            return None
        return cls(
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
        )


@dataclass(frozen=True)
class ProviderConfig:
    """Provider configuration."""
    provider: ProviderType
    base_url: str
    model: str
    api_key: str
    temperature: float = 0.7
    max_tokens: int = 1024
    top_p: float = 1.0

    # Connection settings
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    write_timeout: float = 10.0
    pool_timeout: float = 10.0

    @classmethod
    def from_config(
        cls,
        llm_config: dict[str, Any],
        http_config: dict[str, Any],
        api_key: str,
    ) -> ProviderConfig:
        """Build from the active provider block of ``config.yaml``."""
        return cls(
            provider=detect_provider(llm_config["base_url"]),
            base_url=llm_config["base_url"],
            model=llm_config["model"],
            api_key=api_key,
            temperature=llm_config["temperature"],
            max_tokens=llm_config["max_tokens"],
            top_p=llm_config["top_p"],
            connect_timeout=http_config["connect_timeout"],
            read_timeout=http_config["read_timeout"],
            write_timeout=http_config["write_timeout"],
            pool_timeout=http_config["pool_timeout"],
        )


def detect_provider(base_url: str) -> ProviderType:
    """Detect provider type from base URL."""
    base_url_lower = base_url.lower()

    if "openrouter.ai" in base_url_lower:
        return ProviderType.OPENROUTER
    if "groq.com" in base_url_lower:
        return ProviderType.GROQ
    if "generativelanguage.googleapis.com" in base_url_lower:
        return ProviderType.GEMINI

    return ProviderType.OPENAI  # Default fallback
