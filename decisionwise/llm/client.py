"""
HTTP completion client for OpenAI-compatible chat endpoints.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog

from .exceptions import ProviderError
from .models import ProviderConfig, TokenUsage

logger = structlog.get_logger(__name__)


class CompletionBackend(Protocol):
    """Anything that turns chat messages into the model's raw text reply."""

    async def complete(self, messages: list[dict[str, Any]]) -> str: ...


class LLMClient:
    """HTTP client for JSON-mode chat completions."""

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.last_usage: TokenUsage | None = None
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"Authorization": f"Bearer {config.api_key}"},
            timeout=httpx.Timeout(
                connect=config.connect_timeout,
                read=config.read_timeout,
                write=config.write_timeout,
                pool=config.pool_timeout,
            ),
            transport=transport,
        )

    def _provider_error(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ) -> ProviderError:
        return ProviderError(
            message,
            provider=self.config.provider.value,
            model=self.config.model,
            status_code=status_code,
            response_data=response_data,
        )

    async def complete(self, messages: list[dict[str, Any]]) -> str:
        """Get the assistant message content for ``messages``."""
        payload = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            "top_p": self.config.top_p,
            "response_format": {"type": "json_object"},
        }

        try:
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Provider returned an error status",
                provider=self.config.provider.value,
                status_code=e.response.status_code,
            )
            raise self._provider_error(
                f"HTTP error: {e!s}",
                status_code=e.response.status_code,
                response_data={"body": e.response.text},
            ) from e
        except httpx.HTTPError as e:
            logger.error("HTTP error", error=str(e))
            raise self._provider_error(f"HTTP error: {e!s}") from e
        except ValueError as e:
            raise self._provider_error(f"Invalid JSON body: {e!s}") from e

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected response format", error=str(e))
            raise self._provider_error(
                f"Unexpected response format: {e!s}", response_data=result
            ) from e

        if not content:
            raise self._provider_error(
                "Provider returned an empty completion", response_data=result
            )

        self.last_usage = TokenUsage.from_dict(result.get("usage"))
        logger.debug(
            "Completion received",
            model=result.get("model", self.config.model),
            total_tokens=self.last_usage.total_tokens if self.last_usage else None,
        )
        return content

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> LLMClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
