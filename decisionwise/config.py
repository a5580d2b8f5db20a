"""Configuration management for DecisionWise."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")

# Map provider names to environment variable names
PROVIDER_KEY_MAP = {
    "openai": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "groq": "GROQ_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


class Configuration:
    """Manages configuration and environment variables for DecisionWise."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables."""
        self.load_env()  # Load .env for API keys
        self._config = self._load_yaml_config(config_path or DEFAULT_CONFIG_PATH)

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @staticmethod
    def _load_yaml_config(config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def active_provider(self) -> str:
        return self._config.get("llm", {}).get("active", "openai")

    @property
    def llm_api_key(self) -> str:
        """Get the API key for the active LLM provider.

        Returns:
            The API key as a string.

        Raises:
            ValueError: If the API key is not found in environment variables.
        """
        active_provider = self.active_provider

        env_key = PROVIDER_KEY_MAP.get(active_provider)
        if not env_key:
            raise ValueError(
                f"Unknown provider '{active_provider}' - no API key mapping found"
            )

        api_key = os.getenv(env_key)
        if not api_key:
            raise ValueError(
                f"API key '{env_key}' not found in environment variables "
                f"for provider '{active_provider}'"
            )

        return api_key

    def get_llm_config(self) -> dict[str, Any]:
        """Get active LLM provider configuration from YAML.

        Returns:
            Active LLM provider configuration dictionary.

        Raises:
            ValueError: If the active provider or one of its required
                parameters is missing.
        """
        providers = self._config.get("llm", {}).get("providers", {})
        active_provider = self.active_provider

        if active_provider not in providers:
            raise ValueError(
                f"Active provider '{active_provider}' not found in providers config"
            )

        llm_config = providers[active_provider]
        required_keys = ["base_url", "model", "temperature", "max_tokens", "top_p"]
        for key in required_keys:
            if key not in llm_config:
                raise ValueError(
                    f"Required LLM configuration parameter '{key}' not found "
                    f"for provider '{active_provider}' in config.yaml"
                )

        return llm_config

    def get_http_client_config(self) -> dict[str, Any]:
        """Get HTTP client configuration for the active LLM provider.

        Returns:
            HTTP client configuration dictionary with validated values.

        Raises:
            ValueError: If required HTTP client parameters are missing or invalid.
        """
        http_config = self.get_llm_config().get("http_client", {})

        required_keys = [
            "connect_timeout", "read_timeout", "write_timeout", "pool_timeout"
        ]
        for key in required_keys:
            if key not in http_config:
                raise ValueError(
                    f"http_client.{key} must be explicitly configured "
                    f"for provider '{self.active_provider}' in config.yaml"
                )
            if http_config[key] <= 0:
                raise ValueError(f"http_client.{key} must be positive")

        return http_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML.

        Returns:
            Logging configuration with ``level`` and ``format``.
        """
        logging_config = {"level": "INFO", "format": "console"}
        logging_config.update(self._config.get("logging", {}))

        if logging_config["format"] not in ("console", "json"):
            raise ValueError("logging.format must be one of: ['console', 'json']")

        return logging_config
