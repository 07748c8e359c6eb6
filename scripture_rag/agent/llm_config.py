"""
LiteLLM Configuration Module

Unified interface to the chat-completion provider through LiteLLM, which
exposes an OpenAI-compatible API over many providers.

Environment variables:
- LLM_PROVIDER: Provider name (e.g., "openai", "anthropic", "azure")
- LLM_MODEL: Model identifier (e.g., "gpt-4o-mini")
- LLM_API_KEY: API key for the provider (or provider-specific key like OPENAI_API_KEY)
- LLM_BASE_URL: (Optional) Custom base URL for self-hosted or proxy endpoints
- LLM_MAX_TOKENS: (Optional) Max tokens for responses (default: 500)
- LLM_TEMPERATURE: (Optional) Sampling temperature (default: 0.7)
- CHAT_HISTORY_LIMIT: (Optional) Previous messages sent with each request (default: 10)
"""

from typing import Any, Dict, List, Optional

import litellm
from litellm import completion
from pydantic import Field
from pydantic_settings import BaseSettings


class LLMSettings(BaseSettings):
    """LLM configuration settings"""

    # Provider and model
    llm_provider: str = Field(default="openai", description="LLM provider name")
    llm_model: str = Field(default="gpt-4o-mini", description="Model identifier")

    # API credentials
    llm_api_key: Optional[str] = Field(default=None, description="API key for LLM provider")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")

    # Optional configuration
    llm_base_url: Optional[str] = Field(default=None, description="Custom base URL")
    llm_max_tokens: int = Field(default=500, description="Max tokens for completion")
    llm_temperature: float = Field(default=0.7, description="Sampling temperature")
    llm_timeout: int = Field(default=60, description="Request timeout in seconds")
    chat_history_limit: int = Field(
        default=10,
        description="Number of previous conversation messages sent to the model"
    )

    # LiteLLM specific settings
    litellm_drop_params: bool = Field(
        default=True,
        description="Drop unsupported params for each provider"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class LLMClient:
    """Chat-completion client using LiteLLM."""

    def __init__(self, settings: Optional[LLMSettings] = None):
        """
        Initialize LLM client.

        Args:
            settings: LLM settings (defaults to loading from environment)
        """
        self.settings = settings or LLMSettings()
        litellm.drop_params = self.settings.litellm_drop_params
        self.model = self._build_model_string()

    def _api_key(self) -> Optional[str]:
        """Provider-specific key wins over the generic llm_api_key."""
        provider = self.settings.llm_provider.lower()
        if provider == "openai":
            return self.settings.openai_api_key or self.settings.llm_api_key
        if provider == "anthropic":
            return self.settings.anthropic_api_key or self.settings.llm_api_key
        return self.settings.llm_api_key

    def _build_model_string(self) -> str:
        """
        Build LiteLLM model string.

        OpenAI models are passed as-is; other providers use "provider/model".
        """
        provider = self.settings.llm_provider.lower()
        model = self.settings.llm_model

        if provider == "openai" or model.startswith(f"{provider}/"):
            return model
        return f"{provider}/{model}"

    def complete(self, messages: List[Dict[str, str]], **kwargs) -> Any:
        """
        Generate completion using LiteLLM.

        Args:
            messages: List of message dicts with 'role' and 'content'
            **kwargs: Additional parameters to pass to litellm.completion()

        Returns:
            LiteLLM completion response
        """
        params = {
            "model": self.model,
            "messages": messages,
            "max_tokens": kwargs.pop("max_tokens", self.settings.llm_max_tokens),
            "temperature": kwargs.pop("temperature", self.settings.llm_temperature),
            "timeout": kwargs.pop("timeout", self.settings.llm_timeout),
        }

        api_key = self._api_key()
        if api_key:
            params["api_key"] = api_key
        if self.settings.llm_base_url:
            params["api_base"] = self.settings.llm_base_url

        params.update(kwargs)
        return completion(**params)


_default_client: Optional[LLMClient] = None


def get_llm_client(settings: Optional[LLMSettings] = None) -> LLMClient:
    """
    Get or create the default LLM client.

    Args:
        settings: Optional settings (creates new client if provided)

    Returns:
        LLM client instance
    """
    global _default_client

    if settings is not None:
        return LLMClient(settings)

    if _default_client is None:
        _default_client = LLMClient()

    return _default_client
