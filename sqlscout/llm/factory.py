"""
LLM Provider Factory

Factory for creating LLM provider instances from per-request credentials.
Supports OpenAI, Anthropic, Google, and Local providers. Providers are built
fresh for every request and never cached, because each one holds the
caller's API key.
"""

import logging

from sqlscout.config import LLMSettings, ProviderName
from sqlscout.llm.anthropic import AnthropicProvider
from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.google import GoogleProvider
from sqlscout.llm.local import LocalProvider
from sqlscout.llm.openai import OpenAIProvider
from sqlscout.models.api import Credentials

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.

    Handles provider selection and default model resolution.
    """

    # Registry of available providers
    PROVIDERS = {
        "openai": OpenAIProvider,
        "anthropic": AnthropicProvider,
        "google": GoogleProvider,
        "local": LocalProvider,
    }

    @staticmethod
    def create_provider(
        provider_type: ProviderName,
        config: LLMSettings,
        api_key: str | None = None,
        model: str | None = None,
    ) -> BaseLLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_type: Type of provider to create
            config: LLM defaults (models, temperature, timeouts)
            api_key: Caller's API key for the provider
            model: Model override; the provider default is used when empty

        Returns:
            Configured provider instance

        Raises:
            ValueError: If provider type is unknown or the API key is missing
        """
        if provider_type not in LLMProviderFactory.PROVIDERS:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {list(LLMProviderFactory.PROVIDERS.keys())}"
            )

        resolved_model = model or config.default_model(provider_type)
        logger.info(
            f"Creating {provider_type} provider with model {resolved_model}",
            extra={"provider": provider_type, "model": resolved_model},
        )

        if provider_type == "local":
            return LocalProvider(
                base_url=config.local_base_url,
                model=resolved_model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.timeout,
                api_key=api_key,
            )

        if not api_key:
            raise ValueError(f"{provider_type} API key is required but was not provided")

        provider_class = LLMProviderFactory.PROVIDERS[provider_type]
        return provider_class(
            api_key=api_key,
            model=resolved_model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )

    @staticmethod
    def create_from_credentials(
        credentials: Credentials,
        config: LLMSettings,
    ) -> BaseLLMProvider:
        """Create the provider named in a request's credentials."""
        return LLMProviderFactory.create_provider(
            credentials.llm_provider,
            config,
            api_key=credentials.llm_api_key,
            model=credentials.llm_model,
        )
