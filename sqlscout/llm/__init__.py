"""
LLM Provider Module

Multi-provider, tool-aware LLM abstraction supporting OpenAI, Anthropic,
Google, and Local models.

Usage:
    from sqlscout.llm import LLMProviderFactory, LLMRequest, LLMMessage
    from sqlscout.config import get_settings

    provider = LLMProviderFactory.create_provider(
        "openai", get_settings().llm, api_key="sk-..."
    )
    request = LLMRequest(messages=[LLMMessage(role="user", content="Hello!")])
    response = await provider.generate(request)
    print(response.content, response.tool_calls)
"""

from sqlscout.llm.anthropic import AnthropicProvider
from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.factory import LLMProviderFactory
from sqlscout.llm.google import GoogleProvider
from sqlscout.llm.local import LocalProvider
from sqlscout.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from sqlscout.llm.openai import OpenAIProvider

__all__ = [
    # Base classes
    "BaseLLMProvider",
    # Models
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    # Factory
    "LLMProviderFactory",
    # Providers
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "LocalProvider",
]
