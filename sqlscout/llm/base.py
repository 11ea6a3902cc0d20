"""
Base LLM Provider

Abstract base class defining the interface for all LLM providers.
Every vendor adapter implements a single turn of tool-aware generation:
given the conversation so far and the tools on offer, return either text or
a set of tool calls. The exploration loop depends only on this interface.
"""

import logging
from abc import ABC, abstractmethod

from sqlscout.llm.models import LLMRequest, LLMResponse

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    All LLM providers (OpenAI, Anthropic, Google, Local) must implement
    this interface to ensure consistent behavior across the application.

    Attributes:
        provider_name: Unique identifier for this provider
        model: Default model identifier
        temperature: Default sampling temperature
        max_tokens: Default maximum tokens to generate
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        provider_name: str,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        """
        Initialize base provider.

        Args:
            provider_name: Provider identifier (e.g., "openai", "anthropic")
            model: Default model for requests that do not name one
            temperature: Default temperature for responses
            max_tokens: Default max tokens for responses
            timeout: Request timeout in seconds
        """
        self.provider_name = provider_name
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

        logger.info(
            f"Initialized {provider_name} provider with model: {model}",
            extra={
                "provider": provider_name,
                "model": model,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Run one model turn.

        If ``request.tools`` is non-empty the model may answer with tool
        calls instead of (or in addition to) text; adapters translate the
        vendor-specific tool-calling format to ``LLMResponse.tool_calls`` and
        translate earlier ``tool_calls``/``tool`` messages back.

        Args:
            request: LLM request with messages, tools and parameters

        Returns:
            LLMResponse with generated content, tool calls and metadata

        Raises:
            Exception: Provider-specific errors (API errors, timeouts, etc.)
        """
        pass  # pragma: no cover - abstract method

    async def close(self) -> None:
        """Release network resources held by the provider client."""
        return None

    def _apply_defaults(self, request: LLMRequest) -> LLMRequest:
        """
        Apply default values to request if not specified.

        Args:
            request: Original request

        Returns:
            Request with defaults applied
        """
        if request.temperature is None:
            request.temperature = self.temperature
        if request.max_tokens is None:
            request.max_tokens = self.max_tokens
        return request

    def _log_request(self, request: LLMRequest) -> None:
        """Log request details for debugging."""
        logger.debug(
            f"{self.provider_name} request",
            extra={
                "provider": self.provider_name,
                "message_count": len(request.messages),
                "tool_count": len(request.tools),
                "temperature": request.temperature,
                "max_tokens": request.max_tokens,
            },
        )

    def _log_response(self, response: LLMResponse) -> None:
        """Log response details for debugging."""
        logger.debug(
            f"{self.provider_name} response",
            extra={
                "provider": self.provider_name,
                "model": response.model,
                "tool_calls": [call.name for call in response.tool_calls],
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
                "finish_reason": response.finish_reason,
            },
        )
