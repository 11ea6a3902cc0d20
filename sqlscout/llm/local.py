"""
Local LLM Provider

Implementation of BaseLLMProvider for local models.
Supports Ollama, vLLM, llama.cpp server, and any OpenAI-compatible endpoint
that implements function calling on /v1/chat/completions.
"""

import logging
from typing import Any

import httpx

from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.models import LLMRequest, LLMResponse, LLMUsage
from sqlscout.llm.openai import (
    map_finish_reason,
    parse_tool_arguments,
    to_openai_messages,
    to_openai_tools,
)
from sqlscout.tools.base import ToolCall

logger = logging.getLogger(__name__)


class LocalProvider(BaseLLMProvider):
    """
    Local LLM provider implementation.

    Talks to local model servers over plain HTTP using the OpenAI chat
    completions wire format, so tool calls are encoded the same way as for
    the OpenAI provider.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize local provider.

        Args:
            base_url: Base URL for local model server
            model: Model name (e.g., "llama3.1:8b" for Ollama)
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout
            api_key: Optional bearer token for servers that require one
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(
            provider_name="local",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.AsyncClient(
            timeout=float(timeout), headers=headers, transport=transport
        )

        logger.info(
            f"Local provider initialized: {self.base_url} with model: {model}",
            extra={"base_url": self.base_url, "model": model},
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion using local model server.

        Uses OpenAI-compatible /v1/chat/completions endpoint.
        """
        request = self._apply_defaults(request)
        self._log_request(request)

        payload: dict[str, Any] = {
            "model": request.model or self.model,
            "messages": to_openai_messages(request.messages),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": False,
        }
        if request.tools:
            payload["tools"] = to_openai_tools(request.tools)

        response = await self._call_openai_compatible(payload)

        choice = (response.get("choices") or [{}])[0]
        message = choice.get("message") or {}
        tool_calls = [
            ToolCall(
                id=call.get("id") or f"call_{index}",
                name=call.get("function", {}).get("name", ""),
                arguments=parse_tool_arguments(call.get("function", {}).get("arguments")),
            )
            for index, call in enumerate(message.get("tool_calls") or [])
        ]
        usage = response.get("usage") or {}
        prompt_tokens = usage.get("prompt_tokens", 0)
        completion_tokens = usage.get("completion_tokens", 0)

        llm_response = LLMResponse(
            content=message.get("content") or "",
            tool_calls=tool_calls,
            model=response.get("model", self.model),
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            finish_reason="tool_calls" if tool_calls else map_finish_reason(choice.get("finish_reason")),
            provider="local",
            metadata={"base_url": self.base_url},
        )

        self._log_response(llm_response)
        return llm_response

    async def close(self) -> None:
        await self.client.aclose()

    async def _call_openai_compatible(self, payload: dict) -> dict:
        """Call OpenAI-compatible endpoint."""
        response = await self.client.post(
            f"{self.base_url}/v1/chat/completions",
            json=payload,
        )
        response.raise_for_status()
        return response.json()
