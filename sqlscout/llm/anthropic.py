"""
Anthropic LLM Provider

Implementation of BaseLLMProvider for Anthropic's Claude models using the
Messages API (tool_use / tool_result content blocks).
"""

import logging
from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from sqlscout.tools.base import ToolCall

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic (Claude) LLM provider implementation.

    Uses the anthropic Python SDK.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            model: Default model to use
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout
        """
        super().__init__(
            provider_name="anthropic",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.client = AsyncAnthropic(api_key=api_key, timeout=float(timeout))

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using Anthropic API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        params: dict[str, Any] = {
            "model": request.model or self.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": self._convert_messages(request.messages),
        }
        # Anthropic requires the system message separately
        if request.system_prompt:
            params["system"] = request.system_prompt
        if request.tools:
            params["tools"] = [
                {
                    "name": definition.name,
                    "description": definition.description,
                    "input_schema": definition.parameters_schema,
                }
                for definition in request.tools
            ]

        try:
            response = await self.client.messages.create(**params)
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise

        text_parts: list[str] = []
        tool_calls: list[ToolCall] = []
        for block in response.content:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                arguments = block.input if isinstance(block.input, dict) else {}
                tool_calls.append(ToolCall(id=block.id, name=block.name, arguments=arguments))

        llm_response = LLMResponse(
            content="".join(text_parts),
            tool_calls=tool_calls,
            model=response.model,
            usage=LLMUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
            finish_reason=self._map_finish_reason(response.stop_reason),
            provider="anthropic",
            metadata={"id": response.id},
        )

        self._log_response(llm_response)
        return llm_response

    async def close(self) -> None:
        await self.client.close()

    def _convert_messages(self, messages: list[LLMMessage]) -> list[dict[str, Any]]:
        """
        Convert messages to Anthropic content blocks.

        Tool results answering one assistant turn must arrive together in a
        single user message, so consecutive tool messages are merged.
        """
        converted: list[dict[str, Any]] = []
        for msg in messages:
            if msg.role == "system":
                continue
            if msg.role == "tool":
                block = {
                    "type": "tool_result",
                    "tool_use_id": msg.tool_call_id,
                    "content": msg.content,
                }
                if msg.is_error:
                    block["is_error"] = True
                previous = converted[-1] if converted else None
                if (
                    previous
                    and previous["role"] == "user"
                    and isinstance(previous["content"], list)
                    and all(item.get("type") == "tool_result" for item in previous["content"])
                ):
                    previous["content"].append(block)
                else:
                    converted.append({"role": "user", "content": [block]})
            elif msg.role == "assistant" and msg.tool_calls:
                blocks: list[dict[str, Any]] = []
                if msg.content:
                    blocks.append({"type": "text", "text": msg.content})
                for call in msg.tool_calls:
                    blocks.append(
                        {"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments}
                    )
                converted.append({"role": "assistant", "content": blocks})
            elif msg.content:
                converted.append({"role": msg.role, "content": msg.content})
        return converted

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map Anthropic stop reason to standard format."""
        if reason == "tool_use":
            return "tool_calls"
        if reason == "max_tokens":
            return "length"
        if reason == "refusal":
            return "content_filter"
        return "stop"
