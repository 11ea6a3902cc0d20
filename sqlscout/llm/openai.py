"""
OpenAI LLM Provider

Implementation of BaseLLMProvider for OpenAI's chat models using the
Chat Completions function-calling interface.
"""

import json
import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from sqlscout.tools.base import ToolCall, ToolDefinition

logger = logging.getLogger(__name__)


def to_openai_messages(messages: list[LLMMessage]) -> list[dict[str, Any]]:
    """Convert conversation messages to the Chat Completions wire format."""
    converted: list[dict[str, Any]] = []
    for msg in messages:
        if msg.role == "tool":
            converted.append(
                {"role": "tool", "tool_call_id": msg.tool_call_id, "content": msg.content}
            )
        elif msg.role == "assistant" and msg.tool_calls:
            converted.append(
                {
                    "role": "assistant",
                    "content": msg.content or None,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.name,
                                "arguments": json.dumps(call.arguments),
                            },
                        }
                        for call in msg.tool_calls
                    ],
                }
            )
        else:
            converted.append({"role": msg.role, "content": msg.content})
    return converted


def to_openai_tools(tools: list[ToolDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": definition.name,
                "description": definition.description,
                "parameters": definition.parameters_schema,
            },
        }
        for definition in tools
    ]


def parse_tool_arguments(raw: str | None) -> dict[str, Any]:
    """Decode a JSON arguments string; malformed arguments become an empty dict."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Discarding malformed tool arguments: {raw[:100]}")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def map_finish_reason(reason: str | None) -> str:
    """Map an OpenAI-style finish reason to our standard format."""
    if reason in ("stop", "length", "content_filter", "tool_calls"):
        return reason
    if reason == "function_call":
        return "tool_calls"
    return "stop"


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI LLM provider implementation.

    Uses the official openai Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout
        """
        super().__init__(
            provider_name="openai",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.client = AsyncOpenAI(
            api_key=api_key,
            timeout=float(timeout),
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion using OpenAI API.

        Args:
            request: LLM request

        Returns:
            LLMResponse with generated content and tool calls

        Raises:
            openai.APIError: On API errors
            openai.APITimeoutError: On timeout
        """
        request = self._apply_defaults(request)
        self._log_request(request)

        params: dict[str, Any] = {
            "model": request.model or self.model,
            "messages": to_openai_messages(request.messages),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            **request.metadata,
        }
        if request.tools:
            params["tools"] = to_openai_tools(request.tools)

        try:
            response = await self.client.chat.completions.create(**params)
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI API timeout: {e}")
            raise
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        choice = response.choices[0]
        tool_calls = [
            ToolCall(
                id=call.id,
                name=call.function.name,
                arguments=parse_tool_arguments(call.function.arguments),
            )
            for call in (choice.message.tool_calls or [])
        ]
        usage = response.usage

        llm_response = LLMResponse(
            content=choice.message.content or "",
            tool_calls=tool_calls,
            model=response.model,
            usage=LLMUsage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            ),
            finish_reason=map_finish_reason(choice.finish_reason),
            provider="openai",
            metadata={"id": response.id},
        )

        self._log_response(llm_response)
        return llm_response

    async def close(self) -> None:
        await self.client.close()
