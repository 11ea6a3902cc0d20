"""
Google LLM Provider

Implementation of BaseLLMProvider for Google's Gemini models using the
google-genai SDK with manual (non-automatic) function calling.
"""

import logging
import uuid
from typing import Any

from google import genai
from google.genai import types

from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from sqlscout.tools.base import ToolCall

logger = logging.getLogger(__name__)


class GoogleProvider(BaseLLMProvider):
    """
    Google (Gemini) LLM provider implementation.

    Gemini attaches thought signatures to function-call parts; the raw model
    content of each turn is kept in ``provider_state`` and replayed verbatim so
    those signatures survive the round trip.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-3-pro-preview",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        """Initialize Google provider."""
        super().__init__(
            provider_name="google",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        # HttpOptions.timeout is expressed in milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout * 1000),
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using Google Gemini API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        model_name = request.model or self.model
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
        )
        if request.tools:
            config.tools = [
                types.Tool(
                    function_declarations=[
                        types.FunctionDeclaration(
                            name=definition.name,
                            description=definition.description,
                            parameters_json_schema=definition.parameters_schema,
                        )
                        for definition in request.tools
                    ]
                )
            ]
            config.automatic_function_calling = types.AutomaticFunctionCallingConfig(disable=True)

        response = await self.client.aio.models.generate_content(
            model=model_name,
            contents=self._convert_messages(request.messages),
            config=config,
        )

        candidate = response.candidates[0] if response.candidates else None
        content = candidate.content if candidate else None
        text_parts: list[str] = []
        tool_calls: list[ToolCall] = []
        for part in (content.parts if content and content.parts else []):
            if part.function_call:
                tool_calls.append(
                    ToolCall(
                        id=part.function_call.id or f"call_{uuid.uuid4().hex[:12]}",
                        name=part.function_call.name,
                        arguments=dict(part.function_call.args or {}),
                    )
                )
            elif part.text and not part.thought:
                text_parts.append(part.text)

        usage = response.usage_metadata
        prompt_tokens = (usage.prompt_token_count or 0) if usage else 0
        completion_tokens = (usage.candidates_token_count or 0) if usage else 0
        raw_reason = str(candidate.finish_reason or "") if candidate else ""

        llm_response = LLMResponse(
            content="".join(text_parts),
            tool_calls=tool_calls,
            model=model_name,
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            finish_reason="tool_calls" if tool_calls else self._map_finish_reason(raw_reason),
            provider="google",
            metadata={"raw_finish_reason": raw_reason},
            provider_state=content,
        )

        self._log_response(llm_response)
        return llm_response

    def _convert_messages(self, messages: list[LLMMessage]) -> list[Any]:
        """Convert messages to Gemini contents, merging consecutive tool results."""
        contents: list[Any] = []
        pending_results: list[Any] = []

        def flush_results() -> None:
            if pending_results:
                contents.append(types.Content(role="user", parts=list(pending_results)))
                pending_results.clear()

        for msg in messages:
            if msg.role == "system":
                continue
            if msg.role == "tool":
                key = "error" if msg.is_error else "result"
                pending_results.append(
                    types.Part.from_function_response(
                        name=msg.name or "tool", response={key: msg.content}
                    )
                )
                continue
            flush_results()
            if msg.role == "assistant":
                if isinstance(msg.provider_state, types.Content):
                    contents.append(msg.provider_state)
                    continue
                parts = [types.Part.from_text(text=msg.content)] if msg.content else []
                parts.extend(
                    types.Part(function_call=types.FunctionCall(name=call.name, args=call.arguments))
                    for call in msg.tool_calls
                )
                if parts:
                    contents.append(types.Content(role="model", parts=parts))
            else:
                contents.append(
                    types.Content(role="user", parts=[types.Part.from_text(text=msg.content)])
                )
        flush_results()
        return contents

    def _map_finish_reason(self, raw_reason: str) -> str:
        raw_reason = raw_reason.lower()
        if any(token in raw_reason for token in ("max_tokens", "length")):
            return "length"
        if any(
            token in raw_reason
            for token in ("safety", "block", "recitation", "prohibited", "spii")
        ):
            return "content_filter"
        if "error" in raw_reason or "malformed" in raw_reason:
            return "error"
        return "stop"
