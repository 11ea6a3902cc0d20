"""
Tests for Anthropic Provider.

Tests message conversion and tool_use parsing with mocked API calls.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from sqlscout.llm.anthropic import AnthropicProvider
from sqlscout.llm.models import LLMMessage, LLMRequest
from sqlscout.tools.base import ToolCall, ToolDefinition


@pytest.fixture
def provider():
    return AnthropicProvider(api_key="sk-ant-test-key", model="claude-sonnet-4-20250514")


def _response(blocks, stop_reason="end_turn"):
    return SimpleNamespace(
        id="msg_123",
        model="claude-sonnet-4-20250514",
        content=blocks,
        stop_reason=stop_reason,
        usage=SimpleNamespace(input_tokens=12, output_tokens=4),
    )


class TestGenerate:
    @pytest.mark.asyncio
    async def test_system_prompt_sent_separately(self, provider):
        with patch.object(
            provider.client.messages,
            "create",
            new_callable=AsyncMock,
            return_value=_response([SimpleNamespace(type="text", text="Done")]),
        ) as mock_create:
            request = LLMRequest(
                messages=[
                    LLMMessage(role="system", content="Be precise"),
                    LLMMessage(role="user", content="Hi"),
                ]
            )
            response = await provider.generate(request)

        kwargs = mock_create.call_args.kwargs
        assert kwargs["system"] == "Be precise"
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]
        assert "tools" not in kwargs
        assert response.content == "Done"
        assert response.usage.total_tokens == 16
        assert response.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_tool_use_blocks_parsed(self, provider):
        blocks = [
            SimpleNamespace(type="text", text="Let me look."),
            SimpleNamespace(
                type="tool_use", id="toolu_1", name="read_document", input={"path": "schema/summary.md"}
            ),
        ]
        tool = ToolDefinition(
            name="read_document",
            description="Read",
            parameters_schema={"type": "object", "properties": {}},
        )

        with patch.object(
            provider.client.messages,
            "create",
            new_callable=AsyncMock,
            return_value=_response(blocks, stop_reason="tool_use"),
        ) as mock_create:
            request = LLMRequest(messages=[LLMMessage(role="user", content="Q")], tools=[tool])
            response = await provider.generate(request)

        assert mock_create.call_args.kwargs["tools"][0]["input_schema"] == {
            "type": "object",
            "properties": {},
        }
        assert response.content == "Let me look."
        assert response.finish_reason == "tool_calls"
        assert response.tool_calls[0].id == "toolu_1"
        assert response.tool_calls[0].arguments == {"path": "schema/summary.md"}


class TestConvertMessages:
    def test_consecutive_tool_results_merged(self, provider):
        messages = [
            LLMMessage(role="user", content="Q"),
            LLMMessage(
                role="assistant",
                content="",
                tool_calls=[
                    ToolCall(id="t1", name="list_documents", arguments={}),
                    ToolCall(id="t2", name="read_document", arguments={"path": "x"}),
                ],
            ),
            LLMMessage(role="tool", content="a", tool_call_id="t1"),
            LLMMessage(role="tool", content="b", tool_call_id="t2", is_error=True),
        ]

        converted = provider._convert_messages(messages)

        assert len(converted) == 3
        assert [block["type"] for block in converted[1]["content"]] == ["tool_use", "tool_use"]
        assert converted[2]["role"] == "user"
        assert converted[2]["content"] == [
            {"type": "tool_result", "tool_use_id": "t1", "content": "a"},
            {"type": "tool_result", "tool_use_id": "t2", "content": "b", "is_error": True},
        ]

    @pytest.mark.parametrize(
        "raw,expected",
        [("tool_use", "tool_calls"), ("max_tokens", "length"), ("end_turn", "stop"), (None, "stop")],
    )
    def test_finish_reason_mapping(self, provider, raw, expected):
        assert provider._map_finish_reason(raw) == expected
