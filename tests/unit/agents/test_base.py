"""
Unit tests for BaseAgent

Tests the base agent framework including:
- Abstract class enforcement
- Metadata tracking
- Retry logic for recoverable errors
- Wrapping of unexpected exceptions
"""

from unittest.mock import AsyncMock

import pytest

from sqlscout.agents.base import BaseAgent
from sqlscout.models.agent import AgentError, AgentInput, AgentOutput, LLMError


class CountingAgent(BaseAgent):
    """Agent that raises the queued errors before succeeding."""

    def __init__(self, errors=None, max_retries=1):
        super().__init__(name="CountingAgent", max_retries=max_retries)
        self.errors = list(errors or [])
        self.calls = 0

    async def execute(self, input: AgentInput) -> AgentOutput:
        self.calls += 1
        self._track_llm_call(tokens=10)
        if self.errors:
            raise self.errors.pop(0)
        return AgentOutput(success=True, data={"calls": self.calls}, metadata=self._create_metadata())


@pytest.fixture
def agent_input():
    return AgentInput(query="How many orders?")


class TestBaseAgentInstantiation:
    def test_cannot_instantiate_base_agent_directly(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            BaseAgent(name="TestAgent")

    def test_defaults(self):
        agent = CountingAgent()
        assert agent.name == "CountingAgent"
        assert agent.max_retries == 1


class TestExecution:
    @pytest.mark.asyncio
    async def test_success_sets_metadata(self, agent_input):
        agent = CountingAgent()

        output = await agent(agent_input)

        assert output.success is True
        assert output.metadata.agent_name == "CountingAgent"
        assert output.metadata.llm_calls == 1
        assert output.metadata.tokens_used == 10
        assert output.metadata.completed_at is not None
        assert output.metadata.duration_ms is not None

    @pytest.mark.asyncio
    async def test_recoverable_error_retried_with_fresh_metadata(self, agent_input):
        agent = CountingAgent(errors=[LLMError(agent="CountingAgent", message="rate limited")])
        agent._sleep = AsyncMock()

        output = await agent(agent_input)

        assert output.success is True
        assert agent.calls == 2
        assert output.metadata.llm_calls == 1
        agent._sleep.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, agent_input):
        agent = CountingAgent(
            errors=[LLMError(agent="CountingAgent", message=f"fail {n}") for n in range(3)],
            max_retries=1,
        )
        agent._sleep = AsyncMock()

        with pytest.raises(LLMError, match="fail 1"):
            await agent(agent_input)
        assert agent.calls == 2

    @pytest.mark.asyncio
    async def test_non_recoverable_not_retried(self, agent_input):
        agent = CountingAgent(
            errors=[AgentError(agent="CountingAgent", message="fatal", recoverable=False)]
        )
        agent._sleep = AsyncMock()

        with pytest.raises(AgentError, match="fatal"):
            await agent(agent_input)
        assert agent.calls == 1
        agent._sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_exception_wrapped(self, agent_input):
        agent = CountingAgent(errors=[KeyError("missing")])

        with pytest.raises(AgentError) as exc_info:
            await agent(agent_input)

        assert exc_info.value.recoverable is False
        assert "Unexpected error" in exc_info.value.message
        assert exc_info.value.context == {"error_type": "KeyError"}
        assert isinstance(exc_info.value.__cause__, KeyError)
