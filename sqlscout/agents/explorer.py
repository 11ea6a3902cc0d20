"""
SchemaExplorerAgent: bounded tool-calling exploration of the schema documents.

The agent gives the model three read-only tools over the materialized schema
documents and runs the conversation until the model answers in plain text or
the step budget is spent:

1. Send the system instruction and the user's question, with tool definitions
2. If the model asks for tools, run them one by one, log each as a step and
   feed the results back
3. Stop on a text-only answer, or after ``step_budget`` tool invocations

The raw answer is returned unparsed; extracting SQL is the parser's job.
"""

import logging
import uuid
from typing import Optional

from sqlscout.agents.base import BaseAgent
from sqlscout.config import AgentSettings
from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.models import LLMMessage, LLMRequest
from sqlscout.models.agent import (
    AgentError,
    ExplorerAgentInput,
    ExplorerAgentOutput,
    LLMError,
    StepLogEntry,
)
from sqlscout.prompts.loader import PromptLoader
from sqlscout.tools.base import ToolContext
from sqlscout.tools.documents import DocumentToolbox
from sqlscout.tools.executor import ToolExecutor

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_PATH = "system/sql_explorer.md"
DEFAULT_ROW_LIMIT = 100


class SchemaExplorerAgent(BaseAgent):
    """
    Drives the model through the schema documents until it proposes a query.

    The agent is built per request around a single provider and holds no
    state between runs apart from the provider reference.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        settings: Optional[AgentSettings] = None,
        prompts: Optional[PromptLoader] = None,
    ):
        self.settings = settings or AgentSettings()
        super().__init__(name="SchemaExplorerAgent", max_retries=self.settings.max_retries)
        self.provider = provider
        self.prompts = prompts or PromptLoader()

    async def run(
        self,
        documents: dict[str, str],
        question: str,
        step_budget: Optional[int] = None,
    ) -> ExplorerAgentOutput:
        """Explore ``documents`` to answer ``question``; retries are handled by __call__."""
        agent_input = ExplorerAgentInput(
            query=question,
            documents=documents,
            step_budget=self.settings.step_budget if step_budget is None else step_budget,
        )
        return await self(agent_input)

    async def execute(self, input: ExplorerAgentInput) -> ExplorerAgentOutput:
        toolbox = DocumentToolbox(input.documents)
        executor = ToolExecutor(toolbox)
        tools = toolbox.definitions()
        ctx = ToolContext(
            correlation_id=f"explore-{uuid.uuid4().hex[:12]}",
            metadata={"agent": self.name},
        )

        messages = [
            LLMMessage(role="system", content=self._system_prompt(toolbox)),
            LLMMessage(role="user", content=input.query),
        ]
        steps: list[StepLogEntry] = []
        last_text = ""

        while True:
            try:
                response = await self.provider.generate(
                    LLMRequest(messages=messages, tools=tools)
                )
            except AgentError:
                raise
            except Exception as e:
                logger.error(f"LLM call failed: {e}")
                raise LLMError(
                    agent=self.name,
                    message=f"LLM exploration failed: {e}",
                    context={"steps_completed": len(steps)},
                ) from e

            self._track_llm_call(tokens=response.usage.total_tokens)
            if response.content.strip():
                last_text = response.content

            if not response.tool_calls:
                return self._build_output(response.content or last_text, steps, exhausted=False)

            remaining = input.step_budget - len(steps)
            calls = response.tool_calls[:remaining]
            if len(calls) < len(response.tool_calls):
                logger.info(
                    "Dropping tool calls beyond the step budget",
                    extra={
                        "correlation_id": ctx.correlation_id,
                        "requested": len(response.tool_calls),
                        "executed": len(calls),
                    },
                )

            messages.append(response.to_message())
            for call in calls:
                entry = StepLogEntry(tool=call.name, command=toolbox.render_command(call))
                steps.append(entry)
                logger.info(
                    f"Exploration step {len(steps)}: {entry.command}",
                    extra={"correlation_id": ctx.correlation_id, "tool": call.name},
                )
                result = await executor.execute_or_report(call, ctx)
                messages.append(LLMMessage.from_tool_result(result))

            if len(steps) >= input.step_budget:
                logger.warning(
                    f"Step budget of {input.step_budget} exhausted",
                    extra={"correlation_id": ctx.correlation_id},
                )
                return self._build_output(last_text, steps, exhausted=True)

    def _system_prompt(self, toolbox: DocumentToolbox) -> str:
        return self.prompts.render(
            SYSTEM_PROMPT_PATH,
            tools=toolbox.definitions(),
            dialect=self.settings.sql_dialect,
            row_limit=DEFAULT_ROW_LIMIT,
        )

    def _build_output(
        self, raw_answer: str, steps: list[StepLogEntry], exhausted: bool
    ) -> ExplorerAgentOutput:
        return ExplorerAgentOutput(
            success=bool(raw_answer.strip()),
            data={"step_count": len(steps)},
            metadata=self._metadata,
            raw_answer=raw_answer,
            steps=steps,
            budget_exhausted=exhausted,
        )


async def explore_schema(
    documents: dict[str, str],
    question: str,
    provider: BaseLLMProvider,
    step_budget: int = 10,
) -> ExplorerAgentOutput:
    """Run one exploration with default settings."""
    agent = SchemaExplorerAgent(provider, settings=AgentSettings(step_budget=step_budget))
    return await agent.run(documents, question)
