"""
Base Agent Framework

Abstract base class for the model-driven stages of the SQLScout pipeline.
Provides a consistent interface, timing, logging, and retry handling.

Usage:
    agent = SchemaExplorerAgent(provider)
    output = await agent(
        ExplorerAgentInput(query="How many orders?", documents=documents, step_budget=8)
    )
    if output.success:
        print(output.raw_answer)
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from sqlscout.models.agent import (
    AgentError,
    AgentInput,
    AgentMetadata,
    AgentOutput,
)

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """
    Abstract base class for agents.

    The __call__ method wraps execute() with:
        - Performance timing
        - Error handling and logging
        - Retries (with exponential backoff) for recoverable AgentErrors

    Attributes:
        name: Unique identifier for this agent
        max_retries: Maximum number of retry attempts on recoverable errors
    """

    def __init__(self, name: str, max_retries: int = 1):
        """
        Initialize base agent.

        Args:
            name: Unique identifier for this agent (e.g., "SchemaExplorerAgent")
            max_retries: Number of retry attempts for recoverable errors
        """
        self.name = name
        self.max_retries = max_retries
        self._metadata = self._create_metadata()

        logger.debug(
            f"Initialized {self.name}",
            extra={"agent": self.name, "max_retries": max_retries},
        )

    @abstractmethod
    async def execute(self, input: AgentInput) -> AgentOutput:
        """
        Execute the agent's core logic.

        Args:
            input: Typed input data for the agent

        Returns:
            AgentOutput: Typed output data with success status and metadata

        Raises:
            AgentError: On execution failures (recoverable or not)
        """
        pass  # pragma: no cover - abstract method

    async def __call__(self, input: AgentInput) -> AgentOutput:
        """
        Execute the agent with timing, logging, and error handling.

        Each retry runs execute() again from scratch with fresh metadata.

        Raises:
            AgentError: If all retry attempts fail or error is not recoverable
        """
        start_time = time.perf_counter()
        attempt = 0

        logger.info(
            f"Starting {self.name}",
            extra={
                "agent": self.name,
                "query": input.query[:100],
                "context_keys": list(input.context.keys()),
            },
        )

        while True:
            try:
                self._metadata = self._create_metadata()
                output = await self.execute(input)

                duration_ms = (time.perf_counter() - start_time) * 1000
                self._metadata.mark_complete()
                self._metadata.duration_ms = duration_ms
                output.metadata = self._metadata

                logger.info(
                    f"Completed {self.name}",
                    extra={
                        "agent": self.name,
                        "success": output.success,
                        "duration_ms": duration_ms,
                        "attempt": attempt + 1,
                        "llm_calls": self._metadata.llm_calls,
                    },
                )
                return output

            except AgentError as e:
                attempt += 1
                logger.warning(
                    f"Agent error in {self.name}",
                    extra={
                        "agent": self.name,
                        "error": str(e),
                        "recoverable": e.recoverable,
                        "attempt": attempt,
                        "max_retries": self.max_retries,
                        "context": e.context,
                    },
                )

                if not e.recoverable or attempt > self.max_retries:
                    self._metadata.mark_complete()
                    self._metadata.error = str(e)
                    logger.error(
                        f"Failed {self.name} after {attempt} attempts",
                        extra={
                            "agent": self.name,
                            "error": str(e),
                            "duration_ms": (time.perf_counter() - start_time) * 1000,
                            "attempts": attempt,
                        },
                    )
                    raise

                wait_time = 2 ** (attempt - 1)  # 1s, 2s, 4s, ...
                logger.info(
                    f"Retrying {self.name} in {wait_time}s",
                    extra={"agent": self.name, "wait_time": wait_time},
                )
                await self._sleep(wait_time)

            except Exception as e:
                self._metadata.mark_complete()
                self._metadata.error = str(e)
                logger.error(
                    f"Unexpected error in {self.name}",
                    extra={
                        "agent": self.name,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise AgentError(
                    agent=self.name,
                    message=f"Unexpected error: {e}",
                    recoverable=False,
                    context={"error_type": type(e).__name__},
                ) from e

    def _create_metadata(self) -> AgentMetadata:
        return AgentMetadata(agent_name=self.name)

    def _track_llm_call(self, tokens: Optional[int] = None) -> None:
        """
        Track an LLM API call in metadata.

        Args:
            tokens: Optional token count for this call
        """
        self._metadata.llm_calls += 1
        if tokens:
            self._metadata.tokens_used = (self._metadata.tokens_used or 0) + tokens

        logger.debug(
            f"LLM call tracked for {self.name}",
            extra={
                "agent": self.name,
                "total_llm_calls": self._metadata.llm_calls,
                "tokens_this_call": tokens,
                "total_tokens": self._metadata.tokens_used,
            },
        )

    async def _sleep(self, seconds: float) -> None:
        """Async sleep utility for retry backoff."""
        await asyncio.sleep(seconds)
