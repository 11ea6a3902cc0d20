"""
Agent I/O Models

Pydantic models for agent inputs, outputs, and error handling.
The exploration agent, response parser, validator and execution bridge
exchange these models so every stage of the pipeline stays typed.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class AgentMetadata(BaseModel):
    """Metadata about agent execution."""

    agent_name: str
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    duration_ms: float | None = None
    llm_calls: int = 0
    tokens_used: int | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=False)

    def mark_complete(self) -> None:
        """Mark execution as complete and calculate duration."""
        self.completed_at = datetime.now(UTC)
        if self.started_at:
            delta = self.completed_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000


class AgentInput(BaseModel):
    """
    Base input model for all agents.

    Each agent should extend this with their specific input fields.
    """

    query: str = Field(..., description="User's natural language question")
    context: dict[str, Any] = Field(
        default_factory=dict, description="Additional context passed between agents"
    )


class AgentOutput(BaseModel):
    """
    Base output model for all agents.

    Each agent should extend this with their specific output fields.
    The metadata field tracks execution details for observability.
    """

    success: bool = Field(..., description="Whether the agent executed successfully")
    data: dict[str, Any] = Field(default_factory=dict, description="Agent-specific output data")
    metadata: AgentMetadata = Field(..., description="Execution metadata")


class AgentError(Exception):
    """
    Custom exception for agent execution errors.

    Attributes:
        agent: Name of the agent that raised the error
        message: Error description
        recoverable: Whether the agent framework may retry
        context: Additional context for debugging
    """

    def __init__(
        self,
        agent: str,
        message: str,
        recoverable: bool = True,
        context: dict[str, Any] | None = None,
    ):
        self.agent = agent
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}
        super().__init__(f"[{agent}] {message}")


class LLMError(AgentError):
    """Error during LLM API call (usually recoverable with retry)."""

    def __init__(self, agent: str, message: str, context: dict[str, Any] | None = None):
        super().__init__(agent, message, recoverable=True, context=context)


# ============================================================================
# SchemaExplorerAgent Models
# ============================================================================


class StepLogEntry(BaseModel):
    """One tool invocation made while exploring the schema documents."""

    tool: str = Field(..., description="Capability name (list_documents, read_document, ...)")
    command: str = Field(..., description="Shell-style rendering, e.g. '$ cat schema/summary.md'")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.command


class ExplorerAgentInput(AgentInput):
    """Input for SchemaExplorerAgent."""

    documents: dict[str, str] = Field(
        ..., description="Materialized schema documents keyed by path"
    )
    step_budget: int = Field(
        default=10, ge=1, description="Maximum tool invocations before the loop stops"
    )


class ExplorerAgentOutput(AgentOutput):
    """Output from SchemaExplorerAgent."""

    raw_answer: str = Field(default="", description="Final (or last) text from the model")
    steps: list[StepLogEntry] = Field(default_factory=list, description="Ordered tool steps")
    budget_exhausted: bool = Field(
        default=False, description="True when the loop stopped on the step budget"
    )


class ParsedResponse(BaseModel):
    """Structured fields extracted from the model's final answer."""

    explanation: str = Field(default="", description="Model's explanation of the query")
    sql: str = Field(default="", description="Extracted SQL (empty = extraction failure)")


class AgentResult(ParsedResponse):
    """Parsed answer together with the exploration steps that produced it."""

    steps: list[StepLogEntry] = Field(default_factory=list)

    @property
    def has_sql(self) -> bool:
        return bool(self.sql.strip())


# ============================================================================
# Validation Models
# ============================================================================


class ValidationOutcome(BaseModel):
    """Result of the read-only SQL policy check."""

    valid: bool = Field(..., description="Whether the SQL passed every rule")
    reason: str | None = Field(None, description="Violated rule (present iff invalid)")
    rule: str | None = Field(None, description="Identifier of the violated rule")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def rejected(cls, rule: str, reason: str) -> "ValidationOutcome":
        return cls(valid=False, rule=rule, reason=reason)


# ============================================================================
# Execution Models
# ============================================================================


class Executed(BaseModel):
    """The query ran and returned rows."""

    status: Literal["executed"] = "executed"
    rows: list[dict[str, Any]] = Field(default_factory=list)
    execution_time_ms: float | None = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


class ExecutionUnavailable(BaseModel):
    """The execution RPC is not set up on the target; SQL is still returned."""

    status: Literal["unavailable"] = "unavailable"
    diagnostic: str
    sql: str
    explanation: str = ""


class ExecutionFailed(BaseModel):
    """The RPC ran but the database rejected the statement."""

    status: Literal["error"] = "error"
    diagnostic: str


ExecutionOutcome = Annotated[
    Executed | ExecutionUnavailable | ExecutionFailed,
    Field(discriminator="status"),
]
