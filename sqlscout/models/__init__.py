"""
SQLScout Models Module

Pydantic models for type-safe data validation throughout the application.

Available Models:
    Schema Models:
        - SchemaInfo: Normalized schema description (tables, columns, FKs)
        - TableInfo, ColumnInfo, ForeignKeyInfo

    Agent Models:
        - AgentInput / AgentOutput / AgentMetadata: Agent framework I/O
        - AgentError, LLMError: Agent exceptions
        - StepLogEntry: One recorded tool invocation
        - ParsedResponse / AgentResult: Extracted explanation and SQL
        - ValidationOutcome: Read-only policy verdict
        - Executed / ExecutionUnavailable / ExecutionFailed: Execution outcomes

    API Models:
        - Credentials, QueryRequest, QueryResponse
        - SchemaRequest, SchemaResponse, HealthResponse, ErrorResponse

Usage:
    from sqlscout.models import SchemaInfo, ValidationOutcome
    from sqlscout.models.api import QueryRequest
"""

from sqlscout.models.agent import (
    AgentError,
    AgentInput,
    AgentMetadata,
    AgentOutput,
    AgentResult,
    Executed,
    ExecutionFailed,
    ExecutionOutcome,
    ExecutionUnavailable,
    ExplorerAgentInput,
    ExplorerAgentOutput,
    LLMError,
    ParsedResponse,
    StepLogEntry,
    ValidationOutcome,
)
from sqlscout.models.api import (
    Credentials,
    ErrorResponse,
    HealthResponse,
    QueryRequest,
    QueryResponse,
    SchemaRequest,
    SchemaResponse,
)
from sqlscout.models.schema import ColumnInfo, ForeignKeyInfo, SchemaInfo, TableInfo

__all__ = [
    # Schema
    "SchemaInfo",
    "TableInfo",
    "ColumnInfo",
    "ForeignKeyInfo",
    # Agent framework
    "AgentInput",
    "AgentOutput",
    "AgentMetadata",
    "AgentError",
    "LLMError",
    # Exploration / parsing
    "ExplorerAgentInput",
    "ExplorerAgentOutput",
    "StepLogEntry",
    "ParsedResponse",
    "AgentResult",
    # Validation / execution
    "ValidationOutcome",
    "Executed",
    "ExecutionUnavailable",
    "ExecutionFailed",
    "ExecutionOutcome",
    # API
    "Credentials",
    "QueryRequest",
    "QueryResponse",
    "SchemaRequest",
    "SchemaResponse",
    "HealthResponse",
    "ErrorResponse",
]
