"""
SQLScout Agents

The stages that turn a question into executed SQL:
- SchemaExplorerAgent: bounded tool-calling exploration of schema documents
- MarkdownResponseParser: extracts explanation and SQL from the final answer
- SQLValidator: read-only policy checks
- QueryExecutionBridge: runs the vetted statement and classifies the outcome
"""

from sqlscout.agents.base import BaseAgent
from sqlscout.agents.executor import QueryExecutionBridge
from sqlscout.agents.explorer import SchemaExplorerAgent, explore_schema
from sqlscout.agents.response_parser import (
    BaseResponseParser,
    MarkdownResponseParser,
    parse_response,
)
from sqlscout.agents.validator import SQLValidator, validate_sql

__all__ = [
    "BaseAgent",
    "SchemaExplorerAgent",
    "explore_schema",
    "BaseResponseParser",
    "MarkdownResponseParser",
    "parse_response",
    "SQLValidator",
    "validate_sql",
    "QueryExecutionBridge",
]
