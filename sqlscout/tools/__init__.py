"""Tool system entrypoint."""

from __future__ import annotations

from sqlscout.tools.base import ToolCall, ToolContext, ToolDefinition, ToolResult, tool
from sqlscout.tools.documents import DocumentToolbox
from sqlscout.tools.executor import ToolExecutionError, ToolExecutor

__all__ = [
    "DocumentToolbox",
    "ToolCall",
    "ToolContext",
    "ToolDefinition",
    "ToolExecutionError",
    "ToolExecutor",
    "ToolResult",
    "tool",
]
