"""Tool execution engine."""

from __future__ import annotations

import inspect
import logging

from sqlscout.tools.base import ToolCall, ToolContext, ToolResult
from sqlscout.tools.documents import DocumentToolbox

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    pass


class ToolExecutor:
    def __init__(self, toolbox: DocumentToolbox) -> None:
        self.toolbox = toolbox

    async def execute(self, call: ToolCall, ctx: ToolContext) -> ToolResult:
        handler = self.toolbox.get_handler(call.name)
        if handler is None:
            raise ToolExecutionError(f"Unknown tool: {call.name}")

        ctx.log_action("tool_invoked", {"tool": call.name, "args": list(call.arguments.keys())})

        try:
            result = handler(**call.arguments)
            if inspect.isawaitable(result):
                result = await result
        except TypeError as exc:
            logger.warning(f"Invalid arguments for tool {call.name}: {exc}")
            raise ToolExecutionError(f"Invalid arguments for {call.name}: {exc}") from exc
        except Exception as exc:
            logger.error(f"Tool execution failed: {call.name} - {exc}")
            raise ToolExecutionError(f"Tool {call.name} failed: {exc}") from exc

        ctx.log_action("tool_completed", {"tool": call.name, "chars": len(result)})
        return ToolResult(call_id=call.id, name=call.name, content=result)

    async def execute_or_report(self, call: ToolCall, ctx: ToolContext) -> ToolResult:
        """Execute a call, turning tool errors into an error result for the model."""
        try:
            return await self.execute(call, ctx)
        except ToolExecutionError as exc:
            return ToolResult(call_id=call.id, name=call.name, content=str(exc), is_error=True)
