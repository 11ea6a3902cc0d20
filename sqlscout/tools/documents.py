"""
Document Toolbox

Read-only tools over a materialized schema document set. The agent can list,
read and search documents; there is deliberately no way to write, so the
schema context it explores is exactly what the materializer produced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable

from sqlscout.tools.base import ToolCall, ToolDefinition, get_tool_definition, tool

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 100


def _normalize_path(path: Any) -> str:
    path = "" if path is None else str(path).strip()
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


class DocumentToolbox:
    """Exposes list/read/search over an immutable document set."""

    def __init__(self, documents: Mapping[str, str]):
        self._documents = MappingProxyType(dict(documents))
        self._handlers: dict[str, Callable[..., str]] = {}
        for attr in ("list_documents", "read_document", "search_documents"):
            handler = getattr(self, attr)
            definition = get_tool_definition(handler)
            self._handlers[definition.name] = handler

    @property
    def documents(self) -> Mapping[str, str]:
        return self._documents

    def definitions(self) -> list[ToolDefinition]:
        return [get_tool_definition(handler) for handler in self._handlers.values()]

    def get_handler(self, name: str) -> Callable[..., str] | None:
        return self._handlers.get(name)

    @tool(
        name="list_documents",
        description=(
            "List schema document paths, optionally only those under a path prefix "
            "such as 'schema/tables/'. Equivalent to `ls`."
        ),
    )
    def list_documents(self, prefix: str | None = "") -> str:
        prefix = _normalize_path(prefix)
        paths = sorted(path for path in self._documents if path.startswith(prefix))
        if not paths:
            return f"No documents found under '{prefix}'."
        return "\n".join(paths)

    @tool(
        name="read_document",
        description=(
            "Read the full text of one schema document, e.g. 'schema/summary.md' or "
            "'schema/tables/orders.md'. Equivalent to `cat`."
        ),
    )
    def read_document(self, path: str) -> str:
        path = _normalize_path(path)
        for candidate in (path, f"{path}.md"):
            if candidate in self._documents:
                return self._documents[candidate]
        return (
            f"Document not found: {path}. "
            "Use list_documents to see the available paths."
        )

    @tool(
        name="search_documents",
        description=(
            "Case-insensitive substring search across schema documents, optionally "
            "restricted to a path prefix. Returns 'path:line: text' matches. "
            "Equivalent to `grep -ri`."
        ),
    )
    def search_documents(self, pattern: str, prefix: str | None = "") -> str:
        pattern = "" if pattern is None else str(pattern)
        if not pattern:
            return "Search pattern must not be empty."
        prefix = _normalize_path(prefix)
        needle = pattern.lower()
        matches: list[str] = []
        for path in sorted(self._documents):
            if not path.startswith(prefix):
                continue
            for line_no, line in enumerate(self._documents[path].splitlines(), start=1):
                if needle in line.lower():
                    matches.append(f"{path}:{line_no}: {line}")
        if not matches:
            return f"No matches for '{pattern}'."
        if len(matches) > MAX_SEARCH_RESULTS:
            omitted = len(matches) - MAX_SEARCH_RESULTS
            matches = matches[:MAX_SEARCH_RESULTS] + [f"... {omitted} more matches omitted"]
        return "\n".join(matches)

    @staticmethod
    def render_command(call: ToolCall) -> str:
        """Shell-style echo of a tool call for the step log."""
        args: dict[str, Any] = call.arguments
        if call.name == "list_documents":
            prefix = _normalize_path(args.get("prefix"))
            return f"$ ls {prefix}".rstrip()
        if call.name == "read_document":
            return f"$ cat {_normalize_path(args.get('path'))}"
        if call.name == "search_documents":
            prefix = _normalize_path(args.get("prefix")) or "schema/"
            return f'$ grep -ri "{args.get("pattern", "")}" {prefix}'
        return f"[{call.name}] executed"
