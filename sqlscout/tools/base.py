"""Tool system base types and decorator."""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable
from typing import Any, Literal, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)
NONE_TYPE = type(None)
TOOL_DEFINITION_ATTR = "__tool_definition__"


class ToolDefinition(BaseModel):
    name: str
    description: str
    parameters_schema: dict[str, Any]


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Text result fed back to the model for one tool call."""

    call_id: str
    name: str
    content: str
    is_error: bool = False


class ToolContext(BaseModel):
    correlation_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def log_action(self, action: str, metadata: dict[str, Any]) -> None:
        logger.info(
            "tool_action",
            extra={
                "correlation_id": self.correlation_id,
                "action": action,
                "metadata": metadata,
            },
        )


def _extract_parameters_schema(func: Callable[..., Any]) -> dict[str, Any]:
    signature = inspect.signature(func)
    type_hints = get_type_hints(func, include_extras=True)
    properties: dict[str, Any] = {}
    required: list[str] = []

    for name, param in signature.parameters.items():
        if name in ("self", "ctx", "context"):
            continue
        resolved_annotation = type_hints.get(name, param.annotation)
        param_schema = _annotation_to_json_schema(resolved_annotation)
        if param.default is inspect.Parameter.empty:
            required.append(name)
        else:
            if param.default is None:
                param_schema = _ensure_nullable(param_schema)
            else:
                param_schema["default"] = param.default
        properties[name] = param_schema

    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def _annotation_to_json_schema(annotation: Any) -> dict[str, Any]:
    if annotation is inspect.Parameter.empty or annotation is Any:
        return {}

    origin = get_origin(annotation)
    if origin is not None:
        return _origin_to_schema(origin, get_args(annotation))

    if annotation is bool:
        return {"type": "boolean"}
    if annotation is int:
        return {"type": "integer"}
    if annotation is float:
        return {"type": "number"}
    if annotation is str:
        return {"type": "string"}
    if annotation in (list, tuple, set, frozenset):
        return {"type": "array", "items": {}}
    if annotation is NONE_TYPE:
        return {"type": "null"}

    return {"type": "string"}


def _origin_to_schema(origin: Any, args: tuple[Any, ...]) -> dict[str, Any]:
    if origin is Literal:
        values = list(args)
        if not values:
            return {}
        schema: dict[str, Any] = {"enum": values}
        if all(isinstance(value, str) for value in values):
            schema["type"] = "string"
        return schema

    if origin in (list, tuple, set, frozenset):
        item_schema = _annotation_to_json_schema(args[0]) if args else {}
        return {"type": "array", "items": item_schema}

    if origin in (Union, types.UnionType):
        non_none = [arg for arg in args if arg is not NONE_TYPE]
        if len(non_none) == 1:
            base_schema = _annotation_to_json_schema(non_none[0])
            return _ensure_nullable(base_schema) if len(non_none) != len(args) else base_schema
        return {"anyOf": [_annotation_to_json_schema(arg) for arg in args]}

    return _annotation_to_json_schema(origin)


def _ensure_nullable(schema: dict[str, Any]) -> dict[str, Any]:
    if not schema:
        return {"anyOf": [{}, {"type": "null"}]}
    if schema.get("type") == "null":
        return schema
    return {"anyOf": [schema, {"type": "null"}]}


def tool(name: str, description: str):
    """
    Mark a function (or method) as a model-callable tool.

    The JSON schema for its parameters is derived from the signature. The
    definition is stored on the function itself; there is no global registry,
    so each toolbox instance exposes only its own tools.
    """

    def decorator(func: Callable[..., Any]):
        setattr(
            func,
            TOOL_DEFINITION_ATTR,
            ToolDefinition(
                name=name,
                description=description,
                parameters_schema=_extract_parameters_schema(func),
            ),
        )
        return func

    return decorator


def get_tool_definition(func: Callable[..., Any]) -> ToolDefinition | None:
    return getattr(func, TOOL_DEFINITION_ATTR, None)
