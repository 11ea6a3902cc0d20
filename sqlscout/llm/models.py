"""
LLM Request and Response Models

Pydantic models for LLM provider interactions.
Provider-agnostic models that work across OpenAI, Anthropic, Google, etc.,
including tool definitions offered to the model and tool calls it makes.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from sqlscout.tools.base import ToolCall, ToolDefinition, ToolResult

FinishReason = Literal["stop", "length", "content_filter", "error", "tool_calls"]


class LLMMessage(BaseModel):
    """Single message in an LLM conversation."""

    role: Literal["system", "user", "assistant", "tool"] = Field(
        ...,
        description="Message role"
    )
    content: str = Field(
        default="",
        description="Message content (may be empty for assistant tool-call turns)"
    )
    tool_calls: List[ToolCall] = Field(
        default_factory=list,
        description="Tool calls made by the assistant in this turn"
    )
    tool_call_id: Optional[str] = Field(
        None,
        description="For role='tool': id of the call this message answers"
    )
    name: Optional[str] = Field(
        None,
        description="For role='tool': name of the tool that produced the result"
    )
    is_error: bool = Field(
        default=False,
        description="For role='tool': whether the tool reported an error"
    )
    provider_state: Any = Field(
        default=None,
        exclude=True,
        description="Opaque provider-native turn (e.g. Gemini content with thought signatures)"
    )

    @model_validator(mode="after")
    def check_role_fields(self) -> "LLMMessage":
        if self.role == "tool" and not self.tool_call_id:
            raise ValueError("tool messages require tool_call_id")
        if self.role in ("system", "user") and not self.content:
            raise ValueError(f"{self.role} messages require content")
        return self

    @classmethod
    def from_tool_result(cls, result: ToolResult) -> "LLMMessage":
        return cls(
            role="tool",
            content=result.content,
            tool_call_id=result.call_id,
            name=result.name,
            is_error=result.is_error,
        )


class LLMRequest(BaseModel):
    """Request to an LLM provider."""

    messages: List[LLMMessage] = Field(
        ...,
        description="Conversation messages",
        min_length=1
    )
    tools: List[ToolDefinition] = Field(
        default_factory=list,
        description="Tools the model may call in this turn"
    )
    temperature: Optional[float] = Field(
        None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (overrides default)"
    )
    max_tokens: Optional[int] = Field(
        None,
        gt=0,
        description="Maximum tokens to generate (overrides default)"
    )
    model: Optional[str] = Field(
        None,
        description="Specific model to use (overrides default)"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional provider-specific parameters"
    )

    @property
    def system_prompt(self) -> Optional[str]:
        parts = [msg.content for msg in self.messages if msg.role == "system"]
        return "\n\n".join(parts) if parts else None


class LLMUsage(BaseModel):
    """Token usage information."""

    prompt_tokens: int = Field(
        default=0,
        ge=0,
        description="Number of tokens in the prompt"
    )
    completion_tokens: int = Field(
        default=0,
        ge=0,
        description="Number of tokens in the completion"
    )
    total_tokens: int = Field(
        default=0,
        ge=0,
        description="Total tokens used"
    )


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    content: str = Field(
        default="",
        description="Generated text content"
    )
    tool_calls: List[ToolCall] = Field(
        default_factory=list,
        description="Tool calls requested by the model"
    )
    model: str = Field(
        ...,
        description="Model that generated the response"
    )
    usage: LLMUsage = Field(
        default_factory=LLMUsage,
        description="Token usage information"
    )
    finish_reason: FinishReason = Field(
        ...,
        description="Reason the generation stopped"
    )
    provider: str = Field(
        ...,
        description="Provider that handled the request (openai, anthropic, etc.)"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional provider-specific response data"
    )
    provider_state: Any = Field(
        default=None,
        exclude=True,
        description="Opaque provider-native turn to replay in the next request"
    )

    def to_message(self) -> LLMMessage:
        """Assistant message that replays this response in the conversation."""
        return LLMMessage(
            role="assistant",
            content=self.content,
            tool_calls=list(self.tool_calls),
            provider_state=self.provider_state,
        )
