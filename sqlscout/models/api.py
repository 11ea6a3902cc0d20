"""
API Request/Response Models

Pydantic models for FastAPI endpoints. Wire names follow the camelCase
field names used by the browser client (supabaseUrl, llmProvider, ...).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sqlscout.models.schema import SchemaInfo


class Credentials(BaseModel):
    """Per-request credentials. Never logged, never cached."""

    supabase_url: str = Field(..., alias="supabaseUrl", min_length=1)
    supabase_anon_key: str = Field(..., alias="supabaseAnonKey", min_length=1, repr=False)
    llm_provider: Literal["openai", "anthropic", "google", "local"] = Field(
        ..., alias="llmProvider"
    )
    llm_model: str | None = Field(
        None, alias="llmModel", description="Optional model override"
    )
    llm_api_key: str | None = Field(None, alias="llmApiKey", repr=False)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def require_api_key(self) -> "Credentials":
        """Hosted providers need an API key; a local model server does not."""
        if self.llm_provider != "local" and not self.llm_api_key:
            raise ValueError(f"llmApiKey is required for the {self.llm_provider} provider")
        return self


class SchemaRequest(BaseModel):
    """Request model for the schema endpoint."""

    supabase_url: str = Field(..., alias="supabaseUrl", min_length=1)
    supabase_anon_key: str = Field(..., alias="supabaseAnonKey", min_length=1, repr=False)

    model_config = ConfigDict(populate_by_name=True)


class SchemaResponse(BaseModel):
    """Response model for the schema endpoint."""

    schema_info: SchemaInfo = Field(..., alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class QueryRequest(BaseModel):
    """Request model for the query endpoint."""

    question: str = Field(..., min_length=1, description="Natural language question")
    credentials: Credentials
    schema_info: SchemaInfo = Field(..., alias="schema")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "question": "Show me the first 5 orders",
                "credentials": {
                    "supabaseUrl": "https://xyzcompany.supabase.co",
                    "supabaseAnonKey": "<anon key>",
                    "llmProvider": "openai",
                    "llmModel": None,
                    "llmApiKey": "<api key>",
                },
                "schema": {"tables": [], "columns": [], "foreignKeys": []},
            }
        },
    )


class QueryResponse(BaseModel):
    """
    Response model for the query endpoint.

    Only fields that were explicitly set are serialized, so each outcome
    keeps its own shape (e.g. extraction failures carry no ``sql``, while an
    unavailable execution carries ``data: null`` and a ``note``).
    """

    success: bool
    error: str | None = None
    explanation: str | None = None
    sql: str | None = None
    steps: list[str] | None = None
    data: list[dict[str, Any]] | None = None
    note: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Service health status")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Check timestamp (ISO 8601)")


class ErrorResponse(BaseModel):
    """Error payload for 4xx/5xx responses."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
