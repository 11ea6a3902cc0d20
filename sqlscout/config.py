"""
Application Configuration

Pydantic-based settings management using environment variables.
Only defaults live here (models, budgets, timeouts). Request credentials
(Supabase URL/key, LLM API key) always travel with the request and are
never read from or stored in settings.

Usage:
    from sqlscout.config import get_settings

    settings = get_settings()
    print(settings.agent.step_budget)
    print(settings.llm.default_model("anthropic"))
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["openai", "anthropic", "google", "local"]


class LLMSettings(BaseSettings):
    """LLM provider defaults."""

    openai_model: str = Field(default="gpt-4o-mini", description="Default OpenAI model")
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514", description="Default Anthropic model"
    )
    google_model: str = Field(default="gemini-3-pro-preview", description="Default Google model")

    # Local model configuration
    local_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL for local model server (Ollama, vLLM, etc.)",
    )
    local_model: str = Field(default="llama3.1:8b", description="Local model name")

    # Common settings
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        description="Temperature for LLM responses (0.0 = deterministic)",
    )
    max_tokens: int = Field(
        default=2000,
        gt=0,
        le=16000,
        description="Maximum tokens per LLM response",
    )
    timeout: int = Field(
        default=30,
        gt=0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    def default_model(self, provider: ProviderName) -> str:
        """Return the configured default model for a provider."""
        return {
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
            "google": self.google_model,
            "local": self.local_model,
        }[provider]


class AgentSettings(BaseSettings):
    """Schema exploration agent configuration."""

    step_budget: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum tool invocations per question before the loop stops",
    )
    max_retries: int = Field(
        default=1,
        ge=0,
        le=5,
        description="Retries of the whole exploration loop on recoverable provider errors",
    )
    sql_dialect: str = Field(
        default="PostgreSQL",
        description="SQL dialect the agent is instructed to produce",
    )

    model_config = SettingsConfigDict(
        env_prefix="AGENT_",
        env_file=".env",
        extra="ignore",
    )


class ExecutionSettings(BaseSettings):
    """Remote query execution (PostgREST RPC) configuration."""

    rpc_function: str = Field(
        default="execute_query",
        description="Name of the RPC function that runs read-only SQL",
    )
    rpc_argument: str = Field(
        default="query_text",
        description="Name of the RPC function's SQL text argument",
    )
    timeout: int = Field(
        default=30,
        gt=0,
        description="HTTP timeout for schema fetch and query execution in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="EXECUTION_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("rpc_function", "rpc_argument")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """RPC names are interpolated into the URL and payload."""
        if not v.replace("_", "").isalnum():
            raise ValueError("RPC names may only contain letters, digits and underscores")
        return v


class PipelineSettings(BaseSettings):
    """Per-request pipeline configuration."""

    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Upper bound on the total latency of one question",
    )

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stdout only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Settings are nested by domain (llm, agent, execution, pipeline, logging).

    Environment Variables:
        ENVIRONMENT: Deployment environment (development, staging, production)
        APP_NAME: Application name for logging
        DEBUG: Enable debug mode
        API_HOST: API server host
        API_PORT: API server port
        LLM_*: LLM provider defaults (see LLMSettings)
        AGENT_*: Exploration agent limits (see AgentSettings)
        EXECUTION_*: RPC execution settings (see ExecutionSettings)
        PIPELINE_*: Request-level limits (see PipelineSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.agent.step_budget
        10
        >>> settings.execution.rpc_function
        'execute_query'
    """

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    app_name: str = Field(
        default="SQLScout",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        gt=0,
        le=65535,
        description="API server port",
    )

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Log configuration on initialization."""
        logger = logging.getLogger(__name__)
        logger.info(
            f"Settings loaded for {self.app_name} ({self.environment})",
            extra={
                "environment": self.environment,
                "debug": self.debug,
                "step_budget": self.agent.step_budget,
                "rpc_function": self.execution.rpc_function,
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("SQLSCOUT_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.
    Settings hold no credentials, so sharing them across requests is safe.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
