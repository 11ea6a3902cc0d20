"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging
from collections.abc import Callable

import pytest

from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.models import LLMRequest, LLMResponse, LLMUsage
from sqlscout.models.api import Credentials
from sqlscout.models.schema import ColumnInfo, ForeignKeyInfo, SchemaInfo, TableInfo
from sqlscout.tools.base import ToolCall

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """Capture logs at DEBUG for every test."""
    caplog.set_level(logging.DEBUG)
    yield


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Reload settings from a clean environment for each test.

    Disables the .env override so a developer's local file cannot leak
    into test runs.
    """
    from sqlscout.config import clear_settings_cache

    monkeypatch.setenv("SQLSCOUT_ENV_SOURCE", "environment")
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Scripted Provider
# ============================================================================


class ScriptedProvider(BaseLLMProvider):
    """
    Provider that replays a fixed list of turns.

    Each turn is a string (final text answer), a list of
    ``(tool_name, arguments)`` tuples (tool calls), a ready-made LLMResponse,
    or an exception to raise. Every request is recorded
    so tests can inspect what the model was sent.
    """

    def __init__(self, turns: list, model: str = "scripted-model"):
        super().__init__(provider_name="scripted", model=model)
        self.turns = list(turns)
        self.requests: list[LLMRequest] = []
        self.closed = False

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request.model_copy(deep=True))
        if not self.turns:
            raise AssertionError("ScriptedProvider ran out of turns")
        turn = self.turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        if isinstance(turn, LLMResponse):
            return turn
        if isinstance(turn, str):
            return LLMResponse(
                content=turn,
                model=self.model,
                finish_reason="stop",
                provider="scripted",
                usage=LLMUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
            )
        index = len(self.requests)
        calls = [
            ToolCall(id=f"call_{index}_{n}", name=name, arguments=arguments)
            for n, (name, arguments) in enumerate(turn)
        ]
        return LLMResponse(
            content="",
            tool_calls=calls,
            model=self.model,
            finish_reason="tool_calls",
            provider="scripted",
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_provider() -> Callable[[list], ScriptedProvider]:
    """Factory for scripted providers."""
    return ScriptedProvider


# ============================================================================
# Common Test Data
# ============================================================================


@pytest.fixture
def sample_schema() -> SchemaInfo:
    """Two related tables: customers and orders."""
    return SchemaInfo(
        tables=[
            TableInfo(table_name="customers"),
            TableInfo(table_name="orders"),
        ],
        columns=[
            ColumnInfo(table_name="customers", column_name="id", data_type="integer", is_nullable="NO"),
            ColumnInfo(table_name="customers", column_name="name", data_type="text"),
            ColumnInfo(table_name="orders", column_name="id", data_type="integer", is_nullable="NO"),
            ColumnInfo(table_name="orders", column_name="customer_id", data_type="integer"),
            ColumnInfo(
                table_name="orders",
                column_name="total",
                data_type="numeric",
                column_default="0",
            ),
        ],
        foreign_keys=[
            ForeignKeyInfo(
                constraint_name="orders_customer_id_fkey",
                table_name="orders",
                column_name="customer_id",
                foreign_table_name="customers",
                foreign_column_name="id",
            )
        ],
    )


@pytest.fixture
def sample_credentials() -> Credentials:
    return Credentials(
        supabase_url="https://demo.supabase.co",
        supabase_anon_key="anon-test-key",
        llm_provider="openai",
        llm_api_key="sk-test-key-1234567890abcdefghij",
    )


@pytest.fixture
def final_answer() -> str:
    """A well-formed final answer for the orders question."""
    return (
        "**Explanation:** Returns the first five orders.\n\n"
        "**SQL Query:**\n"
        "```sql\n"
        "SELECT * FROM orders LIMIT 5\n"
        "```\n"
    )
