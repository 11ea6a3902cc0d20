"""
Unit Tests for CLI

Tests the SQLScout CLI commands.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from sqlscout.cli import cli, format_rows, load_schema_file
from sqlscout.connectors.base import SchemaFetchError
from sqlscout.connectors.supabase import SupabaseConnector
from sqlscout.models.api import QueryResponse
from sqlscout.pipeline.orchestrator import QueryPipeline


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def schema_file(tmp_path, sample_schema):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps({"schema": sample_schema.model_dump(by_alias=True)}))
    return path


class TestValidateCommand:
    def test_allowed(self, runner):
        result = runner.invoke(cli, ["validate", "SELECT * FROM orders LIMIT 5"])

        assert result.exit_code == 0
        assert "Query is allowed" in result.output

    def test_rejected(self, runner):
        result = runner.invoke(cli, ["validate", "DROP TABLE orders"])

        assert result.exit_code == 1
        assert "Only SELECT queries are allowed" in result.output


class TestDocsCommand:
    def test_lists_paths(self, runner, schema_file):
        result = runner.invoke(cli, ["docs", str(schema_file)])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "schema/overview.md",
            "schema/relationships.md",
            "schema/summary.md",
            "schema/tables/customers.md",
            "schema/tables/orders.md",
        ]

    def test_prints_document(self, runner, schema_file):
        result = runner.invoke(cli, ["docs", str(schema_file), "--path", "schema/tables/orders.md"])

        assert result.exit_code == 0
        assert "customer_id" in result.output

    def test_unknown_document(self, runner, schema_file):
        result = runner.invoke(cli, ["docs", str(schema_file), "--path", "schema/nope.md"])

        assert result.exit_code == 1
        assert "Document not found" in result.output

    def test_invalid_schema_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"schema": {"tables": [{"table_schema": "public"}]}}))

        result = runner.invoke(cli, ["docs", str(path)])

        assert result.exit_code == 1
        assert "Invalid schema file" in result.output


class TestAskCommand:
    def test_json_output(self, runner, schema_file):
        response = QueryResponse(
            success=True,
            explanation="First five orders.",
            sql="SELECT * FROM orders LIMIT 5",
            steps=["$ cat schema/summary.md"],
            data=[{"id": 1}],
        )
        with patch.object(
            QueryPipeline, "run", new_callable=AsyncMock, return_value=response
        ) as mock_run:
            result = runner.invoke(
                cli,
                [
                    "ask",
                    "Show me 5 orders",
                    "--schema",
                    str(schema_file),
                    "--url",
                    "https://demo.supabase.co",
                    "--key",
                    "anon",
                    "--api-key",
                    "sk-test",
                    "--json",
                ],
            )

        assert result.exit_code == 0
        assert json.loads(result.output) == response.to_payload()
        question, credentials, schema = mock_run.call_args.args
        assert question == "Show me 5 orders"
        assert credentials.llm_provider == "openai"
        assert len(schema.tables) == 2

    def test_unsuccessful_response_exits_nonzero(self, runner, schema_file):
        response = QueryResponse(success=False, error="Could not extract SQL", steps=[])
        with patch.object(QueryPipeline, "run", new_callable=AsyncMock, return_value=response):
            result = runner.invoke(
                cli,
                ["ask", "q", "--schema", str(schema_file), "--url", "u", "--key", "k",
                 "--provider", "local"],
            )

        assert result.exit_code == 1
        assert "Could not extract SQL" in result.output

    def test_missing_api_key(self, runner, schema_file, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY", raising=False)

        result = runner.invoke(
            cli,
            ["ask", "q", "--schema", str(schema_file), "--url", "u", "--key", "k",
             "--provider", "anthropic"],
        )

        assert result.exit_code == 1
        assert "llmApiKey is required" in result.output


class TestSchemaCommand:
    def test_writes_schema_file(self, runner, tmp_path, sample_schema):
        output = tmp_path / "out.json"
        with patch.object(
            SupabaseConnector, "fetch_schema", new_callable=AsyncMock, return_value=sample_schema
        ):
            result = runner.invoke(
                cli, ["schema", "--url", "https://demo.supabase.co", "--key", "anon", "-o", str(output)]
            )

        assert result.exit_code == 0
        assert "Saved 2 tables" in result.output
        assert load_schema_file(output) == sample_schema

    def test_fetch_error(self, runner):
        with patch.object(
            SupabaseConnector,
            "fetch_schema",
            new_callable=AsyncMock,
            side_effect=SchemaFetchError("Failed to fetch schema from REST endpoint"),
        ):
            result = runner.invoke(cli, ["schema", "--url", "https://demo.supabase.co", "--key", "anon"])

        assert result.exit_code == 1
        assert "Failed to fetch schema" in result.output


def test_format_rows_collects_all_columns():
    table = format_rows([{"id": 1}, {"id": 2, "total": None}])

    assert [column.header for column in table.columns] == ["id", "total"]
    assert table.row_count == 2
