"""Unit tests for POST /api/query."""

import pytest
from fastapi.testclient import TestClient

from sqlscout.api.main import app
from sqlscout.api.routes.query import get_pipeline
from sqlscout.models.api import QueryResponse
from sqlscout.pipeline.orchestrator import PipelineTimeoutError


class FakePipeline:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def run(self, question, credentials, schema):
        self.calls.append((question, credentials, schema))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def body():
    return {
        "question": "Show me the first 5 orders",
        "credentials": {
            "supabaseUrl": "https://demo.supabase.co",
            "supabaseAnonKey": "anon-secret-key",
            "llmProvider": "openai",
            "llmApiKey": "sk-secret",
        },
        "schema": {
            "tables": [{"table_name": "orders"}],
            "columns": [{"table_name": "orders", "column_name": "id", "data_type": "integer"}],
            "foreignKeys": [],
        },
    }


@pytest.fixture
def use_pipeline():
    def install(pipeline):
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        return pipeline

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def test_success_payload(client, body, use_pipeline):
    pipeline = use_pipeline(
        FakePipeline(
            result=QueryResponse(
                success=True,
                explanation="First five orders.",
                sql="SELECT * FROM orders LIMIT 5",
                steps=["$ cat schema/summary.md"],
                data=[{"id": 1}],
            )
        )
    )

    response = client.post("/api/query", json=body)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "explanation": "First five orders.",
        "sql": "SELECT * FROM orders LIMIT 5",
        "steps": ["$ cat schema/summary.md"],
        "data": [{"id": 1}],
    }
    question, credentials, schema = pipeline.calls[0]
    assert question == "Show me the first 5 orders"
    assert credentials.llm_provider == "openai"
    assert schema.tables[0].table_name == "orders"


def test_expected_failure_is_still_200(client, body, use_pipeline):
    use_pipeline(
        FakePipeline(result=QueryResponse(success=False, error="Could not extract SQL", steps=[]))
    )

    response = client.post("/api/query", json=body)

    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "Could not extract SQL", "steps": []}


def test_timeout_is_504(client, body, use_pipeline):
    use_pipeline(FakePipeline(error=PipelineTimeoutError(60)))

    response = client.post("/api/query", json=body)

    assert response.status_code == 504
    assert response.json() == {
        "success": False,
        "error": "Query processing timed out after 60 seconds",
    }


def test_unexpected_error_is_500(client, body, use_pipeline):
    use_pipeline(FakePipeline(error=RuntimeError("provider exploded")))

    response = client.post("/api/query", json=body)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to process query"}
    assert "provider exploded" not in response.text


@pytest.mark.parametrize("missing", ["question", "credentials", "schema"])
def test_missing_fields_are_400(client, body, missing, use_pipeline):
    pipeline = use_pipeline(FakePipeline())
    del body[missing]

    response = client.post("/api/query", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing question, credentials, or schema"}
    assert pipeline.calls == []


def test_missing_api_key_never_echoes_credentials(client, body, use_pipeline):
    use_pipeline(FakePipeline())
    del body["credentials"]["llmApiKey"]

    response = client.post("/api/query", json=body)

    assert response.status_code == 400
    assert "anon-secret-key" not in response.text
