"""Unit tests for POST /api/schema."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from sqlscout.api.main import app
from sqlscout.connectors.base import SchemaFetchError
from sqlscout.connectors.supabase import SupabaseConnector

BODY = {"supabaseUrl": "https://demo.supabase.co", "supabaseAnonKey": "anon-secret-key"}


@pytest.fixture
def client():
    return TestClient(app)


def test_returns_schema_with_wire_names(client, sample_schema):
    with patch.object(
        SupabaseConnector, "fetch_schema", new_callable=AsyncMock, return_value=sample_schema
    ):
        response = client.post("/api/schema", json=BODY)

    assert response.status_code == 200
    schema = response.json()["schema"]
    assert [table["table_name"] for table in schema["tables"]] == ["customers", "orders"]
    assert schema["foreignKeys"][0]["foreign_table_name"] == "customers"


def test_fetch_failure_is_500(client):
    with patch.object(
        SupabaseConnector,
        "fetch_schema",
        new_callable=AsyncMock,
        side_effect=SchemaFetchError("Failed to fetch schema from REST endpoint"),
    ):
        response = client.post("/api/schema", json=BODY)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch schema from REST endpoint"}


@pytest.mark.parametrize(
    "body",
    [{}, {"supabaseUrl": "https://demo.supabase.co"}, {"supabaseUrl": "", "supabaseAnonKey": "k"}],
)
def test_missing_fields_are_400(client, body):
    response = client.post("/api/schema", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing supabaseUrl or supabaseAnonKey"}
