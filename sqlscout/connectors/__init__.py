"""
Database Connectors

Async connectors for the databases SQLScout can query.
"""

from sqlscout.connectors.base import (
    BaseConnector,
    ConnectionError,
    ConnectorError,
    FunctionUnavailableError,
    QueryError,
    QueryResult,
    SchemaFetchError,
)
from sqlscout.connectors.supabase import SupabaseConnector, parse_openapi_schema

__all__ = [
    "BaseConnector",
    "ConnectorError",
    "ConnectionError",
    "QueryError",
    "FunctionUnavailableError",
    "SchemaFetchError",
    "QueryResult",
    "SupabaseConnector",
    "parse_openapi_schema",
]
