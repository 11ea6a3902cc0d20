"""
Base Database Connector

Abstract base class for remote database connectors. Provides a consistent
async interface for running read-only SQL and fetching the schema
description the agent explores.

All connectors must implement:
- connect(): Prepare the underlying client (idempotent)
- execute(): Run one vetted SQL statement and return its rows
- fetch_schema(): Describe tables, columns and foreign keys
- close(): Release network resources (idempotent)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from sqlscout.models.schema import SchemaInfo

logger = logging.getLogger(__name__)


# ============================================================================
# Data Models
# ============================================================================


class QueryResult(BaseModel):
    """Result from query execution."""

    rows: list[dict[str, Any]] = Field(..., description="Query result rows")
    row_count: int = Field(..., description="Number of rows returned")
    columns: list[str] = Field(default_factory=list, description="Column names")
    execution_time_ms: float = Field(..., description="Round-trip execution time in ms")


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class ConnectionError(ConnectorError):
    """The remote endpoint could not be reached or refused the credentials."""

    pass


class QueryError(ConnectorError):
    """The database ran the statement and reported an error."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class FunctionUnavailableError(ConnectorError):
    """The execution procedure does not exist on the target."""

    pass


class SchemaFetchError(ConnectorError):
    """The schema description could not be fetched."""

    pass


# ============================================================================
# Base Connector
# ============================================================================


class BaseConnector(ABC):
    """
    Abstract base class for database connectors.

    Connectors are built per request from the caller's credentials and must
    never expose those credentials in logs or ``repr``.

    Usage:
        async with SupabaseConnector(url, anon_key) as connector:
            schema = await connector.fetch_schema()
            result = await connector.execute("SELECT * FROM orders LIMIT 5")
            print(f"Found {result.row_count} rows")
    """

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self._connected = False

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the connector for use.

        Should be idempotent.
        """
        pass

    @abstractmethod
    async def execute(self, query: str) -> QueryResult:
        """
        Execute a single read-only SQL statement.

        Raises:
            FunctionUnavailableError: If the target cannot run SQL at all
            ConnectionError: On transport or authentication failures
            QueryError: If the database rejected the statement
        """
        pass

    @abstractmethod
    async def fetch_schema(self) -> SchemaInfo:
        """
        Describe the target database.

        Raises:
            SchemaFetchError: If the description cannot be fetched
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release network resources.

        Should be idempotent - safe to call multiple times.
        """
        pass

    @property
    def is_connected(self) -> bool:
        """Check if connector is connected."""
        return self._connected

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
        return False
