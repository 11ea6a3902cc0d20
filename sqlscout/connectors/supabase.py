"""
Supabase Connector

Connector for Supabase projects over the PostgREST HTTP API using httpx.
SQL runs through a single remote procedure (``execute_query(query_text)`` by
default); the schema description comes from the PostgREST OpenAPI document.
"""

import logging
import re
import time
from typing import Any, Optional

import httpx

from sqlscout.connectors.base import (
    BaseConnector,
    ConnectionError,
    FunctionUnavailableError,
    QueryError,
    QueryResult,
    SchemaFetchError,
)
from sqlscout.models.schema import ColumnInfo, ForeignKeyInfo, SchemaInfo, TableInfo

logger = logging.getLogger(__name__)

# PostgREST: function not found in the schema cache
FUNCTION_NOT_FOUND_CODE = "PGRST202"
# Postgres: undefined_function
UNDEFINED_FUNCTION_CODE = "42883"

_FK_PATTERN = re.compile(r"<fk table='([^']+)' column='([^']+)'/>")


def normalize_rows(payload: Any) -> list[dict[str, Any]]:
    """Coerce an RPC payload into a list of row objects."""
    if payload is None:
        return []
    items = payload if isinstance(payload, list) else [payload]
    return [item if isinstance(item, dict) else {"value": item} for item in items]


def parse_openapi_schema(spec: dict[str, Any]) -> SchemaInfo:
    """
    Build a SchemaInfo from a PostgREST OpenAPI document.

    Every definition not starting with ``_`` is treated as a public base
    table. Column types come from ``format`` (falling back to ``type``) and
    foreign keys from the ``<fk table='..' column='..'/>`` markers PostgREST
    puts in column descriptions.
    """
    tables: list[TableInfo] = []
    columns: list[ColumnInfo] = []
    foreign_keys: list[ForeignKeyInfo] = []

    for table_name, definition in (spec.get("definitions") or {}).items():
        if table_name.startswith("_"):
            continue
        tables.append(TableInfo(table_schema="public", table_name=table_name, table_type="BASE TABLE"))

        for column_name, column_def in ((definition or {}).get("properties") or {}).items():
            column_def = column_def or {}
            columns.append(
                ColumnInfo(
                    table_schema="public",
                    table_name=table_name,
                    column_name=column_name,
                    data_type=column_def.get("format") or column_def.get("type") or "unknown",
                    is_nullable="YES",
                )
            )
            fk_match = _FK_PATTERN.search(column_def.get("description") or "")
            if fk_match:
                foreign_keys.append(
                    ForeignKeyInfo(
                        table_name=table_name,
                        column_name=column_name,
                        foreign_table_name=fk_match.group(1),
                        foreign_column_name=fk_match.group(2),
                    )
                )

    return SchemaInfo(tables=tables, columns=columns, foreign_keys=foreign_keys)


class SupabaseConnector(BaseConnector):
    """
    Supabase/PostgREST connector.

    The anon key is sent as both ``apikey`` and bearer token on every call.
    It is held only for the lifetime of this connector and never logged.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        rpc_function: str = "execute_query",
        rpc_argument: str = "query_text",
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Supabase connector.

        Args:
            url: Project URL (e.g. https://xyz.supabase.co)
            anon_key: Project anon (public) key
            rpc_function: Remote procedure that runs read-only SQL
            rpc_argument: Name of that procedure's SQL text argument
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(timeout=timeout)
        self.url = url.rstrip("/")
        self.rpc_function = rpc_function
        self.rpc_argument = rpc_argument
        self._anon_key = anon_key
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.debug(f"Initialized {self.__class__.__name__} for {httpx.URL(self.url).host}")

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=f"{self.url}/rest/v1",
            headers={
                "apikey": self._anon_key,
                "Authorization": f"Bearer {self._anon_key}",
            },
            timeout=float(self.timeout),
            transport=self._transport,
        )
        self._connected = True

    async def execute(self, query: str) -> QueryResult:
        """
        Run ``query`` through the execution procedure.

        Raises:
            FunctionUnavailableError: If the procedure is not set up
            ConnectionError: On transport or authentication failures
            QueryError: If the database rejected the statement
        """
        start_time = time.perf_counter()
        payload = await self.execute_rpc(self.rpc_function, {self.rpc_argument: query})
        rows = normalize_rows(payload)
        execution_time_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            f"Query executed in {execution_time_ms:.2f}ms, returned {len(rows)} rows"
        )
        return QueryResult(
            rows=rows,
            row_count=len(rows),
            columns=list(rows[0].keys()) if rows else [],
            execution_time_ms=execution_time_ms,
        )

    async def execute_rpc(self, function: str, arguments: dict[str, Any]) -> Any:
        """Call ``POST /rpc/<function>`` and return the decoded JSON payload."""
        await self.connect()
        try:
            response = await self._client.post(f"/rpc/{function}", json=arguments)
        except httpx.HTTPError as e:
            logger.error(f"RPC {function} transport error: {e}")
            raise ConnectionError(f"Could not reach Supabase: {e}") from e

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"RPC {function} returned a non-JSON body")
                raise ConnectionError("Supabase returned a non-JSON response") from e

        code, message = self._error_details(response)
        logger.warning(
            f"RPC {function} failed with HTTP {response.status_code}",
            extra={"rpc": function, "status": response.status_code, "code": code},
        )
        if code == FUNCTION_NOT_FOUND_CODE or response.status_code == 404:
            raise FunctionUnavailableError(message)
        if code == UNDEFINED_FUNCTION_CODE and function in message:
            raise FunctionUnavailableError(message)
        if response.status_code in (401, 403) and not code:
            raise ConnectionError(message)
        raise QueryError(message, code=code)

    async def fetch_schema(self) -> SchemaInfo:
        """Fetch the PostgREST OpenAPI document and convert it to a SchemaInfo."""
        await self.connect()
        try:
            response = await self._client.get("/")
        except httpx.HTTPError as e:
            logger.error(f"Schema fetch transport error: {e}")
            raise SchemaFetchError(f"Failed to fetch schema from REST endpoint: {e}") from e

        if not response.is_success:
            logger.error(f"Schema fetch failed with HTTP {response.status_code}")
            raise SchemaFetchError("Failed to fetch schema from REST endpoint")

        try:
            spec = response.json()
        except ValueError as e:
            raise SchemaFetchError("REST endpoint did not return an OpenAPI document") from e

        schema = parse_openapi_schema(spec if isinstance(spec, dict) else {})
        logger.info(
            f"Fetched schema with {len(schema.tables)} tables",
            extra={"tables": len(schema.tables), "columns": len(schema.columns)},
        )
        return schema

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._connected = False

    @staticmethod
    def _error_details(response: httpx.Response) -> tuple[Optional[str], str]:
        """Extract PostgREST ``code`` and ``message`` from an error response."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or f"HTTP {response.status_code}"
            code = body.get("code")
            return (str(code) if code is not None else None), str(message)
        return None, response.text.strip() or f"HTTP {response.status_code}"

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.url} ({status})>"
