"""
QueryExecutionBridge: run vetted SQL on the target and classify the outcome.

Three outcomes are kept apart:
- Executed: the statement ran and returned rows
- ExecutionUnavailable: the target cannot run SQL (procedure missing,
  unreachable); the generated SQL is still handed back with a setup hint
- ExecutionFailed: the database ran the statement and rejected it
"""

import logging
import re
from typing import Optional

from sqlscout.config import ExecutionSettings
from sqlscout.connectors.base import (
    BaseConnector,
    ConnectionError,
    FunctionUnavailableError,
    QueryError,
)
from sqlscout.models.agent import (
    Executed,
    ExecutionFailed,
    ExecutionOutcome,
    ExecutionUnavailable,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_NOTE = (
    "SQL generated successfully. RPC error: {message}. To execute queries directly, "
    "set up an {function} RPC function in your Supabase project."
)

_TRAILING_SEMICOLONS = re.compile(r";+$")


def strip_trailing_semicolons(sql: str) -> str:
    """The procedure wraps the statement in a subquery, so a trailing ';' would break it."""
    return _TRAILING_SEMICOLONS.sub("", sql.strip())


class QueryExecutionBridge:
    """Submits a validated statement through a connector."""

    def __init__(self, settings: Optional[ExecutionSettings] = None):
        self.settings = settings or ExecutionSettings()

    async def execute(
        self,
        sql: str,
        connector: BaseConnector,
        explanation: str = "",
    ) -> ExecutionOutcome:
        """
        Execute ``sql`` and classify the result.

        Args:
            sql: Statement that already passed validation
            connector: Connector for the caller's database
            explanation: Model explanation, carried into the unavailable outcome

        Returns:
            Executed, ExecutionUnavailable or ExecutionFailed
        """
        statement = strip_trailing_semicolons(sql)

        try:
            result = await connector.execute(statement)
        except (FunctionUnavailableError, ConnectionError) as e:
            logger.warning(
                f"Query execution unavailable: {e}",
                extra={"rpc": self.settings.rpc_function, "error_type": type(e).__name__},
            )
            return ExecutionUnavailable(
                diagnostic=UNAVAILABLE_NOTE.format(
                    message=str(e), function=self.settings.rpc_function
                ),
                sql=sql,
                explanation=explanation,
            )
        except QueryError as e:
            logger.info(
                f"Database rejected query: {e}",
                extra={"code": e.code, "sql": statement[:200]},
            )
            return ExecutionFailed(diagnostic=str(e))

        logger.info(
            f"Query returned {result.row_count} rows",
            extra={"row_count": result.row_count, "execution_time_ms": result.execution_time_ms},
        )
        return Executed(rows=result.rows, execution_time_ms=result.execution_time_ms)
