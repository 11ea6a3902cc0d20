"""
Query Pipeline

Runs one natural-language question end to end:

    SchemaInfo -> materialize -> SchemaExplorerAgent -> MarkdownResponseParser
        -> SQLValidator -> QueryExecutionBridge -> QueryResponse

Every component is built fresh for the call from the request's credentials
and discarded afterwards. Expected failures (no SQL, rejected SQL, execution
unavailable or failed) become ``QueryResponse`` payloads; anything else
propagates to the caller.
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from typing import Optional

from sqlscout.agents.executor import QueryExecutionBridge
from sqlscout.agents.explorer import SchemaExplorerAgent
from sqlscout.agents.response_parser import BaseResponseParser, MarkdownResponseParser
from sqlscout.agents.validator import SQLValidator
from sqlscout.config import Settings, get_settings
from sqlscout.connectors.base import BaseConnector
from sqlscout.connectors.supabase import SupabaseConnector
from sqlscout.llm.base import BaseLLMProvider
from sqlscout.llm.factory import LLMProviderFactory
from sqlscout.models.agent import AgentResult, Executed, ExecutionUnavailable
from sqlscout.models.api import Credentials, QueryResponse
from sqlscout.models.schema import SchemaInfo
from sqlscout.schema.materializer import materialize

logger = logging.getLogger(__name__)

EXTRACTION_FAILURE_MESSAGE = (
    "Could not extract SQL from the response. Please try rephrasing your question."
)

ProviderBuilder = Callable[[Credentials], BaseLLMProvider]
ConnectorBuilder = Callable[[Credentials], BaseConnector]


class PipelineTimeoutError(Exception):
    """The question was not answered within the request time limit."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Query processing timed out after {timeout_seconds:g} seconds")


class QueryPipeline:
    """
    Per-request orchestration of the question-to-rows flow.

    Usage:
        pipeline = QueryPipeline()
        response = await pipeline.run(question, credentials, schema)
        print(response.to_payload())
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider_builder: Optional[ProviderBuilder] = None,
        connector_builder: Optional[ConnectorBuilder] = None,
        parser: Optional[BaseResponseParser] = None,
    ):
        """
        Initialize pipeline.

        Args:
            settings: Application settings (defaults only, never credentials)
            provider_builder: Builds the LLM provider from credentials
            connector_builder: Builds the database connector from credentials
            parser: Strategy for reading the model's final answer
        """
        self.settings = settings or get_settings()
        self.provider_builder = provider_builder or self._default_provider
        self.connector_builder = connector_builder or self._default_connector
        self.parser = parser or MarkdownResponseParser()

    async def run(
        self,
        question: str,
        credentials: Credentials,
        schema: SchemaInfo,
    ) -> QueryResponse:
        """
        Answer ``question`` against the caller's database.

        Raises:
            PipelineTimeoutError: If the request time limit is exceeded
            AgentError: If the model provider keeps failing
        """
        timeout_seconds = self.settings.pipeline.request_timeout_seconds
        try:
            async with asyncio.timeout(timeout_seconds):
                return await self._run(question, credentials, schema)
        except TimeoutError as e:
            logger.error(f"Pipeline timed out after {timeout_seconds}s")
            raise PipelineTimeoutError(timeout_seconds) from e

    async def _run(
        self,
        question: str,
        credentials: Credentials,
        schema: SchemaInfo,
    ) -> QueryResponse:
        correlation_id = f"query-{uuid.uuid4().hex[:12]}"
        start_time = time.perf_counter()
        logger.info(
            "Processing question",
            extra={
                "correlation_id": correlation_id,
                "provider": credentials.llm_provider,
                "question": question[:100],
                "tables": len(schema.tables),
            },
        )

        documents = materialize(schema)
        provider = self.provider_builder(credentials)
        connector: Optional[BaseConnector] = None
        try:
            agent = SchemaExplorerAgent(provider, settings=self.settings.agent)
            exploration = await agent.run(documents, question)
            parsed = self.parser.parse(exploration.raw_answer)
            result = AgentResult(
                explanation=parsed.explanation,
                sql=parsed.sql,
                steps=exploration.steps,
            )
            steps = [str(step) for step in result.steps]

            if not result.has_sql:
                logger.info("No SQL extracted", extra={"correlation_id": correlation_id})
                return QueryResponse(
                    success=False,
                    error=EXTRACTION_FAILURE_MESSAGE,
                    explanation=result.explanation,
                    steps=steps,
                )

            validation = SQLValidator().validate(result.sql)
            if not validation.valid:
                return QueryResponse(
                    success=False,
                    error=validation.reason,
                    explanation=result.explanation,
                    sql=result.sql,
                    steps=steps,
                )

            connector = self.connector_builder(credentials)
            bridge = QueryExecutionBridge(self.settings.execution)
            outcome = await bridge.execute(result.sql, connector, explanation=result.explanation)

            logger.info(
                f"Question answered with outcome '{outcome.status}'",
                extra={
                    "correlation_id": correlation_id,
                    "steps": len(steps),
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                },
            )

            if isinstance(outcome, Executed):
                return QueryResponse(
                    success=True,
                    explanation=result.explanation,
                    sql=result.sql,
                    steps=steps,
                    data=outcome.rows,
                )
            if isinstance(outcome, ExecutionUnavailable):
                return QueryResponse(
                    success=True,
                    explanation=result.explanation,
                    sql=result.sql,
                    steps=steps,
                    data=None,
                    note=outcome.diagnostic,
                )
            return QueryResponse(
                success=False,
                error=outcome.diagnostic,
                explanation=result.explanation,
                sql=result.sql,
                steps=steps,
                data=None,
            )
        finally:
            await provider.close()
            if connector is not None:
                await connector.close()

    def _default_provider(self, credentials: Credentials) -> BaseLLMProvider:
        return LLMProviderFactory.create_from_credentials(credentials, self.settings.llm)

    def _default_connector(self, credentials: Credentials) -> BaseConnector:
        return SupabaseConnector(
            url=credentials.supabase_url,
            anon_key=credentials.supabase_anon_key,
            rpc_function=self.settings.execution.rpc_function,
            rpc_argument=self.settings.execution.rpc_argument,
            timeout=self.settings.execution.timeout,
        )
