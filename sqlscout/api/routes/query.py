"""
Query Routes

Answers a natural-language question against the caller's database.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from sqlscout.config import get_settings
from sqlscout.models.api import ErrorResponse, QueryRequest
from sqlscout.pipeline.orchestrator import PipelineTimeoutError, QueryPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


def get_pipeline() -> QueryPipeline:
    """Build a fresh pipeline for each request."""
    return QueryPipeline(settings=get_settings())


@router.post("/query")
async def query(
    query_request: QueryRequest,
    pipeline: QueryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """
    Run the question pipeline.

    Expected outcomes (no SQL, rejected SQL, execution unavailable or
    failed) are returned with 200 and ``success`` set accordingly.

    Returns:
        200 with the pipeline payload, 504 on timeout, 500 on unexpected errors
    """
    logger.info(f"Query request received: {query_request.question[:100]}")

    try:
        response = await pipeline.run(
            query_request.question,
            query_request.credentials,
            query_request.schema_info,
        )
    except PipelineTimeoutError as e:
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content=ErrorResponse(error=str(e)).model_dump(),
        )
    except Exception as e:
        logger.error(f"Query error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Failed to process query").model_dump(),
        )

    return JSONResponse(content=response.to_payload())
