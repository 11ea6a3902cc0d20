"""
Schema Routes

Fetches the schema description of the caller's Supabase project.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from sqlscout.config import get_settings
from sqlscout.connectors.supabase import SupabaseConnector
from sqlscout.models.api import SchemaRequest, SchemaResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/schema", response_model=SchemaResponse, response_model_by_alias=True)
async def fetch_schema(schema_request: SchemaRequest):
    """
    Fetch tables and columns through the PostgREST OpenAPI endpoint.

    Returns:
        ``{"schema": {...}}`` on success, ``500 {"error": ...}`` on failure
    """
    settings = get_settings()
    try:
        async with SupabaseConnector(
            url=schema_request.supabase_url,
            anon_key=schema_request.supabase_anon_key,
            timeout=settings.execution.timeout,
        ) as connector:
            schema_info = await connector.fetch_schema()
    except Exception as e:
        logger.error(f"Schema fetch error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Failed to fetch schema"},
        )

    return SchemaResponse(schema_info=schema_info)
