"""
FastAPI Application

Main FastAPI application for SQLScout with:
- Lifespan logging
- CORS middleware for the browser client
- Request validation errors mapped to 400
- Health, schema and query endpoints

The app holds no per-request state: credentials arrive with each request
and every pipeline component is built for that request only.

Usage:
    uvicorn sqlscout.api.main:app --reload --port 8000
"""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sqlscout import __version__
from sqlscout.api.routes import health, query, schema
from sqlscout.config import get_settings

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGES = {
    "/api/query": "Missing question, credentials, or schema",
    "/api/schema": "Missing supabaseUrl or supabaseAnonKey",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup and log shutdown."""
    config = get_settings()
    config.logging.configure()
    logger.info(f"Starting {config.app_name} API server ({config.environment})")
    try:
        yield
    finally:
        logger.info(f"{config.app_name} API server shut down complete")


app = FastAPI(
    title="SQLScout API",
    description="Natural-language questions to vetted, read-only SQL",
    version=__version__,
    lifespan=lifespan,
)

cors_origins_env = os.getenv("CORS_ORIGINS", "")
cors_origins = (
    [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
    if cors_origins_env
    else ["http://localhost:3000", "http://localhost:3001"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or incomplete bodies as 400; request values are never echoed."""
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
    logger.info(f"Rejected request to {request.url.path}", extra={"fields": fields})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": MISSING_FIELDS_MESSAGES.get(request.url.path, "Invalid request")},
    )


app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(schema.router, prefix="/api", tags=["schema"])
app.include_router(query.router, prefix="/api", tags=["query"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": "SQLScout API",
        "version": __version__,
        "description": "Natural-language questions to vetted, read-only SQL",
        "docs": "/docs",
    }
