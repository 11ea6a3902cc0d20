"""API route modules."""

from sqlscout.api.routes import health, query, schema

__all__ = ["health", "query", "schema"]
