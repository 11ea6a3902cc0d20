"""HTTP API for SQLScout."""
