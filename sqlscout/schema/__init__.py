"""Schema materialization into browsable documents."""

from sqlscout.schema.materializer import (
    OVERVIEW_PATH,
    RELATIONSHIPS_PATH,
    SUMMARY_PATH,
    TABLES_DIR,
    materialize,
    table_document_path,
)

__all__ = [
    "materialize",
    "table_document_path",
    "OVERVIEW_PATH",
    "RELATIONSHIPS_PATH",
    "SUMMARY_PATH",
    "TABLES_DIR",
]
