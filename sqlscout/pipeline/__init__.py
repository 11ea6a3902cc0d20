"""Per-request question pipeline."""

from sqlscout.pipeline.orchestrator import (
    EXTRACTION_FAILURE_MESSAGE,
    PipelineTimeoutError,
    QueryPipeline,
)

__all__ = ["QueryPipeline", "PipelineTimeoutError", "EXTRACTION_FAILURE_MESSAGE"]
