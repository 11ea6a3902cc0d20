"""SQLScout: natural-language questions to vetted, read-only SQL."""

__version__ = "0.1.0"
