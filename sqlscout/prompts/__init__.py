"""Prompt templates and loader."""

from sqlscout.prompts.loader import PromptLoader

__all__ = ["PromptLoader"]
