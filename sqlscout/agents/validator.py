"""
SQLValidator: read-only policy checks on candidate SQL.

Pure, lexical, rule-based validation. No LLM calls and no SQL parsing:
rules run in a fixed order and the first violation wins.

1. Statement type: must start with SELECT or WITH
2. Forbidden keywords: no whole-word mutating or administrative keyword
3. Single statement: no semicolon outside quoted literals
4. Comments: no ``--`` or ``/*``

Quoted literals are stripped naively (``'...'`` then ``"..."``) before the
semicolon check. Escaped quotes and dollar-quoted strings are not understood,
so a statement like ``SELECT 'it''s'`` is handled by accident rather than by
design. This is a known limitation.
"""

import logging
import re
from collections.abc import Callable

from sqlscout.models.agent import ValidationOutcome

logger = logging.getLogger(__name__)

FORBIDDEN_KEYWORDS = (
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "GRANT",
    "REVOKE",
    "EXECUTE",
    "EXEC",
    "CALL",
    "SET",
    "COPY",
    "LOAD",
    "VACUUM",
    "REINDEX",
    "CLUSTER",
)

_SINGLE_QUOTED = re.compile(r"'[^']*'")
_DOUBLE_QUOTED = re.compile(r'"[^"]*"')


class SQLValidator:
    """Sequential read-only / anti-injection rule pipeline."""

    def __init__(self, forbidden_keywords: tuple[str, ...] = FORBIDDEN_KEYWORDS):
        self.forbidden_keywords = forbidden_keywords
        self._keyword_patterns = [
            (keyword, re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE))
            for keyword in forbidden_keywords
        ]
        self.rules: list[Callable[[str], ValidationOutcome | None]] = [
            self._check_statement_type,
            self._check_forbidden_keywords,
            self._check_single_statement,
            self._check_comments,
        ]

    def validate(self, sql: str) -> ValidationOutcome:
        """
        Validate a candidate statement.

        Args:
            sql: Candidate SQL as extracted from the model's answer

        Returns:
            ValidationOutcome; ``reason`` is set iff the statement is rejected
        """
        normalized = sql.strip().upper()
        for rule in self.rules:
            outcome = rule(normalized)
            if outcome is not None:
                logger.info(
                    f"SQL rejected: {outcome.reason}",
                    extra={"rule": outcome.rule, "sql": normalized[:200]},
                )
                return outcome
        logger.debug("SQL passed validation", extra={"sql": normalized[:200]})
        return ValidationOutcome.ok()

    def _check_statement_type(self, normalized: str) -> ValidationOutcome | None:
        if normalized.startswith("SELECT") or normalized.startswith("WITH"):
            return None
        return ValidationOutcome.rejected(
            "statement_type",
            "Only SELECT queries are allowed. Query must start with SELECT or WITH.",
        )

    def _check_forbidden_keywords(self, normalized: str) -> ValidationOutcome | None:
        for keyword, pattern in self._keyword_patterns:
            if pattern.search(normalized):
                return ValidationOutcome.rejected(
                    "forbidden_keyword",
                    f"Query contains forbidden keyword: {keyword}. "
                    "Only SELECT queries are allowed.",
                )
        return None

    def _check_single_statement(self, normalized: str) -> ValidationOutcome | None:
        without_literals = _DOUBLE_QUOTED.sub("", _SINGLE_QUOTED.sub("", normalized))
        if ";" in without_literals:
            return ValidationOutcome.rejected(
                "multiple_statements", "Multiple SQL statements are not allowed."
            )
        return None

    def _check_comments(self, normalized: str) -> ValidationOutcome | None:
        if "--" in normalized or "/*" in normalized:
            return ValidationOutcome.rejected("comments", "SQL comments are not allowed.")
        return None


def validate_sql(sql: str) -> ValidationOutcome:
    """Validate ``sql`` with the default rule set."""
    return SQLValidator().validate(sql)
