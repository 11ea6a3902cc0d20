"""
Response parsing for the model's final answer.

The exploration agent returns free-form text. Parsers turn it into an
explanation and a single SQL statement; an empty ``sql`` means nothing
could be extracted.
"""

import logging
import re
from abc import ABC, abstractmethod

from sqlscout.models.agent import ParsedResponse

logger = logging.getLogger(__name__)


class BaseResponseParser(ABC):
    """Strategy interface for extracting structured fields from an answer."""

    @abstractmethod
    def parse(self, raw_answer: str) -> ParsedResponse:
        """Extract explanation and SQL from ``raw_answer``."""


class MarkdownResponseParser(BaseResponseParser):
    """
    Parser for the markdown answer format requested by the system prompt:

        **Explanation:** ...

        **SQL Query:**
        ```sql
        SELECT ...
        ```
    """

    SQL_BLOCK = re.compile(r"```sql\n([\s\S]*?)```")
    EXPLANATION = re.compile(
        r"(?:\*\*)?Explanation:(?:\*\*)?\s*([\s\S]*?)(?=(?:\*\*)?SQL Query:|$)"
    )

    def parse(self, raw_answer: str) -> ParsedResponse:
        sql_match = self.SQL_BLOCK.search(raw_answer)
        sql = sql_match.group(1).strip() if sql_match else ""

        explanation_match = self.EXPLANATION.search(raw_answer)
        if explanation_match:
            explanation = explanation_match.group(1).strip()
        else:
            explanation = raw_answer.split("```")[0].strip()

        if not sql:
            logger.info(
                "No SQL block found in model answer",
                extra={"answer_chars": len(raw_answer)},
            )
        return ParsedResponse(explanation=explanation, sql=sql)


def parse_response(raw_answer: str) -> ParsedResponse:
    return MarkdownResponseParser().parse(raw_answer)
