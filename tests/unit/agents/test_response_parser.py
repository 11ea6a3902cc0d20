"""Unit tests for the markdown response parser."""

from sqlscout.agents.response_parser import MarkdownResponseParser, parse_response


def test_canonical_answer(final_answer):
    parsed = parse_response(final_answer)

    assert parsed.sql == "SELECT * FROM orders LIMIT 5"
    assert parsed.explanation == "Returns the first five orders."


def test_explanation_without_bold():
    raw = "Explanation: Counts customers.\nSQL Query:\n```sql\nSELECT count(*) FROM customers\n```"

    parsed = parse_response(raw)

    assert parsed.explanation == "Counts customers."
    assert parsed.sql == "SELECT count(*) FROM customers"


def test_missing_explanation_falls_back_to_leading_text():
    raw = "Here is the query you need.\n```sql\nSELECT 1\n```\nAnything else?"

    parsed = parse_response(raw)

    assert parsed.explanation == "Here is the query you need."
    assert parsed.sql == "SELECT 1"


def test_first_sql_block_wins():
    raw = "```sql\nSELECT 1\n```\nor\n```sql\nSELECT 2\n```"

    assert parse_response(raw).sql == "SELECT 1"


def test_no_fence_is_extraction_failure():
    parsed = MarkdownResponseParser().parse("SELECT * FROM orders LIMIT 5")

    assert parsed.sql == ""
    assert parsed.explanation == "SELECT * FROM orders LIMIT 5"


def test_untagged_fence_not_extracted():
    assert parse_response("```\nSELECT 1\n```").sql == ""


def test_multiline_sql_trimmed():
    raw = "**Explanation:** Join.\n\n```sql\n  SELECT o.id\n  FROM orders o\n\n```"

    assert parse_response(raw).sql == "SELECT o.id\n  FROM orders o"
