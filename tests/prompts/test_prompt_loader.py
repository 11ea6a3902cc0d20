import pytest
from jinja2 import UndefinedError

from sqlscout.prompts.loader import PromptLoader, split_front_matter
from sqlscout.tools.documents import DocumentToolbox


def test_prompt_loader_strips_front_matter():
    loader = PromptLoader()
    content = loader.load("system/sql_explorer.md")
    assert not content.startswith("---")
    assert "expert SQL analyst" in content


def test_prompt_loader_renders_template():
    loader = PromptLoader()
    rendered = loader.render(
        "system/sql_explorer.md",
        tools=DocumentToolbox({}).definitions(),
        dialect="PostgreSQL",
        row_limit=100,
    )
    assert "`list_documents`" in rendered
    assert "`search_documents`" in rendered
    assert "PostgreSQL syntax" in rendered
    assert "Limit results to 100 rows" in rendered
    assert "unaccent" in rendered
    assert "{{" not in rendered


def test_dialect_specific_rules_omitted():
    rendered = PromptLoader().render(
        "system/sql_explorer.md", tools=[], dialect="SQLite", row_limit=50
    )
    assert "unaccent" not in rendered
    assert "Limit results to 50 rows" in rendered


def test_missing_variable_raises():
    with pytest.raises(UndefinedError):
        PromptLoader().render("system/sql_explorer.md", tools=[])


def test_unknown_prompt():
    with pytest.raises(FileNotFoundError):
        PromptLoader().render("system/missing.md")


def test_prompt_metadata():
    metadata = PromptLoader().get_metadata("system/sql_explorer.md")
    assert metadata["name"] == "sql_explorer"
    assert set(metadata["variables"]) == {"dialect", "tools", "row_limit"}


def test_split_front_matter_without_header():
    assert split_front_matter("plain body") == ({}, "plain body")
