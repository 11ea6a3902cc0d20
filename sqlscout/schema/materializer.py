"""
Schema Materializer

Turns a SchemaInfo into a small set of markdown documents the exploration
agent can list, read and search. Splitting the schema into addressable
documents lets the agent fetch only the tables it needs instead of ingesting
the whole schema in one prompt.

Documents:
    schema/overview.md          every table with its type
    schema/tables/<table>.md    columns table plus owned foreign keys
    schema/relationships.md     every foreign key (only when there are any)
    schema/summary.md           compact column listing for all tables

The output is a pure function of the input: identical schemas produce
byte-identical documents.
"""

from sqlscout.models.schema import ColumnInfo, ForeignKeyInfo, SchemaInfo, TableInfo

DOCUMENT_ROOT = "schema"
OVERVIEW_PATH = f"{DOCUMENT_ROOT}/overview.md"
RELATIONSHIPS_PATH = f"{DOCUMENT_ROOT}/relationships.md"
SUMMARY_PATH = f"{DOCUMENT_ROOT}/summary.md"
TABLES_DIR = f"{DOCUMENT_ROOT}/tables"


def table_document_path(table_name: str) -> str:
    return f"{TABLES_DIR}/{table_name}.md"


def materialize(schema: SchemaInfo) -> dict[str, str]:
    """
    Render a schema description into a document set.

    Args:
        schema: Normalized schema description (may be sparse or inconsistent)

    Returns:
        Mapping of document path to markdown text
    """
    documents: dict[str, str] = {OVERVIEW_PATH: _render_overview(schema.tables)}

    for table in schema.tables:
        documents[table_document_path(table.table_name)] = _render_table(
            table,
            schema.columns_for(table.table_name),
            schema.foreign_keys_for(table.table_name),
        )

    if schema.foreign_keys:
        documents[RELATIONSHIPS_PATH] = _render_relationships(schema.foreign_keys)

    documents[SUMMARY_PATH] = _render_summary(schema)
    return documents


def _render_overview(tables: list[TableInfo]) -> str:
    lines = ["# Database Schema Overview", "", "## Tables", ""]
    lines.extend(f"- {table.table_name} ({table.table_type})" for table in tables)
    return "\n".join(lines) + "\n"


def _render_table(
    table: TableInfo,
    columns: list[ColumnInfo],
    foreign_keys: list[ForeignKeyInfo],
) -> str:
    content = f"# Table: {table.table_name}\n\n"
    content += f"Type: {table.table_type}\n"
    content += f"Schema: {table.table_schema}\n\n"

    content += "## Columns\n\n"
    content += "| Column | Type | Nullable | Default |\n"
    content += "|--------|------|----------|--------|\n"
    for column in columns:
        nullable = "Yes" if column.is_nullable == "YES" else "No"
        default = column.column_default or "-"
        content += f"| {column.column_name} | {column.data_type} | {nullable} | {default} |\n"

    if foreign_keys:
        content += "\n## Foreign Keys\n\n"
        for fk in foreign_keys:
            content += f"- {fk.column_name} → {fk.foreign_table_name}.{fk.foreign_column_name}\n"

    return content


def _render_relationships(foreign_keys: list[ForeignKeyInfo]) -> str:
    content = "# Table Relationships\n\n## Foreign Key Relationships\n\n"
    for fk in foreign_keys:
        content += (
            f"- {fk.table_name}.{fk.column_name} → "
            f"{fk.foreign_table_name}.{fk.foreign_column_name}\n"
        )
    return content


def _render_summary(schema: SchemaInfo) -> str:
    content = "# Quick Reference\n\n## All Tables and Columns\n\n"
    for table in schema.tables:
        content += f"### {table.table_name}\n"
        content += "\n".join(
            f"- {column.column_name} ({column.data_type})"
            for column in schema.columns_for(table.table_name)
        )
        content += "\n\n"
    return content
