"""
Schema Description Models

Normalized description of a target database: tables, columns and foreign
keys. Field names follow the information_schema column names so payloads
produced by introspection can be passed through unchanged.
"""

from pydantic import BaseModel, ConfigDict, Field


class TableInfo(BaseModel):
    """A table or view in the target database."""

    table_schema: str = Field(default="public", description="Schema the table lives in")
    table_name: str = Field(..., description="Table name")
    table_type: str = Field(default="BASE TABLE", description="BASE TABLE or VIEW")


class ColumnInfo(BaseModel):
    """A column, referencing its table by name."""

    table_schema: str = Field(default="public", description="Schema of the owning table")
    table_name: str = Field(..., description="Owning table name")
    column_name: str = Field(..., description="Column name")
    data_type: str = Field(default="unknown", description="Declared column type")
    is_nullable: str = Field(default="YES", description="'YES' or 'NO'")
    column_default: str | None = Field(None, description="Default expression if any")
    character_maximum_length: int | None = Field(None, description="Max length for text types")


class ForeignKeyInfo(BaseModel):
    """A foreign key from an owning column to a referenced column."""

    constraint_name: str | None = Field(None, description="Constraint name")
    table_schema: str = Field(default="public", description="Schema of the owning table")
    table_name: str = Field(..., description="Owning table")
    column_name: str = Field(..., description="Owning column")
    foreign_table_schema: str = Field(default="public", description="Referenced schema")
    foreign_table_name: str = Field(..., description="Referenced table")
    foreign_column_name: str = Field(..., description="Referenced column")


class SchemaInfo(BaseModel):
    """
    Normalized schema description.

    Columns and foreign keys SHOULD reference tables in the same description,
    but dangling references are allowed and tolerated downstream.
    """

    tables: list[TableInfo] = Field(default_factory=list, description="Tables and views")
    columns: list[ColumnInfo] = Field(default_factory=list, description="All columns")
    foreign_keys: list[ForeignKeyInfo] = Field(
        default_factory=list,
        alias="foreignKeys",
        description="Foreign keys (empty when introspection could not discover them)",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "tables": [
                    {"table_schema": "public", "table_name": "orders", "table_type": "BASE TABLE"}
                ],
                "columns": [
                    {
                        "table_schema": "public",
                        "table_name": "orders",
                        "column_name": "id",
                        "data_type": "integer",
                        "is_nullable": "NO",
                        "column_default": None,
                        "character_maximum_length": None,
                    }
                ],
                "foreignKeys": [],
            }
        },
    )

    def columns_for(self, table_name: str) -> list[ColumnInfo]:
        """Columns whose stated table name matches, in declaration order."""
        return [column for column in self.columns if column.table_name == table_name]

    def foreign_keys_for(self, table_name: str) -> list[ForeignKeyInfo]:
        """Foreign keys owned by the given table."""
        return [fk for fk in self.foreign_keys if fk.table_name == table_name]
