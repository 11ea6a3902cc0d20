"""
SQLScout CLI

Command-line interface for SQLScout.

Usage:
    sqlscout schema --url URL --key KEY -o schema.json   # Fetch a project's schema
    sqlscout docs schema.json                            # List schema documents
    sqlscout docs schema.json --path schema/summary.md   # Print one document
    sqlscout validate "SELECT * FROM orders"             # Check SQL against the policy
    sqlscout ask "Show me 5 orders" --schema schema.json # Run the full pipeline
    sqlscout serve --port 8000                           # Run the HTTP API
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from sqlscout import __version__
from sqlscout.agents.validator import validate_sql
from sqlscout.config import LoggingSettings, get_settings
from sqlscout.connectors.supabase import SupabaseConnector
from sqlscout.models.api import Credentials, QueryResponse
from sqlscout.models.schema import SchemaInfo
from sqlscout.pipeline.orchestrator import QueryPipeline
from sqlscout.schema.materializer import materialize

console = Console()

MAX_DISPLAY_ROWS = 50


def configure_cli_logging(verbose: bool = False) -> None:
    """Keep library loggers quiet unless --verbose is given."""
    if verbose:
        LoggingSettings(level="DEBUG").configure()
        return
    logging.basicConfig(level=logging.CRITICAL)
    for logger_name in ("sqlscout", "httpx", "httpcore", "openai", "anthropic", "google_genai"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)


def describe_error(error: Exception) -> str:
    """Printable error text; validation errors list messages only, never input values."""
    if isinstance(error, ValidationError):
        return escape("; ".join(item["msg"] for item in error.errors()))
    return escape(str(error))


def load_schema_file(path: Path) -> SchemaInfo:
    """Read a SchemaInfo JSON file, accepting either a bare schema or ``{"schema": ...}``."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "schema" in payload:
        payload = payload["schema"]
    return SchemaInfo.model_validate(payload)


def format_rows(rows: list[dict[str, Any]]) -> Table:
    """Render result rows as a rich table."""
    table = Table(show_header=True, header_style="bold cyan")
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    for column in columns:
        table.add_column(column)
    for row in rows[:MAX_DISPLAY_ROWS]:
        table.add_row(*["" if row.get(col) is None else str(row.get(col)) for col in columns])
    return table


def print_query_response(response: QueryResponse) -> None:
    """Display a pipeline response."""
    if response.steps:
        console.print("[bold]Exploration steps:[/bold]")
        for step in response.steps:
            console.print(f"[dim]{step}[/dim]", highlight=False)
        console.print()

    if response.explanation:
        console.print(Panel(Markdown(response.explanation), title="[bold green]Explanation[/bold green]"))

    if response.sql:
        console.print(Panel(Syntax(response.sql, "sql"), title="SQL", border_style="cyan"))

    if response.error:
        console.print(f"[red]Error: {escape(response.error)}[/red]")
    if response.note:
        console.print(f"[yellow]{escape(response.note)}[/yellow]")

    if response.data is not None:
        console.print(f"\n[bold cyan]Results ({len(response.data)} rows):[/bold cyan]")
        if response.data:
            console.print(format_rows(response.data))
            if len(response.data) > MAX_DISPLAY_ROWS:
                console.print(f"[dim]Showing first {MAX_DISPLAY_ROWS} rows.[/dim]")


@click.group()
@click.version_option(version=__version__, prog_name="SQLScout")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """SQLScout - Natural-language questions to vetted, read-only SQL."""
    configure_cli_logging(verbose)


@cli.command()
@click.option("--url", envvar="SUPABASE_URL", required=True, help="Supabase project URL")
@click.option("--key", envvar="SUPABASE_ANON_KEY", required=True, help="Supabase anon key")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the schema JSON to this file instead of stdout",
)
def schema(url: str, key: str, output: Path | None):
    """Fetch the schema description of a Supabase project."""

    async def run_fetch() -> SchemaInfo:
        async with SupabaseConnector(url, key, timeout=get_settings().execution.timeout) as connector:
            return await connector.fetch_schema()

    try:
        schema_info = asyncio.run(run_fetch())
    except Exception as e:
        console.print(f"[red]Error: {describe_error(e)}[/red]")
        sys.exit(1)

    document = json.dumps({"schema": schema_info.model_dump(by_alias=True)}, indent=2)
    if output:
        output.write_text(document + "\n", encoding="utf-8")
        console.print(
            f"[green]✓ Saved {len(schema_info.tables)} tables to {output}[/green]"
        )
    else:
        click.echo(document)


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--path", "doc_path", default=None, help="Print a single document")
def docs(schema_file: Path, doc_path: str | None):
    """Show the documents the agent explores for a schema file."""
    try:
        documents = materialize(load_schema_file(schema_file))
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid schema file: {describe_error(e)}[/red]")
        sys.exit(1)

    if doc_path is None:
        for path in sorted(documents):
            click.echo(path)
        return

    if doc_path not in documents:
        console.print(f"[red]Document not found: {doc_path}[/red]")
        sys.exit(1)
    click.echo(documents[doc_path], nl=False)


@cli.command()
@click.argument("sql")
def validate(sql: str):
    """Check SQL against the read-only policy."""
    outcome = validate_sql(sql)
    if outcome.valid:
        console.print("[green]✓ Query is allowed[/green]")
        return
    console.print(f"[red]✗ {escape(outcome.reason)}[/red]")
    sys.exit(1)


@cli.command()
@click.argument("question")
@click.option(
    "--schema",
    "schema_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Schema JSON produced by 'sqlscout schema'",
)
@click.option("--url", envvar="SUPABASE_URL", required=True, help="Supabase project URL")
@click.option("--key", envvar="SUPABASE_ANON_KEY", required=True, help="Supabase anon key")
@click.option(
    "--provider",
    type=click.Choice(["openai", "anthropic", "google", "local"]),
    default="openai",
    show_default=True,
    help="LLM provider",
)
@click.option("--model", default=None, help="Model override (provider default if omitted)")
@click.option("--api-key", envvar="LLM_API_KEY", default=None, help="LLM provider API key")
@click.option("--json", "as_json", is_flag=True, help="Print the raw response payload")
def ask(
    question: str,
    schema_file: Path,
    url: str,
    key: str,
    provider: str,
    model: str | None,
    api_key: str | None,
    as_json: bool,
):
    """Answer a question against a Supabase project."""
    try:
        schema_info = load_schema_file(schema_file)
        credentials = Credentials(
            supabase_url=url,
            supabase_anon_key=key,
            llm_provider=provider,
            llm_model=model,
            llm_api_key=api_key,
        )
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Error: {describe_error(e)}[/red]")
        sys.exit(1)

    async def run_query() -> QueryResponse:
        pipeline = QueryPipeline(settings=get_settings())
        return await pipeline.run(question, credentials, schema_info)

    try:
        if as_json:
            response = asyncio.run(run_query())
        else:
            with console.status("[bold green]Exploring schema..."):
                response = asyncio.run(run_query())
    except Exception as e:
        console.print(f"[red]Error: {describe_error(e)}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(response.to_payload(), indent=2, default=str))
    else:
        print_query_response(response)

    if not response.success:
        sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Bind host (defaults to API_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to API_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    console.print(f"[green]Starting SQLScout API on http://{host}:{port}[/green]")
    uvicorn.run("sqlscout.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
