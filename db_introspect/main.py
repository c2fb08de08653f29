"""db-introspect - Main entry point."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing_extensions import Annotated

from .clients import open_client
from .config import find_env_file, settings
from .connector import Connector
from .database.models import IntrospectionResult
from .errors import IntrospectionError
from .registry import default_registry

app = typer.Typer(
    name="db-introspect",
    help="Describe relational database schemas in a dialect-independent form",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

UrlOption = Annotated[Optional[str], typer.Option("--url", help="Database connection URL")]
DialectOption = Annotated[Optional[str], typer.Option("--dialect", help="Dialect driver (default: from config)")]


def _setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_url(url: Optional[str]) -> str:
    resolved = url or settings.database_url
    if not resolved:
        err_console.print("[red]No database URL. Pass --url or set DB_INTROSPECT_DATABASE_URL.[/red]")
        raise typer.Exit(1)
    return resolved


def _fail(error: IntrospectionError):
    err_console.print(f"[red]Error: {error.message}[/red]")
    raise typer.Exit(1)


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Database URL configured: {'Yes' if settings.database_url else 'No'}")
    console.print(f"  Dialect: {settings.dialect}")
    console.print(f"  Default Schema: {settings.default_schema}")
    console.print(f"  Max Workers: {settings.max_workers}")
    console.print(f"  Log Level: {settings.log_level}")
    console.print(f"  Env File: {find_env_file() or '(none)'}")


@app.command()
def schemas(
    url: UrlOption = None,
    dialect: DialectOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """List user schemas (internal schemas are excluded)."""
    _setup_logging(verbose)
    dialect_name = dialect or settings.dialect
    registry = default_registry()

    try:
        with open_client(dialect_name, _resolve_url(url)) as client:
            connector = Connector(registry.create(dialect_name, client))
            names = connector.list_schemas()
    except IntrospectionError as e:
        _fail(e)

    for name in names:
        console.print(name)


@app.command()
def inspect(
    schema: Annotated[Optional[str], typer.Argument(help="Schema to introspect (default: from config)")] = None,
    url: UrlOption = None,
    dialect: DialectOption = None,
    workers: Annotated[Optional[int], typer.Option("--workers", "-w", min=1, help="Tables fetched concurrently")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Write JSON result to a file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """Introspect a schema: tables, columns, indices and relations."""
    _setup_logging(verbose)
    schema_name = schema or settings.default_schema
    dialect_name = dialect or settings.dialect
    max_workers = workers or settings.max_workers
    database_url = _resolve_url(url)
    registry = default_registry()

    # Parallel runs give every worker its own connection
    worker_clients: List = []

    def driver_factory():
        worker_client = open_client(dialect_name, database_url)
        worker_clients.append(worker_client)
        return registry.create(dialect_name, worker_client)

    try:
        with open_client(dialect_name, database_url) as client:
            connector = Connector(
                registry.create(dialect_name, client),
                max_workers=max_workers,
                driver_factory=driver_factory if max_workers > 1 else None,
            )
            result = connector.introspect(schema_name)
    except IntrospectionError as e:
        _fail(e)
    finally:
        for worker_client in worker_clients:
            worker_client.close()

    if output:
        output.write_text(json.dumps(result.to_dict(), indent=2))
        console.print(f"[green]Wrote {len(result.tables)} tables to {output}[/green]")
    elif as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _print_result(result)

    _print_partial_columns(result)


def _print_result(result: IntrospectionResult):
    console.print(f"[bold]Schema {result.schema}[/bold] ({result.dialect})")

    for table in result.tables:
        title = table.name if not table.comment else f"{table.name} - {table.comment}"
        grid = Table(title=title, title_justify="left")
        grid.add_column("Column")
        grid.add_column("Type")
        grid.add_column("Identifier")
        grid.add_column("Null")
        grid.add_column("Default")
        grid.add_column("Key")

        for column in table.columns:
            key = "PK" if column.is_primary_key else ("UQ" if column.is_unique else "")
            identifier = column.type_identifier.value if column.type_identifier else "[yellow]?[/yellow]"
            grid.add_row(
                column.name,
                column.data_type,
                identifier,
                "yes" if column.is_nullable else "no",
                column.default_value or "",
                key,
            )
        console.print(grid)

        for index in table.indices:
            flags = "primary" if index.is_primary_key else ("unique" if index.unique else "index")
            console.print(f"  {flags} {index.name} ({', '.join(index.fields)})")

    if result.relations:
        console.print("[bold]Relations[/bold]")
        for rel in result.relations:
            console.print(
                f"  {rel.source_table}.{rel.source_column} -> "
                f"{rel.target_table}.{rel.target_column} ({rel.relationship_type})"
            )


def _print_partial_columns(result: IntrospectionResult):
    partial = result.partial_columns()
    if not partial:
        return
    err_console.print(f"[yellow]{len(partial)} column(s) need manual handling:[/yellow]")
    for table_name, column in partial:
        err_console.print(f"[yellow]  {table_name}.{column.name}: {column.type_comment}[/yellow]")


@app.callback()
def main():
    """
    db-introspect - Describe relational database schemas.

    Examples:

        db-introspect schemas --url postgresql://localhost/app

        db-introspect inspect public --json

        db-introspect inspect sales --workers 4 -o sales.json
    """
    pass


if __name__ == "__main__":
    app()
