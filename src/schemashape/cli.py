"""CLI interface for schemashape using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schemashape import __description__, __version__
from schemashape.config import SchemaShapeConfig, load_config
from schemashape.diagnostics import ResolutionResult
from schemashape.exceptions import SchemaShapeError
from schemashape.resolver import SchemaResolver
from schemashape.validator import Validator

app = typer.Typer(
    name="schemashape",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"schemashape version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """schemashape - schema-driven type inference and validation."""


def _load_settings(config: Path | None) -> SchemaShapeConfig:
    settings = load_config(config)
    logging.basicConfig(level=settings.logging.level.to_logging_level())
    return settings


def _load_document(path: Path, label: str) -> Any:
    """Load a JSON document, exiting with an error message on failure."""
    if not path.exists():
        console.print(f"[red]Error:[/red] {label} file not found: {path}")
        raise typer.Exit(1)
    try:
        with open(path, encoding="utf-8") as f:
            return jsonlib.load(f)
    except jsonlib.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON in {label} file {path}: {e}")
        raise typer.Exit(1)


def _resolve(schema_path: Path, settings: SchemaShapeConfig) -> ResolutionResult:
    schema = _load_document(schema_path, "schema")
    try:
        return SchemaResolver(settings.resolver).resolve(schema)
    except SchemaShapeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _print_schema_issues(result: ResolutionResult) -> None:
    if not result.issues:
        return

    console.print("\n[blue]Schema Issues:[/blue]")
    issues_table = Table()
    issues_table.add_column("Code", style="cyan")
    issues_table.add_column("Severity", style="white")
    issues_table.add_column("Message", style="white")
    issues_table.add_column("Location", style="dim")

    for issue in result.issues:
        severity_color = "yellow" if issue.severity.value == "warning" else "dim"
        issues_table.add_row(
            issue.code.value,
            f"[{severity_color}]{issue.severity.value.upper()}[/{severity_color}]",
            escape(issue.message),
            escape(issue.path)
        )

    console.print(issues_table)


@app.command()
def resolve(
    schema: Annotated[
        Path,
        typer.Argument(help="Path to a JSON schema document")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json, table (default: json)")
    ] = "json",
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .schemashape.json)")
    ] = None,
) -> None:
    """Resolve a schema document into its type model."""
    valid_formats = ["json", "table"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        settings = _load_settings(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    result = _resolve(schema, settings)

    if format == "json":
        console.print_json(jsonlib.dumps(result.to_dict()))
    else:
        console.print(f"[green]Resolved:[/green] {schema}")
        console.print(f"Model: {result.model.describe()}")
        _print_schema_issues(result)


@app.command()
def validate(
    schema: Annotated[
        Path,
        typer.Argument(help="Path to a JSON schema document")
    ],
    data: Annotated[
        Path,
        typer.Argument(help="Path to the JSON data document to check")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: table)")
    ] = "table",
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .schemashape.json)")
    ] = None,
) -> None:
    """Validate a data document against a schema."""
    valid_formats = ["table", "json", "markdown"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        settings = _load_settings(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    resolution = _resolve(schema, settings)
    value = _load_document(data, "data")
    result = Validator(settings.validator).validate(resolution.model, value)

    if format == "json":
        console.print_json(jsonlib.dumps(result.to_dict()))
    elif format == "markdown":
        console.print("# Validation Report")
        console.print(f"**Accepted:** {result.accepted}")
        console.print(f"**Exit Code:** {result.exit_code}")
        console.print()

        if result.issues:
            console.print("## Issues")
            for issue in result.issues:
                console.print(f"- `{escape(issue.path)}`: {escape(issue.reason)}")
    else:  # table format
        status_color = "green" if result.accepted else "red"
        status = "ACCEPTED" if result.accepted else "REJECTED"
        console.print(f"[{status_color}]Validation Status: {status}[/{status_color}]")
        console.print(f"Exit Code: {result.exit_code}")

        if result.issues:
            console.print("\n[blue]Issues Found:[/blue]")
            issues_table = Table()
            issues_table.add_column("Path", style="cyan")
            issues_table.add_column("Reason", style="white")

            for issue in result.issues:
                issues_table.add_row(escape(issue.path), escape(issue.reason))

            console.print(issues_table)
        else:
            console.print("\n[green]No issues found![/green]")

        _print_schema_issues(resolution)

    raise typer.Exit(result.exit_code)


if __name__ == "__main__":
    app()
