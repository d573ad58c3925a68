"""
CLI: ``estimator config``: show the effective configuration.
"""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table

from estimator.cli.utils import console, err_console


def config_command(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show the effective settings (environment, .env and defaults)."""
    from pydantic import ValidationError

    from estimator.core.settings import get_settings

    try:
        settings = get_settings(_force_reload=True)
    except ValidationError as e:
        err_console.print(f"[red]Configuration Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if format == "json":
        console.print_json(settings.model_dump_json())
        return

    values = settings.model_dump()
    if format == "env":
        for key, value in sorted(values.items()):
            console.print(f"ESTIMATOR_{key.upper()}={'' if value is None else value}", markup=False)
        return

    table = Table(title="Settings", pad_edge=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Environment variable", style="dim")
    for key, value in sorted(values.items()):
        table.add_row(key, escape("" if value is None else str(value)), f"ESTIMATOR_{key.upper()}")
    console.print(table)

    catalog_path = settings.catalog_path
    if not catalog_path.is_dir():
        console.print(f"[yellow]Warning:[/yellow] catalog directory {escape(str(catalog_path))} does not exist")
