"""
CLI: ``estimator entries``: catalog entry CRUD commands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from estimator.cli.utils import (
    CATALOG_DIR_HELP,
    console,
    err_console,
    fail,
    fmt_decimal,
    make_context,
    output_result,
    print_json,
    print_warnings,
)

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_entries(
    category: str | None = typer.Option(None, "--category", "-c", help="Only this category"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List catalog entries with their Medium-size hours."""
    from estimator.ops.entries import list_entries as _list

    result = _list(make_context(catalog_dir), category)
    if not result.success:
        fail(result.error, as_json=json_out)
    if json_out:
        print_json(result.data)
        return

    table = Table(title="Entries", pad_edge=False)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Tech stack")
    table.add_column("Medium hours", overflow="fold")
    for entry in result.data:
        hours = ", ".join(f"{e.role_id}={fmt_decimal(e.hours)}" for e in entry.medium_estimates)
        table.add_row(
            escape(entry.id),
            escape(entry.name),
            escape(entry.category),
            escape(entry.tech_stack or ""),
            escape(hours),
        )
    console.print(table)


@app.command("show")
def show_entry(
    entry_id: str = typer.Argument(..., help="Entry ID"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one entry."""
    from estimator.ops.entries import get_entry as _get

    result = _get(make_context(catalog_dir), entry_id)
    output_result(result, as_json=json_out, title=f"Entry: {entry_id}")


@app.command("set")
def set_entry(
    entry_id: str = typer.Argument(..., help="Entry ID (created if missing)"),
    name: str | None = typer.Option(None, "--name", "-n"),
    description: str | None = typer.Option(None, "--description"),
    category: str | None = typer.Option(None, "--category", "-c"),
    tech_stack: str | None = typer.Option(None, "--tech-stack", "-s"),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Tag (repeatable; replaces current tags)"),
    hours: list[str] | None = typer.Option(
        None, "--hours", "-H", help="ROLE=HOURS Medium estimate (repeatable; replaces current estimates)"
    ),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Create or update an entry. Omitted options keep their current values."""
    from estimator.core.errors import EstimatorError
    from estimator.ops.entries import save_entry as _save
    from estimator.ops.requests import SaveEntryRequest

    ctx = make_context(catalog_dir, allow_empty=True)
    try:
        current = ctx.repository.get_entry(entry_id)
    except EstimatorError:
        current = None

    if hours:
        estimates: dict[str, str] = {}
        for token in hours:
            role_id, sep, value = token.partition("=")
            if not sep or not role_id.strip():
                err_console.print(f"[bold red]Error[/bold red]: --hours expects ROLE=HOURS, got '{escape(token)}'")
                raise typer.Exit(code=1)
            estimates[role_id.strip()] = value.strip()
    else:
        estimates = {e.role_id: e.hours for e in current.medium_estimates} if current else {}

    request = SaveEntryRequest(
        id=entry_id,
        name=name if name is not None else (current.name if current else entry_id),
        description=description if description is not None else (current.description if current else ""),
        category=category if category is not None else (current.category if current else ""),
        tech_stack=tech_stack if tech_stack is not None else (current.tech_stack if current else None),
        tags=list(tags) if tags else (list(current.tags) if current else []),
        medium_estimates=estimates,
    )
    result = _save(ctx, request)
    if not result.success:
        fail(result.error, as_json=json_out)
    print_warnings(result)
    if json_out:
        print_json(result.data)
        return
    verb = "Updated" if current else "Created"
    console.print(f"[green]✓[/green] {verb} entry {escape(entry_id)}")


@app.command("delete")
def delete_entry(
    entry_id: str = typer.Argument(..., help="Entry ID"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Delete an entry."""
    from estimator.ops.entries import delete_entry as _delete

    result = _delete(make_context(catalog_dir), entry_id)
    if not result.success:
        fail(result.error, as_json=json_out)
    print_warnings(result)
    if json_out:
        print_json(result.data)
        return
    console.print(f"[green]✓[/green] Deleted entry {escape(entry_id)}")
