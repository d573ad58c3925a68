"""
CLI: ``estimator export`` / ``estimator import``: TSV round-trip of a catalog.

Export writes ``roles.tsv`` and ``entries.tsv`` for editing in a spreadsheet;
import validates them, reports every row error at once, and writes a new
catalog JSON only when the whole import is clean.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from estimator.cli.utils import CATALOG_DIR_HELP, console, err_console, make_repository
from estimator.core.errors import EstimatorError
from estimator.core.timestamps import truncate_to_second, utc_now


def export_command(
    input_file: Path | None = typer.Option(
        None, "--input", "-i", help="Catalog JSON to export (defaults to the latest snapshot)"
    ),
    output_dir: Path = typer.Option(..., "--output", "-o", help="Directory for roles.tsv and entries.tsv"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing files without asking"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
) -> None:
    """Export a catalog to tab-separated files."""
    from estimator.tabular import ENTRIES_FILENAME, ROLES_FILENAME, export_catalog

    store = make_repository(catalog_dir).store
    try:
        snapshot = store.read(input_file) if input_file is not None else store.load_latest()
    except EstimatorError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.code}): {escape(e.message)}")
        raise typer.Exit(code=1) from e

    existing = [p for p in (output_dir / ROLES_FILENAME, output_dir / ENTRIES_FILENAME) if p.exists()]
    if existing and not force:
        names = ", ".join(p.name for p in existing)
        if not typer.confirm(f"{names} already exist in {output_dir}. Overwrite?", default=False):
            console.print("Export cancelled.")
            raise typer.Exit(code=0)

    try:
        result = export_catalog(snapshot, output_dir)
    except EstimatorError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.code}): {escape(e.message)}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✓[/green] Exported {result.role_count} roles to {escape(str(result.roles_path))}")
    console.print(f"[green]✓[/green] Exported {result.entry_count} entries to {escape(str(result.entries_path))}")


def import_command(
    roles_file: Path = typer.Option(..., "--roles", help="roles.tsv to import"),
    entries_file: Path = typer.Option(..., "--entries", help="entries.tsv to import"),
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="Catalog JSON to write (defaults to a new snapshot in the catalog directory)"
    ),
    validate_only: bool = typer.Option(False, "--validate-only", help="Check the files without writing anything"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing output file without asking"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
) -> None:
    """Import tab-separated files into a catalog snapshot."""
    from estimator.tabular import import_catalog

    result = import_catalog(roles_file, entries_file)

    if result.errors:
        table = Table(title=f"{len(result.errors)} import error(s)", pad_edge=False)
        table.add_column("File")
        table.add_column("Row", justify="right")
        table.add_column("Error", overflow="fold")
        for error in result.errors:
            table.add_row(escape(error.file), str(error.row), escape(error.message))
        err_console.print(table)
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Validated {len(result.roles)} roles and {len(result.entries)} entries")
    if validate_only:
        return

    store = make_repository(catalog_dir).store
    snapshot = result.to_snapshot(timestamp=truncate_to_second(utc_now()))

    try:
        if output_file is None:
            path = store.save(snapshot).path
        else:
            if output_file.exists() and not force:
                if not typer.confirm(f"{output_file} already exists. Overwrite?", default=False):
                    console.print("Import cancelled.")
                    raise typer.Exit(code=0)
            path = store.write(output_file, snapshot)
    except EstimatorError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.code}): {escape(e.message)}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✓[/green] Wrote {escape(str(path))}")
