"""
CLI: ``estimator snapshots``: snapshot history.

``--check`` loads the newest snapshot the way the MCP server would and
reports whether it parses, which is the quick test after editing a catalog
file by hand.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from estimator.cli.utils import CATALOG_DIR_HELP, console, fail, make_context, print_json
from estimator.core.timestamps import to_iso8601
from estimator.ops.context import OperationContext


def snapshots_command(
    limit: int = typer.Option(20, "--limit", "-n", help="Show at most this many snapshots"),
    check: bool = typer.Option(False, "--check", help="Load the latest snapshot and report whether it is valid"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List catalog snapshots, newest first."""
    from estimator.ops.snapshots import list_snapshots

    ctx = make_context(catalog_dir)
    if check:
        _check_latest(ctx, json_out=json_out)
        return

    result = list_snapshots(ctx)
    if not result.success:
        fail(result.error, as_json=json_out)

    files = result.data[:limit] if limit > 0 else result.data
    if json_out:
        print_json(
            [
                {"file": f.path.name, "timestamp": to_iso8601(f.timestamp), "sizeBytes": f.size_bytes}
                for f in files
            ]
        )
        return

    if not files:
        console.print("[dim]No snapshots.[/dim]")
        return

    table = Table(title=f"Snapshots ({len(result.data)})", pad_edge=False)
    table.add_column("File", style="cyan")
    table.add_column("Timestamp (UTC)")
    table.add_column("Size", justify="right")
    for i, f in enumerate(files):
        name = escape(f.path.name) + (" [green](latest)[/green]" if i == 0 else "")
        table.add_row(name, to_iso8601(f.timestamp), f"{f.size_bytes:,} B")
    console.print(table)


def _check_latest(ctx: OperationContext, *, json_out: bool) -> None:
    from estimator.ops.snapshots import reload_catalog

    result = reload_catalog(ctx)
    if not result.success:
        fail(result.error, as_json=json_out)

    snapshot = result.data
    summary = {
        "version": snapshot.version,
        "timestamp": to_iso8601(snapshot.timestamp),
        "roles": len(snapshot.roles),
        "entries": len(snapshot.entries),
    }
    if json_out:
        print_json(summary)
        return
    console.print(
        f"[green]✓[/green] Latest snapshot is valid: {summary['roles']} roles, {summary['entries']} entries "
        f"(version {escape(snapshot.version)}, {summary['timestamp']})"
    )
