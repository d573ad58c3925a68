"""
CLI utility helpers: output formatting and repository wiring.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from estimator.core.repository import CatalogRepository
from estimator.core.settings import get_settings
from estimator.core.store import CatalogStore
from estimator.ops.context import OperationContext
from estimator.ops.result import OperationError, OperationResult

console = Console()
err_console = Console(stderr=True)

CATALOG_DIR_HELP = "Catalog directory (defaults to ESTIMATOR_CATALOG_PATH)"


# ── Repository helpers ───────────────────────────────────────────────────


def resolve_catalog_dir(catalog_dir: Path | None) -> Path:
    return Path(catalog_dir) if catalog_dir is not None else Path(get_settings().catalog_path)


def make_repository(catalog_dir: Path | None = None, *, allow_empty: bool = False) -> CatalogRepository:
    """Repository over *catalog_dir*, or the configured catalog path."""
    return CatalogRepository(CatalogStore(resolve_catalog_dir(catalog_dir)), allow_empty=allow_empty)


def make_context(catalog_dir: Path | None = None, *, allow_empty: bool = False) -> OperationContext:
    """Create an ``OperationContext`` for CLI commands."""
    return OperationContext(repository=make_repository(catalog_dir, allow_empty=allow_empty), caller="cli")


# ── Output helpers ───────────────────────────────────────────────────────


def to_jsonable(obj: Any) -> Any:
    """Convert domain objects, dataclasses and containers to plain data."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, list | tuple):
        return [to_jsonable(o) for o in obj]
    return obj


def print_json(data: Any) -> None:
    console.print_json(json.dumps(to_jsonable(data), default=_json_default))


def fail(error: OperationError | None, *, as_json: bool = False) -> None:
    """Report a failed operation and exit with status 1."""
    if error is None:
        err_console.print("[bold red]Error[/bold red]: Unknown error")
        raise typer.Exit(code=1)

    if as_json:
        from estimator.ops.result import error_payload

        print_json({"error": error_payload(error)})
        raise typer.Exit(code=1)

    err_console.print(f"[bold red]Error[/bold red] ({error.code}): {escape(error.message)}")
    for item in error.details.get("errors", []):
        err_console.print(f"  [red]•[/red] {escape(str(item.get('code', '')))}: {escape(str(item.get('message', '')))}")
    raise typer.Exit(code=1)


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` generically (key/value or table)."""
    if not result.success:
        fail(result.error, as_json=as_json)

    print_warnings(result)
    data = result.data

    if as_json:
        print_json(data)
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        _print_table([to_jsonable(d) for d in data], title=title)
    else:
        _print_dict(to_jsonable(data), title=title)


def print_warnings(result: OperationResult) -> None:
    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")


def fmt_decimal(value: Decimal | int | float | None) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in items[0]:
        table.add_column(col, overflow="fold")
    for item in items:
        table.add_row(*(escape(_cell(v)) for v in item.values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{escape(title)}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{escape(str(k))}[/cyan]: {escape(_cell(v))}")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, list | tuple):
        return ", ".join(_cell(v) for v in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}={_cell(v)}" for k, v in value.items())
    return str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, datetime | Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
