"""
CLI: ``estimator roles``: role CRUD commands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from estimator.cli.utils import (
    CATALOG_DIR_HELP,
    console,
    fail,
    fmt_decimal,
    make_context,
    output_result,
    print_json,
    print_warnings,
)

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_roles(
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List all roles."""
    from estimator.ops.roles import list_roles as _list

    result = _list(make_context(catalog_dir))
    if not result.success:
        fail(result.error, as_json=json_out)
    if json_out:
        print_json(result.data)
        return

    table = Table(title="Roles", pad_edge=False)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Multiplier", justify="right")
    table.add_column("Tech stack")
    table.add_column("Description", overflow="fold")
    for role in result.data:
        table.add_row(
            escape(role.id),
            escape(role.name),
            fmt_decimal(role.productivity_multiplier),
            escape(role.tech_stack_id or ""),
            escape(role.description),
        )
    console.print(table)


@app.command("show")
def show_role(
    role_id: str = typer.Argument(..., help="Role ID"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one role."""
    from estimator.ops.roles import get_role as _get

    result = _get(make_context(catalog_dir), role_id)
    output_result(result, as_json=json_out, title=f"Role: {role_id}")


@app.command("set")
def set_role(
    role_id: str = typer.Argument(..., help="Role ID (created if missing)"),
    name: str | None = typer.Option(None, "--name", "-n"),
    description: str | None = typer.Option(None, "--description"),
    multiplier: str | None = typer.Option(
        None, "--multiplier", "-m", help="Productivity multiplier, e.g. 0.7 (must be > 0)"
    ),
    tech_stack: str | None = typer.Option(None, "--tech-stack", "-s"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Create or update a role. Omitted options keep their current values."""
    from estimator.ops.requests import SaveRoleRequest
    from estimator.ops.roles import save_role as _save

    ctx = make_context(catalog_dir, allow_empty=True)
    current = _current_role(ctx, role_id)
    request = SaveRoleRequest(
        id=role_id,
        name=name if name is not None else (current.name if current else role_id),
        description=description if description is not None else (current.description if current else ""),
        productivity_multiplier=(
            multiplier if multiplier is not None else (current.productivity_multiplier if current else "1.0")
        ),
        tech_stack_id=tech_stack if tech_stack is not None else (current.tech_stack_id if current else None),
    )
    result = _save(ctx, request)
    if not result.success:
        fail(result.error, as_json=json_out)
    print_warnings(result)
    if json_out:
        print_json(result.data)
        return
    verb = "Updated" if current else "Created"
    console.print(f"[green]✓[/green] {verb} role {escape(role_id)}")


@app.command("delete")
def delete_role(
    role_id: str = typer.Argument(..., help="Role ID"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Delete a role that no entry references."""
    from estimator.ops.roles import delete_role as _delete

    result = _delete(make_context(catalog_dir), role_id)
    if not result.success:
        fail(result.error, as_json=json_out)
    if json_out:
        print_json(result.data)
        return
    console.print(f"[green]✓[/green] Deleted role {escape(role_id)}")


def _current_role(ctx, role_id: str):
    from estimator.core.errors import EstimatorError

    try:
        return ctx.repository.get_role(role_id)
    except EstimatorError:
        return None
