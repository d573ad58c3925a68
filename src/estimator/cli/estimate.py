"""
CLI: ``estimator features``, ``estimator categories`` and ``estimator estimate``.

The same catalog browsing and calculation the MCP tools expose, for use from
a terminal.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from estimator.cli.utils import CATALOG_DIR_HELP, console, fail, make_context, print_json
from estimator.core.calculator import Estimate, round_display
from estimator.core.models import SizeSelection


def features_command(
    category: str | None = typer.Option(None, "--category", "-c", help="Only this category"),
    tech_stack: str | None = typer.Option(None, "--tech-stack", "-s", help="Only this tech stack"),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Only entries with this tag"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List catalog features available for estimation."""
    from estimator.ops.catalog import list_features
    from estimator.ops.requests import ListFeaturesRequest

    ctx = make_context(catalog_dir)
    result = list_features(ctx, ListFeaturesRequest(category=category, tech_stack=tech_stack, tag=tag))
    if not result.success:
        fail(result.error, as_json=json_out)

    query = result.data
    if json_out:
        print_json(query.to_dict())
        return

    if not query.entries:
        console.print("[dim]No matching features.[/dim]")
        return

    table = Table(title=f"Features ({query.total_count})", pad_edge=False)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Tech stack")
    table.add_column("Tags", overflow="fold")
    for entry in query.entries:
        table.add_row(
            escape(entry.id),
            escape(entry.name),
            escape(entry.category),
            escape(entry.tech_stack or ""),
            escape(", ".join(entry.tags)),
        )
    console.print(table)


def parse_selection(token: str) -> SizeSelection:
    """``feature=SIZE`` into a selection; a missing size is left blank for validation."""
    feature_id, _, size = token.rpartition("=")
    if not feature_id:
        return SizeSelection(feature_id=size.strip(), size="")
    return SizeSelection(feature_id=feature_id.strip(), size=size.strip())


def estimate_command(
    selections: list[str] = typer.Argument(..., help="Selections as FEATURE=SIZE (XS, S, M, L, XL)"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Calculate an estimate for one or more feature selections."""
    from estimator.ops.estimates import calculate_estimate
    from estimator.ops.requests import CalculateEstimateRequest

    ctx = make_context(catalog_dir)
    request = CalculateEstimateRequest(selections=[parse_selection(t) for t in selections])
    result = calculate_estimate(ctx, request)
    if not result.success:
        fail(result.error, as_json=json_out)

    if json_out:
        print_json(result.data.to_dict())
        return
    render_estimate(result.data)


def render_estimate(estimate: Estimate) -> None:
    features = Table(title="Per feature", pad_edge=False)
    features.add_column("Feature", style="cyan")
    features.add_column("Size")
    features.add_column("Role")
    features.add_column("Base h", justify="right")
    features.add_column("Sized h", justify="right")
    features.add_column("×", justify="right")
    features.add_column("Final h", justify="right")
    for feature in estimate.features:
        for i, line in enumerate(feature.roles):
            features.add_row(
                escape(feature.feature_name or feature.feature_id) if i == 0 else "",
                feature.size.value if i == 0 else "",
                escape(line.role_name or line.role_id),
                format(line.base_hours, "f"),
                str(round_display(line.sized_hours)),
                format(line.productivity_multiplier, "f"),
                str(round_display(line.final_hours)),
            )
    console.print(features)

    roles = Table(title="Per role", pad_edge=False)
    roles.add_column("Role", style="cyan")
    roles.add_column("Sized h", justify="right")
    roles.add_column("Sized d", justify="right")
    roles.add_column("Final h", justify="right")
    roles.add_column("Final d", justify="right")
    for total in estimate.role_totals:
        roles.add_row(
            escape(total.role_name or total.role_id),
            str(round_display(total.sized_hours)),
            str(round_display(total.sized_days)),
            str(round_display(total.final_hours)),
            str(round_display(total.final_days)),
        )
    console.print(roles)

    console.print(
        f"[bold]Total[/bold] ({len(estimate.features)} features): "
        f"{round_display(estimate.final_hours)} h / {round_display(estimate.final_days)} d "
        f"[dim](before productivity: {round_display(estimate.sized_hours)} h)[/dim]"
    )


def categories_command(
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-d", help=CATALOG_DIR_HELP),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the distinct categories used by catalog entries."""
    from estimator.ops.catalog import list_categories

    result = list_categories(make_context(catalog_dir))
    if not result.success:
        fail(result.error, as_json=json_out)

    if json_out:
        print_json(result.data)
        return
    if not result.data:
        console.print("[dim]No categories.[/dim]")
        return
    for category in result.data:
        console.print(escape(category))
