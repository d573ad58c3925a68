"""
Root Typer application for the estimator CLI.

Sub-commands import their operation modules lazily so ``estimator --help``
stays fast.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="estimator",
    help="estimator: feature-catalog project estimation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from estimator import __version__

        typer.echo(f"estimator {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l", help="Log level for stderr output (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """estimator CLI: browse the catalog, calculate estimates, edit roles and entries."""
    from pydantic import ValidationError

    from estimator.core.logging import configure_logging
    from estimator.core.settings import get_settings

    # Bad settings are reported by the command that needs them (see `estimator config`)
    try:
        json_format = get_settings().log_format == "json"
    except ValidationError:
        json_format = False

    configure_logging(level=log_level, json_format=json_format, service="estimator-cli")


# ── Command registration ─────────────────────────────────────────────────

from estimator.cli.catalog import export_command, import_command  # noqa: E402
from estimator.cli.config import config_command  # noqa: E402
from estimator.cli.entries import app as entries_app  # noqa: E402
from estimator.cli.estimate import categories_command, estimate_command, features_command  # noqa: E402
from estimator.cli.roles import app as roles_app  # noqa: E402
from estimator.cli.serve import serve_command  # noqa: E402
from estimator.cli.snapshots import snapshots_command  # noqa: E402

app.command("export")(export_command)
app.command("import")(import_command)
app.command("features")(features_command)
app.command("categories")(categories_command)
app.command("estimate")(estimate_command)
app.command("snapshots")(snapshots_command)
app.command("config")(config_command)
app.command("serve")(serve_command)

app.add_typer(roles_app, name="roles", help="Role management.")
app.add_typer(entries_app, name="entries", help="Catalog entry management.")
