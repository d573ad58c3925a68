"""Export a catalog snapshot to ``roles.tsv`` and ``entries.tsv``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from estimator.core.errors import StorageError
from estimator.core.logging import get_logger
from estimator.core.models import CatalogSnapshot
from estimator.tabular.rows import (
    ENTRY_COLUMNS,
    ENTRY_OPTIONAL_COLUMNS,
    ROLE_COLUMNS,
    ROLE_OPTIONAL_COLUMNS,
    TSV_ENCODING,
    format_decimal,
    join_tags,
    write_rows,
)

logger = get_logger(__name__)

ROLES_FILENAME = "roles.tsv"
ENTRIES_FILENAME = "entries.tsv"


@dataclass(frozen=True)
class ExportResult:
    roles_path: Path
    entries_path: Path
    role_count: int
    entry_count: int


def render_roles(snapshot: CatalogSnapshot) -> str:
    """roles.tsv text, one row per role sorted by id."""
    rows = [list(ROLE_COLUMNS + ROLE_OPTIONAL_COLUMNS)]
    for role in sorted(snapshot.roles, key=lambda r: r.id):
        rows.append(
            [
                role.id,
                role.name,
                role.description,
                format_decimal(role.productivity_multiplier),
                role.tech_stack_id or "",
            ]
        )
    return write_rows(rows)


def render_entries(snapshot: CatalogSnapshot) -> str:
    """entries.tsv text with one hours column per role id.

    Rows are sorted by category then id; a blank cell means the entry has no
    estimate for that role.
    """
    role_ids = sorted(r.id for r in snapshot.roles)
    rows = [list(ENTRY_COLUMNS + ENTRY_OPTIONAL_COLUMNS) + role_ids]
    for entry in sorted(snapshot.entries, key=lambda e: (e.category, e.id)):
        hours = {est.role_id: est.hours for est in entry.medium_estimates}
        rows.append(
            [
                entry.id,
                entry.name,
                entry.description,
                entry.category,
                entry.tech_stack or "",
                join_tags(entry.tags),
            ]
            + [format_decimal(hours[rid]) if rid in hours else "" for rid in role_ids]
        )
    return write_rows(rows)


def export_catalog(snapshot: CatalogSnapshot, directory: Path | str) -> ExportResult:
    """Write both TSV files into *directory*, creating it if needed.

    Raises:
        StorageError: if the directory or either file cannot be written.
    """
    directory = Path(directory)
    roles_path = directory / ROLES_FILENAME
    entries_path = directory / ENTRIES_FILENAME
    try:
        directory.mkdir(parents=True, exist_ok=True)
        roles_path.write_text(render_roles(snapshot), encoding=TSV_ENCODING, newline="")
        entries_path.write_text(render_entries(snapshot), encoding=TSV_ENCODING, newline="")
    except OSError as e:
        raise StorageError(
            f"Failed to export catalog to {directory}: {e}",
            details={"directory": str(directory)},
            cause=e,
        ) from e

    logger.info(
        "catalog_exported",
        directory=str(directory),
        roles=len(snapshot.roles),
        entries=len(snapshot.entries),
    )
    return ExportResult(
        roles_path=roles_path,
        entries_path=entries_path,
        role_count=len(snapshot.roles),
        entry_count=len(snapshot.entries),
    )
