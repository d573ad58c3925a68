"""
Import ``roles.tsv`` and ``entries.tsv`` into a catalog snapshot.

Every problem is collected as a :class:`RowError` rather than raised, so a
single pass reports everything wrong with both files. A row with any error
is left out of the result; callers decide whether a partial import is
acceptable (the CLI refuses to write anything when ``errors`` is non-empty).
"""

from __future__ import annotations

import csv
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from estimator.core.logging import get_logger
from estimator.core.models import DEFAULT_CATALOG_VERSION, CatalogEntry, CatalogSnapshot, MediumEstimate, Role
from estimator.tabular.rows import (
    ENTRY_COLUMNS,
    ENTRY_OPTIONAL_COLUMNS,
    LEGACY_MULTIPLIER_COLUMN,
    ROLE_COLUMNS,
    ROLE_OPTIONAL_COLUMNS,
    RowError,
    header_matches,
    parse_decimal,
    read_rows,
    split_tags,
)

logger = get_logger(__name__)


@dataclass
class ImportResult:
    roles: list[Role] = field(default_factory=list)
    entries: list[CatalogEntry] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_snapshot(
        self,
        *,
        version: str = DEFAULT_CATALOG_VERSION,
        timestamp: datetime | None = None,
    ) -> CatalogSnapshot:
        """Snapshot with roles by id, entries by category then id."""
        entries = [
            CatalogEntry(
                id=e.id,
                name=e.name,
                description=e.description,
                category=e.category,
                tech_stack=e.tech_stack,
                tags=e.tags,
                medium_estimates=tuple(sorted(e.medium_estimates, key=lambda m: m.role_id)),
            )
            for e in sorted(self.entries, key=lambda e: (e.category, e.id))
        ]
        return CatalogSnapshot(
            version=version,
            timestamp=timestamp,
            roles=tuple(sorted(self.roles, key=lambda r: r.id)),
            entries=tuple(entries),
        )


def import_catalog(roles_path: Path | str, entries_path: Path | str) -> ImportResult:
    """Parse both files and collect every row error."""
    roles_path = Path(roles_path)
    entries_path = Path(entries_path)

    roles, seen_role_ids, role_errors = import_roles(roles_path)
    entries, entry_errors = import_entries(entries_path, seen_role_ids)

    result = ImportResult(roles=roles, entries=entries, errors=role_errors + entry_errors)
    logger.info(
        "catalog_imported",
        roles=len(roles),
        entries=len(entries),
        errors=len(result.errors),
    )
    return result


# ---------------------------------------------------------------------------
# roles.tsv
# ---------------------------------------------------------------------------


def import_roles(path: Path) -> tuple[list[Role], set[str] | None, list[RowError]]:
    """Parse roles.tsv.

    Returns the valid roles, the ids of every role row (valid or not, for
    checking entries.tsv columns; ``None`` when the file itself could not be
    read) and the row errors.
    """
    name = path.name
    rows, errors = _load(path)
    if rows is None:
        return [], None, errors

    header_number, header = rows[0]
    expected = list(ROLE_COLUMNS + ROLE_OPTIONAL_COLUMNS)
    if not _role_header_ok(header):
        errors.append(
            RowError(name, header_number, f"Expected header {_tabbed(expected)}, found {_tabbed(header)}")
        )
        return [], None, errors

    width = len(header)
    roles: list[Role] = []
    seen: set[str] = set()

    for number, fields in rows[1:]:
        if len(fields) > width:
            errors.append(RowError(name, number, f"Row has {len(fields)} columns, expected at most {width}"))
            continue
        fields = fields + [""] * (width - len(fields))
        role_id, role_name, description, multiplier_text = (f.strip() for f in fields[:4])
        tech_stack_id = fields[4].strip() if width > 4 else ""

        row_errors: list[str] = []
        if not role_id:
            row_errors.append("Missing required field 'Id'")
        elif role_id in seen:
            row_errors.append(f"Duplicate role Id '{role_id}'")
        if not role_name:
            row_errors.append("Missing required field 'Name'")

        multiplier = parse_decimal(multiplier_text)
        if multiplier is None:
            row_errors.append(f"Invalid ProductivityMultiplier '{multiplier_text}'")
        elif multiplier <= 0:
            row_errors.append(f"ProductivityMultiplier must be greater than 0, got {multiplier_text}")

        if role_id:
            seen.add(role_id)
        if row_errors:
            errors.extend(RowError(name, number, message) for message in row_errors)
            continue

        roles.append(
            Role(
                id=role_id,
                name=role_name,
                description=description,
                productivity_multiplier=multiplier,
                tech_stack_id=tech_stack_id or None,
            )
        )

    return roles, seen, errors


def _role_header_ok(header: list[str]) -> bool:
    if len(header) not in (len(ROLE_COLUMNS), len(ROLE_COLUMNS) + len(ROLE_OPTIONAL_COLUMNS)):
        return False
    for i, (actual, expected) in enumerate(zip(header, ROLE_COLUMNS + ROLE_OPTIONAL_COLUMNS, strict=False)):
        if header_matches(actual, expected):
            continue
        if i == 3 and header_matches(actual, LEGACY_MULTIPLIER_COLUMN):
            continue
        return False
    return True


# ---------------------------------------------------------------------------
# entries.tsv
# ---------------------------------------------------------------------------


def import_entries(path: Path, role_ids: Collection[str] | None) -> tuple[list[CatalogEntry], list[RowError]]:
    """Parse entries.tsv against the role ids found in roles.tsv.

    When *role_ids* is ``None`` every extra column is taken as a role column
    without checking it.
    """
    name = path.name
    rows, errors = _load(path)
    if rows is None:
        return [], errors

    header_number, header = rows[0]
    fixed = len(ENTRY_COLUMNS)
    if len(header) < fixed or not all(header_matches(h, e) for h, e in zip(header, ENTRY_COLUMNS, strict=False)):
        errors.append(
            RowError(
                name,
                header_number,
                f"Expected header to start with {_tabbed(list(ENTRY_COLUMNS + ENTRY_OPTIONAL_COLUMNS))}, "
                f"found {_tabbed(header)}",
            )
        )
        return [], errors

    optional: dict[str, int] = {}
    for column in ENTRY_OPTIONAL_COLUMNS:
        if fixed < len(header) and header_matches(header[fixed], column):
            optional[column] = fixed
            fixed += 1

    # column index -> role id, for the columns whose cells are read
    role_columns: dict[int, str] = {}
    seen_columns: set[str] = set()
    for index in range(fixed, len(header)):
        role_id = header[index].strip()
        if not role_id:
            errors.append(RowError(name, header_number, f"Column {index + 1} has an empty role id"))
        elif role_id in seen_columns:
            errors.append(RowError(name, header_number, f"Duplicate role column '{role_id}'"))
        elif role_ids is not None and role_id not in role_ids:
            errors.append(RowError(name, header_number, f"Unknown role column '{role_id}' (not in roles file)"))
        else:
            role_columns[index] = role_id
        seen_columns.add(role_id)

    width = len(header)
    entries: list[CatalogEntry] = []
    seen: set[str] = set()

    for number, fields in rows[1:]:
        if len(fields) > width:
            errors.append(RowError(name, number, f"Row has {len(fields)} columns, expected at most {width}"))
            continue
        fields = fields + [""] * (width - len(fields))
        entry_id, entry_name, description, category = (f.strip() for f in fields[:4])

        row_errors: list[str] = []
        if not entry_id:
            row_errors.append("Missing required field 'Id'")
        elif entry_id in seen:
            row_errors.append(f"Duplicate entry Id '{entry_id}'")
        if not entry_name:
            row_errors.append("Missing required field 'Name'")

        estimates: list[MediumEstimate] = []
        for index, role_id in role_columns.items():
            text = fields[index].strip()
            if not text:
                continue
            hours = parse_decimal(text)
            if hours is None:
                row_errors.append(f"Invalid hours '{text}' for role '{role_id}'")
            elif hours < 0:
                row_errors.append(f"Negative hours {text} for role '{role_id}'")
            else:
                estimates.append(MediumEstimate(role_id, hours))

        if entry_id:
            seen.add(entry_id)
        if row_errors:
            errors.extend(RowError(name, number, message) for message in row_errors)
            continue

        tech_stack = fields[optional["TechStack"]].strip() if "TechStack" in optional else ""
        tags = split_tags(fields[optional["Tags"]]) if "Tags" in optional else ()
        entries.append(
            CatalogEntry(
                id=entry_id,
                name=entry_name,
                description=description,
                category=category,
                tech_stack=tech_stack or None,
                tags=tags,
                medium_estimates=tuple(estimates),
            )
        )

    return entries, errors


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(path: Path) -> tuple[list[tuple[int, list[str]]] | None, list[RowError]]:
    """Read *path*; ``None`` rows plus a file-level error if it is unusable."""
    name = path.name
    if not path.is_file():
        return None, [RowError(name, 0, f"File not found: {path}")]
    try:
        rows = read_rows(path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        return None, [RowError(name, 0, f"Could not read file: {e}")]
    if not rows:
        return None, [RowError(name, 0, "File is empty")]
    return rows, []


def _tabbed(columns: list[str]) -> str:
    return "[" + ", ".join(columns) + "]"
