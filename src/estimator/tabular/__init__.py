"""
Tab-separated import/export of a catalog for spreadsheet editing.

Usage:
    from estimator.tabular import export_catalog, import_catalog

    export_catalog(snapshot, "out/")
    result = import_catalog("out/roles.tsv", "out/entries.tsv")
    if result.ok:
        snapshot = result.to_snapshot()
"""

from estimator.tabular.exporter import (
    ENTRIES_FILENAME,
    ROLES_FILENAME,
    ExportResult,
    export_catalog,
    render_entries,
    render_roles,
)
from estimator.tabular.importer import ImportResult, import_catalog, import_entries, import_roles
from estimator.tabular.rows import RowError

__all__ = [
    "ENTRIES_FILENAME",
    "ROLES_FILENAME",
    "ExportResult",
    "ImportResult",
    "RowError",
    "export_catalog",
    "import_catalog",
    "import_entries",
    "import_roles",
    "render_entries",
    "render_roles",
]
