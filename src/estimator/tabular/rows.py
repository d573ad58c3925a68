"""
Tab-separated row primitives shared by the importer and exporter.

Layout
──────
roles.tsv    Id | Name | Description | ProductivityMultiplier | TechStackId
entries.tsv  Id | Name | Description | Category | TechStack | Tags | <role id>...

Fields containing a tab, newline or double quote are wrapped in double
quotes with internal quotes doubled. Files are UTF-8; the exporter writes a
byte-order mark so spreadsheet tools detect the encoding, and the importer
accepts files with or without one.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

ROLE_COLUMNS = ("Id", "Name", "Description", "ProductivityMultiplier")
ROLE_OPTIONAL_COLUMNS = ("TechStackId",)
# Header used by files exported before the multiplier rename
LEGACY_MULTIPLIER_COLUMN = "CopilotMultiplier"

ENTRY_COLUMNS = ("Id", "Name", "Description", "Category")
ENTRY_OPTIONAL_COLUMNS = ("TechStack", "Tags")

TAG_SEPARATOR = ";"
TSV_ENCODING = "utf-8-sig"

_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


@dataclass(frozen=True, order=True)
class RowError:
    """One problem in one row of an imported file.

    ``row`` is 1-based and counts the header as row 1; 0 marks problems with
    the file as a whole (missing, empty).
    """

    file: str
    row: int
    message: str

    def to_dict(self) -> dict[str, object]:
        return {"file": self.file, "row": self.row, "message": self.message}

    def __str__(self) -> str:
        where = f"{self.file}:{self.row}" if self.row else self.file
        return f"{where}: {self.message}"


def parse_decimal(text: str) -> Decimal | None:
    """Parse a plain invariant-culture decimal (``24``, ``0.75``, ``-1.5``).

    Returns ``None`` for anything else, including exponents, thousands
    separators, NaN and infinity.
    """
    text = text.strip()
    if not _DECIMAL_RE.match(text):
        return None
    return Decimal(text)


def format_decimal(value: Decimal) -> str:
    """Fixed-point text for *value*, never scientific notation."""
    return format(value, "f")


def split_tags(text: str) -> tuple[str, ...]:
    return tuple(t.strip() for t in text.split(TAG_SEPARATOR) if t.strip())


def join_tags(tags: tuple[str, ...] | list[str]) -> str:
    return TAG_SEPARATOR.join(tags)


def write_rows(rows: list[list[str]]) -> str:
    """Render rows as TSV text with CRLF line endings.

    With CRLF as the terminator the writer quotes any field holding a bare
    ``\\r`` or ``\\n`` as well as tabs and quotes.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter="\t",
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\r\n",
    )
    writer.writerows(rows)
    return buffer.getvalue()


def read_rows(path: Path) -> list[tuple[int, list[str]]]:
    """Read a TSV file as ``(row_number, fields)`` pairs, skipping blank rows.

    Row numbers are 1-based record numbers, so a quoted multi-line field
    still counts as one row.
    """
    with path.open(encoding=TSV_ENCODING, newline="") as f:
        reader = csv.reader(f, delimiter="\t", quotechar='"')
        rows: list[tuple[int, list[str]]] = []
        for number, fields in enumerate(reader, start=1):
            if not any(field.strip() for field in fields):
                continue
            rows.append((number, fields))
        return rows


def header_matches(actual: str, expected: str) -> bool:
    return actual.strip().casefold() == expected.casefold()
