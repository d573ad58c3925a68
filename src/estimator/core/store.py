"""
Catalog snapshot store.

Maps a directory of ``catalog-<timestamp>.json`` files to
:class:`~estimator.core.models.CatalogSnapshot` values. The directory is an
append-only version history: every save writes a new file named after its
UTC timestamp, nothing is ever edited in place, and old snapshots are kept
until someone removes them by hand.

The latest snapshot is chosen by the *parsed* timestamp in the file name,
not by raw string order, so a stray file with a different padding or a
non-timestamp suffix (``catalog-temp.json``) can never be mistaken for the
newest version.

The store keeps no state between calls; every :meth:`CatalogStore.load_latest`
re-reads the disk. Caching is the repository's job.
"""

from __future__ import annotations

import contextlib
import json
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from estimator.core.errors import NotFoundError, ParseError, StorageError
from estimator.core.logging import get_logger
from estimator.core.models import CatalogSnapshot, SnapshotFile
from estimator.core.timestamps import (
    from_snapshot_stamp,
    to_snapshot_stamp,
    truncate_to_second,
    utc_now,
)

logger = get_logger(__name__)

SNAPSHOT_PREFIX = "catalog-"
SNAPSHOT_SUFFIX = ".json"
SNAPSHOT_GLOB = f"{SNAPSHOT_PREFIX}*{SNAPSHOT_SUFFIX}"


@dataclass(frozen=True)
class StoredSnapshot:
    """Result of :meth:`CatalogStore.save`: where it went and what was written."""

    path: Path
    snapshot: CatalogSnapshot


def snapshot_filename(timestamp: datetime) -> str:
    """File name for a snapshot taken at *timestamp*."""
    return f"{SNAPSHOT_PREFIX}{to_snapshot_stamp(timestamp)}{SNAPSHOT_SUFFIX}"


def parse_snapshot_filename(name: str) -> datetime | None:
    """Timestamp encoded in a snapshot file name, or ``None`` if it has none."""
    if not (name.startswith(SNAPSHOT_PREFIX) and name.endswith(SNAPSHOT_SUFFIX)):
        return None
    stamp = name[len(SNAPSHOT_PREFIX) : -len(SNAPSHOT_SUFFIX)]
    try:
        return from_snapshot_stamp(stamp)
    except ValueError:
        return None


def dumps_snapshot(snapshot: CatalogSnapshot) -> str:
    """Serialize a snapshot to indented camelCase JSON."""
    return json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False, default=_json_default) + "\n"


def loads_snapshot(text: str, *, source: str = "<string>") -> CatalogSnapshot:
    """Parse snapshot JSON, keeping every number as :class:`Decimal`."""
    try:
        data = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {source}: {e}", details={"file": source}, cause=e) from e
    try:
        return CatalogSnapshot.from_dict(data)
    except ParseError as e:
        e.with_details(file=source)
        raise


class CatalogStore:
    """Directory-backed snapshot persistence.

    Args:
        directory: Catalog directory (need not exist until the first save).
        clock: Source of "now"; injectable for deterministic tests.
    """

    def __init__(self, directory: str | Path, *, clock: Callable[[], datetime] = utc_now):
        self.directory = Path(directory)
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #

    def list_snapshots(self) -> list[SnapshotFile]:
        """All timestamped snapshot files, newest first.

        Raises:
            NotFoundError: if the directory does not exist.
        """
        if not self.directory.is_dir():
            raise NotFoundError(
                f"Catalog directory not found at {self.directory}",
                details={"directory": str(self.directory)},
            )

        files: list[SnapshotFile] = []
        for path in self.directory.glob(SNAPSHOT_GLOB):
            if not path.is_file():
                continue
            timestamp = parse_snapshot_filename(path.name)
            if timestamp is None:
                logger.warning("snapshot_name_unparseable", file=path.name)
                continue
            files.append(SnapshotFile(path=path, timestamp=timestamp, size_bytes=path.stat().st_size))

        files.sort(key=lambda f: (f.timestamp, f.path.name), reverse=True)
        return files

    def latest_path(self) -> Path:
        """Path of the newest snapshot file.

        Raises:
            NotFoundError: if the directory is missing or holds no snapshots.
        """
        files = self.list_snapshots()
        if not files:
            raise NotFoundError(
                f"No catalog files found in {self.directory}",
                details={"directory": str(self.directory)},
            )
        return files[0].path

    def load_latest(self) -> CatalogSnapshot:
        """Read and parse the newest snapshot.

        Raises:
            NotFoundError: if the directory is missing or holds no snapshots.
            ParseError: if the newest file is not a valid snapshot.
        """
        path = self.latest_path()
        snapshot = self.read(path)
        logger.debug(
            "catalog_loaded",
            file=path.name,
            roles=len(snapshot.roles),
            entries=len(snapshot.entries),
        )
        return snapshot

    def read(self, path: str | Path) -> CatalogSnapshot:
        """Read a single snapshot file (any name)."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as e:
            raise NotFoundError(f"Catalog file not found: {path}", details={"file": str(path)}, cause=e) from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", details={"file": str(path)}, cause=e) from e
        return loads_snapshot(text, source=path.name)

    # ------------------------------------------------------------------ #
    # Writing
    # ------------------------------------------------------------------ #

    def save(self, snapshot: CatalogSnapshot) -> StoredSnapshot:
        """Stamp *snapshot* with the current time and write it as a new file.

        Two saves within the same second map to the same file name; the
        second one wins.

        Raises:
            StorageError: if the directory cannot be created or written.
        """
        stamped = snapshot.stamped(truncate_to_second(self._clock()))
        path = self.directory / snapshot_filename(stamped.timestamp)
        self.write(path, stamped)
        logger.info(
            "snapshot_saved",
            file=path.name,
            roles=len(stamped.roles),
            entries=len(stamped.entries),
        )
        return StoredSnapshot(path=path, snapshot=stamped)

    def write(self, path: str | Path, snapshot: CatalogSnapshot) -> Path:
        """Write *snapshot* to an explicit path, atomically."""
        path = Path(path)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(dumps_snapshot(snapshot), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise StorageError(f"Failed to write {path}: {e}", details={"file": str(path)}, cause=e) from e
        return path


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        # Integral values stay ints so "24" round-trips as 24, not 24.0
        if value == value.to_integral_value():
            return int(value)
        as_float = float(value)
        if Decimal(repr(as_float)) == value:
            return as_float
        # More digits than a float holds: a numeric string reads back exactly
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
