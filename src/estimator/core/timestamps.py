"""
UTC timestamp utilities for catalog snapshots.

Snapshot files encode their timestamp in the file name
(``catalog-2025-01-15T10-30-00Z.json``): ISO-8601 with the colons replaced
by hyphens, zero-padded, second precision, ``Z`` suffix. The JSON body
carries the same instant as ``2025-01-15T10:30:00Z``.

STDLIB ONLY.
"""

from __future__ import annotations

from datetime import UTC, datetime

SNAPSHOT_STAMP_FORMAT = "%Y-%m-%dT%H-%M-%SZ"


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_snapshot_stamp(dt: datetime) -> str:
    """Format a datetime as the file-name stamp (``2025-01-15T10-30-00Z``)."""
    return _as_utc(dt).strftime(SNAPSHOT_STAMP_FORMAT)


def from_snapshot_stamp(stamp: str) -> datetime:
    """Parse a file-name stamp back to an aware UTC datetime.

    Raises:
        ValueError: if *stamp* is not in the snapshot stamp format.
    """
    return datetime.strptime(stamp, SNAPSHOT_STAMP_FORMAT).replace(tzinfo=UTC)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to an ISO 8601 UTC string with ``Z`` suffix."""
    if dt is None:
        return None
    return _as_utc(dt).isoformat().replace("+00:00", "Z")


def from_iso8601(s: str | None) -> datetime | None:
    """Parse ISO 8601 string to an aware UTC datetime.

    Naive values are taken to be UTC; offsets are converted.
    """
    if s is None:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return _as_utc(datetime.fromisoformat(s))


def truncate_to_second(dt: datetime) -> datetime:
    """Drop sub-second precision (file names only resolve whole seconds)."""
    return dt.replace(microsecond=0)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
