"""Tests for estimator.core.timestamps: snapshot stamps + UTC helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from estimator.core.timestamps import (
    from_iso8601,
    from_snapshot_stamp,
    to_iso8601,
    to_snapshot_stamp,
    truncate_to_second,
    utc_now,
)


class TestUtcNow:
    def test_has_utc_timezone(self):
        assert utc_now().tzinfo is UTC

    def test_is_recent(self):
        before = datetime.now(UTC)
        result = utc_now()
        after = datetime.now(UTC)
        assert before <= result <= after


class TestSnapshotStamp:
    def test_format(self):
        dt = datetime(2025, 1, 5, 7, 3, 9, tzinfo=UTC)
        assert to_snapshot_stamp(dt) == "2025-01-05T07-03-09Z"

    def test_converts_offsets_to_utc(self):
        dt = datetime(2025, 1, 5, 9, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_snapshot_stamp(dt) == "2025-01-05T07-00-00Z"

    def test_parse(self):
        assert from_snapshot_stamp("2025-01-05T07-03-09Z") == datetime(2025, 1, 5, 7, 3, 9, tzinfo=UTC)

    @pytest.mark.parametrize("stamp", ["temp", "2025-01-05", "2025-01-05T07:03:09Z", ""])
    def test_parse_rejects_other_formats(self, stamp):
        with pytest.raises(ValueError):
            from_snapshot_stamp(stamp)

    def test_stamps_sort_like_time(self):
        early = datetime(2025, 1, 9, 23, 59, 59, tzinfo=UTC)
        late = datetime(2025, 1, 10, 0, 0, 0, tzinfo=UTC)
        assert to_snapshot_stamp(early) < to_snapshot_stamp(late)


class TestIso8601:
    def test_to_iso8601_uses_z_suffix(self):
        assert to_iso8601(datetime(2025, 1, 15, 10, 30, tzinfo=UTC)) == "2025-01-15T10:30:00Z"

    def test_to_iso8601_none(self):
        assert to_iso8601(None) is None

    def test_from_iso8601_z(self):
        assert from_iso8601("2025-01-15T10:30:00Z") == datetime(2025, 1, 15, 10, 30, tzinfo=UTC)

    def test_from_iso8601_naive_is_utc(self):
        assert from_iso8601("2025-01-15T10:30:00").tzinfo == UTC

    def test_from_iso8601_none(self):
        assert from_iso8601(None) is None


def test_truncate_to_second():
    dt = datetime(2025, 1, 15, 10, 30, 5, 999_999, tzinfo=UTC)
    assert truncate_to_second(dt) == datetime(2025, 1, 15, 10, 30, 5, tzinfo=UTC)
