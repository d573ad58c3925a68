"""Tests for estimator.core.store: snapshot files on disk."""

import json
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from estimator.core.errors import NotFoundError, ParseError, StorageError
from estimator.core.models import Role
from estimator.core.store import (
    CatalogStore,
    dumps_snapshot,
    loads_snapshot,
    parse_snapshot_filename,
    snapshot_filename,
)


class TestFileNames:
    def test_snapshot_filename(self, base_time):
        assert snapshot_filename(base_time) == "catalog-2025-01-15T09-30-00Z.json"

    def test_parse_snapshot_filename(self, base_time):
        assert parse_snapshot_filename("catalog-2025-01-15T09-30-00Z.json") == base_time

    @pytest.mark.parametrize(
        "name",
        ["catalog-temp.json", "catalog-2025-01-15.json", "roles.json", "catalog-2025-01-15T09-30-00Z.txt"],
    )
    def test_parse_rejects_other_names(self, name):
        assert parse_snapshot_filename(name) is None


class TestSerialization:
    def test_integral_decimals_written_as_ints(self, sample_snapshot):
        data = json.loads(dumps_snapshot(sample_snapshot))
        assert data["entries"][0]["mediumEstimates"][0] == {"roleId": "developer", "hours": 24}
        assert data["roles"][0]["productivityMultiplier"] == 0.7

    def test_long_decimals_survive_round_trip(self, sample_snapshot):
        exact = Decimal("0.12345678901234567890123")
        role = Role("precise", "Precise", productivity_multiplier=exact)
        snapshot = sample_snapshot.with_roles([role])

        text = dumps_snapshot(snapshot)

        assert json.loads(text)["roles"][0]["productivityMultiplier"] == "0.12345678901234567890123"
        assert loads_snapshot(text).roles[0].productivity_multiplier == exact

    def test_short_decimals_stay_numbers(self, sample_snapshot):
        role = Role("dev", "Dev", productivity_multiplier=Decimal("0.75"))
        text = dumps_snapshot(sample_snapshot.with_roles([role]))
        assert '"productivityMultiplier": 0.75' in text

    def test_loads_rejects_numeric_timestamp(self):
        text = json.dumps({"timestamp": 1700000000, "roles": [], "entries": []})
        with pytest.raises(ParseError, match="Invalid timestamp") as exc_info:
            loads_snapshot(text, source="catalog-2025-01-15T09-30-00Z.json")
        assert exc_info.value.details["file"] == "catalog-2025-01-15T09-30-00Z.json"

    def test_loads_rejects_role_estimated_twice(self):
        text = json.dumps(
            {
                "roles": [{"id": "dev", "productivityMultiplier": 1}],
                "entries": [
                    {"id": "x", "mediumEstimates": [{"roleId": "dev", "hours": 10}, {"roleId": "dev", "hours": 5}]}
                ],
            }
        )
        with pytest.raises(ParseError, match="Duplicate medium estimate role ids: dev"):
            loads_snapshot(text)

    def test_loads_rejects_zero_multiplier(self):
        with pytest.raises(ParseError, match="must be greater than 0"):
            loads_snapshot('{"roles": [{"id": "qa", "productivityMultiplier": 0}]}')

    def test_loads_keeps_decimals(self):
        snapshot = loads_snapshot('{"roles": [{"id": "qa", "productivityMultiplier": 0.1}]}')
        assert snapshot.roles[0].productivity_multiplier == Decimal("0.1")

    def test_loads_invalid_json(self):
        with pytest.raises(ParseError, match="Invalid JSON in broken.json") as exc_info:
            loads_snapshot("{", source="broken.json")
        assert exc_info.value.details["file"] == "broken.json"

    def test_loads_adds_file_to_shape_errors(self):
        with pytest.raises(ParseError) as exc_info:
            loads_snapshot('{"roles": [{"name": "no id"}]}', source="bad.json")
        assert exc_info.value.details["file"] == "bad.json"


class TestListSnapshots:
    def test_missing_directory(self, tmp_path):
        with pytest.raises(NotFoundError, match="Catalog directory not found"):
            CatalogStore(tmp_path / "nope").list_snapshots()

    def test_empty_directory(self, tmp_path):
        assert CatalogStore(tmp_path).list_snapshots() == []

    def test_newest_first_and_skips_unparseable(self, tmp_path, snapshot_factory, write_snapshot):
        directory = tmp_path / "catalogs"
        for day in (3, 1, 2):
            write_snapshot(directory, snapshot_factory(datetime(2025, 1, day, tzinfo=UTC)))
        (directory / "catalog-temp.json").write_text("{}", encoding="utf-8")

        files = CatalogStore(directory).list_snapshots()

        assert [f.timestamp.day for f in files] == [3, 2, 1]
        assert all(f.size_bytes > 0 for f in files)


class TestLoadLatest:
    def test_picks_latest_of_three(self, tmp_path, snapshot_factory, write_snapshot):
        directory = tmp_path / "catalogs"
        t1 = datetime(2025, 1, 1, 8, 0, 0, tzinfo=UTC)
        t2 = t1 + timedelta(hours=1)
        t3 = t2 + timedelta(hours=1)
        for ts in (t2, t3, t1):
            snapshot = snapshot_factory(ts).with_roles([Role(f"role-{ts.hour}")])
            write_snapshot(directory, snapshot)

        latest = CatalogStore(directory).load_latest()

        assert latest.timestamp == t3
        assert [r.id for r in latest.roles] == ["role-10"]

    def test_ignores_names_that_sort_after_timestamps(self, catalog_dir, base_time):
        (catalog_dir / "catalog-zzz.json").write_text("not json", encoding="utf-8")
        assert CatalogStore(catalog_dir).load_latest().timestamp == base_time

    def test_no_snapshots(self, tmp_path):
        with pytest.raises(NotFoundError, match="No catalog files found"):
            CatalogStore(tmp_path).load_latest()

    def test_corrupt_latest_raises_parse_error(self, catalog_dir, base_time):
        (catalog_dir / snapshot_filename(base_time + timedelta(days=1))).write_text("{", encoding="utf-8")
        with pytest.raises(ParseError):
            CatalogStore(catalog_dir).load_latest()

    def test_numeric_timestamp_in_latest_raises_parse_error(self, catalog_dir, base_time):
        body = json.dumps({"timestamp": 5, "roles": [], "entries": []})
        (catalog_dir / snapshot_filename(base_time + timedelta(days=1))).write_text(body, encoding="utf-8")
        with pytest.raises(ParseError, match="Invalid timestamp"):
            CatalogStore(catalog_dir).load_latest()

    def test_tolerates_bom(self, tmp_path, sample_snapshot, base_time):
        path = tmp_path / snapshot_filename(base_time)
        path.write_text(dumps_snapshot(sample_snapshot), encoding="utf-8-sig")
        assert CatalogStore(tmp_path).load_latest() == sample_snapshot


class TestRead:
    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError, match="Catalog file not found"):
            CatalogStore(tmp_path).read(tmp_path / "missing.json")

    def test_any_name(self, tmp_path, sample_snapshot, write_snapshot):
        path = write_snapshot(tmp_path, sample_snapshot, name="anything.json")
        assert CatalogStore(tmp_path).read(path) == sample_snapshot


class TestSave:
    def test_writes_new_timestamped_file(self, store, sample_snapshot, base_time):
        stored = store.save(sample_snapshot)

        assert stored.path.name == "catalog-2025-01-15T09-31-00Z.json"
        assert stored.snapshot.timestamp == base_time + timedelta(minutes=1)
        assert store.load_latest() == stored.snapshot
        assert len(store.list_snapshots()) == 2

    def test_truncates_to_second(self, tmp_path, sample_snapshot, base_time, clock_at):
        store = CatalogStore(tmp_path, clock=clock_at(base_time.replace(microsecond=654_321)))
        stored = store.save(sample_snapshot)
        assert stored.snapshot.timestamp == base_time

    def test_creates_directory(self, tmp_path, sample_snapshot, clock):
        store = CatalogStore(tmp_path / "new" / "dir", clock=clock)
        stored = store.save(sample_snapshot)
        assert stored.path.exists()

    def test_leaves_no_temp_files(self, store, sample_snapshot):
        store.save(sample_snapshot)
        assert not list(store.directory.glob(".*.tmp"))

    def test_write_failure_is_storage_error(self, tmp_path, sample_snapshot, clock):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        store = CatalogStore(blocker / "catalogs", clock=clock)
        with pytest.raises(StorageError, match="Failed to write"):
            store.save(sample_snapshot)
