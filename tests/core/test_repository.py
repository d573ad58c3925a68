"""Tests for estimator.core.repository: CRUD with integrity checks."""

import threading
from decimal import Decimal

import pytest

from estimator.core.errors import (
    InvalidMultiplierError,
    InvalidRoleReferenceError,
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
    ValidationError,
)
from estimator.core.models import CatalogEntry, MediumEstimate, Role
from estimator.core.repository import CatalogRepository
from estimator.core.store import CatalogStore


def _entry(entry_id="search", *role_hours):
    return CatalogEntry(
        id=entry_id,
        name=entry_id.title(),
        category="feature",
        medium_estimates=tuple(MediumEstimate(r, Decimal(h)) for r, h in role_hours),
    )


class TestLoading:
    def test_lazy_load(self, store):
        repo = CatalogRepository(store)
        assert repo._snapshot is None
        assert len(repo.get_roles()) == 3
        assert repo._snapshot is not None

    def test_snapshot_is_cached(self, repository):
        assert repository.snapshot() is repository.snapshot()

    def test_missing_catalog_raises(self, tmp_path):
        repo = CatalogRepository(CatalogStore(tmp_path / "nope"))
        with pytest.raises(NotFoundError):
            repo.snapshot()

    def test_allow_empty(self, tmp_path):
        repo = CatalogRepository(CatalogStore(tmp_path / "nope"), allow_empty=True)
        assert repo.get_roles() == []
        assert repo.get_entries() == []

    def test_reload_picks_up_external_writes(self, repository, catalog_dir, clock):
        assert repository.get_role("architect") is None
        other = CatalogRepository(CatalogStore(catalog_dir, clock=clock))
        clock.current = clock.current.replace(hour=12)
        other.save_role(Role("architect", "Architect"))

        assert repository.get_role("architect") is None
        repository.reload()
        assert repository.get_role("architect").name == "Architect"


class TestReads:
    def test_get_role(self, repository):
        assert repository.get_role("qa").name == "QA Engineer"
        assert repository.get_role("ghost") is None

    def test_get_entry(self, repository):
        assert repository.get_entry("auth").category == "security"
        assert repository.get_entry("ghost") is None

    def test_get_entries_by_category_ignores_case(self, repository):
        assert [e.id for e in repository.get_entries_by_category("SECURITY")] == ["auth"]

    @pytest.mark.parametrize("category", [None, ""])
    def test_get_entries_by_category_blank_returns_all(self, repository, category):
        assert len(repository.get_entries_by_category(category)) == 3


class TestSaveRole:
    def test_insert_persists_new_snapshot(self, repository, store):
        before = len(store.list_snapshots())
        snapshot = repository.save_role(Role("architect", "Architect", productivity_multiplier=Decimal("0.9")))

        assert len(store.list_snapshots()) == before + 1
        assert snapshot.roles[-1].id == "architect"
        assert store.load_latest().role_map()["architect"].productivity_multiplier == Decimal("0.9")

    def test_replace_keeps_position(self, repository):
        repository.save_role(Role("developer", "Engineer", productivity_multiplier=Decimal("0.5")))
        roles = repository.get_roles()
        assert [r.id for r in roles] == ["developer", "qa", "pm"]
        assert roles[0].name == "Engineer"

    @pytest.mark.parametrize("multiplier", ["0", "-0.3"])
    def test_rejects_non_positive_multiplier(self, repository, store, multiplier):
        before = repository.snapshot()
        with pytest.raises(InvalidMultiplierError):
            repository.save_role(Role("qa", "QA", productivity_multiplier=Decimal(multiplier)))
        assert repository.snapshot() is before
        assert len(store.list_snapshots()) == 1

    def test_accepts_multiplier_above_one(self, repository):
        repository.save_role(Role("pm", "PM", productivity_multiplier=Decimal("1.2")))
        assert repository.get_role("pm").productivity_multiplier == Decimal("1.2")


class TestDeleteRole:
    def test_delete_unreferenced(self, repository, store):
        repository.save_role(Role("architect", "Architect"))
        repository.delete_role("architect")
        assert repository.get_role("architect") is None
        assert store.load_latest().role_map().get("architect") is None

    def test_missing_role(self, repository):
        with pytest.raises(NotFoundError, match="Role 'ghost' not found"):
            repository.delete_role("ghost")

    def test_referenced_role_is_refused(self, repository, store):
        before = repository.snapshot()
        files_before = len(store.list_snapshots())

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            repository.delete_role("developer")

        assert exc_info.value.referencing_entries == ["Basic CRUD", "Authentication", "CI pipeline"]
        assert repository.snapshot() is before
        assert len(store.list_snapshots()) == files_before

    def test_refusal_is_repeatable(self, repository):
        before = repository.snapshot()
        for _ in range(2):
            with pytest.raises(ReferentialIntegrityError):
                repository.delete_role("qa")
        assert repository.snapshot() is before
        assert repository.get_role("qa") is not None

    def test_delete_after_references_removed(self, repository):
        repository.delete_entry("basic-crud")
        repository.delete_role("qa")
        assert repository.get_role("qa") is None


class TestSaveEntry:
    def test_insert(self, repository):
        repository.save_entry(_entry("search", ("developer", "10")))
        assert repository.get_entry("search").medium_estimates[0].hours == Decimal("10")

    def test_replace_keeps_position(self, repository):
        repository.save_entry(_entry("auth", ("qa", "2")))
        assert [e.id for e in repository.get_entries()] == ["basic-crud", "auth", "ci-pipeline"]
        assert repository.get_entry("auth").role_ids == ["qa"]

    def test_lists_every_invalid_role(self, repository, store):
        files_before = len(store.list_snapshots())

        with pytest.raises(InvalidRoleReferenceError) as exc_info:
            repository.save_entry(_entry("search", ("developer", "1"), ("ghost", "2"), ("phantom", "3")))

        assert exc_info.value.invalid_role_ids == ["ghost", "phantom"]
        assert exc_info.value.details["entry_id"] == "search"
        assert repository.get_entry("search") is None
        assert len(store.list_snapshots()) == files_before

    def test_rejects_role_estimated_twice(self, repository):
        with pytest.raises(ValidationError, match="more than once"):
            repository.save_entry(_entry("search", ("developer", "1"), ("developer", "4")))

    def test_rejects_negative_hours(self, repository):
        with pytest.raises(ValidationError, match="negative hours"):
            repository.save_entry(_entry("search", ("developer", "-1")))

    def test_zero_hours_allowed(self, repository):
        repository.save_entry(_entry("search", ("developer", "0")))
        assert repository.get_entry("search") is not None


class TestDeleteEntry:
    def test_delete(self, repository, store):
        repository.delete_entry("auth")
        assert repository.get_entry("auth") is None
        assert "auth" not in store.load_latest().entry_map()

    def test_delete_missing_still_writes(self, repository, store):
        files_before = len(store.list_snapshots())
        repository.delete_entry("ghost")
        assert len(store.list_snapshots()) == files_before + 1
        assert len(repository.get_entries()) == 3


class TestFailedWrite:
    """A write that fails leaves both the in-memory snapshot and the directory as they were."""

    @pytest.mark.parametrize(
        "mutate",
        [
            pytest.param(lambda repo: repo.save_role(Role("architect", "Architect")), id="save_role"),
            pytest.param(lambda repo: repo.delete_role("temp"), id="delete_role"),
            pytest.param(lambda repo: repo.save_entry(_entry("search", ("developer", "5"))), id="save_entry"),
            pytest.param(lambda repo: repo.delete_entry("auth"), id="delete_entry"),
        ],
    )
    def test_state_unchanged(self, repository, store, monkeypatch, mutate):
        repository.save_role(Role("temp", "Temp"))
        before = repository.snapshot()
        files_before = sorted(f.path.name for f in store.list_snapshots())

        def failing_write(path, snapshot):
            raise StorageError(f"Failed to write {path}: disk full")

        monkeypatch.setattr(store, "write", failing_write)

        with pytest.raises(StorageError, match="disk full"):
            mutate(repository)

        assert repository.snapshot() is before
        assert sorted(f.path.name for f in store.list_snapshots()) == files_before

    def test_unwritable_directory_leaves_no_temp_file(self, repository, store, monkeypatch):
        before = repository.snapshot()

        def failing_replace(src, dst):
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr("estimator.core.store.os.replace", failing_replace)

        with pytest.raises(StorageError, match="read-only filesystem"):
            repository.delete_entry("auth")

        assert repository.snapshot() is before
        assert sorted(p.name for p in store.directory.iterdir()) == ["catalog-2025-01-15T09-30-00Z.json"]


class TestConcurrency:
    def test_parallel_saves_do_not_lose_roles(self, tmp_path, sample_snapshot, clock):
        store = CatalogStore(tmp_path, clock=clock)
        store.write(tmp_path / "catalog-2000-01-01T00-00-00Z.json", sample_snapshot)
        repo = CatalogRepository(store)

        def worker(n):
            repo.save_role(Role(f"role-{n}", f"Role {n}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = {r.id for r in repo.get_roles()}
        assert {f"role-{n}" for n in range(8)} <= ids
        assert {r.id for r in store.load_latest().roles} == ids
