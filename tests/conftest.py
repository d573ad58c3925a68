"""
Shared pytest fixtures for estimator tests.

This module provides:
- A small sample catalog (three roles, three entries)
- Catalog directories seeded with that catalog on disk
- A deterministic ticking clock so snapshot file names are predictable
- Settings cache isolation

Usage:
    def test_something(repository):
        assert repository.get_role("developer").name == "Developer"
"""

import sys
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure estimator package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from estimator.core.models import CatalogEntry, CatalogSnapshot, MediumEstimate, Role
from estimator.core.repository import CatalogRepository
from estimator.core.settings import clear_settings_cache
from estimator.core.store import CatalogStore, dumps_snapshot, snapshot_filename

BASE_TIME = datetime(2025, 1, 15, 9, 30, 0, tzinfo=UTC)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep ambient ESTIMATOR_* variables and .env files out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("ESTIMATOR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Clock
# =============================================================================


class TickingClock:
    """Returns BASE_TIME, then one second later on every call."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def clock_at() -> Callable[[datetime], TickingClock]:
    """Factory for clocks starting at an arbitrary instant."""
    return TickingClock


# =============================================================================
# Sample catalog
# =============================================================================


def make_snapshot(timestamp: datetime | None = BASE_TIME) -> CatalogSnapshot:
    return CatalogSnapshot(
        version="1.0",
        timestamp=timestamp,
        roles=(
            Role("developer", "Developer", "Writes the code", Decimal("0.70")),
            Role("qa", "QA Engineer", "Tests the code", Decimal("0.80")),
            Role("pm", "Project Manager", "Keeps it on track", Decimal("1.0")),
        ),
        entries=(
            CatalogEntry(
                id="basic-crud",
                name="Basic CRUD",
                description="List, create, edit and delete one entity",
                category="feature",
                tech_stack="dotnet",
                tags=("crud", "api"),
                medium_estimates=(
                    MediumEstimate("developer", Decimal("24")),
                    MediumEstimate("qa", Decimal("8")),
                ),
            ),
            CatalogEntry(
                id="auth",
                name="Authentication",
                description="Login with an external identity provider",
                category="security",
                tech_stack="dotnet",
                tags=("identity",),
                medium_estimates=(
                    MediumEstimate("developer", Decimal("16")),
                    MediumEstimate("pm", Decimal("4")),
                ),
            ),
            CatalogEntry(
                id="ci-pipeline",
                name="CI pipeline",
                description="Build, test and publish on every push",
                category="infrastructure",
                tags=("devops",),
                medium_estimates=(MediumEstimate("developer", Decimal("12")),),
            ),
        ),
    )


@pytest.fixture
def sample_snapshot() -> CatalogSnapshot:
    return make_snapshot()


def write_snapshot_file(directory: Path, snapshot: CatalogSnapshot, name: str | None = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (name or snapshot_filename(snapshot.timestamp))
    path.write_text(dumps_snapshot(snapshot), encoding="utf-8")
    return path


@pytest.fixture
def write_snapshot() -> Callable[..., Path]:
    return write_snapshot_file


@pytest.fixture
def catalog_dir(tmp_path, sample_snapshot) -> Path:
    """A catalog directory holding one snapshot of the sample catalog."""
    directory = tmp_path / "catalogs"
    write_snapshot_file(directory, sample_snapshot)
    return directory


@pytest.fixture
def store(catalog_dir, clock) -> CatalogStore:
    # Saves land one minute after the seeded snapshot so they sort as newer
    clock.current = BASE_TIME + timedelta(minutes=1)
    return CatalogStore(catalog_dir, clock=clock)


@pytest.fixture
def repository(store) -> CatalogRepository:
    return CatalogRepository(store)


@pytest.fixture
def snapshot_factory() -> Callable[..., CatalogSnapshot]:
    return make_snapshot
