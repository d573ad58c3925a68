"""
Catalog repository.

Owns the one in-memory snapshot the rest of the process computes against and
enforces the catalog invariants on every mutation:

- a role cannot be deleted while any entry's medium estimates reference it;
- an entry cannot be saved while its medium estimates reference unknown
  roles (all unknown ids are reported, not just the first).

Mutations are serialised by a per-instance lock and follow the same
sequence: validate against the current snapshot, build a new snapshot,
persist it through the store, and only then swap the reference. A failed
write leaves the previous snapshot in place. Readers never lock; they see
either the old or the new snapshot, never a mix, because snapshots are
immutable and replaced whole.

The snapshot is loaded lazily on first access and never refreshed on its
own. Call :meth:`CatalogRepository.reload` to pick up snapshots written by
another process.
"""

from __future__ import annotations

import threading
from decimal import Decimal

from estimator.core.errors import (
    InvalidMultiplierError,
    InvalidRoleReferenceError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from estimator.core.logging import get_logger
from estimator.core.models import CatalogEntry, CatalogSnapshot, Role
from estimator.core.store import CatalogStore

logger = get_logger(__name__)


class CatalogRepository:
    """Typed CRUD over the current catalog snapshot.

    Args:
        store: Snapshot persistence.
        allow_empty: Start from an empty snapshot instead of raising
            :class:`NotFoundError` when the store holds no snapshots yet.
    """

    def __init__(self, store: CatalogStore, *, allow_empty: bool = False):
        self.store = store
        self.allow_empty = allow_empty
        self._snapshot: CatalogSnapshot | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    def snapshot(self) -> CatalogSnapshot:
        """The current snapshot, loading it on first access."""
        current = self._snapshot
        if current is not None:
            return current
        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._load()
            return self._snapshot

    def reload(self) -> CatalogSnapshot:
        """Discard the in-memory snapshot and re-read the latest from disk."""
        with self._lock:
            self._snapshot = self._load()
            return self._snapshot

    def _load(self) -> CatalogSnapshot:
        try:
            return self.store.load_latest()
        except NotFoundError:
            if not self.allow_empty:
                raise
            logger.info("catalog_empty", directory=str(self.store.directory))
            return CatalogSnapshot()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get_roles(self) -> list[Role]:
        return list(self.snapshot().roles)

    def get_role(self, role_id: str) -> Role | None:
        return next((r for r in self.snapshot().roles if r.id == role_id), None)

    def get_entries(self) -> list[CatalogEntry]:
        return list(self.snapshot().entries)

    def get_entry(self, entry_id: str) -> CatalogEntry | None:
        return next((e for e in self.snapshot().entries if e.id == entry_id), None)

    def get_entries_by_category(self, category: str | None) -> list[CatalogEntry]:
        """Entries whose category matches case-insensitively; all if blank."""
        entries = self.snapshot().entries
        if not category:
            return list(entries)
        wanted = category.casefold()
        return [e for e in entries if e.category.casefold() == wanted]

    # ------------------------------------------------------------------ #
    # Role mutations
    # ------------------------------------------------------------------ #

    def save_role(self, role: Role) -> CatalogSnapshot:
        """Insert or replace a role by id and persist a new snapshot."""
        if role.productivity_multiplier <= 0:
            raise InvalidMultiplierError(role.id, role.productivity_multiplier)

        with self._lock:
            base = self._current()
            roles = list(base.roles)
            index = _index_of(roles, role.id)
            if index is None:
                roles.append(role)
            else:
                roles[index] = role

            if role.productivity_multiplier > Decimal("1"):
                logger.warning(
                    "role_multiplier_above_baseline",
                    role_id=role.id,
                    multiplier=str(role.productivity_multiplier),
                )

            snapshot = self._commit(base.with_roles(roles))
            logger.info("role_saved", role_id=role.id, created=index is None)
            return snapshot

    def delete_role(self, role_id: str) -> CatalogSnapshot:
        """Remove a role that no entry references and persist.

        Raises:
            NotFoundError: if no role has *role_id*.
            ReferentialIntegrityError: if an entry still references it.
        """
        with self._lock:
            base = self._current()
            index = _index_of(list(base.roles), role_id)
            if index is None:
                raise NotFoundError(f"Role '{role_id}' not found", details={"role_id": role_id})

            referencing = [e.name or e.id for e in base.entries if role_id in e.role_ids]
            if referencing:
                raise ReferentialIntegrityError("Role", role_id, referencing)

            roles = [r for r in base.roles if r.id != role_id]
            snapshot = self._commit(base.with_roles(roles))
            logger.info("role_deleted", role_id=role_id)
            return snapshot

    # ------------------------------------------------------------------ #
    # Entry mutations
    # ------------------------------------------------------------------ #

    def save_entry(self, entry: CatalogEntry) -> CatalogSnapshot:
        """Insert or replace an entry by id and persist.

        Raises:
            ValidationError: on negative hours or a role estimated twice.
            InvalidRoleReferenceError: listing every unknown role id.
        """
        _validate_estimates(entry)

        with self._lock:
            base = self._current()
            known = {r.id for r in base.roles}
            invalid: list[str] = []
            for role_id in entry.role_ids:
                if role_id not in known and role_id not in invalid:
                    invalid.append(role_id)
            if invalid:
                raise InvalidRoleReferenceError(invalid).with_details(entry_id=entry.id)

            entries = list(base.entries)
            index = _index_of(entries, entry.id)
            if index is None:
                entries.append(entry)
            else:
                entries[index] = entry

            snapshot = self._commit(base.with_entries(entries))
            logger.info("entry_saved", entry_id=entry.id, created=index is None)
            return snapshot

    def delete_entry(self, entry_id: str) -> CatalogSnapshot:
        """Remove an entry (nothing references entries) and persist."""
        with self._lock:
            base = self._current()
            entries = [e for e in base.entries if e.id != entry_id]
            snapshot = self._commit(base.with_entries(entries))
            logger.info("entry_deleted", entry_id=entry_id, removed=len(entries) < len(base.entries))
            return snapshot

    # ------------------------------------------------------------------ #
    # Internals (call with the lock held)
    # ------------------------------------------------------------------ #

    def _current(self) -> CatalogSnapshot:
        if self._snapshot is None:
            self._snapshot = self._load()
        return self._snapshot

    def _commit(self, snapshot: CatalogSnapshot) -> CatalogSnapshot:
        stored = self.store.save(snapshot)
        self._snapshot = stored.snapshot
        return stored.snapshot


def _index_of(items: list, item_id: str) -> int | None:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return None


def _validate_estimates(entry: CatalogEntry) -> None:
    seen: set[str] = set()
    for estimate in entry.medium_estimates:
        if estimate.hours < 0:
            raise ValidationError(
                f"Entry '{entry.id}' has negative hours {estimate.hours} for role '{estimate.role_id}'",
                field="hours",
                value=str(estimate.hours),
                details={"entry_id": entry.id, "role_id": estimate.role_id},
            )
        if estimate.role_id in seen:
            raise ValidationError(
                f"Entry '{entry.id}' estimates role '{estimate.role_id}' more than once",
                field="mediumEstimates",
                details={"entry_id": entry.id, "role_id": estimate.role_id},
            )
        seen.add(estimate.role_id)
