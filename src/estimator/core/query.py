"""Catalog query service.

Thin filter over repository reads used to present the catalog to the
calling agent. Category and tech stack match exactly, ignoring case; tag is
a membership test against the entry's tags, also ignoring case. Blank filter
values count as "not given". No ranking and no fuzzy matching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from estimator.core.models import CatalogEntry, CatalogSnapshot
from estimator.core.repository import CatalogRepository
from estimator.core.timestamps import to_iso8601


@dataclass(frozen=True)
class CatalogQueryResult:
    """Matching entries plus the filters that produced them."""

    entries: tuple[CatalogEntry, ...]
    applied_filters: dict[str, str] = field(default_factory=dict)
    catalog_version: str | None = None
    catalog_timestamp: str | None = None

    @property
    def total_count(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalogVersion": self.catalog_version,
            "catalogTimestamp": self.catalog_timestamp,
            "entries": [e.to_summary() for e in self.entries],
            "appliedFilters": dict(self.applied_filters),
            "totalCount": self.total_count,
        }


def filter_entries(
    snapshot: CatalogSnapshot,
    *,
    category: str | None = None,
    tech_stack: str | None = None,
    tag: str | None = None,
) -> CatalogQueryResult:
    """Apply the optional filters to *snapshot* in catalog order."""
    applied: dict[str, str] = {}
    if category and category.strip():
        applied["category"] = category.strip()
    if tech_stack and tech_stack.strip():
        applied["techStack"] = tech_stack.strip()
    if tag and tag.strip():
        applied["tag"] = tag.strip()

    def matches(entry: CatalogEntry) -> bool:
        if "category" in applied and entry.category.casefold() != applied["category"].casefold():
            return False
        if "techStack" in applied and (entry.tech_stack or "").casefold() != applied["techStack"].casefold():
            return False
        if "tag" in applied and not entry.has_tag(applied["tag"]):
            return False
        return True

    return CatalogQueryResult(
        entries=tuple(e for e in snapshot.entries if matches(e)),
        applied_filters=applied,
        catalog_version=snapshot.version,
        catalog_timestamp=to_iso8601(snapshot.timestamp),
    )


class CatalogQueryService:
    """Read-only catalog queries through a repository."""

    def __init__(self, repository: CatalogRepository):
        self.repository = repository

    def find(
        self,
        category: str | None = None,
        tech_stack: str | None = None,
        tag: str | None = None,
    ) -> CatalogQueryResult:
        return filter_entries(
            self.repository.snapshot(),
            category=category,
            tech_stack=tech_stack,
            tag=tag,
        )

    def categories(self) -> list[str]:
        """Distinct categories, sorted case-insensitively."""
        seen = {e.category for e in self.repository.get_entries() if e.category}
        return sorted(seen, key=str.casefold)
