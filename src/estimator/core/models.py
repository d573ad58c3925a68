"""Catalog domain model.

Manifesto:
    A snapshot is one immutable version of the whole catalog. Every model
    here is a frozen dataclass so a snapshot can be shared between readers
    and swapped whole by the repository; edits go through
    :func:`dataclasses.replace` and produce new objects.

Only the Medium-size baseline is stored per entry and role; every other size
is derived by the calculator.

JSON field names are camelCase. Decimals are kept as :class:`~decimal.Decimal`
end to end: files are parsed with ``parse_float=Decimal`` and written back as
JSON numbers, or as numeric strings when a float cannot hold the value exactly.

Tags:
    estimator, models, dataclasses, catalog, snapshot

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from estimator.core.errors import ParseError
from estimator.core.timestamps import from_iso8601, to_iso8601

DEFAULT_CATALOG_VERSION = "1.0"


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Role:
    """A consulting role with its AI productivity multiplier.

    ``productivity_multiplier`` of 1.0 means no acceleration; values below 1
    model AI-assisted speedup and are applied after size scaling.
    """

    id: str
    name: str = ""
    description: str = ""
    productivity_multiplier: Decimal = Decimal("1.0")
    tech_stack_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "productivityMultiplier": self.productivity_multiplier,
            "techStackId": self.tech_stack_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Role:
        # copilotMultiplier is the name used by catalogs written before the rename
        multiplier = data.get("productivityMultiplier", data.get("copilotMultiplier", "1.0"))
        role_id = _require_str(data, "id", "role")
        productivity_multiplier = to_decimal(multiplier, "productivityMultiplier")
        if productivity_multiplier <= 0:
            raise ParseError(
                f"Role '{role_id}' has productivityMultiplier {productivity_multiplier}; it must be greater than 0",
                details={"role_id": role_id, "field": "productivityMultiplier"},
            )
        return cls(
            id=role_id,
            name=_optional_str(data.get("name")) or "",
            description=_optional_str(data.get("description")) or "",
            productivity_multiplier=productivity_multiplier,
            tech_stack_id=_optional_str(data.get("techStackId")),
        )


# ---------------------------------------------------------------------------
# Catalog entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MediumEstimate:
    """Medium-size baseline hours for one role on one feature."""

    role_id: str
    hours: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"roleId": self.role_id, "hours": self.hours}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MediumEstimate:
        role_id = _require_str(data, "roleId", "medium estimate")
        hours = to_decimal(data.get("hours"), "hours")
        if hours < 0:
            raise ParseError(
                f"Negative hours {hours} for role '{role_id}'",
                details={"role_id": role_id, "field": "hours"},
            )
        return cls(role_id=role_id, hours=hours)


@dataclass(frozen=True)
class CatalogEntry:
    """A feature that can be selected for estimation."""

    id: str
    name: str = ""
    description: str = ""
    category: str = ""
    tech_stack: str | None = None
    tags: tuple[str, ...] = ()
    medium_estimates: tuple[MediumEstimate, ...] = ()

    @property
    def role_ids(self) -> list[str]:
        return [e.role_id for e in self.medium_estimates]

    def has_tag(self, tag: str) -> bool:
        wanted = tag.casefold()
        return any(t.casefold() == wanted for t in self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "techStack": self.tech_stack,
            "tags": list(self.tags),
            "mediumEstimates": [e.to_dict() for e in self.medium_estimates],
        }

    def to_summary(self) -> dict[str, Any]:
        """Presentation form for the calling agent (no hours)."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "techStack": self.tech_stack,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogEntry:
        estimates = data.get("mediumEstimates") or []
        if not isinstance(estimates, list):
            raise ParseError("mediumEstimates must be a list", details={"entry_id": data.get("id")})
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ParseError("tags must be a list", details={"entry_id": data.get("id")})
        entry_id = _require_str(data, "id", "entry")
        medium_estimates = tuple(MediumEstimate.from_dict(_as_object(e, "medium estimate")) for e in estimates)
        try:
            _reject_duplicates([m.role_id for m in medium_estimates], "medium estimate role")
        except ParseError as e:
            e.with_details(entry_id=entry_id)
            raise
        return cls(
            id=entry_id,
            name=_optional_str(data.get("name")) or "",
            description=_optional_str(data.get("description")) or "",
            category=_optional_str(data.get("category")) or "",
            tech_stack=_optional_str(data.get("techStack")),
            tags=tuple(str(t) for t in tags),
            medium_estimates=medium_estimates,
        )


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogSnapshot:
    """One immutable, timestamped version of the full catalog."""

    version: str = DEFAULT_CATALOG_VERSION
    timestamp: datetime | None = None
    roles: tuple[Role, ...] = ()
    entries: tuple[CatalogEntry, ...] = ()

    def role_map(self) -> dict[str, Role]:
        return {r.id: r for r in self.roles}

    def entry_map(self) -> dict[str, CatalogEntry]:
        return {e.id: e for e in self.entries}

    def with_roles(self, roles: list[Role] | tuple[Role, ...]) -> CatalogSnapshot:
        return replace(self, roles=tuple(roles))

    def with_entries(self, entries: list[CatalogEntry] | tuple[CatalogEntry, ...]) -> CatalogSnapshot:
        return replace(self, entries=tuple(entries))

    def stamped(self, timestamp: datetime) -> CatalogSnapshot:
        return replace(self, timestamp=timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "timestamp": to_iso8601(self.timestamp),
            "roles": [r.to_dict() for r in self.roles],
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Any) -> CatalogSnapshot:
        """Build a snapshot from decoded JSON.

        Raises:
            ParseError: on a wrong shape, a bad decimal or timestamp,
                duplicate role/entry ids, a multiplier not above 0,
                negative hours, or a role estimated twice in one entry.
        """
        data = _as_object(data, "catalog")
        roles_data = data.get("roles") or []
        # "catalog" is the entry list key used by older catalog files
        entries_data = data.get("entries", data.get("catalog")) or []
        if not isinstance(roles_data, list) or not isinstance(entries_data, list):
            raise ParseError("roles and entries must be lists")

        raw_timestamp = data.get("timestamp")
        if raw_timestamp is not None and not isinstance(raw_timestamp, str):
            raise ParseError(
                f"Invalid timestamp {raw_timestamp!r}: expected an ISO-8601 string",
                details={"field": "timestamp"},
            )
        try:
            timestamp = from_iso8601(raw_timestamp) if raw_timestamp else None
        except (TypeError, ValueError) as e:
            raise ParseError(f"Invalid timestamp '{raw_timestamp}'", cause=e) from e

        roles = tuple(Role.from_dict(_as_object(r, "role")) for r in roles_data)
        entries = tuple(CatalogEntry.from_dict(_as_object(e, "entry")) for e in entries_data)
        _reject_duplicates([r.id for r in roles], "role")
        _reject_duplicates([e.id for e in entries], "entry")

        return cls(
            version=str(data.get("version") or DEFAULT_CATALOG_VERSION),
            timestamp=timestamp,
            roles=roles,
            entries=entries,
        )


@dataclass(frozen=True)
class SizeSelection:
    """One requested feature at one T-shirt size (request-scoped)."""

    feature_id: str
    size: str


@dataclass(frozen=True)
class SnapshotFile:
    """A persisted snapshot file in the catalog directory."""

    path: Path
    timestamp: datetime
    size_bytes: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_decimal(value: Any, name: str) -> Decimal:
    """Coerce a JSON number or numeric string to Decimal.

    Floats go through ``str()`` so 0.7 becomes ``Decimal("0.7")``.
    """
    if isinstance(value, bool) or value is None:
        raise ParseError(f"Invalid decimal for {name}: {value!r}", details={"field": name})
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ParseError(f"Invalid decimal for {name}: {value!r}", details={"field": name}, cause=e) from e
    if not result.is_finite():
        raise ParseError(f"Invalid decimal for {name}: {value!r}", details={"field": name})
    return result


def _as_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ParseError(f"Expected a JSON object for {what}, got {type(value).__name__}")
    return value


def _require_str(data: dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ParseError(f"Missing required field '{key}' on {what}", details={"field": key})
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _reject_duplicates(ids: list[str], what: str) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for item_id in ids:
        if item_id in seen and item_id not in duplicates:
            duplicates.append(item_id)
        seen.add(item_id)
    if duplicates:
        raise ParseError(
            f"Duplicate {what} ids: {', '.join(duplicates)}",
            details={"duplicate_ids": duplicates},
        )
