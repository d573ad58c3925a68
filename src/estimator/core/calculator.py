"""
Estimate calculator.

Turns an ordered list of (feature, T-shirt size) selections into a full
estimate breakdown against one catalog snapshot. The calculation is a pure
function: no I/O, no shared state, safe to call concurrently.

Manifesto:
    - **All errors at once:** every selection is validated before anything
      is computed, and every problem found is reported together
    - **All or nothing:** a request with any validation error produces no
      breakdown at all
    - **Exact arithmetic:** hours and multipliers are Decimals; totals are
      accumulated unrounded and rounded once, for display only

Size scaling:
    Only the Medium baseline is stored. Other sizes are derived with fixed,
    Fibonacci-derived multipliers (1, 2, 5, 8, 13 over 5):

    ====  ==========
    Size  Multiplier
    ====  ==========
    XS    0.2
    S     0.4
    M     1.0
    L     1.6
    XL    2.6
    ====  ==========

Per selection and role::

    sized_hours = medium_hours * size_multiplier(size)
    final_hours = sized_hours * role.productivity_multiplier

Days use a fixed 8-hour day.

Examples:
    >>> from decimal import Decimal
    >>> snapshot = CatalogSnapshot(
    ...     roles=(Role("developer", "Developer", productivity_multiplier=Decimal("0.70")),),
    ...     entries=(CatalogEntry("basic-crud", "Basic CRUD",
    ...              medium_estimates=(MediumEstimate("developer", Decimal("24")),)),),
    ... )
    >>> outcome = calculate(snapshot, [SizeSelection("basic-crud", "L")])
    >>> outcome.estimate.final_hours
    Decimal('26.880')
    >>> round_display(outcome.estimate.final_hours)
    Decimal('26.9')

Tags:
    estimation, calculator, decimal, t-shirt-sizing, pure-function

Doc-Types:
    - API Reference
    - Estimation Policy
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from enum import Enum
from typing import Any

from estimator.core.errors import (
    EmptyInputError,
    InvalidSizeError,
    UnknownFeatureError,
    UnknownRoleError,
    ValidationError,
)
from estimator.core.models import CatalogEntry, CatalogSnapshot, MediumEstimate, Role, SizeSelection
from estimator.core.timestamps import to_iso8601

HOURS_PER_DAY = Decimal("8")
DISPLAY_QUANTUM = Decimal("0.1")


class TShirtSize(str, Enum):
    """Supported feature sizes, smallest first."""

    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


SIZE_MULTIPLIERS: dict[TShirtSize, Decimal] = {
    TShirtSize.XS: Decimal("0.2"),
    TShirtSize.S: Decimal("0.4"),
    TShirtSize.M: Decimal("1.0"),
    TShirtSize.L: Decimal("1.6"),
    TShirtSize.XL: Decimal("2.6"),
}


def parse_size(token: str | None) -> TShirtSize | None:
    """Case-insensitive size lookup; ``None`` for anything unsupported."""
    if not isinstance(token, str):
        return None
    try:
        return TShirtSize(token.upper())
    except ValueError:
        return None


def size_multiplier(size: TShirtSize | str) -> Decimal:
    """Multiplier applied to the Medium baseline for *size*.

    Raises:
        InvalidSizeError: if *size* is not a supported size.
    """
    parsed = size if isinstance(size, TShirtSize) else parse_size(size)
    if parsed is None:
        raise InvalidSizeError("", str(size))
    return SIZE_MULTIPLIERS[parsed]


def round_display(value: Decimal) -> Decimal:
    """Round to one decimal place (half-even) for presentation."""
    return value.quantize(DISPLAY_QUANTUM, rounding=ROUND_HALF_EVEN)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RoleLine:
    """One role's contribution to one selected feature (unrounded)."""

    role_id: str
    role_name: str
    base_hours: Decimal
    size_multiplier: Decimal
    sized_hours: Decimal
    productivity_multiplier: Decimal
    final_hours: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "roleName": self.role_name,
            "baseHours": _num(self.base_hours),
            "sizeMultiplier": _num(self.size_multiplier),
            "sizedHours": _num(round_display(self.sized_hours)),
            "productivityMultiplier": _num(self.productivity_multiplier),
            "finalHours": _num(round_display(self.final_hours)),
        }


@dataclass(frozen=True)
class FeatureBreakdown:
    """Per-role breakdown for one selection."""

    feature_id: str
    feature_name: str
    category: str
    size: TShirtSize
    roles: tuple[RoleLine, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "featureId": self.feature_id,
            "featureName": self.feature_name,
            "category": self.category,
            "size": self.size.value,
            "roleEstimates": {line.role_id: line.to_dict() for line in self.roles},
        }


@dataclass(frozen=True)
class RoleTotal:
    """Hours for one role summed across every selection (unrounded)."""

    role_id: str
    role_name: str
    productivity_multiplier: Decimal
    sized_hours: Decimal
    final_hours: Decimal

    @property
    def sized_days(self) -> Decimal:
        return self.sized_hours / HOURS_PER_DAY

    @property
    def final_days(self) -> Decimal:
        return self.final_hours / HOURS_PER_DAY

    def to_dict(self) -> dict[str, Any]:
        return {
            "roleId": self.role_id,
            "roleName": self.role_name,
            "productivityMultiplier": _num(self.productivity_multiplier),
            "sizedHours": _num(round_display(self.sized_hours)),
            "sizedDays": _num(round_display(self.sized_days)),
            "finalHours": _num(round_display(self.final_hours)),
            "finalDays": _num(round_display(self.final_days)),
        }


@dataclass(frozen=True)
class Estimate:
    """Full breakdown for a validated selection list."""

    features: tuple[FeatureBreakdown, ...]
    role_totals: tuple[RoleTotal, ...]
    sized_hours: Decimal
    final_hours: Decimal
    catalog_version: str | None = None
    catalog_timestamp: str | None = None

    @property
    def sized_days(self) -> Decimal:
        return self.sized_hours / HOURS_PER_DAY

    @property
    def final_days(self) -> Decimal:
        return self.final_hours / HOURS_PER_DAY

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalogVersion": self.catalog_version,
            "catalogTimestamp": self.catalog_timestamp,
            "perFeatureBreakdown": [f.to_dict() for f in self.features],
            "perRoleTotals": [t.to_dict() for t in self.role_totals],
            "grandTotals": {
                "featureCount": len(self.features),
                "sizedHours": _num(round_display(self.sized_hours)),
                "sizedDays": _num(round_display(self.sized_days)),
                "finalHours": _num(round_display(self.final_hours)),
                "finalDays": _num(round_display(self.final_days)),
            },
        }


@dataclass(frozen=True)
class EstimateOutcome:
    """Either an estimate or the complete list of validation errors."""

    estimate: Estimate | None = None
    errors: tuple[ValidationError, ...] = ()

    @property
    def ok(self) -> bool:
        return self.estimate is not None and not self.errors


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------


def validate_selections(
    snapshot: CatalogSnapshot,
    selections: Sequence[SizeSelection],
) -> list[ValidationError]:
    """Every problem with *selections*, in selection order."""
    if not selections:
        return [EmptyInputError()]

    entries = snapshot.entry_map()
    roles = snapshot.role_map()
    errors: list[ValidationError] = []
    reported_roles: set[tuple[str, str]] = set()

    for selection in selections:
        entry = entries.get(selection.feature_id) if selection.feature_id else None
        if entry is None:
            errors.append(UnknownFeatureError(selection.feature_id or ""))
        if parse_size(selection.size) is None:
            errors.append(InvalidSizeError(selection.feature_id or "", selection.size))
        if entry is not None:
            for role_id in entry.role_ids:
                key = (entry.id, role_id)
                if role_id not in roles and key not in reported_roles:
                    reported_roles.add(key)
                    errors.append(UnknownRoleError(entry.id, role_id))

    return errors


def calculate(
    snapshot: CatalogSnapshot,
    selections: Sequence[SizeSelection],
) -> EstimateOutcome:
    """Validate *selections* and, if all are valid, compute the estimate."""
    errors = validate_selections(snapshot, selections)
    if errors:
        return EstimateOutcome(errors=tuple(errors))

    entries = snapshot.entry_map()
    roles = snapshot.role_map()

    features: list[FeatureBreakdown] = []
    sized_totals: dict[str, Decimal] = {}
    final_totals: dict[str, Decimal] = {}

    for selection in selections:
        entry = entries[selection.feature_id]
        size = parse_size(selection.size)
        lines = tuple(_role_line(estimate, roles[estimate.role_id], size) for estimate in entry.medium_estimates)
        for line in lines:
            sized_totals[line.role_id] = sized_totals.get(line.role_id, Decimal(0)) + line.sized_hours
            final_totals[line.role_id] = final_totals.get(line.role_id, Decimal(0)) + line.final_hours
        features.append(_breakdown(entry, size, lines))

    role_totals = sorted(
        (
            RoleTotal(
                role_id=role_id,
                role_name=roles[role_id].name,
                productivity_multiplier=roles[role_id].productivity_multiplier,
                sized_hours=sized_totals[role_id],
                final_hours=final_totals[role_id],
            )
            for role_id in sized_totals
        ),
        key=lambda t: (-t.final_hours, t.role_id),
    )

    estimate = Estimate(
        features=tuple(features),
        role_totals=tuple(role_totals),
        sized_hours=sum(sized_totals.values(), Decimal(0)),
        final_hours=sum(final_totals.values(), Decimal(0)),
        catalog_version=snapshot.version,
        catalog_timestamp=to_iso8601(snapshot.timestamp),
    )
    return EstimateOutcome(estimate=estimate)


def _role_line(estimate: MediumEstimate, role: Role, size: TShirtSize) -> RoleLine:
    multiplier = SIZE_MULTIPLIERS[size]
    sized = estimate.hours * multiplier
    return RoleLine(
        role_id=role.id,
        role_name=role.name,
        base_hours=estimate.hours,
        size_multiplier=multiplier,
        sized_hours=sized,
        productivity_multiplier=role.productivity_multiplier,
        final_hours=sized * role.productivity_multiplier,
    )


def _breakdown(entry: CatalogEntry, size: TShirtSize, lines: tuple[RoleLine, ...]) -> FeatureBreakdown:
    return FeatureBreakdown(
        feature_id=entry.id,
        feature_name=entry.name,
        category=entry.category,
        size=size,
        roles=lines,
    )


def _num(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)
