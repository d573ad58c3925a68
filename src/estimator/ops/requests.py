"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function. Requests carry only transport-agnostic data; decimals may arrive
as strings or numbers and are converted by the operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from estimator.core.models import SizeSelection


@dataclass(frozen=True, slots=True)
class ListFeaturesRequest:
    """Request for :func:`estimator.ops.catalog.list_features`.

    Blank or ``None`` filters are ignored.
    """

    category: str | None = None
    tech_stack: str | None = None
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class CalculateEstimateRequest:
    """Request for :func:`estimator.ops.estimates.calculate_estimate`."""

    selections: list[SizeSelection] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SaveRoleRequest:
    """Request for :func:`estimator.ops.roles.save_role` (insert or replace)."""

    id: str
    name: str = ""
    description: str = ""
    productivity_multiplier: Decimal | str | int | float = Decimal("1.0")
    tech_stack_id: str | None = None


@dataclass(frozen=True, slots=True)
class SaveEntryRequest:
    """Request for :func:`estimator.ops.entries.save_entry` (insert or replace).

    Attributes:
        medium_estimates: Role id to Medium-size hours.
    """

    id: str
    name: str = ""
    description: str = ""
    category: str = ""
    tech_stack: str | None = None
    tags: list[str] = field(default_factory=list)
    medium_estimates: dict[str, Decimal | str | int | float] = field(default_factory=dict)
