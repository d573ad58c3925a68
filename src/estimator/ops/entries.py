"""
Catalog entry operations.

CRUD for selectable features. Saves are refused while any medium estimate
names a role that does not exist; every unknown role id is reported.
"""

from __future__ import annotations

from estimator.core.errors import EstimatorError
from estimator.core.logging import get_logger
from estimator.core.models import CatalogEntry, MediumEstimate, to_decimal
from estimator.ops.context import OperationContext
from estimator.ops.requests import SaveEntryRequest
from estimator.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def list_entries(ctx: OperationContext, category: str | None = None) -> OperationResult[list[CatalogEntry]]:
    """Entries in catalog order, optionally limited to one category."""
    timer = start_timer()

    try:
        entries = ctx.repository.get_entries_by_category(category)
        return OperationResult.ok(entries, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="list_entries", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to list entries: {exc}", elapsed_ms=timer.elapsed_ms)


def get_entry(ctx: OperationContext, entry_id: str) -> OperationResult[CatalogEntry]:
    """A single entry by id."""
    timer = start_timer()

    try:
        entry = ctx.repository.get_entry(entry_id)
        if entry is None:
            return OperationResult.fail(
                "NOT_FOUND",
                f"Entry '{entry_id}' not found",
                details={"entry_id": entry_id},
                elapsed_ms=timer.elapsed_ms,
            )
        return OperationResult.ok(entry, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="get_entry", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to get entry: {exc}", elapsed_ms=timer.elapsed_ms)


def save_entry(ctx: OperationContext, request: SaveEntryRequest) -> OperationResult[CatalogEntry]:
    """Insert or replace an entry and persist a new snapshot."""
    timer = start_timer()

    try:
        entry = CatalogEntry(
            id=request.id.strip(),
            name=request.name,
            description=request.description,
            category=request.category,
            tech_stack=request.tech_stack or None,
            tags=tuple(t.strip() for t in request.tags if t.strip()),
            medium_estimates=tuple(
                MediumEstimate(role_id, to_decimal(hours, "hours"))
                for role_id, hours in request.medium_estimates.items()
            ),
        )
        if not entry.id:
            return OperationResult.fail("VALIDATION_FAILED", "Entry id is required", elapsed_ms=timer.elapsed_ms)

        ctx.repository.save_entry(entry)
        return OperationResult.ok(entry, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="save_entry", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to save entry: {exc}", elapsed_ms=timer.elapsed_ms)


def delete_entry(ctx: OperationContext, entry_id: str) -> OperationResult[dict]:
    """Remove an entry. Deleting an unknown id still writes a new snapshot."""
    timer = start_timer()

    try:
        existed = ctx.repository.get_entry(entry_id) is not None
        ctx.repository.delete_entry(entry_id)
        warnings = [] if existed else [f"Entry '{entry_id}' did not exist"]
        return OperationResult.ok({"deleted": entry_id, "existed": existed}, warnings=warnings, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="delete_entry", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to delete entry: {exc}", elapsed_ms=timer.elapsed_ms)
