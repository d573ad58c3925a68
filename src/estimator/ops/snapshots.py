"""Snapshot history operations."""

from __future__ import annotations

from estimator.core.errors import EstimatorError
from estimator.core.logging import get_logger
from estimator.core.models import CatalogSnapshot, SnapshotFile
from estimator.ops.context import OperationContext
from estimator.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def list_snapshots(ctx: OperationContext) -> OperationResult[list[SnapshotFile]]:
    """Snapshot files in the catalog directory, newest first."""
    timer = start_timer()

    try:
        files = ctx.repository.store.list_snapshots()
        return OperationResult.ok(files, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="list_snapshots", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to list snapshots: {exc}", elapsed_ms=timer.elapsed_ms)


def reload_catalog(ctx: OperationContext) -> OperationResult[CatalogSnapshot]:
    """Drop the in-memory snapshot and re-read the newest file."""
    timer = start_timer()

    try:
        snapshot = ctx.repository.reload()
        return OperationResult.ok(snapshot, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="reload_catalog", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to reload catalog: {exc}", elapsed_ms=timer.elapsed_ms)
