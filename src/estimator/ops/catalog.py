"""
Catalog browsing operations.

Read-only views of the current snapshot used by the MCP ``get_catalog_features``
tool and the ``estimator features`` / ``estimator categories`` commands.
"""

from __future__ import annotations

from estimator.core.errors import EstimatorError
from estimator.core.logging import get_logger
from estimator.core.query import CatalogQueryResult, CatalogQueryService
from estimator.ops.context import OperationContext
from estimator.ops.requests import ListFeaturesRequest
from estimator.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def list_features(
    ctx: OperationContext,
    request: ListFeaturesRequest,
) -> OperationResult[CatalogQueryResult]:
    """Catalog entries matching the optional category, tech stack and tag."""
    timer = start_timer()

    try:
        result = CatalogQueryService(ctx.repository).find(
            category=request.category,
            tech_stack=request.tech_stack,
            tag=request.tag,
        )
        logger.debug(
            "features_listed",
            request_id=ctx.request_id,
            filters=result.applied_filters,
            count=result.total_count,
        )
        return OperationResult.ok(result, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="list_features", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to list features: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def list_categories(ctx: OperationContext) -> OperationResult[list[str]]:
    """Distinct entry categories."""
    timer = start_timer()

    try:
        categories = CatalogQueryService(ctx.repository).categories()
        return OperationResult.ok(categories, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="list_categories", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to list categories: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )
