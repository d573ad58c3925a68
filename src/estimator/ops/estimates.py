"""
Estimate operations.

Wraps the pure calculator with the current snapshot. Validation failures
come back as one ``VALIDATION_FAILED`` error whose ``details["errors"]``
lists every individual problem, each with its own code.
"""

from __future__ import annotations

from estimator.core.calculator import Estimate, calculate
from estimator.core.errors import ErrorCategory, EstimatorError
from estimator.core.logging import LogContext, get_logger
from estimator.ops.context import OperationContext
from estimator.ops.requests import CalculateEstimateRequest
from estimator.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def calculate_estimate(
    ctx: OperationContext,
    request: CalculateEstimateRequest,
) -> OperationResult[Estimate]:
    """Validate the selections and compute the full breakdown."""
    timer = start_timer()

    with LogContext(request_id=ctx.request_id, caller=ctx.caller):
        try:
            outcome = calculate(ctx.repository.snapshot(), request.selections)
        except EstimatorError as exc:
            return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
        except Exception as exc:
            logger.exception("op_failed", operation="calculate_estimate", error=str(exc))
            return OperationResult.fail(
                "INTERNAL",
                f"Failed to calculate estimate: {exc}",
                elapsed_ms=timer.elapsed_ms,
            )

        if not outcome.ok:
            errors = [e.to_dict() for e in outcome.errors]
            logger.info(
                "estimate_rejected",
                error_count=len(errors),
                codes=sorted({e.code for e in outcome.errors}),
            )
            return OperationResult.fail(
                "VALIDATION_FAILED",
                f"{len(errors)} validation error(s) in feature selections",
                category=ErrorCategory.VALIDATION,
                details={"errors": errors},
                elapsed_ms=timer.elapsed_ms,
            )

        estimate = outcome.estimate
        logger.info(
            "estimate_calculated",
            feature_count=len(estimate.features),
            final_hours=str(estimate.final_hours),
        )
        return OperationResult.ok(estimate, elapsed_ms=timer.elapsed_ms)
