"""
Operations layer: transport-agnostic catalog and estimate functions.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions are transport-agnostic (no MCP, no CLI knowledge)

Usage::

    from estimator.ops import OperationContext
    from estimator.ops.estimates import calculate_estimate
    from estimator.ops.requests import CalculateEstimateRequest

    ctx = OperationContext(repository=repo, caller="cli")
    result = calculate_estimate(ctx, CalculateEstimateRequest([SizeSelection("basic-crud", "M")]))
    assert result.success
"""

from estimator.ops.context import OperationContext
from estimator.ops.result import OperationError, OperationResult, error_payload

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
    "error_payload",
]
