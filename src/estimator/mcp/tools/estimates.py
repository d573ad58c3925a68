"""Estimate calculation MCP tools."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from estimator.mcp import _app

mcp = _app.mcp


class FeatureSizeInput(BaseModel):
    """One feature selection as sent by the calling agent."""

    model_config = ConfigDict(populate_by_name=True)

    feature_id: str | None = Field(default=None, alias="featureId", description="Catalog feature id")
    size: str | None = Field(default=None, description="T-shirt size: XS, S, M, L or XL")


@mcp.tool()
async def calculate_estimate(selections: list[FeatureSizeInput]) -> dict[str, Any]:
    """Calculate a project estimate from feature selections.

    Each selection names a catalog feature id and a T-shirt size. Sizes are
    case-insensitive. The same feature may be selected more than once and is
    counted each time. If any selection is invalid nothing is calculated and
    every problem is returned at once.

    Args:
        selections: List of {featureId, size} objects

    Returns:
        Dictionary with 'perFeatureBreakdown', 'perRoleTotals' and
        'grandTotals' (hours and 8-hour days, rounded to one decimal), or
        'error' with 'details.errors' listing each validation problem
    """
    from estimator.core.models import SizeSelection
    from estimator.ops.context import OperationContext
    from estimator.ops.estimates import calculate_estimate as _calculate_estimate
    from estimator.ops.requests import CalculateEstimateRequest
    from estimator.ops.result import error_payload

    ctx = _app._get_context()
    if not ctx.initialized:
        return ctx.error_payload()

    request = CalculateEstimateRequest(
        selections=[SizeSelection(feature_id=s.feature_id or "", size=s.size or "") for s in selections or []]
    )
    result = _calculate_estimate(OperationContext(repository=ctx.repository, caller="mcp"), request)

    if not result.success:
        return {"error": error_payload(result.error)}
    return result.data.to_dict()
