"""Catalog browsing MCP tools."""

from __future__ import annotations

from typing import Any

from estimator.mcp import _app

mcp = _app.mcp


@mcp.tool()
async def get_catalog_features(
    category: str | None = None,
    tech_stack: str | None = None,
    tag: str | None = None,
) -> dict[str, Any]:
    """List catalog features that can be selected for an estimate.

    Returns ids, names, descriptions, categories, tech stacks and tags
    (no hours). Every filter is optional and case-insensitive; blank values
    are ignored.

    Args:
        category: Only features in this category (e.g. 'feature', 'infrastructure')
        tech_stack: Only features for this tech stack
        tag: Only features carrying this tag

    Returns:
        Dictionary with 'entries', 'appliedFilters', 'totalCount',
        'catalogVersion' and 'catalogTimestamp'
    """
    from estimator.ops.catalog import list_features
    from estimator.ops.context import OperationContext
    from estimator.ops.requests import ListFeaturesRequest
    from estimator.ops.result import error_payload

    ctx = _app._get_context()
    if not ctx.initialized:
        return ctx.error_payload()

    request = ListFeaturesRequest(category=category, tech_stack=tech_stack, tag=tag)
    result = list_features(OperationContext(repository=ctx.repository, caller="mcp"), request)

    if not result.success:
        return {"error": error_payload(result.error)}
    return result.data.to_dict()
