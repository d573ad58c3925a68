"""Estimator MCP server.

Exposes the feature catalog and the estimate calculator as MCP tools. The
implementation lives in `estimator.mcp._app` (shared state) and
`estimator.mcp.tools.*` (tool functions); this module wires them together
and provides the console entry point.

Tags: mcp, server, ai-tools, estimation, protocol
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
"""

from __future__ import annotations

from estimator.mcp._app import (  # noqa: F401
    AppContext,
    _get_context,
    lifespan,
    mcp,
)

# Import tools to trigger @mcp.tool() registration
from estimator.mcp.tools.catalog import get_catalog_features  # noqa: F401
from estimator.mcp.tools.estimates import calculate_estimate  # noqa: F401
from estimator.mcp.tools.instructions import get_instructions  # noqa: F401
from estimator.mcp.transport import run_estimator_mcp


def create_server():
    """Create and return the MCP server instance."""
    return mcp


def run():
    """Run the MCP server (entry point for console script)."""
    run_estimator_mcp(mcp)


if __name__ == "__main__":
    run()
