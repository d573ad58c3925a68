"""Estimator MCP Server.

Model Context Protocol (MCP) server that lets an AI assistant browse the
feature catalog and turn feature selections into project estimates.

Usage::

    # stdio mode (default)
    estimator-mcp

    # HTTP mode
    estimator-mcp --transport http --port 8100
"""

from estimator.mcp.server import create_server, mcp, run

__all__ = [
    "create_server",
    "mcp",
    "run",
]
