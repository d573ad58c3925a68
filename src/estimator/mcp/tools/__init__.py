"""MCP tools package: importing it registers every tool."""

# Importing each module triggers @mcp.tool() registration
from estimator.mcp.tools import (  # noqa: F401
    catalog,
    estimates,
    instructions,
)
