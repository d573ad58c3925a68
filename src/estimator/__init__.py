"""
Estimator - consulting project estimates from a versioned feature catalog.

Packages:
- estimator.core: domain model, snapshot store, repository, calculator
- estimator.tabular: TSV import/export for bulk catalog editing
- estimator.ops: operation functions shared by the CLI and MCP server
- estimator.cli: ``estimator`` command-line interface
- estimator.mcp: MCP tools consumed by an LLM agent
"""

__version__ = "0.3.0"
