"""
CLI: ``estimator serve``: start the MCP server.
"""

from __future__ import annotations

import typer

from estimator.cli.utils import err_console


def serve_command(
    transport: str = typer.Option("stdio", "--transport", "-t", help="stdio or http"),
    host: str | None = typer.Option(None, "--host", help="Bind address for http (defaults to ESTIMATOR_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port for http (defaults to ESTIMATOR_PORT)"),
) -> None:
    """Start the MCP server (same as the ``estimator-mcp`` command)."""
    from estimator.mcp import mcp
    from estimator.mcp.transport import run_estimator_mcp

    if transport not in ("stdio", "http", "streamable-http"):
        err_console.print(f"[red]Unknown transport '{transport}'.[/red] Use stdio or http.")
        raise typer.Exit(code=1)

    argv = ["--transport", transport]
    if host:
        argv += ["--host", host]
    if port:
        argv += ["--port", str(port)]
    run_estimator_mcp(mcp, argv=argv)
