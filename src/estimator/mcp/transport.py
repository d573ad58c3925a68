"""FastMCP server scaffold and console entry point.

Usage::

    from estimator.mcp.transport import create_estimator_mcp, run_estimator_mcp

    mcp = create_estimator_mcp(
        name="estimator",
        instructions="Project estimation from a feature catalog ...",
        lifespan=app_lifespan,
    )

    @mcp.tool()
    async def get_catalog_features(...): ...

    def run():
        run_estimator_mcp(mcp, default_port=8100)
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from estimator.core.logging import configure_logging, get_logger
from estimator.core.settings import get_settings

logger = get_logger(__name__)


def create_estimator_mcp(
    name: str,
    instructions: str,
    lifespan: Callable[..., Any],
) -> FastMCP:
    """Create a FastMCP server instance.

    Parameters
    ----------
    name : str
        MCP server name.
    instructions : str
        Natural language description of the server's capabilities.
    lifespan : async context manager
        Lifespan factory that yields an AppContext dataclass.

    Returns
    -------
    FastMCP
        Configured server instance; register tools on it.
    """
    return FastMCP(
        name,
        instructions=instructions,
        lifespan=lifespan,
    )


def parse_transport_args(args: Sequence[str], *, default_port: int) -> tuple[str, str | None, int]:
    """``(transport, host, port)`` from ``--transport``/``--host``/``--port`` flags.

    Unknown flags are ignored so the entry point tolerates launcher extras.
    """
    transport = "stdio"
    host: str | None = None
    port = default_port

    i = 0
    while i < len(args):
        if args[i] in ("--transport", "-t") and i + 1 < len(args):
            transport = args[i + 1]
            i += 2
        elif args[i] in ("--host",) and i + 1 < len(args):
            host = args[i + 1]
            i += 2
        elif args[i] in ("--port", "-p") and i + 1 < len(args):
            port = int(args[i + 1])
            i += 2
        else:
            i += 1
    return transport, host, port


def run_estimator_mcp(
    mcp: FastMCP,
    *,
    default_port: int | None = None,
    argv: Sequence[str] | None = None,
) -> None:
    """Standard entry point for the MCP console script.

    Parses ``--transport`` and ``--port`` from ``sys.argv`` and starts the
    server in either stdio or streamable-http mode. Logging always goes to
    stderr; in stdio mode stdout carries the protocol.
    """
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_format == "json",
        service="estimator-mcp",
    )

    transport, host, port = parse_transport_args(
        sys.argv[1:] if argv is None else argv,
        default_port=default_port or settings.port,
    )

    if transport in ("http", "streamable-http"):
        mcp.settings.host = host or settings.host
        mcp.settings.port = port
        logger.info("mcp_starting", server=mcp.name, transport="streamable-http", host=mcp.settings.host, port=port)
        mcp.run(transport="streamable-http")
    else:
        logger.info("mcp_starting", server=mcp.name, transport="stdio", catalog_path=str(settings.catalog_path))
        mcp.run(transport="stdio")
