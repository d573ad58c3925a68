"""Usage guidance MCP tool."""

from __future__ import annotations

from importlib import resources

from estimator.core.logging import get_logger
from estimator.core.settings import get_settings
from estimator.mcp import _app

mcp = _app.mcp
logger = get_logger(__name__)


def load_instructions() -> str:
    """Markdown guide from ``instructions_path`` or the packaged default."""
    path = get_settings().instructions_path
    if path is not None:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("instructions_unreadable", path=str(path), error=str(e))
            return f"Error: could not read instructions file at {path}: {e}"
    return resources.files("estimator.mcp").joinpath("instructions.md").read_text(encoding="utf-8")


@mcp.tool()
async def get_instructions() -> str:
    """Return the guide for assistants using this server to build estimates.

    Call this first: it explains the workflow, the T-shirt sizes, how
    productivity multipliers apply and how to present results.
    """
    text = load_instructions()
    logger.debug("instructions_served", length=len(text))
    return text
