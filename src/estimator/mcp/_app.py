"""Shared MCP application state: server instance, context, helpers.

Tags: mcp, server, internal
Doc-Types: TECHNICAL_DESIGN
"""

from __future__ import annotations

import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from estimator.core.errors import EstimatorError
from estimator.core.logging import get_logger
from estimator.core.repository import CatalogRepository
from estimator.core.settings import get_settings
from estimator.core.store import CatalogStore
from estimator.mcp.transport import create_estimator_mcp

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Per-call view of the catalog for MCP tools.

    ``initialized`` is ``False`` when the catalog could not be loaded;
    ``error`` then holds the reason.
    """

    repository: CatalogRepository | None = None
    initialized: bool = False
    error: EstimatorError | None = None

    def error_payload(self) -> dict[str, Any]:
        """``{"error": {...}}`` for a context that failed to load."""
        if self.error is None:
            return {"error": {"code": "INTERNAL", "message": "Catalog not initialized"}}
        payload = {"code": self.error.code, "message": self.error.message}
        if self.error.details:
            payload["details"] = dict(self.error.details)
        return {"error": payload}


_repositories: dict[Path, CatalogRepository] = {}
_repositories_lock = threading.Lock()


def _get_repository(catalog_path: Path) -> CatalogRepository:
    """One repository per catalog directory for the life of the process."""
    with _repositories_lock:
        repository = _repositories.get(catalog_path)
        if repository is None:
            repository = CatalogRepository(CatalogStore(catalog_path))
            _repositories[catalog_path] = repository
        return repository


def _reset_repositories() -> None:
    with _repositories_lock:
        _repositories.clear()


@asynccontextmanager
async def lifespan(server: Any) -> AsyncIterator[AppContext]:
    """MCP server lifespan manager. Loads the catalog once to fail loudly at startup."""
    ctx = _get_context()
    if ctx.initialized:
        snapshot = ctx.repository.snapshot()
        logger.info(
            "mcp_initialized",
            catalog_path=str(ctx.repository.store.directory),
            roles=len(snapshot.roles),
            entries=len(snapshot.entries),
        )
    else:
        logger.warning("catalog_unavailable", error=ctx.error.message if ctx.error else None)
    yield ctx


mcp = create_estimator_mcp(
    name="estimator",
    instructions="""
Project estimation server backed by a versioned feature catalog.

Workflow:
1. Call get_instructions for the full estimation guide
2. Call get_catalog_features to see what can be estimated (filter by category, tech stack or tag)
3. Map the user's requirements to catalog feature ids and T-shirt sizes (XS, S, M, L, XL)
4. Call calculate_estimate with the selections to get per-feature, per-role and total hours
""",
    lifespan=lifespan,
)


def _get_context() -> AppContext:
    """Catalog context for one tool call.

    With ``reload_on_request`` the newest snapshot file is re-read so edits
    made by the CLI show up without restarting the server.
    """
    settings = get_settings()
    repository = _get_repository(Path(settings.catalog_path))
    try:
        if settings.reload_on_request:
            repository.reload()
        else:
            repository.snapshot()
    except EstimatorError as e:
        logger.warning("catalog_load_failed", code=e.code, error=e.message)
        return AppContext(repository=repository, initialized=False, error=e)
    return AppContext(repository=repository, initialized=True)
