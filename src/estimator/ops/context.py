"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument. The context carries the catalog repository, caller identity and
arbitrary metadata forwarded to logging.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from estimator.core.repository import CatalogRepository


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        repository: Catalog repository the operation reads and mutates.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request: ``"mcp"``, ``"cli"`` or ``"sdk"``.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    repository: CatalogRepository
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    metadata: dict[str, Any] = field(default_factory=dict)
