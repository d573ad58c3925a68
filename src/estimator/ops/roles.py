"""
Role operations.

CRUD for consulting roles. Deletes are refused while any catalog entry
estimates hours for the role; the refusal leaves the catalog unchanged.
"""

from __future__ import annotations

from estimator.core.errors import EstimatorError
from estimator.core.logging import get_logger
from estimator.core.models import Role, to_decimal
from estimator.ops.context import OperationContext
from estimator.ops.requests import SaveRoleRequest
from estimator.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def list_roles(ctx: OperationContext) -> OperationResult[list[Role]]:
    """All roles in catalog order."""
    timer = start_timer()

    try:
        return OperationResult.ok(ctx.repository.get_roles(), elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="list_roles", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to list roles: {exc}", elapsed_ms=timer.elapsed_ms)


def get_role(ctx: OperationContext, role_id: str) -> OperationResult[Role]:
    """A single role by id."""
    timer = start_timer()

    try:
        role = ctx.repository.get_role(role_id)
        if role is None:
            return OperationResult.fail(
                "NOT_FOUND",
                f"Role '{role_id}' not found",
                details={"role_id": role_id},
                elapsed_ms=timer.elapsed_ms,
            )
        return OperationResult.ok(role, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="get_role", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to get role: {exc}", elapsed_ms=timer.elapsed_ms)


def save_role(ctx: OperationContext, request: SaveRoleRequest) -> OperationResult[Role]:
    """Insert or replace a role and persist a new snapshot."""
    timer = start_timer()

    try:
        role = Role(
            id=request.id.strip(),
            name=request.name,
            description=request.description,
            productivity_multiplier=to_decimal(request.productivity_multiplier, "productivityMultiplier"),
            tech_stack_id=request.tech_stack_id or None,
        )
        if not role.id:
            return OperationResult.fail("VALIDATION_FAILED", "Role id is required", elapsed_ms=timer.elapsed_ms)

        ctx.repository.save_role(role)
        warnings = []
        if role.productivity_multiplier > 1:
            warnings.append(
                f"Role '{role.id}' multiplier {role.productivity_multiplier} is above 1.0 (slower than baseline)"
            )
        return OperationResult.ok(role, warnings=warnings, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="save_role", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to save role: {exc}", elapsed_ms=timer.elapsed_ms)


def delete_role(ctx: OperationContext, role_id: str) -> OperationResult[dict]:
    """Remove a role no entry references."""
    timer = start_timer()

    try:
        ctx.repository.delete_role(role_id)
        return OperationResult.ok({"deleted": role_id}, elapsed_ms=timer.elapsed_ms)
    except EstimatorError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", operation="delete_role", error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to delete role: {exc}", elapsed_ms=timer.elapsed_ms)
