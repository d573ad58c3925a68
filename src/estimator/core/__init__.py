"""
Core primitives: domain model, snapshot store, repository, calculator.

Usage:
    from estimator.core import CatalogRepository, CatalogStore, calculate

    repo = CatalogRepository(CatalogStore("data/catalogs"))
    outcome = calculate(repo.snapshot(), [SizeSelection("basic-crud", "M")])
"""

from estimator.core.calculator import (
    HOURS_PER_DAY,
    SIZE_MULTIPLIERS,
    Estimate,
    EstimateOutcome,
    FeatureBreakdown,
    RoleLine,
    RoleTotal,
    TShirtSize,
    calculate,
    parse_size,
    round_display,
    size_multiplier,
    validate_selections,
)
from estimator.core.errors import (
    EmptyInputError,
    ErrorCategory,
    EstimatorError,
    InvalidMultiplierError,
    InvalidReferenceError,
    InvalidRoleReferenceError,
    InvalidSizeError,
    NotFoundError,
    ParseError,
    ReferentialIntegrityError,
    StorageError,
    UnknownFeatureError,
    UnknownRoleError,
    ValidationError,
)
from estimator.core.models import (
    CatalogEntry,
    CatalogSnapshot,
    MediumEstimate,
    Role,
    SizeSelection,
    SnapshotFile,
)
from estimator.core.query import CatalogQueryResult, CatalogQueryService, filter_entries
from estimator.core.repository import CatalogRepository
from estimator.core.store import CatalogStore, StoredSnapshot

__all__ = [
    # models
    "CatalogEntry",
    "CatalogSnapshot",
    "MediumEstimate",
    "Role",
    "SizeSelection",
    "SnapshotFile",
    # storage
    "CatalogStore",
    "StoredSnapshot",
    "CatalogRepository",
    # calculation
    "HOURS_PER_DAY",
    "SIZE_MULTIPLIERS",
    "Estimate",
    "EstimateOutcome",
    "FeatureBreakdown",
    "RoleLine",
    "RoleTotal",
    "TShirtSize",
    "calculate",
    "parse_size",
    "round_display",
    "size_multiplier",
    "validate_selections",
    # queries
    "CatalogQueryResult",
    "CatalogQueryService",
    "filter_entries",
    # errors
    "EmptyInputError",
    "ErrorCategory",
    "EstimatorError",
    "InvalidMultiplierError",
    "InvalidReferenceError",
    "InvalidRoleReferenceError",
    "InvalidSizeError",
    "NotFoundError",
    "ParseError",
    "ReferentialIntegrityError",
    "StorageError",
    "UnknownFeatureError",
    "UnknownRoleError",
    "ValidationError",
]
