"""
Structured error types for the estimator.

Every failure the catalog and calculator can produce is a subclass of
:class:`EstimatorError`. Errors carry a category for routing, a stable
machine-readable ``code``, a ``details`` mapping with the offending ids, and
an optional chained cause. Callers that sit at a transport boundary (CLI,
MCP tools) turn them into structured payloads with :meth:`to_dict` instead of
letting them escape.

Manifesto:
    - **Typed hierarchy:** One class per failure the caller must tell apart
    - **Exhaustive reporting:** Validation errors are collected, never
      fail-fast, so each error describes exactly one problem
    - **Rich details:** Ids and offending values travel with the error
    - **Error chaining:** Wrapped OS/JSON errors are kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                      EstimatorError                           │
        │               (category, code, details, cause)                │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  NotFoundError      ParseError        StorageError           │
        │  (NOT_FOUND)        (PARSE)           (STORAGE)              │
        │                                                               │
        │  ReferentialIntegrityError   InvalidReferenceError           │
        │  (INTEGRITY)                 └─ InvalidRoleReferenceError    │
        │                                                               │
        │  ValidationError (VALIDATION)                                 │
        │    EmptyInputError  UnknownFeatureError  InvalidSizeError     │
        │    UnknownRoleError InvalidMultiplierError                    │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidSizeError("basic-crud", "XXL")
    >>> error.code
    'INVALID_SIZE'
    >>> error.to_dict()["details"]
    {'feature_id': 'basic-crud', 'size': 'XXL'}

Tags:
    error-handling, exception-hierarchy, validation, referential-integrity

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Categories group errors by what the caller has to do about them:
    NOT_FOUND and STORAGE point at the catalog directory, PARSE at a
    malformed file or row, INTEGRITY at the catalog contents, and
    VALIDATION at the request itself.
    """

    NOT_FOUND = "NOT_FOUND"
    PARSE = "PARSE"
    STORAGE = "STORAGE"
    INTEGRITY = "INTEGRITY"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


class EstimatorError(Exception):
    """
    Base exception for all estimator errors.

    Subclasses set ``default_category`` and ``default_code``; instances may
    override both. ``details`` holds small, JSON-friendly values (ids, sizes,
    file names) for logging and for the structured error payloads returned
    to the calling agent.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_code: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.code = code or self.default_code
        self.details = details or {}
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_details(self, **kwargs: Any) -> EstimatorError:
        """Add details to this error (fluent API)."""
        self.details.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        if self.details:
            result["details"] = dict(self.details)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, code={self.code})"


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class NotFoundError(EstimatorError):
    """Catalog directory, snapshot file, role or entry does not exist."""

    default_category = ErrorCategory.NOT_FOUND
    default_code = "NOT_FOUND"


class ParseError(EstimatorError):
    """Snapshot file or tabular row could not be parsed."""

    default_category = ErrorCategory.PARSE
    default_code = "PARSE_ERROR"


class StorageError(EstimatorError):
    """Writing a snapshot to disk failed."""

    default_category = ErrorCategory.STORAGE
    default_code = "STORAGE_ERROR"


# =============================================================================
# INTEGRITY ERRORS
# =============================================================================


class ReferentialIntegrityError(EstimatorError):
    """
    Delete blocked by a live reference.

    Raised when a role is still referenced by the medium estimates of one or
    more catalog entries. ``referencing_entries`` lists the entry names so
    the editor can tell the user what to fix first.
    """

    default_category = ErrorCategory.INTEGRITY
    default_code = "REFERENTIAL_INTEGRITY"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        referencing_entries: Iterable[str],
        **kwargs: Any,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.referencing_entries = list(referencing_entries)
        message = (
            f"Cannot delete {entity_type} '{entity_id}' because it is referenced by: "
            f"{', '.join(self.referencing_entries)}"
        )
        details = {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "referencing_entries": self.referencing_entries,
        }
        super().__init__(message, details=details, **kwargs)


class InvalidReferenceError(EstimatorError):
    """Save blocked by a dangling reference."""

    default_category = ErrorCategory.INTEGRITY
    default_code = "INVALID_REFERENCE"


class InvalidRoleReferenceError(InvalidReferenceError):
    """An entry's medium estimates reference role ids that do not exist."""

    default_code = "INVALID_ROLE_REFERENCE"

    def __init__(self, invalid_role_ids: Iterable[str], **kwargs: Any):
        self.invalid_role_ids = list(invalid_role_ids)
        super().__init__(
            f"Invalid role references: {', '.join(self.invalid_role_ids)}",
            details={"invalid_role_ids": self.invalid_role_ids},
            **kwargs,
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(EstimatorError):
    """
    Bad input shape.

    Validation errors are collected exhaustively by the calculator and the
    tabular importer; each instance describes a single problem.
    """

    default_category = ErrorCategory.VALIDATION
    default_code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.details.setdefault("field", field)
        if value is not None:
            self.details.setdefault("value", value)


class EmptyInputError(ValidationError):
    """No feature selections were provided."""

    default_code = "EMPTY_INPUT"

    def __init__(self, message: str = "No features provided. Provide at least one feature with featureId and size."):
        super().__init__(message)


class UnknownFeatureError(ValidationError):
    """A selection names a feature id that is not in the catalog."""

    default_code = "UNKNOWN_FEATURE"

    def __init__(self, feature_id: str):
        self.feature_id = feature_id
        if feature_id:
            message = f"Feature ID '{feature_id}' not found in catalog"
        else:
            message = "Feature selection is missing featureId"
        super().__init__(message, details={"feature_id": feature_id})


class InvalidSizeError(ValidationError):
    """A selection uses a size outside XS, S, M, L, XL."""

    default_code = "INVALID_SIZE"

    def __init__(self, feature_id: str, size: str | None):
        self.feature_id = feature_id
        self.size = size
        super().__init__(
            f"Feature '{feature_id}' has invalid size '{size or ''}'. Must be exactly one of: XS, S, M, L, XL",
            details={"feature_id": feature_id, "size": size},
        )


class UnknownRoleError(ValidationError):
    """A selected entry estimates hours for a role missing from the snapshot."""

    default_code = "UNKNOWN_ROLE"

    def __init__(self, feature_id: str, role_id: str):
        self.feature_id = feature_id
        self.role_id = role_id
        super().__init__(
            f"Feature '{feature_id}' references role '{role_id}' which is not in the catalog",
            details={"feature_id": feature_id, "role_id": role_id},
        )


class InvalidMultiplierError(ValidationError):
    """A role's productivity multiplier is not strictly positive."""

    default_code = "INVALID_MULTIPLIER"

    def __init__(self, role_id: str, multiplier: Any):
        self.role_id = role_id
        self.multiplier = multiplier
        super().__init__(
            f"Role '{role_id}' has productivity multiplier {multiplier}; it must be greater than 0",
            field="productivity_multiplier",
            value=str(multiplier),
            details={"role_id": role_id},
        )
