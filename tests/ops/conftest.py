"""Shared fixtures for estimator.ops tests."""

import pytest

from estimator.ops.context import OperationContext


@pytest.fixture()
def ctx(repository) -> OperationContext:
    """Operation context over the sample catalog."""
    return OperationContext(repository=repository, caller="test")
