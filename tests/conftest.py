# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator
from uuid import UUID

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from jobsight.contracts import InvocationSnapshot, StorageObjectRef
from tests.fixtures.stores import InMemoryObjectStore

CURRENT_INVOCATION_ID = UUID("6f1c7c52-3a4e-4c1e-9a55-0f0f5a3b2c10")
OTHER_INVOCATION_ID = UUID("0b6d2f4e-8c71-4d2a-b9e3-7a5c1d9e8f20")


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def input_ref() -> StorageObjectRef:
    return StorageObjectRef(container="input", blob_name="orders-2024-01-01.csv")


@pytest.fixture
def make_snapshot():
    """Build an InvocationSnapshot from engine-style (PascalCase) fields."""

    def _make(**fields) -> InvocationSnapshot:
        data = {"Id": str(CURRENT_INVOCATION_ID), **fields}
        return InvocationSnapshot.model_validate(data)

    return _make


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
