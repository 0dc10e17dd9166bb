"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and lighthouse/domains/),
making its fixtures available to centralized tests AND colocated domain tests.
"""

import os
from unittest.mock import AsyncMock

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any lighthouse module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test_user")
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("POSTGRES_DB", "test_db")


@pytest.fixture
def db():
    """Stand-in session; fakes ignore it and crud tests inspect its calls."""
    return AsyncMock()
