"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For candidate and requirement builders, see tests/fixtures/builders.py
"""

import pytest

from tests.fixtures.builders import AS_OF, default_taxonomy


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "concurrency: marks tests that start threads (deselect with '-m \"not concurrency\"')"
    )


@pytest.fixture(scope="session")
def taxonomy():
    """Bundled default taxonomy."""
    return default_taxonomy()


@pytest.fixture
def as_of():
    """Fixed scoring date so recency and experience are reproducible."""
    return AS_OF
