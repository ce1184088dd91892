"""
Shared pytest configuration and fixtures for the movie-night IRV tabulator.

This module provides common test fixtures and utilities used across
all test modules.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def majority_records():
    """Movie A holds a first-round majority."""
    return [
        {"rankings": ["A", "B", "C"]},
        {"rankings": ["B", "A", "C"]},
        {"rankings": ["A", "B", "C"]},
    ]


@pytest.fixture
def three_way_tie_records():
    """Every movie starts with one vote; A goes first on the tie."""
    return [
        {"rankings": ["A", "B"]},
        {"rankings": ["B", "C"]},
        {"rankings": ["C", "B"]},
    ]


@pytest.fixture
def runoff_records():
    """Four movies, no first-round majority, two eliminations needed."""
    return [
        {"rankings": ["m1", "m2", "m3", "m4"]},
        {"rankings": ["m1", "m2", "m3"]},
        {"rankings": ["m2", "m3"]},
        {"rankings": ["m2", "m1"]},
        {"rankings": ["m3", "m2"]},
        {"rankings": ["m4", "m3", "m2"]},
        {"rankings": ["m3", "m1"]},
    ]


@pytest.fixture
def malformed_records():
    """Mix of valid and structurally invalid vote records."""
    return [
        {"rankings": ["A", "B"]},
        {"rankings": []},
        {"rankings": None},
        {},
        {"rankings": "A"},
        {"rankings": ["B"]},
    ]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers",
        "golden: marks tests as golden dataset validation (hand-computed scenarios)",
    )
    config.addinivalue_line(
        "markers", "invariant: marks tests as mathematical invariant validation"
    )
    config.addinivalue_line(
        "markers", "smoke: marks tests as smoke tests (basic functionality check)"
    )
