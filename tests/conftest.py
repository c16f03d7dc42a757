"""Pytest configuration, test categorization and shared mesh fixtures.

Tests live in a flat `tests/` layout and are categorized into `unit`,
`regression`, `e2e` and `benchmark` via markers derived from file names, so CI
can run targeted subsets.
"""

from __future__ import annotations

import os
import pathlib
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sample_meshes import fan_disk, square_grid  # noqa: E402


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-apply test category markers based on filename conventions."""
    for item in items:
        name = pathlib.Path(str(item.fspath)).name.lower()

        if "benchmark" in name:
            item.add_marker(pytest.mark.benchmark)
        elif "e2e" in name or "end_to_end" in name:
            item.add_marker(pytest.mark.e2e)
        elif "regression" in name:
            item.add_marker(pytest.mark.regression)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def flat_fan():
    """Single-sheet hexagonal fan; vertex 0 is the only interior vertex."""
    return fan_disk(n=6)


@pytest.fixture
def jittered_grid():
    vertices, faces = square_grid(4, 4, jitter=0.05, seed=7)
    return vertices, faces


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
