"""Global pytest configuration and shared fixtures for daisyworld."""

from __future__ import annotations

import numpy as np
import pytest

from daisyworld.config import SimulationConfig
from daisyworld.grid import Grid

# -----------------------------------------------------------------------------
# Markers
# -----------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used by the test suite."""
    config.addinivalue_line(
        "markers",
        "slow: long-running end-to-end simulation",
    )


# -----------------------------------------------------------------------------
# Shared fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def small_config() -> SimulationConfig:
    """10x10 nominal-luminosity configuration with a fixed seed."""
    return SimulationConfig(
        n_rows=10,
        n_cols=10,
        start_percent_blacks=20.0,
        start_percent_whites=20.0,
        scenario="nominal",
        seed=2024,
    )


@pytest.fixture
def grid3() -> Grid:
    """Empty 3x3 grid; on a 3x3 torus every cell neighbours every other."""
    return Grid(3, 3)
