"""Unit tests for daisyworld.reproduction.

This module tests:
- The seed-threshold parabola, its roots, and clipping to [0, 1]
- Ageing and death at max_age
- Reproduction into snapshot-empty neighbours only
- Conflicts when several parents compete for the same free patch
- Crowded neighbourhoods as silent no-ops
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from daisyworld.grid import DaisyColor, Grid
from daisyworld.reproduction import (
    ReproductionEngine,
    reproduction_probability,
    seed_threshold,
)

# 22.5 degrees puts the raw parabola above 1, so reproduction is certain.
_OPTIMAL_T = 22.5
_HOT_T = 80.0


def _parabola_roots() -> tuple[float, float]:
    a, b, c = -0.0032, 0.1457, -0.6443
    disc = math.sqrt(b * b - 4.0 * a * c)
    r1 = (-b + disc) / (2.0 * a)
    r2 = (-b - disc) / (2.0 * a)
    return min(r1, r2), max(r1, r2)


def _fill(grid: Grid, color: DaisyColor, albedo: float, age: int = 0) -> None:
    for cell in grid.cells():
        grid.place(cell, color, albedo, age=age)


# -------------------------------------------------------------------
# Probability
# -------------------------------------------------------------------


def test_seed_threshold_peak_and_roots() -> None:
    """Parabola peaks near 22.8 degrees and crosses zero near 5 and 40."""
    low, high = _parabola_roots()
    assert low == pytest.approx(4.96, abs=0.01)
    assert high == pytest.approx(40.57, abs=0.01)
    assert float(seed_threshold(low)) == pytest.approx(0.0, abs=1e-12)
    assert float(seed_threshold(high)) == pytest.approx(0.0, abs=1e-12)
    assert float(seed_threshold(_OPTIMAL_T)) > 1.0


def test_probability_is_zero_at_and_beyond_roots() -> None:
    """At the roots and outside them the probability is exactly zero."""
    low, high = _parabola_roots()
    temps = np.array([low - 1e-9, low - 5.0, high + 1e-9, high + 20.0, -100.0, 150.0])
    assert np.all(reproduction_probability(temps) == 0.0)


def test_probability_near_band_edges_is_small() -> None:
    """At 5 and 40 degrees the probability is positive but small."""
    p = reproduction_probability(np.array([5.0, 40.0]))
    assert np.all(p > 0.0)
    assert np.all(p < 0.07)


def test_probability_clipped_to_one() -> None:
    """The parabola's peak above 1 is clipped."""
    assert float(reproduction_probability(_OPTIMAL_T)) == 1.0


# -------------------------------------------------------------------
# Ageing and death
# -------------------------------------------------------------------


def test_engine_rejects_bad_max_age() -> None:
    """max_age must be positive."""
    with pytest.raises(ValueError, match="max_age"):
        ReproductionEngine(max_age=0)


def test_daisies_age_and_die_at_max_age(
    grid3: Grid, rng: np.random.Generator
) -> None:
    """A daisy reaching max_age is removed; younger daisies age by one."""
    grid3.temperature[:] = _HOT_T
    grid3.place((0, 0), DaisyColor.BLACK, 0.25, age=24)
    grid3.place((1, 1), DaisyColor.WHITE, 0.75, age=3)

    report = ReproductionEngine(max_age=25).step(grid3, rng)

    assert grid3.daisy_at((0, 0)) is None
    survivor = grid3.daisy_at((1, 1))
    assert survivor is not None
    assert survivor.age == 4
    assert (report.aged, report.died, report.born) == (2, 1, 0)


def test_no_reproduction_outside_band(rng: np.random.Generator) -> None:
    """Hot patches never produce offspring."""
    grid = Grid(5, 5)
    grid.temperature[:] = _HOT_T
    grid.place((2, 2), DaisyColor.WHITE, 0.75)

    engine = ReproductionEngine()
    for _ in range(10):
        report = engine.step(grid, rng)
        assert report.born == 0
    assert int(grid.occupied_mask().sum()) == 1


# -------------------------------------------------------------------
# Reproduction
# -------------------------------------------------------------------


def test_single_parent_seeds_one_neighbour(
    grid3: Grid, rng: np.random.Generator
) -> None:
    """A parent at the optimum seeds one neighbour with its own color and albedo."""
    grid3.temperature[:] = _OPTIMAL_T
    grid3.place((1, 1), DaisyColor.WHITE, 0.7)

    report = ReproductionEngine().step(grid3, rng)

    assert report.born == 1
    children = [
        grid3.daisy_at(cell)
        for cell in grid3.neighbors((1, 1))
        if grid3.is_occupied(cell)
    ]
    assert len(children) == 1
    child = children[0]
    assert child is not None
    assert child.color is DaisyColor.WHITE
    assert child.albedo == pytest.approx(0.7)
    assert child.age == 0

    parent = grid3.daisy_at((1, 1))
    assert parent is not None
    assert parent.age == 1


def test_crowded_neighbourhood_is_a_no_op(
    grid3: Grid, rng: np.random.Generator
) -> None:
    """A full grid produces no births and no errors."""
    grid3.temperature[:] = _OPTIMAL_T
    _fill(grid3, DaisyColor.BLACK, 0.25, age=1)

    report = ReproductionEngine().step(grid3, rng)

    assert report.born == 0
    assert report.crowded == 9
    assert int(grid3.occupied_mask().sum()) == 9


def test_cells_vacated_this_tick_are_not_seeding_places(
    grid3: Grid, rng: np.random.Generator
) -> None:
    """A patch freed by a death in the same tick stays empty until next tick."""
    grid3.temperature[:] = _OPTIMAL_T
    _fill(grid3, DaisyColor.WHITE, 0.75, age=1)
    grid3.remove((0, 0))
    grid3.place((0, 0), DaisyColor.WHITE, 0.75, age=24)

    report = ReproductionEngine(max_age=25).step(grid3, rng)

    assert report.died == 1
    assert report.born == 0
    assert grid3.daisy_at((0, 0)) is None


def test_competing_parents_fill_a_free_patch_once(
    grid3: Grid, rng: np.random.Generator
) -> None:
    """Eight parents share one free patch; exactly one birth happens."""
    grid3.temperature[:] = _OPTIMAL_T
    _fill(grid3, DaisyColor.BLACK, 0.25, age=2)
    grid3.remove((2, 0))

    report = ReproductionEngine().step(grid3, rng)

    assert report.born == 1
    assert report.crowded == 7
    newborn = grid3.daisy_at((2, 0))
    assert newborn is not None
    assert newborn.age == 0
    assert int(grid3.occupied_mask().sum()) == 9


def test_step_is_deterministic_given_seed() -> None:
    """Identical grids and seeds produce identical outcomes."""

    def run(seed: int) -> tuple[np.ndarray, np.ndarray]:
        grid = Grid(6, 6)
        grid.temperature[:] = np.linspace(0.0, 45.0, 36).reshape(6, 6)
        for cell in [(0, 0), (1, 3), (3, 3), (5, 2), (4, 5)]:
            grid.place(cell, DaisyColor.BLACK, 0.25, age=3)
        engine = ReproductionEngine()
        gen = np.random.default_rng(seed)
        for _ in range(5):
            engine.step(grid, gen)
        return grid.color.copy(), grid.age.copy()

    color_a, age_a = run(7)
    color_b, age_b = run(7)
    assert np.array_equal(color_a, color_b)
    assert np.array_equal(age_a, age_b)
