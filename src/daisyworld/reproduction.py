# daisyworld/src/daisyworld/reproduction.py
"""Daisy ageing, reproduction and death.

Each tick runs in explicit snapshot-then-commit phases so the outcome does not
depend on the order in which daisies are visited:

1. Snapshot occupancy and (post-diffusion) temperature at tick start.
2. Age every daisy in the snapshot; daisies reaching max_age are marked dead.
3. Survivors draw u ~ U[0, 1) and reproduce when u < p(T) (see
   reproduction_probability).
4. Reproducing parents, visited in a random permutation, each claim one random
   neighbour that was empty in the snapshot and not yet claimed this tick.
5. Commit deaths and births.

Cells vacated by deaths in this tick are never seeding places, and newborns
are not aged until the next tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, cast

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from .grid import Cell, Grid

FloatArray = NDArray[np.floating]

DEFAULT_MAX_AGE: Final[int] = 25

# Parabola with roots near 5 and 40 degrees and a peak of ~1 near 22.5.
SEED_LINEAR: Final[float] = 0.1457
SEED_QUADRATIC: Final[float] = 0.0032
SEED_OFFSET: Final[float] = 0.6443

_MAX_AGE_ERROR = "max_age must be >= 1; got {max_age}"


def seed_threshold(temperature: ArrayLike) -> FloatArray:
    """Raw reproduction parabola; negative outside roughly [5, 40] degrees."""
    t = np.asarray(temperature, dtype=np.float64)
    return cast("FloatArray", SEED_LINEAR * t - SEED_QUADRATIC * t**2 - SEED_OFFSET)


def reproduction_probability(temperature: ArrayLike) -> FloatArray:
    """Seed threshold clipped to a valid probability in [0, 1]."""
    return cast("FloatArray", np.clip(seed_threshold(temperature), 0.0, 1.0))


@dataclass(frozen=True, slots=True)
class ReproductionReport:
    """Counts from one reproduction pass.

    Attributes:
        aged: Daisies alive at tick start (all of them age by one).
        died: Daisies removed for reaching max_age.
        born: Daisies created this tick.
        crowded: Parents that drew a birth but found no free neighbour.
    """

    aged: int
    died: int
    born: int
    crowded: int


class ReproductionEngine:
    """Ages, reproduces and kills daisies once per tick."""

    def __init__(self, max_age: int = DEFAULT_MAX_AGE) -> None:
        """
        Initialize ReproductionEngine.

        Args:
            max_age: Age at which a daisy dies.

        Raises:
            ValueError: If max_age < 1.
        """
        if max_age < 1:
            raise ValueError(_MAX_AGE_ERROR.format(max_age=max_age))
        self.max_age = int(max_age)

    def step(self, grid: Grid, rng: np.random.Generator) -> ReproductionReport:
        """
        Run one ageing/reproduction/death pass over the grid.

        Args:
            grid: Grid holding daisies and post-diffusion temperatures.
            rng: Random number source.

        Returns:
            Counts of aged, dead, newborn and crowded-out daisies.
        """
        # Phase 1: snapshot.
        occupied = grid.occupied_mask().copy()
        temperature = grid.temperature.copy()
        rows, cols = np.nonzero(occupied)

        # Phase 2: ageing and death.
        new_age = grid.age[rows, cols] + 1
        dead = new_age >= self.max_age
        alive = ~dead

        # Phase 3: one draw per survivor, in row-major order.
        surv_rows = rows[alive]
        surv_cols = cols[alive]
        p = reproduction_probability(temperature[surv_rows, surv_cols])
        draws = rng.random(surv_rows.size)
        seeding = np.nonzero(draws < p)[0]

        # Phase 4: parents claim free neighbours from the snapshot.
        claimed = np.zeros(grid.shape, dtype=bool)
        births: list[tuple[Cell, int, float]] = []
        crowded = 0
        for k in rng.permutation(seeding):
            parent = (int(surv_rows[k]), int(surv_cols[k]))
            candidates = [
                cell
                for cell in grid.neighbors(parent)
                if not occupied[cell] and not claimed[cell]
            ]
            if not candidates:
                crowded += 1
                continue
            target = candidates[int(rng.integers(len(candidates)))]
            claimed[target] = True
            births.append((target, int(grid.color[parent]), float(grid.albedo[parent])))

        # Phase 5: commit.
        grid.age[rows, cols] = new_age
        grid.clear(rows[dead], cols[dead])
        for cell, code, albedo in births:
            grid.color[cell] = code
            grid.age[cell] = 0
            grid.albedo[cell] = albedo

        return ReproductionReport(
            aged=int(rows.size),
            died=int(np.count_nonzero(dead)),
            born=len(births),
            crowded=crowded,
        )
