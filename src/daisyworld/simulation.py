# daisyworld/src/daisyworld/simulation.py
"""Simulation clock: setup, per-tick orchestration, and the runtime query surface.

Per tick, ``SimulationClock.step`` runs:

1. temperature relaxation of every patch from the previous field, then
   diffusion (TemperatureEngine.update);
2. global mean temperature;
3. ageing, reproduction and death (ReproductionEngine.step);
4. population counts;
5. tick += 1;
6. luminosity for the next tick (ScenarioController.advance).

All randomness comes from one ``numpy.random.Generator`` seeded from the
configuration, so a run is reproducible given ``config.seed``.

The clock is not thread-safe: step() and setup() must not be called
concurrently on the same instance.
"""

from __future__ import annotations

import math
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from .config import SimulationConfig
from .errors import raise_not_initialized
from .grid import DaisyColor, Grid
from .reproduction import ReproductionEngine, ReproductionReport
from .scenario import ScenarioController
from .temperature import TemperatureEngine

if TYPE_CHECKING:
    from .grid import Cell

_SEED_SHORTFALL_WARNING = (
    "Only {available} empty patches remain for {requested} {color} daisies; "
    "seeding {available}."
)
_N_STEPS_ERROR = "n_steps must be >= 0; got {n_steps}"


@dataclass(frozen=True, slots=True)
class GlobalStats:
    """Aggregate statistics of the simulation.

    Attributes:
        tick: Number of completed steps.
        mean_temperature: Mean patch temperature after the last diffusion pass.
        black_count: Number of black daisies.
        white_count: Number of white daisies.
        solar_luminosity: Luminosity that will drive the next tick.
    """

    tick: int
    mean_temperature: float
    black_count: int
    white_count: int
    solar_luminosity: float

    @property
    def total_count(self) -> int:
        """Total number of daisies."""
        return self.black_count + self.white_count


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


class SimulationClock:
    """Owns the simulation state and advances it one tick at a time."""

    def __init__(
        self,
        config: SimulationConfig | Mapping[str, Any] | None = None,
    ) -> None:
        """
        Initialize SimulationClock.

        Args:
            config: Optional configuration. When given, setup() is called
                immediately; otherwise setup() must be called before step().
        """
        self._config: SimulationConfig | None = None
        self._grid: Grid | None = None
        self._rng: np.random.Generator | None = None
        self._temperature: TemperatureEngine | None = None
        self._reproduction: ReproductionEngine | None = None
        self._scenario: ScenarioController | None = None

        self.tick = 0
        self.solar_luminosity = 0.0
        self.global_temperature = 0.0
        self.black_count = 0
        self.white_count = 0
        self.history: list[GlobalStats] = []
        self.last_report: ReproductionReport | None = None

        if config is not None:
            self.setup(config)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        """True once setup() has completed."""
        return self._grid is not None

    @property
    def config(self) -> SimulationConfig:
        """Configuration passed to the last setup()."""
        if self._config is None:
            raise_not_initialized("config")
        return self._config

    @property
    def grid(self) -> Grid:
        """Patch grid."""
        if self._grid is None:
            raise_not_initialized("grid")
        return self._grid

    def setup(
        self,
        config: SimulationConfig | Mapping[str, Any] | None = None,
    ) -> None:
        """
        Re-initialize all simulation state.

        Args:
            config: Configuration object or plain mapping of options
                (snake_case or camelCase). Defaults to SimulationConfig().

        Raises:
            ConfigurationError: If a mapping fails validation.
        """
        if config is None:
            cfg = SimulationConfig()
        elif isinstance(config, SimulationConfig):
            cfg = config
        else:
            cfg = SimulationConfig.from_mapping(config)

        rng = np.random.default_rng(cfg.seed)
        grid = Grid(cfg.n_rows, cfg.n_cols)
        scenario = ScenarioController(cfg.scenario, cfg.initial_solar_luminosity)
        temperature = TemperatureEngine(cfg.albedo_of_bare_surface, cfg.diffusion_rate)
        reproduction = ReproductionEngine(cfg.max_age)

        self._config = cfg
        self._rng = rng
        self._grid = grid
        self._scenario = scenario
        self._temperature = temperature
        self._reproduction = reproduction

        self.tick = 0
        self.solar_luminosity = scenario.initial_luminosity()
        self.history = []
        self.last_report = None

        n_blacks = _round_half_up(cfg.start_percent_blacks * grid.size / 100.0)
        n_whites = math.floor(cfg.start_percent_whites * grid.size / 100.0)
        self._seed_randomly(DaisyColor.BLACK, n_blacks)
        self._seed_randomly(DaisyColor.WHITE, n_whites)

        occupied = grid.occupied_mask()
        grid.age[occupied] = rng.integers(
            0, cfg.max_age, size=int(np.count_nonzero(occupied))
        )

        temperature.relax(grid, self.solar_luminosity)
        self._refresh_stats()
        if cfg.store_history:
            self.history.append(self.get_global_stats())

    def _seed_randomly(self, color: DaisyColor, n: int) -> None:
        grid = self.grid
        empty = np.flatnonzero(~grid.occupied_mask())
        if n > empty.size:
            warnings.warn(
                _SEED_SHORTFALL_WARNING.format(
                    available=empty.size, requested=n, color=color.name.lower()
                ),
                RuntimeWarning,
                stacklevel=3,
            )
            n = int(empty.size)
        if n == 0:
            return

        rng = self._require_rng()
        chosen = np.sort(rng.choice(empty, size=n, replace=False))
        rows, cols = np.unravel_index(chosen, grid.shape)
        grid.color[rows, cols] = color.value
        grid.age[rows, cols] = 0
        grid.albedo[rows, cols] = self.config.albedo_for(color)

    def _require_rng(self) -> np.random.Generator:
        if self._rng is None:
            raise_not_initialized("rng")
        return self._rng

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self) -> GlobalStats:
        """
        Advance the simulation by exactly one tick.

        Returns:
            Statistics after the tick.

        Raises:
            SimulationNotInitializedError: If setup() has not been called.
        """
        if (
            self._grid is None
            or self._rng is None
            or self._temperature is None
            or self._reproduction is None
            or self._scenario is None
        ):
            raise_not_initialized("step")

        self._temperature.update(self._grid, self.solar_luminosity)
        self.global_temperature = self._grid.mean_temperature()

        self.last_report = self._reproduction.step(self._grid, self._rng)
        self._refresh_counts()

        self.tick += 1
        self.solar_luminosity = self._scenario.advance(self.tick, self.solar_luminosity)

        stats = self.get_global_stats()
        if self.config.store_history:
            self.history.append(stats)
        return stats

    def run(self, n_steps: int) -> list[GlobalStats]:
        """
        Advance the simulation by n_steps ticks.

        Args:
            n_steps: Number of ticks to run (>= 0).

        Raises:
            ValueError: If n_steps is negative.

        Returns:
            Statistics after each tick.
        """
        if n_steps < 0:
            raise ValueError(_N_STEPS_ERROR.format(n_steps=n_steps))
        return [self.step() for _ in range(n_steps)]

    def _refresh_counts(self) -> None:
        self.black_count = self.grid.count(DaisyColor.BLACK)
        self.white_count = self.grid.count(DaisyColor.WHITE)

    def _refresh_stats(self) -> None:
        self.global_temperature = self.grid.mean_temperature()
        self._refresh_counts()

    # ------------------------------------------------------------------
    # Runtime query / command surface
    # ------------------------------------------------------------------

    def get_patch_temperature(self, cell: Cell) -> float:
        """Return the temperature of a patch."""
        return float(self.grid.temperature[self.grid.normalize(cell)])

    def get_occupant(self, cell: Cell) -> DaisyColor | None:
        """Return the color of the daisy on a patch, or None if empty."""
        daisy = self.grid.daisy_at(cell)
        return None if daisy is None else daisy.color

    def place_daisy(self, cell: Cell, color: DaisyColor | str) -> bool:
        """
        Place a new age-0 daisy on an empty patch.

        Args:
            cell: Target patch.
            color: DaisyColor or its name ("black" / "white").

        Returns:
            True if placed; False (no-op) if the patch was already occupied.
        """
        resolved = color if isinstance(color, DaisyColor) else DaisyColor[color.upper()]
        placed = self.grid.place(cell, resolved, self.config.albedo_for(resolved))
        if placed:
            self._refresh_counts()
        return placed

    def remove_daisy(self, cell: Cell) -> bool:
        """
        Remove the daisy on a patch.

        Returns:
            True if removed; False (no-op) if the patch was empty.
        """
        removed = self.grid.remove(cell)
        if removed:
            self._refresh_counts()
        return removed

    def get_global_stats(self) -> GlobalStats:
        """Return the current aggregate statistics."""
        if not self.is_initialized:
            raise_not_initialized("get_global_stats")
        return GlobalStats(
            tick=self.tick,
            mean_temperature=self.global_temperature,
            black_count=self.black_count,
            white_count=self.white_count,
            solar_luminosity=self.solar_luminosity,
        )
