# daisyworld/src/daisyworld/temperature.py
"""Patch temperature update: absorbed energy, local heating, relaxation, diffusion.

Per patch and per tick:

1. absorbed = (1 - albedo) * solar_luminosity, where albedo is the occupant's
   albedo or the bare-surface albedo on empty patches.
2. heating = 72 * ln(absorbed) + 80 for absorbed > 0, else 80.
3. relaxed = (previous + heating) / 2.

After every patch is relaxed the field is diffused (see grid.diffuse). All
three stages are vectorized over the whole grid, so each reads a single
snapshot of the previous stage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, cast

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .grid import DEFAULT_DIFFUSION_RATE, diffuse

if TYPE_CHECKING:
    from .grid import Grid

FloatArray = NDArray[np.floating]

HEATING_SCALE: Final[float] = 72.0
HEATING_OFFSET: Final[float] = 80.0

_ALBEDO_RANGE_ERROR = "albedo_of_bare_surface must be in [0, 1]; got {albedo}"


def local_heating(absorbed: ArrayLike) -> FloatArray:
    """
    Local heating from absorbed luminosity.

    An absorbed luminosity of 1 gives 80 degrees, 0.5 gives about 30, and
    0.01 gives about -252. Non-positive values fall back to 80.

    Args:
        absorbed: Scalar or array of absorbed luminosities.

    Returns:
        Array of heating values with the same shape as absorbed.
    """
    absorbed_arr = np.asarray(absorbed, dtype=np.float64)
    positive = absorbed_arr > 0.0
    safe = np.where(positive, absorbed_arr, 1.0)
    heating = np.where(
        positive,
        HEATING_SCALE * np.log(safe) + HEATING_OFFSET,
        HEATING_OFFSET,
    )
    return cast("FloatArray", heating)


def equilibrium_temperature(albedo: float, solar_luminosity: float) -> float:
    """Fixed point of the relaxation for a uniform field of the given albedo."""
    return float(local_heating((1.0 - albedo) * solar_luminosity))


class TemperatureEngine:
    """Recomputes every patch temperature once per tick."""

    def __init__(
        self,
        albedo_of_bare_surface: float,
        diffusion_rate: float = DEFAULT_DIFFUSION_RATE,
    ) -> None:
        """
        Initialize TemperatureEngine.

        Args:
            albedo_of_bare_surface: Albedo used on unoccupied patches.
            diffusion_rate: Share of each patch's value blended toward its
                neighbour mean.

        Raises:
            ValueError: If the surface albedo is outside [0, 1].
        """
        if not 0.0 <= albedo_of_bare_surface <= 1.0:
            raise ValueError(_ALBEDO_RANGE_ERROR.format(albedo=albedo_of_bare_surface))
        self.albedo_of_bare_surface = float(albedo_of_bare_surface)
        self.diffusion_rate = float(diffusion_rate)

    def albedo_field(self, grid: Grid) -> FloatArray:
        """Return per-patch albedo: occupant albedo, else bare surface."""
        return cast(
            "FloatArray",
            np.where(grid.occupied_mask(), grid.albedo, self.albedo_of_bare_surface),
        )

    def absorbed_luminosity(self, grid: Grid, solar_luminosity: float) -> FloatArray:
        """Return per-patch absorbed luminosity."""
        return (1.0 - self.albedo_field(grid)) * float(solar_luminosity)

    def relax(self, grid: Grid, solar_luminosity: float) -> FloatArray:
        """
        Move every patch halfway toward its local heating value.

        Args:
            grid: Grid to update in place.
            solar_luminosity: Current solar luminosity.

        Returns:
            The committed (pre-diffusion) temperature field.
        """
        heating = local_heating(self.absorbed_luminosity(grid, solar_luminosity))
        relaxed = (grid.temperature + heating) / 2.0
        np.copyto(grid.temperature, relaxed)
        return grid.temperature

    def update(self, grid: Grid, solar_luminosity: float) -> FloatArray:
        """
        Run the full per-tick temperature update: relaxation then diffusion.

        Args:
            grid: Grid to update in place.
            solar_luminosity: Current solar luminosity.

        Returns:
            The committed post-diffusion temperature field.
        """
        self.relax(grid, solar_luminosity)
        diffused = diffuse(grid.temperature, self.diffusion_rate, grid.mean_operator)
        np.copyto(grid.temperature, diffused)
        return grid.temperature
