# daisyworld/src/daisyworld/config.py
"""Configuration model for a daisyworld simulation.

The configuration is an explicit, immutable object handed to
``SimulationClock.setup``. Field names are snake_case; the camelCase names used
by interactive front-ends (``startPercentBlacks``, ``albedoOfBareSurface``, ...)
are accepted as aliases.

Notes:
    - Unknown fields are rejected (`extra="forbid"`) so typos in slider names
      fail loudly instead of silently falling back to defaults.
    - Start percentages that add up to more than 100 cannot all be seeded.
      With `strict=True` this is rejected; otherwise a RuntimeWarning is
      emitted and whites are seeded only on the patches left empty.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import raise_invalid_config
from .grid import DaisyColor
from .scenario import RAMP_DEFAULT_START, Scenario

_START_PERCENT_SUM_ERROR = (
    "start_percent_blacks + start_percent_whites = {total} exceeds 100; "
    "not every daisy can be seeded"
)


class SimulationConfig(BaseModel):
    """Configuration schema for a daisyworld run.

    Attributes:
        n_rows: Number of patch rows.
        n_cols: Number of patch columns.
        start_percent_blacks: Percentage of patches seeded with black daisies.
        start_percent_whites: Percentage of patches seeded with white daisies.
        albedo_of_blacks: Albedo of every black daisy.
        albedo_of_whites: Albedo of every white daisy.
        albedo_of_bare_surface: Albedo of an unoccupied patch.
        scenario: Luminosity schedule.
        initial_solar_luminosity: Starting luminosity for the ramp schedule.
        max_age: Age at which a daisy dies.
        diffusion_rate: Share of each patch's temperature that flows toward
            its neighbour mean per tick.
        seed: Seed for the random number generator (None for OS entropy).
        strict: Reject recoverable configuration problems instead of warning.
        store_history: Record GlobalStats after every step.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    n_rows: int = Field(default=29, ge=1)
    n_cols: int = Field(default=29, ge=1)

    start_percent_blacks: float = Field(default=20.0, ge=0.0, le=100.0)
    start_percent_whites: float = Field(default=20.0, ge=0.0, le=100.0)

    albedo_of_blacks: float = Field(default=0.25, ge=0.0, le=1.0)
    albedo_of_whites: float = Field(default=0.75, ge=0.0, le=1.0)
    albedo_of_bare_surface: float = Field(default=0.4, ge=0.0, le=1.0)

    scenario: Scenario = Scenario.RAMP
    initial_solar_luminosity: float = Field(default=RAMP_DEFAULT_START, gt=0.0)

    max_age: int = Field(default=25, ge=1)
    diffusion_rate: float = Field(default=0.5, ge=0.0, le=1.0)

    seed: int | None = Field(default=None, ge=0)
    strict: bool = True
    store_history: bool = False

    @field_validator("scenario", mode="before")
    @classmethod
    def _parse_scenario(cls, value: Any) -> Scenario:
        return Scenario.parse(value)

    @model_validator(mode="after")
    def _check_start_percentages(self) -> SimulationConfig:
        total = self.start_percent_blacks + self.start_percent_whites
        if total <= 100.0:
            return self
        msg = _START_PERCENT_SUM_ERROR.format(total=total)
        if self.strict:
            raise ValueError(msg)
        warnings.warn(msg, RuntimeWarning, stacklevel=2)
        return self

    @property
    def n_patches(self) -> int:
        """Total number of patches on the grid."""
        return self.n_rows * self.n_cols

    def albedo_for(self, color: DaisyColor) -> float:
        """Return the configured albedo for a daisy color."""
        if color is DaisyColor.BLACK:
            return self.albedo_of_blacks
        return self.albedo_of_whites

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> SimulationConfig:
        """Validate a plain mapping into a SimulationConfig.

        Args:
            mapping: Field values keyed by snake_case or camelCase names.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If any field is missing, unknown or out of range.
        """
        try:
            return cls.model_validate(dict(mapping))
        except ValidationError as exc:
            fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
            raise_invalid_config(
                detail=str(exc),
                fields=[f for f in fields if f],
            )
