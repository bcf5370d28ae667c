# daisyworld/src/daisyworld/scenario.py
"""Solar luminosity schedules.

The controller is consulted once per tick, *after* the temperature and
reproduction updates and after the tick counter has been incremented, so the
value used by tick N is the one produced at the end of tick N-1 (or at setup,
for tick 1).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

_UNKNOWN_SCENARIO_ERROR = "Unknown scenario: {scenario!r}; expected one of {choices}"
_LUMINOSITY_POSITIVE_ERROR = "initial_solar_luminosity must be > 0; got {value}"

RAMP_UP_WINDOW: Final[tuple[int, int]] = (200, 400)
RAMP_DOWN_WINDOW: Final[tuple[int, int]] = (600, 850)
RAMP_UP_INCREMENT: Final[float] = 0.005
RAMP_DOWN_DECREMENT: Final[float] = 0.0025
RAMP_DEFAULT_START: Final[float] = 0.8
LUMINOSITY_PRECISION: Final[int] = 4


class Scenario(StrEnum):
    """Named luminosity schedules."""

    LOW = "low"
    NOMINAL = "nominal"
    HIGH = "high"
    RAMP = "ramp"

    @classmethod
    def parse(cls, value: str | Scenario) -> Scenario:
        """Resolve a scenario name, accepting the long-form labels.

        Args:
            value: Scenario member, short name, or long-form label such as
                "ramp-up-ramp-down" or "our solar luminosity".

        Returns:
            The matching Scenario.

        Raises:
            ValueError: If the name is not recognized.
        """
        if isinstance(value, Scenario):
            return value
        key = str(value).strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError as exc:
            choices = sorted([*(m.value for m in cls), *_ALIASES])
            raise ValueError(
                _UNKNOWN_SCENARIO_ERROR.format(scenario=value, choices=choices)
            ) from exc


_ALIASES: Final[dict[str, Scenario]] = {
    "low solar luminosity": Scenario.LOW,
    "our solar luminosity": Scenario.NOMINAL,
    "high solar luminosity": Scenario.HIGH,
    "ramp-up-ramp-down": Scenario.RAMP,
}

CONSTANT_LUMINOSITY: Final[dict[Scenario, float]] = {
    Scenario.LOW: 0.6,
    Scenario.NOMINAL: 1.0,
    Scenario.HIGH: 1.4,
}


class ScenarioController:
    """Drives solar luminosity according to a named schedule."""

    def __init__(
        self,
        scenario: Scenario | str,
        initial_solar_luminosity: float = RAMP_DEFAULT_START,
    ) -> None:
        """
        Initialize ScenarioController.

        Args:
            scenario: Schedule to follow.
            initial_solar_luminosity: Starting value for the ramp schedule.
                Ignored by the constant schedules.

        Raises:
            ValueError: If the scenario is unknown or the ramp start is not
                positive.
        """
        self.scenario = Scenario.parse(scenario)
        if not initial_solar_luminosity > 0.0:
            raise ValueError(
                _LUMINOSITY_POSITIVE_ERROR.format(value=initial_solar_luminosity)
            )
        self.initial_solar_luminosity = float(initial_solar_luminosity)

    def initial_luminosity(self) -> float:
        """Return the luminosity in effect at setup."""
        if self.scenario is Scenario.RAMP:
            return self.initial_solar_luminosity
        return CONSTANT_LUMINOSITY[self.scenario]

    def advance(self, tick: int, current: float) -> float:
        """
        Return the luminosity to use for the tick after `tick`.

        Args:
            tick: Tick counter value after the increment of the tick just run.
            current: Luminosity used during that tick.

        Returns:
            The next luminosity value.
        """
        if self.scenario is not Scenario.RAMP:
            return CONSTANT_LUMINOSITY[self.scenario]

        up_start, up_stop = RAMP_UP_WINDOW
        down_start, down_stop = RAMP_DOWN_WINDOW
        if up_start < tick <= up_stop:
            return round(current + RAMP_UP_INCREMENT, LUMINOSITY_PRECISION)
        if down_start < tick <= down_stop:
            return round(current - RAMP_DOWN_DECREMENT, LUMINOSITY_PRECISION)
        return current
