"""daisyworld albedo/temperature feedback simulation package."""

from __future__ import annotations

from .config import SimulationConfig
from .errors import (
    ConfigurationError,
    DaisyworldError,
    ErrorCode,
    InvalidCellError,
    SimulationNotInitializedError,
)
from .grid import (
    Cell,
    Daisy,
    DaisyColor,
    Grid,
    build_moore_mean_operator,
    diffuse,
)
from .reproduction import (
    ReproductionEngine,
    ReproductionReport,
    reproduction_probability,
    seed_threshold,
)
from .scenario import Scenario, ScenarioController
from .simulation import GlobalStats, SimulationClock
from .temperature import TemperatureEngine, equilibrium_temperature, local_heating

__all__ = [
    "Cell",
    "ConfigurationError",
    "Daisy",
    "DaisyColor",
    "DaisyworldError",
    "ErrorCode",
    "GlobalStats",
    "Grid",
    "InvalidCellError",
    "ReproductionEngine",
    "ReproductionReport",
    "Scenario",
    "ScenarioController",
    "SimulationClock",
    "SimulationConfig",
    "SimulationNotInitializedError",
    "TemperatureEngine",
    "build_moore_mean_operator",
    "diffuse",
    "equilibrium_temperature",
    "local_heating",
    "reproduction_probability",
    "seed_threshold",
]

__version__ = "0.1.0"
