"""Unit tests for daisyworld.scenario."""

from __future__ import annotations

import pytest

from daisyworld.scenario import Scenario, ScenarioController


def _luminosity_after(controller: ScenarioController, ticks: int) -> float:
    """Apply advance() for ticks 1..ticks, as the clock does."""
    value = controller.initial_luminosity()
    for tick in range(1, ticks + 1):
        value = controller.advance(tick, value)
    return value


# -------------------------------------------------------------------
# Names
# -------------------------------------------------------------------


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("low", Scenario.LOW),
        ("NOMINAL", Scenario.NOMINAL),
        (" high ", Scenario.HIGH),
        ("ramp", Scenario.RAMP),
        ("ramp-up-ramp-down", Scenario.RAMP),
        ("low solar luminosity", Scenario.LOW),
        ("our solar luminosity", Scenario.NOMINAL),
        ("high solar luminosity", Scenario.HIGH),
        (Scenario.HIGH, Scenario.HIGH),
    ],
)
def test_scenario_parse(name: str, expected: Scenario) -> None:
    """Short names and long-form labels resolve to the same schedule."""
    assert Scenario.parse(name) is expected


def test_scenario_parse_unknown_raises() -> None:
    """Unknown names are rejected with the list of choices."""
    with pytest.raises(ValueError, match="Unknown scenario"):
        Scenario.parse("blinding")


def test_controller_rejects_non_positive_start() -> None:
    """The ramp start must be positive."""
    with pytest.raises(ValueError, match="must be > 0"):
        ScenarioController("ramp", initial_solar_luminosity=0.0)


# -------------------------------------------------------------------
# Constant schedules
# -------------------------------------------------------------------


@pytest.mark.parametrize(
    ("scenario", "value"),
    [("low", 0.6), ("nominal", 1.0), ("high", 1.4)],
)
def test_constant_schedules_hold_value(scenario: str, value: float) -> None:
    """Constant schedules reset to their value every tick."""
    controller = ScenarioController(scenario, initial_solar_luminosity=3.0)
    assert controller.initial_luminosity() == value
    assert controller.advance(1, 123.0) == value
    assert _luminosity_after(controller, 900) == value


# -------------------------------------------------------------------
# Ramp schedule
# -------------------------------------------------------------------


def test_ramp_starts_at_configured_value() -> None:
    """The ramp starts at initial_solar_luminosity."""
    assert ScenarioController("ramp").initial_luminosity() == 0.8
    assert ScenarioController("ramp", 1.1).initial_luminosity() == 1.1


def test_ramp_holds_until_tick_200() -> None:
    """No change through tick 200."""
    assert _luminosity_after(ScenarioController("ramp"), 200) == 0.8


def test_ramp_first_increment_at_tick_201() -> None:
    """Tick 201 applies the first +0.005."""
    assert _luminosity_after(ScenarioController("ramp"), 201) == 0.805


def test_ramp_up_ends_at_tick_400() -> None:
    """200 increments reach 1.8; tick 401 adds nothing."""
    controller = ScenarioController("ramp")
    assert _luminosity_after(controller, 400) == 1.8
    assert _luminosity_after(controller, 401) == 1.8
    assert _luminosity_after(controller, 600) == 1.8


def test_ramp_down_begins_at_tick_601() -> None:
    """Tick 601 applies the first -0.0025."""
    assert _luminosity_after(ScenarioController("ramp"), 601) == 1.7975


def test_ramp_down_ends_at_tick_850() -> None:
    """250 decrements reach 1.175 and the value then holds."""
    controller = ScenarioController("ramp")
    assert _luminosity_after(controller, 850) == 1.175
    assert _luminosity_after(controller, 1000) == 1.175


def test_ramp_values_are_rounded_to_four_decimals() -> None:
    """Every ramp step is rounded, so no float drift accumulates."""
    controller = ScenarioController("ramp")
    value = controller.initial_luminosity()
    for tick in range(1, 1001):
        value = controller.advance(tick, value)
        assert value == round(value, 4)
        assert value > 0.0
