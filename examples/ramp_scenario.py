# daisyworld/examples/ramp_scenario.py
"""Ramp-up/ramp-down luminosity run demonstrating temperature self-regulation.

Luminosity holds at 0.8 for 200 ticks, climbs to 1.8 by tick 400, holds, then
falls to 1.175 by tick 850. While daisies cover the planet the global
temperature stays far flatter than the bare-planet equilibrium would.

This script saves plots to disk (no interactive windows).
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from daisyworld import SimulationClock, SimulationConfig, equilibrium_temperature

_OUTPUT_DIR = Path(__file__).resolve().parent / "output" / "ramp"
_N_TICKS = 1000


def _series(clock: SimulationClock) -> dict[str, np.ndarray]:
    """Collect history fields into arrays.

    Args:
        clock: Clock that ran with store_history=True.

    Returns:
        Arrays keyed by field name, one entry per stored tick.
    """
    history = clock.history
    return {
        "tick": np.array([s.tick for s in history]),
        "luminosity": np.array([s.solar_luminosity for s in history]),
        "temperature": np.array([s.mean_temperature for s in history]),
        "blacks": np.array([s.black_count for s in history]),
        "whites": np.array([s.white_count for s in history]),
    }


def save_ramp_plot(
    data: dict[str, np.ndarray],
    *,
    albedo_of_bare_surface: float,
    out_path: Path,
) -> None:
    """Save luminosity, temperature and population panels to an image file.

    Args:
        data: Output of _series.
        albedo_of_bare_surface: Used to draw the bare-planet reference curve.
        out_path: Output path for the saved figure.
    """
    tick = data["tick"]
    bare = [
        equilibrium_temperature(albedo_of_bare_surface, lum)
        for lum in data["luminosity"]
    ]

    fig, axes = plt.subplots(3, 1, figsize=(9, 9), sharex=True)

    axes[0].plot(tick, data["luminosity"], color="tab:orange")
    axes[0].set_ylabel("Solar luminosity")

    axes[1].plot(tick, data["temperature"], label="global mean")
    axes[1].plot(tick, bare, linestyle="--", label="bare planet equilibrium")
    axes[1].set_ylabel("Temperature")
    axes[1].legend()

    axes[2].plot(tick, data["blacks"], color="black", label="black")
    axes[2].plot(tick, data["whites"], color="tab:gray", label="white")
    axes[2].set_ylabel("Daisies")
    axes[2].set_xlabel("Tick")
    axes[2].legend()

    for ax in axes:
        ax.grid(visible=True)

    fig.suptitle("Daisyworld, ramp-up-ramp-down scenario")
    fig.tight_layout()

    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def main() -> None:
    """Run the ramp scenario and save its plot to examples/output/ramp/."""
    config = SimulationConfig(scenario="ramp", store_history=True, seed=2006)
    clock = SimulationClock(config)
    clock.run(_N_TICKS)

    data = _series(clock)
    save_ramp_plot(
        data,
        albedo_of_bare_surface=config.albedo_of_bare_surface,
        out_path=_OUTPUT_DIR / "ramp_scenario.png",
    )

    final = clock.get_global_stats()
    print(  # noqa: T201
        f"tick={final.tick} luminosity={final.solar_luminosity:.4f} "
        f"T={final.mean_temperature:.2f} blacks={final.black_count} "
        f"whites={final.white_count}"
    )


if __name__ == "__main__":
    main()
