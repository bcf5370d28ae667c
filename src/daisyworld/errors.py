# daisyworld/src/daisyworld/errors.py
"""Error types for the daisyworld engine.

This module centralizes:
- explicit error classes with actionable messages, and
- small helpers that raise them with standardized wording.

Design intent:
- invalid configuration is rejected before a simulation starts
- numeric degeneracies (non-positive absorbed luminosity, negative seed
  thresholds, crowded neighbourhoods) are handled by policy, never by raising
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final, NoReturn

_NOT_INITIALIZED_MSG: Final[str] = (
    "Cannot call {operation}() before setup(); the simulation has no initial "
    "state. Call setup(config) first."
)


class ErrorCode(StrEnum):
    """Machine-readable classification for daisyworld failures."""

    INVALID_CONFIG = "invalid_config"
    NOT_INITIALIZED = "not_initialized"
    INVALID_CELL = "invalid_cell"


class DaisyworldError(Exception):
    """Base exception for daisyworld errors."""

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        """
        Initialize a DaisyworldError.

        Args:
            message: Human-readable error message.
            code: Optional machine-readable error code classifying the error.
        """
        super().__init__(message)
        self.code: ErrorCode | None = code


class ConfigurationError(DaisyworldError, ValueError):
    """Raised when a simulation configuration is invalid."""


class SimulationNotInitializedError(DaisyworldError, RuntimeError):
    """Raised when the simulation is used before setup()."""


class InvalidCellError(DaisyworldError, IndexError):
    """Raised when a cell is not a pair of integer coordinates."""


def raise_invalid_config(
    *,
    detail: str,
    fields: list[str] | None = None,
) -> NoReturn:
    """Raise a standardized ConfigurationError.

    Args:
        detail: Human-readable description of the problem.
        fields: Configuration fields involved, if known.

    Raises:
        ConfigurationError: Always.
    """
    parts: list[str] = ["Invalid daisyworld configuration."]
    if fields:
        parts.append(f"Field(s): {sorted(set(fields))}.")
    parts.append(f"Detail: {detail}")
    raise ConfigurationError(" ".join(parts), code=ErrorCode.INVALID_CONFIG)


def raise_not_initialized(operation: str) -> NoReturn:
    """Raise a standardized SimulationNotInitializedError.

    Args:
        operation: Name of the operation that was attempted.

    Raises:
        SimulationNotInitializedError: Always.
    """
    raise SimulationNotInitializedError(
        _NOT_INITIALIZED_MSG.format(operation=operation),
        code=ErrorCode.NOT_INITIALIZED,
    )
