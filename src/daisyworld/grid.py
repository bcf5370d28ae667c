# daisyworld/src/daisyworld/grid.py
"""
Toroidal patch grid, daisy occupancy, and temperature diffusion.

The grid stores its state as a small set of 2D arrays (struct-of-arrays)
rather than one object per patch:

- ``temperature``: float patch temperatures.
- ``color``: int8 occupant color code (0 = empty, see DaisyColor).
- ``age``: integer occupant age (meaningful only where occupied).
- ``albedo``: occupant albedo fixed at creation (NaN where empty).

Every public accessor takes a ``(row, col)`` cell and wraps it toroidally, so
``(-1, 0)`` and ``(n_rows - 1, 0)`` address the same patch.

Diffusion notes:
    * The neighbour mean is a sparse linear operator built once per grid shape
      from Kronecker products of 1D circulant stencils.
    * ``diffuse`` always reads a full snapshot of its input; the update is never
      applied in place, so no patch sees an already-diffused neighbour.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Final, TypeAlias, cast

import numpy as np
from numpy.typing import NDArray
from scipy.sparse import coo_matrix, csr_matrix, identity, kron

from .errors import ErrorCode, InvalidCellError

if TYPE_CHECKING:
    from collections.abc import Iterator


# =============================================================================
# Public types
# =============================================================================

Cell: TypeAlias = tuple[int, int]
FloatArray: TypeAlias = NDArray[np.floating]

EMPTY: Final[int] = 0
N_NEIGHBORS: Final[int] = 8
DEFAULT_DIFFUSION_RATE: Final[float] = 0.5

# Moore neighbourhood offsets in a fixed order (row-major, self excluded).
_MOORE_OFFSETS: Final[tuple[Cell, ...]] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

_GRID_SIZE_ERROR = "Grid dimensions must be >= 1; got ({n_rows}, {n_cols})"
_CELL_ERROR = "cell must be a (row, col) pair of integers; got {cell!r}"
_FIELD_SHAPE_ERROR = "field shape {actual} does not match grid shape {expected}"
_DIFFUSION_RATE_ERROR = "rate must be in [0, 1]; got {rate}"
_OPERATOR_SIZE_ERROR = "operator shape {shape} is incompatible with field size {size}"


class DaisyColor(IntEnum):
    """Daisy color classes; the integer value is the grid color code."""

    BLACK = 1
    WHITE = 2


@dataclass(frozen=True, slots=True)
class Daisy:
    """Read-only view of the daisy occupying a patch.

    Attributes:
        color: Color class.
        age: Age in ticks.
        albedo: Albedo fixed when the daisy was created.
    """

    color: DaisyColor
    age: int
    albedo: float


# =============================================================================
# Diffusion operator
# =============================================================================


def _cyclic_stencil(n: int) -> csr_matrix:
    """Return I + S + S^T for the cyclic shift S on n points.

    Duplicate entries are summed, so on n < 3 a point that is both the left
    and right neighbour is counted twice (and n == 1 counts itself three
    times), matching a wrap-around Moore neighbourhood with 8 slots.
    """
    idx = np.arange(n)
    rows = np.concatenate([idx, idx, idx])
    cols = np.concatenate([idx, (idx + 1) % n, (idx - 1) % n])
    data = np.ones(rows.size, dtype=np.float64)
    return coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()


def build_moore_mean_operator(n_rows: int, n_cols: int) -> csr_matrix:
    """Build the toroidal Moore-neighbour mean operator.

    For a field flattened in row-major order, ``op @ field.ravel()`` is the
    mean of each patch's 8 wrap-around neighbours.

    Args:
        n_rows: Number of grid rows.
        n_cols: Number of grid columns.

    Raises:
        ValueError: If either dimension is < 1.

    Returns:
        Sparse CSR matrix of shape (n_rows * n_cols, n_rows * n_cols).
    """
    if n_rows < 1 or n_cols < 1:
        raise ValueError(_GRID_SIZE_ERROR.format(n_rows=n_rows, n_cols=n_cols))

    block = kron(_cyclic_stencil(n_rows), _cyclic_stencil(n_cols), format="csr")
    neighbour_sum = block - identity(n_rows * n_cols, format="csr")
    return csr_matrix(neighbour_sum / float(N_NEIGHBORS))


def diffuse(
    field: FloatArray,
    rate: float = DEFAULT_DIFFUSION_RATE,
    mean_operator: csr_matrix | None = None,
) -> FloatArray:
    """Blend every patch toward its neighbour mean.

    Each patch keeps ``1 - rate`` of its value and takes ``rate`` times the
    mean of its 8 toroidal neighbours. Every output value is computed from the
    same input snapshot.

    Args:
        field: 2D array of patch values.
        rate: Diffusion rate in [0, 1].
        mean_operator: Optional prebuilt operator from
            build_moore_mean_operator for this shape.

    Raises:
        ValueError: If rate is out of range, or the operator does not match.

    Returns:
        New 2D array with the diffused values.
    """
    if not 0.0 <= rate <= 1.0:
        raise ValueError(_DIFFUSION_RATE_ERROR.format(rate=rate))

    snapshot = np.array(field, dtype=np.float64, copy=True)
    if snapshot.ndim != 2:  # noqa: PLR2004
        raise ValueError(
            _FIELD_SHAPE_ERROR.format(actual=snapshot.shape, expected="(rows, cols)")
        )

    op = mean_operator
    if op is None:
        op = build_moore_mean_operator(*snapshot.shape)
    if op.shape != (snapshot.size, snapshot.size):
        raise ValueError(
            _OPERATOR_SIZE_ERROR.format(shape=op.shape, size=snapshot.size)
        )

    neighbour_mean = np.asarray(op @ snapshot.ravel()).reshape(snapshot.shape)
    return cast("FloatArray", (1.0 - rate) * snapshot + rate * neighbour_mean)


# =============================================================================
# Grid
# =============================================================================


class Grid:
    """Fixed-size toroidal grid of patches with at most one daisy each."""

    def __init__(self, n_rows: int, n_cols: int) -> None:
        """
        Initialize an empty grid with all temperatures at 0.

        Args:
            n_rows: Number of rows (>= 1).
            n_cols: Number of columns (>= 1).

        Raises:
            ValueError: If either dimension is < 1.
        """
        if n_rows < 1 or n_cols < 1:
            raise ValueError(_GRID_SIZE_ERROR.format(n_rows=n_rows, n_cols=n_cols))

        self.n_rows = int(n_rows)
        self.n_cols = int(n_cols)
        self.shape: tuple[int, int] = (self.n_rows, self.n_cols)

        self.temperature = np.zeros(self.shape, dtype=np.float64)
        self.color = np.full(self.shape, EMPTY, dtype=np.int8)
        self.age = np.zeros(self.shape, dtype=np.int64)
        self.albedo = np.full(self.shape, np.nan, dtype=np.float64)

        self._mean_operator: csr_matrix | None = None

    @property
    def size(self) -> int:
        """Number of patches."""
        return self.n_rows * self.n_cols

    @property
    def mean_operator(self) -> csr_matrix:
        """Neighbour-mean operator for this grid shape (built on first use)."""
        if self._mean_operator is None:
            self._mean_operator = build_moore_mean_operator(self.n_rows, self.n_cols)
        return self._mean_operator

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------

    def normalize(self, cell: Cell) -> Cell:
        """
        Wrap a cell onto the torus.

        Args:
            cell: (row, col) pair; any integers are accepted.

        Raises:
            InvalidCellError: If cell is not a pair of integers.

        Returns:
            Equivalent cell with 0 <= row < n_rows and 0 <= col < n_cols.
        """
        try:
            row, col = cell
            row_i = operator.index(row)
            col_i = operator.index(col)
        except (TypeError, ValueError) as exc:
            raise InvalidCellError(
                _CELL_ERROR.format(cell=cell), code=ErrorCode.INVALID_CELL
            ) from exc
        return (row_i % self.n_rows, col_i % self.n_cols)

    def neighbors(self, cell: Cell) -> list[Cell]:
        """Return the 8 Moore neighbours of a cell, wrapping at the edges."""
        row, col = self.normalize(cell)
        return [
            ((row + dr) % self.n_rows, (col + dc) % self.n_cols)
            for dr, dc in _MOORE_OFFSETS
        ]

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for row in range(self.n_rows):
            for col in range(self.n_cols):
                yield (row, col)

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    def is_occupied(self, cell: Cell) -> bool:
        """Return True if a daisy occupies the cell."""
        return bool(self.color[self.normalize(cell)] != EMPTY)

    def occupied_mask(self) -> NDArray[np.bool_]:
        """Return a boolean array marking occupied patches."""
        return self.color != EMPTY

    def empty_cells(self) -> list[Cell]:
        """Return every unoccupied cell in row-major order."""
        rows, cols = np.nonzero(self.color == EMPTY)
        return [(int(r), int(c)) for r, c in zip(rows, cols, strict=True)]

    def daisy_at(self, cell: Cell) -> Daisy | None:
        """Return a view of the daisy at a cell, or None if it is empty."""
        idx = self.normalize(cell)
        code = int(self.color[idx])
        if code == EMPTY:
            return None
        return Daisy(
            color=DaisyColor(code),
            age=int(self.age[idx]),
            albedo=float(self.albedo[idx]),
        )

    def place(
        self,
        cell: Cell,
        color: DaisyColor,
        albedo: float,
        age: int = 0,
    ) -> bool:
        """
        Put a daisy on an empty cell.

        Args:
            cell: Target cell.
            color: Daisy color.
            albedo: Daisy albedo; fixed for the daisy's lifetime.
            age: Initial age.

        Returns:
            True if the daisy was placed, False if the cell was occupied.
        """
        idx = self.normalize(cell)
        if self.color[idx] != EMPTY:
            return False
        self.color[idx] = DaisyColor(color).value
        self.age[idx] = int(age)
        self.albedo[idx] = float(albedo)
        return True

    def remove(self, cell: Cell) -> bool:
        """
        Remove the daisy at a cell.

        Returns:
            True if a daisy was removed, False if the cell was empty.
        """
        idx = self.normalize(cell)
        if self.color[idx] == EMPTY:
            return False
        self.clear(np.array([idx[0]]), np.array([idx[1]]))
        return True

    def clear(self, rows: NDArray[np.integer], cols: NDArray[np.integer]) -> None:
        """Vacate the patches at the given index arrays."""
        self.color[rows, cols] = EMPTY
        self.age[rows, cols] = 0
        self.albedo[rows, cols] = np.nan

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def count(self, color: DaisyColor) -> int:
        """Return the number of daisies of a color."""
        return int(np.count_nonzero(self.color == DaisyColor(color).value))

    def mean_temperature(self) -> float:
        """Return the mean temperature over all patches."""
        return float(self.temperature.mean())
