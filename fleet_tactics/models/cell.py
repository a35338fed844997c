"""Cell states, coordinates and grid primitives."""

from dataclasses import dataclass
from enum import Enum


class CellState(str, Enum):
    """Visible state of a single grid cell.

    The same enum is used for a player's own grid (ground truth) and for
    the shot grids a player keeps about each opponent.
    """

    EMPTY = "EMPTY"
    SHIP = "SHIP"
    HIT = "HIT"
    MISS = "MISS"
    SUNK = "SUNK"
    DECOY = "DECOY"
    RADAR_CONTACT = "RADAR_CONTACT"
    ASTEROID = "ASTEROID"
    CAMO_HIT = "CAMO_HIT"
    ASTEROID_DESTROYED = "ASTEROID_DESTROYED"
    SHIELD_HIT = "SHIELD_HIT"


# Shot-grid states that may be fired at again
TACTICAL_RESHOOTABLE = frozenset(
    {CellState.EMPTY, CellState.RADAR_CONTACT, CellState.SHIELD_HIT}
)
CLASSIC_RESHOOTABLE = frozenset({CellState.EMPTY})


@dataclass(frozen=True)
class Coord:
    """A grid coordinate. x is the column, y is the row."""

    x: int
    y: int


@dataclass(frozen=True)
class GridDimensions:
    """Rows and columns of a board."""

    rows: int
    cols: int

    def __post_init__(self):
        """Validate dimensions after initialization."""
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Invalid grid dimensions: {self.rows}x{self.cols}")


Grid = list[list[CellState]]


def create_empty_grid(rows: int, cols: int) -> Grid:
    """Return a rows x cols grid with every cell EMPTY."""
    return [[CellState.EMPTY for _ in range(cols)] for _ in range(rows)]


def copy_grid(grid: Grid) -> Grid:
    """Copy a grid row by row (cells are immutable enum members)."""
    return [list(row) for row in grid]
