"""Coordinate helpers shared by the engine and the AI."""

from ..models.cell import Coord, GridDimensions


def column_letter(col: int) -> str:
    """Return the column letter used in narrated coordinates (0 -> 'A')."""
    return chr(65 + col)


def cell_label(x: int, y: int) -> str:
    """Human-readable cell label, e.g. (0, 0) -> 'A1'."""
    return f"{column_letter(x)}{y + 1}"


def in_bounds(x: int, y: int, dims: GridDimensions) -> bool:
    """Check whether (x, y) lies on a grid of the given dimensions."""
    return 0 <= x < dims.cols and 0 <= y < dims.rows


def neighbors4(coord: Coord, dims: GridDimensions) -> list[Coord]:
    """Return the in-bounds orthogonal neighbours of a cell (N, S, W, E)."""
    candidates = [
        Coord(coord.x, coord.y - 1),
        Coord(coord.x, coord.y + 1),
        Coord(coord.x - 1, coord.y),
        Coord(coord.x + 1, coord.y),
    ]
    return [c for c in candidates if in_bounds(c.x, c.y, dims)]
