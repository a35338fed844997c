"""Classic-mode opponent: hunt/target on a checkerboard."""

from ..models.cell import CellState, Coord, Grid, GridDimensions
from ..utils.coords import neighbors4
from ..utils.rng import GameRNG


def get_classic_ai_move(shots: Grid, dims: GridDimensions, rng: GameRNG | None = None) -> Coord:
    """Pick the next Classic shot.

    Target mode fires next to known hits. Hunt mode samples the checkerboard,
    since every ship is at least two cells long. When the checkerboard is
    exhausted any open cell will do.

    Args:
        shots: Shooter's shot grid against the opponent
        dims: Board dimensions
        rng: Random source for picking among equal candidates

    Returns:
        Cell to fire at
    """
    rng = rng or GameRNG()
    hits: list[Coord] = []
    open_cells: list[Coord] = []
    hunt_cells: list[Coord] = []

    for y in range(dims.rows):
        for x in range(dims.cols):
            cell = shots[y][x]
            if cell == CellState.HIT:
                hits.append(Coord(x, y))
            elif cell == CellState.EMPTY:
                open_cells.append(Coord(x, y))
                if (x + y) % 2 == 0:
                    hunt_cells.append(Coord(x, y))

    targets: list[Coord] = []
    for hit in hits:
        for n in neighbors4(hit, dims):
            if shots[n.y][n.x] == CellState.EMPTY and n not in targets:
                targets.append(n)

    for candidates in (targets, hunt_cells, open_cells):
        if candidates:
            return rng.choice(candidates)
    return Coord(0, 0)
