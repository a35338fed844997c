"""Tests for the Classic hunt/target opponent."""

from fleet_tactics.agent.classic_ai import get_classic_ai_move
from fleet_tactics.models.cell import CellState, Coord, GridDimensions, create_empty_grid
from fleet_tactics.utils.rng import GameRNG

DIMS = GridDimensions(rows=12, cols=12)


def test_hunts_on_the_checkerboard():
    rng = GameRNG(3)
    shots = create_empty_grid(12, 12)
    for _ in range(20):
        move = get_classic_ai_move(shots, DIMS, rng)
        assert (move.x + move.y) % 2 == 0


def test_targets_around_a_hit():
    shots = create_empty_grid(12, 12)
    shots[4][4] = CellState.HIT
    shots[3][4] = CellState.MISS

    move = get_classic_ai_move(shots, DIMS, GameRNG(1))

    assert move in {Coord(4, 5), Coord(3, 4), Coord(5, 4)}


def test_falls_back_to_any_open_cell():
    shots = [[CellState.MISS] * 12 for _ in range(12)]
    shots[0][1] = CellState.EMPTY

    assert get_classic_ai_move(shots, DIMS, GameRNG(1)) == Coord(1, 0)


def test_never_repeats_a_shot():
    rng = GameRNG(11)
    shots = create_empty_grid(12, 12)
    seen = set()
    for _ in range(144):
        move = get_classic_ai_move(shots, DIMS, rng)
        assert move not in seen
        seen.add(move)
        shots[move.y][move.x] = CellState.MISS
    assert len(seen) == 144
