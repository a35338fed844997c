"""Tests for the probability heatmap and the target pickers built on it."""

from fleet_tactics.agent.heatmap import (
    build_probability_map,
    find_best_camo_spot,
    find_best_decoy_spot,
    find_best_radar_targets,
    find_best_targets,
    find_jam_targets,
)
from fleet_tactics.models.cell import CellState, Coord, GridDimensions, create_empty_grid
from fleet_tactics.models.player import Player
from fleet_tactics.models.ship import Ship, ShipType

DIMS = GridDimensions(rows=12, cols=12)


def make_target(*lengths: int) -> Player:
    """Player with unplaced ships of the given lengths."""
    ships = [
        Ship(name=f"Ship{i}", ship_type=ShipType.SUPPORTSHIP, length=n)
        for i, n in enumerate(lengths)
    ]
    return Player(id="p1", name="Target", is_ai=False, grid=create_empty_grid(12, 12), ships=ships)


class TestBuildProbabilityMap:
    """Test heat accumulation."""

    def test_counts_every_run(self):
        heat = build_probability_map(make_target(2), create_empty_grid(12, 12), DIMS)

        assert heat[0][0] == 2  # One horizontal and one vertical run
        assert heat[5][5] == 4

    def test_misses_block_runs(self):
        shots = create_empty_grid(12, 12)
        shots[5][5] = CellState.MISS

        heat = build_probability_map(make_target(2), shots, DIMS)

        assert heat[5][5] == 0
        assert heat[5][6] == 3

    def test_sunk_ships_add_nothing(self):
        target = make_target(3)
        target.ships[0].is_sunk = True

        heat = build_probability_map(target, create_empty_grid(12, 12), DIMS)

        assert all(score == 0 for row in heat for score in row)

    def test_hits_boost_their_neighbours(self):
        shots = create_empty_grid(12, 12)
        shots[5][5] = CellState.HIT

        heat = build_probability_map(make_target(2), shots, DIMS)

        assert heat[5][4] == 20
        assert heat[4][5] == 20
        assert set(find_best_targets(heat, shots)) == {
            Coord(5, 4),
            Coord(5, 6),
            Coord(4, 5),
            Coord(6, 5),
        }

    def test_broken_shields_boost_the_area(self):
        shots = create_empty_grid(12, 12)
        shots[5][5] = CellState.SHIELD_HIT

        heat = build_probability_map(make_target(2), shots, DIMS)

        assert heat[5][5] == 12
        assert heat[5][6] == 12
        assert heat[7][7] == 4

    def test_identified_ships_weigh_more(self):
        target = make_target(2)
        target.ships[0].ship_type = ShipType.REPAIRSHIP
        target.ships[0].positions = [Coord(0, 0), Coord(1, 0)]
        shots = create_empty_grid(12, 12)
        shots[0][0] = CellState.HIT

        heat = build_probability_map(target, shots, DIMS)

        assert heat[11][11] == 2 * 1.5


class TestTargetPickers:
    """Test the cell pickers."""

    def test_best_targets_skip_resolved_cells(self):
        heat = [[1.0] * 12 for _ in range(12)]
        heat[0][0] = 9.0
        heat[3][3] = 5.0
        shots = create_empty_grid(12, 12)
        shots[0][0] = CellState.MISS

        assert find_best_targets(heat, shots) == [Coord(3, 3)]

    def test_radar_contacts_stay_targetable(self):
        heat = [[0.0] * 12 for _ in range(12)]
        heat[2][2] = 4.0
        shots = create_empty_grid(12, 12)
        shots[2][2] = CellState.RADAR_CONTACT

        assert find_best_targets(heat, shots) == [Coord(2, 2)]

    def test_radar_targets_are_spread_out(self):
        heat = build_probability_map(make_target(3, 2), create_empty_grid(12, 12), DIMS)

        targets = find_best_radar_targets(heat, create_empty_grid(12, 12), DIMS)

        assert len(targets) == 4
        for i, a in enumerate(targets):
            for b in targets[i + 1:]:
                assert max(abs(a.x - b.x), abs(a.y - b.y)) > 1

    def test_radar_targets_fill_up_on_a_crowded_board(self):
        heat = [[1.0] * 12 for _ in range(12)]
        shots = [[CellState.MISS] * 12 for _ in range(12)]
        for x in range(4):
            shots[0][x] = CellState.EMPTY

        targets = find_best_radar_targets(heat, shots, DIMS)

        assert sorted(targets, key=lambda c: c.x) == [Coord(x, 0) for x in range(4)]

    def test_jam_needs_hits(self):
        assert find_jam_targets(create_empty_grid(12, 12), DIMS) == []

    def test_jam_centres_on_the_hits(self):
        shots = create_empty_grid(12, 12)
        shots[2][2] = CellState.HIT
        shots[2][4] = CellState.HIT

        targets = find_jam_targets(shots, DIMS)

        assert targets == [Coord(3, 2), Coord(2, 2), Coord(4, 2), Coord(3, 1)]

    def test_jam_centre_rounds_halves_up(self):
        shots = create_empty_grid(12, 12)
        shots[2][4] = CellState.HIT
        shots[2][5] = CellState.HIT
        shots[3][4] = CellState.HIT
        shots[3][5] = CellState.HIT

        targets = find_jam_targets(shots, DIMS)

        assert targets[0] == Coord(5, 3)

    def test_jam_in_a_corner_stays_on_the_board(self):
        shots = create_empty_grid(12, 12)
        shots[0][0] = CellState.HIT

        targets = find_jam_targets(shots, DIMS)

        assert targets == [Coord(0, 0), Coord(1, 0), Coord(0, 1), Coord(1, 1)]


class TestDefensivePickers:
    """Test decoy and camouflage placement."""

    def test_decoy_goes_to_the_quietest_water(self):
        owner = make_target()
        threat = [[1.0] * 12 for _ in range(12)]
        for y, x in ((10, 10), (10, 11), (11, 10), (11, 11)):
            threat[y][x] = 0.0

        assert find_best_decoy_spot(threat, owner, DIMS) == Coord(10, 10)

    def test_decoy_avoids_ships(self):
        owner = make_target()
        owner.grid[10][10] = CellState.SHIP
        threat = [[1.0] * 12 for _ in range(12)]
        threat[10][10] = 0.0
        threat[11][11] = 0.0

        spot = find_best_decoy_spot(threat, owner, DIMS)

        assert spot != Coord(10, 10)
        assert owner.grid[spot.y][spot.x] == CellState.EMPTY

    def test_camo_covers_the_mothership(self):
        owner = make_target()
        mothership = Ship(
            name="Mothership",
            ship_type=ShipType.MOTHERSHIP,
            length=2,
            positions=[Coord(8, 8), Coord(9, 8)],
        )
        owner.ships = [mothership]
        owner.grid[8][8] = CellState.SHIP
        owner.grid[8][9] = CellState.SHIP

        assert find_best_camo_spot(owner, DIMS) == Coord(6, 5)
