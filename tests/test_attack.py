"""Tests for shot resolution in both rule sets."""

from fleet_tactics.engine.core import advance_turn, process_shot
from fleet_tactics.models.cell import CellState, Coord
from fleet_tactics.models.game import GameMode, GamePhase, LogResult
from fleet_tactics.models.player import CamoArea, TargetLock
from fleet_tactics.models.ship import ShipType


def shots_of(state, attacker="p1", target="p2"):
    return state.player(attacker).shots[target]


class TestClassicShots:
    """Test Classic hit / miss / sink."""

    def test_hit(self, classic_battle):
        state = process_shot(classic_battle, "p2", 0, 0)

        assert shots_of(state)[0][0] == CellState.HIT
        assert state.player("p2").grid[0][0] == CellState.HIT
        assert state.player("p2").ship_named("Carrier").is_damaged
        assert state.player("p1").action_points == 0
        assert state.log[0].result == LogResult.HIT
        assert state.log[0].hit_ship_name == "Carrier"
        assert state.last_shot.coords == Coord(0, 0)
        # Input snapshot untouched
        assert classic_battle.player("p2").grid[0][0] == CellState.SHIP

    def test_miss(self, classic_battle):
        state = process_shot(classic_battle, "p2", 11, 11)

        assert shots_of(state)[11][11] == CellState.MISS
        assert state.player("p2").grid[11][11] == CellState.MISS
        assert state.log[0].result == LogResult.MISS

    def test_one_shot_per_turn(self, classic_battle):
        state = process_shot(classic_battle, "p2", 11, 11)
        assert process_shot(state, "p2", 10, 10) is state

    def test_resolved_cell_cannot_be_fired_again(self, classic_battle):
        state = process_shot(classic_battle, "p2", 11, 11)
        state = advance_turn(advance_turn(state))

        assert state.current_player_id == "p1"
        assert process_shot(state, "p2", 11, 11) is state

    def test_last_ship_sunk_ends_game(self, make_battle):
        state = make_battle(
            {ShipType.DESTROYER: (0, 0, True)},
            {ShipType.DESTROYER: (5, 5, True)},
            GameMode.CLASSIC,
        )
        state = process_shot(state, "p2", 5, 5)
        state = advance_turn(advance_turn(state))
        state = process_shot(state, "p2", 6, 5)

        assert state.log[0].result == LogResult.SUNK_SHIP
        assert state.log[0].sunk_ship_name == "Destroyer"
        assert shots_of(state)[5][5] == CellState.SUNK
        assert shots_of(state)[5][6] == CellState.SUNK
        assert state.phase == GamePhase.GAME_OVER
        assert state.winner == "p1"
        assert state.player("p2").is_eliminated


class TestGuards:
    """Test rejected shots leave the snapshot untouched."""

    def test_double_fire_is_a_no_op(self, battle):
        state = process_shot(battle, "p2", 11, 11)
        again = process_shot(state, "p2", 11, 11)

        assert again is state
        assert again.player("p1").action_points == 1

    def test_out_of_bounds(self, battle):
        assert process_shot(battle, "p2", 12, 0) is battle
        assert process_shot(battle, "p2", 0, -1) is battle

    def test_outside_play(self, battle):
        state = battle.with_changes(phase=GamePhase.SETUP)
        assert process_shot(state, "p2", 11, 11) is state

    def test_cannot_target_self(self, battle):
        assert process_shot(battle, "p1", 11, 11) is battle


class TestTacticalShots:
    """Test Tactical precedence: shield, asteroid, camouflage, decoy, ship."""

    def test_miss_spends_one_action_point(self, battle):
        state = process_shot(battle, "p2", 11, 11)

        assert shots_of(state)[11][11] == CellState.MISS
        assert state.player("p2").grid[11][11] == CellState.MISS
        assert state.player("p1").action_points == 1

    def test_shield_absorbs_the_shot(self, battle):
        battle.player("p2").shielded_positions = [Coord(0, 0)]

        state = process_shot(battle, "p2", 0, 0)

        assert shots_of(state)[0][0] == CellState.SHIELD_HIT
        assert state.player("p2").shielded_positions == []
        assert state.player("p2").grid[0][0] == CellState.SHIP
        assert not state.player("p2").ship_named("Mothership").is_damaged
        assert state.log[0].result == LogResult.SHIELD_BROKEN
        assert "absorbed by an energy shield" in state.log[0].message

    def test_broken_shield_cell_can_be_fired_again(self, battle):
        battle.player("p2").shielded_positions = [Coord(0, 0)]

        state = process_shot(battle, "p2", 0, 0)
        state = process_shot(state, "p2", 0, 0)

        assert shots_of(state)[0][0] == CellState.HIT
        assert state.player("p2").ship_named("Mothership").is_damaged

    def test_bluff_shield(self, battle):
        battle.player("p2").shielded_positions = [Coord(11, 11)]

        state = process_shot(battle, "p2", 11, 11)

        assert shots_of(state)[11][11] == CellState.SHIELD_HIT
        assert state.log[0].message == "Alice's shot at L12 broke a bluff shield!"

    def test_asteroid_is_destroyed(self, battle):
        battle.player("p2").grid[5][5] = CellState.ASTEROID

        state = process_shot(battle, "p2", 5, 5)

        assert shots_of(state)[5][5] == CellState.ASTEROID_DESTROYED
        assert state.player("p2").grid[5][5] == CellState.EMPTY
        assert state.log[0].result == LogResult.ASTEROID_DESTROYED
        assert process_shot(state, "p2", 5, 5) is state

    def test_decoy_reads_as_hit(self, battle):
        battle.player("p2").decoy_positions = [Coord(11, 11)]

        state = process_shot(battle, "p2", 11, 11)

        assert shots_of(state)[11][11] == CellState.HIT
        assert state.log[0].result == LogResult.HIT
        assert state.log[0].hit_ship_name == "decoy"
        assert state.player("p2").decoy_positions == []
        assert state.player("p2").grid[11][11] == CellState.EMPTY

    def test_camouflage_hides_the_result(self, battle):
        battle.player("p2").camo_area = CamoArea(x=0, y=0)

        state = process_shot(battle, "p2", 0, 2)

        assert shots_of(state)[2][0] == CellState.CAMO_HIT
        assert state.player("p2").grid[2][0] == CellState.HIT
        assert state.player("p2").ship_named("Repairship").is_damaged
        assert [e.result for e in state.log] == [LogResult.CAMO_HIT]

    def test_camouflaged_water_also_reads_camo_hit(self, battle):
        battle.player("p2").camo_area = CamoArea(x=0, y=0)

        state = process_shot(battle, "p2", 3, 1)

        assert shots_of(state)[1][3] == CellState.CAMO_HIT

    def test_target_lock_sees_through_camouflage(self, battle):
        battle.player("p2").camo_area = CamoArea(x=0, y=0)
        battle.player("p1").target_locks["p2"] = TargetLock(cells=(Coord(0, 2),), turns_remaining=3)

        state = process_shot(battle, "p2", 0, 2)

        assert shots_of(state)[2][0] == CellState.HIT
        assert state.log[0].result == LogResult.HIT

    def test_supportship_banks_an_action_point(self, battle):
        state = process_shot(battle, "p2", 6, 6)

        assert state.player("p2").bonus_ap == 1
        assert any(
            e.result == LogResult.SKILL_USED and "+1 AP" in e.message for e in state.log
        )

    def test_sinking_grants_a_bonus(self, battle):
        state = process_shot(battle, "p2", 6, 0)
        state = process_shot(state, "p2", 7, 0)
        state.player("p1").action_points = 1
        state = process_shot(state, "p2", 8, 0)

        scout = state.player("p2").ship_named("Scoutship")
        assert scout.is_sunk
        assert all(shots_of(state)[p.y][p.x] == CellState.SUNK for p in scout.positions)
        assert state.player("p1").bonus_ap == 1
        assert state.log[0].result == LogResult.SUNK_SHIP
        assert state.phase == GamePhase.PLAYING


class TestMothership:
    """Test the Mothership rules: a hit ends the turn, sinking it ends the game."""

    def test_hit_ends_turn_and_unlocks_escape(self, make_battle):
        state = make_battle(
            {ShipType.MOTHERSHIP: (0, 0, True), ShipType.SCOUTSHIP: (5, 5, True)},
            {ShipType.MOTHERSHIP: (0, 0, True)},
        )

        state = process_shot(state, "p2", 0, 0)

        assert state.log[0].result == LogResult.HIT
        assert state.player("p2").escape_skill_unlocked
        assert state.player("p1").action_points == 0
        assert state.player("p1").bonus_ap == 1
        assert process_shot(state, "p2", 1, 0) is state

    def test_sinking_the_mothership_wins(self, make_battle):
        state = make_battle(
            {ShipType.MOTHERSHIP: (0, 0, True), ShipType.SCOUTSHIP: (5, 5, True)},
            {ShipType.MOTHERSHIP: (0, 0, True)},
        )
        state = process_shot(state, "p2", 0, 0)
        state = advance_turn(advance_turn(state))

        # Base allotment plus the point banked by the Mothership hit
        assert state.player("p1").action_points == 3

        state = process_shot(state, "p2", 1, 0)

        assert state.log[0].result == LogResult.SUNK_SHIP
        assert state.phase == GamePhase.GAME_OVER
        assert state.winner == "p1"
        assert state.player("p2").is_eliminated

    def test_concealed_mothership_sink_still_wins(self, battle):
        battle.player("p2").camo_area = CamoArea(x=0, y=0)

        state = process_shot(battle, "p2", 0, 0)
        state.player("p1").action_points = 1
        state = process_shot(state, "p2", 1, 0)

        assert state.phase == GamePhase.GAME_OVER
        assert state.winner == "p1"
        assert shots_of(state)[0][1] == CellState.CAMO_HIT
        assert all(e.result == LogResult.CAMO_HIT for e in state.log)
