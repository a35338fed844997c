"""Tests for turn advance and the turn transition screen."""

from fleet_tactics.engine.core import advance_turn
from fleet_tactics.engine.turns import continue_turn
from fleet_tactics.models.cell import Coord
from fleet_tactics.models.game import GamePhase, RadarScanResult
from fleet_tactics.models.player import TargetLock
from fleet_tactics.models.ship import ShipType


def test_advance_hands_the_turn_over(battle):
    state = advance_turn(battle)

    assert state.current_player_id == "p2"
    assert state.turn == battle.turn + 1
    assert state.phase == GamePhase.PLAYING
    assert battle.current_player_id == "p1"


def test_ap_reset_includes_banked_bonus(battle):
    battle.player("p2").action_points = 0
    battle.player("p2").bonus_ap = 1

    state = advance_turn(battle)

    assert state.player("p2").action_points == 3
    assert state.player("p2").bonus_ap == 0


def test_classic_allotment_is_one(classic_battle):
    state = advance_turn(classic_battle)
    assert state.player("p2").action_points == 1


def test_per_turn_fields_are_cleared(battle):
    battle.radar_scan_result = RadarScanResult(player_id="p1", results=())

    state = advance_turn(battle)

    assert state.radar_scan_result is None
    assert state.active_action is None


def test_only_the_mover_decays(battle):
    battle.player("p1").skill_cooldowns[ShipType.RADARSHIP] = 2
    battle.player("p2").skill_cooldowns[ShipType.RADARSHIP] = 2

    state = advance_turn(battle)

    assert state.player("p1").skill_cooldowns[ShipType.RADARSHIP] == 1
    assert state.player("p2").skill_cooldowns[ShipType.RADARSHIP] == 2


def test_target_lock_expires(battle):
    cells = (Coord(0, 0), Coord(1, 0), Coord(2, 0), Coord(3, 0))
    battle.player("p1").target_locks["p2"] = TargetLock(cells=cells, turns_remaining=1)

    state = advance_turn(battle)

    assert "p2" not in state.player("p1").target_locks


def test_advance_outside_play_is_ignored(battle):
    battle.phase = GamePhase.GAME_OVER
    assert advance_turn(battle) is battle


def test_no_transition_against_the_ai(battle):
    state = advance_turn(advance_turn(battle))
    assert state.phase == GamePhase.PLAYING
    assert state.current_player_id == "p1"


def test_transition_between_two_humans(battle):
    battle.player("p2").is_ai = False

    state = advance_turn(battle)
    assert state.phase == GamePhase.TURN_TRANSITION
    assert state.current_player_id == "p2"

    resumed = continue_turn(state)
    assert resumed.phase == GamePhase.PLAYING
    assert resumed.current_player_id == "p2"


def test_continue_outside_transition_is_a_no_op(battle):
    assert continue_turn(battle) is battle
