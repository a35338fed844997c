"""Tests for game creation, fleet drafting and deployment."""

import pytest

from fleet_tactics.engine.board import Placement
from fleet_tactics.engine.errors import IllegalMoveError
from fleet_tactics.engine.setup import (
    acknowledge_ai_fleet,
    auto_place_fleet,
    create_game,
    join_game,
    submit_fleet,
    submit_placement,
    validate_fleet,
)
from fleet_tactics.engine.turns import continue_turn
from fleet_tactics.models.cell import CellState
from fleet_tactics.models.game import GameMode, GamePhase, MapType, OpponentType
from fleet_tactics.models.ship import ShipType
from fleet_tactics.utils.rng import GameRNG

SMALL_FLEET = [ShipType.MOTHERSHIP, ShipType.RADARSHIP]
SMALL_PLACEMENT = {
    "Mothership": Placement(0, 0, True),
    "Radarship": Placement(0, 2, True),
}
CLASSIC_PLACEMENT = {
    "Carrier": Placement(0, 0, True),
    "Battleship": Placement(0, 2, True),
    "Cruiser": Placement(0, 4, True),
    "Submarine": Placement(0, 6, True),
    "Destroyer": Placement(0, 8, True),
}


class TestCreateGame:
    """Test new games start in the right phase."""

    def test_tactical_starts_with_fleet_selection(self):
        state = create_game(GameMode.TACTICAL, player_name="Alice", rng=GameRNG(1))

        assert state.phase == GamePhase.FLEET_SELECTION
        assert [p.id for p in state.players] == ["p1", "p2"]
        assert state.current_player_id == "p1"
        assert state.players[1].is_ai
        assert state.rules is not None and state.opponent_logic is not None
        assert all(not p.ships for p in state.players)

    def test_classic_skips_drafting(self):
        state = create_game(GameMode.CLASSIC, rng=GameRNG(1))

        assert state.phase == GamePhase.SETUP
        assert [s.name for s in state.players[0].ships] == list(CLASSIC_PLACEMENT)

    def test_every_player_gets_a_shot_grid_per_opponent(self):
        state = create_game(GameMode.TACTICAL, rng=GameRNG(1))
        assert set(state.player("p1").shots) == {"p2"}
        assert set(state.player("p2").shots) == {"p1"}

    def test_asteroid_field_is_shared(self):
        state = create_game(GameMode.TACTICAL, MapType.ASTEROID_FIELD, rng=GameRNG(7))

        p1, p2 = state.players
        assert p1.grid == p2.grid
        assert sum(row.count(CellState.ASTEROID) for row in p1.grid) == 10

    def test_online_waits_in_lobby(self):
        state = create_game(GameMode.TACTICAL, opponent_type=OpponentType.ONLINE, rng=GameRNG(1))
        assert state.phase == GamePhase.LOBBY
        assert len(state.players) == 1

    def test_join_fills_the_lobby(self):
        state = create_game(
            GameMode.TACTICAL, MapType.ASTEROID_FIELD, OpponentType.ONLINE, rng=GameRNG(3)
        )

        joined, player_id = join_game(state, "Bob")

        assert player_id == "p2"
        assert joined.phase == GamePhase.FLEET_SELECTION
        assert joined.player("p2").grid == joined.player("p1").grid
        assert "p2" in joined.player("p1").shots
        assert len(state.players) == 1

        with pytest.raises(IllegalMoveError, match="full"):
            join_game(joined, "Carol")


class TestValidateFleet:
    """Test roster drafting rules."""

    @pytest.fixture
    def state(self):
        return create_game(GameMode.TACTICAL, rng=GameRNG(1))

    def test_valid_roster(self, state):
        ships = validate_fleet(state, SMALL_FLEET)
        assert [s.name for s in ships] == ["Mothership", "Radarship"]
        assert all(not s.positions for s in ships)

    def test_mothership_required(self, state):
        with pytest.raises(IllegalMoveError, match="exactly one Mothership"):
            validate_fleet(state, [ShipType.RADARSHIP])

    def test_no_duplicates(self, state):
        with pytest.raises(IllegalMoveError, match="only be drafted once"):
            validate_fleet(state, [ShipType.MOTHERSHIP, ShipType.RADARSHIP, ShipType.RADARSHIP])

    def test_classic_ships_not_in_tactical_pool(self, state):
        with pytest.raises(IllegalMoveError, match="not available"):
            validate_fleet(state, [ShipType.MOTHERSHIP, ShipType.CARRIER])

    def test_budget(self, state):
        roster = [
            ShipType.MOTHERSHIP,
            ShipType.CAMOSHIP,
            ShipType.COMMANDSHIP,
            ShipType.SCOUTSHIP,
            ShipType.SHIELDSHIP,
            ShipType.RADARSHIP,
            ShipType.REPAIRSHIP,
        ]
        with pytest.raises(IllegalMoveError, match="costs 33 points but the budget is 30"):
            validate_fleet(state, roster)


class TestAgainstAI:
    """Test the setup flow against the AI opponent."""

    def test_full_flow_to_playing(self):
        rng = GameRNG(5)
        state = create_game(GameMode.TACTICAL, player_name="Alice", rng=rng)

        state = submit_fleet(state, "p1", SMALL_FLEET, rng)
        assert state.phase == GamePhase.AI_FLEET_SELECTION
        ai_ships = state.player("p2").ships
        assert [s.ship_type for s in ai_ships].count(ShipType.MOTHERSHIP) == 1
        assert sum(s.point_cost for s in ai_ships) <= state.fleet_budget

        state = acknowledge_ai_fleet(state)
        assert state.phase == GamePhase.SETUP

        state = submit_placement(state, "p1", SMALL_PLACEMENT, rng)

        assert state.phase == GamePhase.PLAYING
        assert state.current_player_id == "p1"
        assert all(p.is_ready for p in state.players)
        assert all(s.positions for s in state.player("p2").ships)

    def test_classic_placement_goes_straight_to_playing(self):
        rng = GameRNG(5)
        state = create_game(GameMode.CLASSIC, rng=rng)

        state = submit_placement(state, "p1", CLASSIC_PLACEMENT, rng)

        assert state.phase == GamePhase.PLAYING
        assert len(state.player("p2").ships) == 5
        assert all(len(s.positions) == s.length for s in state.player("p2").ships)

    def test_acknowledge_outside_reveal_is_a_no_op(self):
        state = create_game(GameMode.TACTICAL, rng=GameRNG(1))
        assert acknowledge_ai_fleet(state) is state

    def test_auto_place_produces_a_valid_deployment(self):
        rng = GameRNG(9)
        state = create_game(GameMode.CLASSIC, rng=rng)

        placements = auto_place_fleet(state, "p1", rng)
        state = submit_placement(state, "p1", placements, rng)

        assert state.phase == GamePhase.PLAYING


class TestHotSeat:
    """Test control passes between two humans through TURN_TRANSITION."""

    def test_tactical_flow(self):
        rng = GameRNG(2)
        state = create_game(GameMode.TACTICAL, opponent_type=OpponentType.HUMAN, rng=rng)

        state = submit_fleet(state, "p1", SMALL_FLEET, rng)
        assert state.phase == GamePhase.TURN_TRANSITION
        assert state.current_player_id == "p2"

        state = continue_turn(state)
        assert state.phase == GamePhase.FLEET_SELECTION

        state = submit_fleet(state, "p2", SMALL_FLEET, rng)
        assert state.current_player_id == "p1"
        state = continue_turn(state)
        assert state.phase == GamePhase.SETUP

        state = continue_turn(submit_placement(state, "p1", SMALL_PLACEMENT, rng))
        assert state.phase == GamePhase.SETUP
        assert state.current_player_id == "p2"

        state = continue_turn(submit_placement(state, "p2", SMALL_PLACEMENT, rng))
        assert state.phase == GamePhase.PLAYING
        assert state.current_player_id == "p1"


class TestPlacementErrors:
    """Test rejected deployments."""

    @pytest.fixture
    def state(self):
        rng = GameRNG(4)
        state = create_game(GameMode.TACTICAL, rng=rng)
        return acknowledge_ai_fleet(submit_fleet(state, "p1", SMALL_FLEET, rng))

    def test_every_ship_needs_a_placement(self, state):
        with pytest.raises(IllegalMoveError, match="Place every ship"):
            submit_placement(state, "p1", {"Mothership": Placement(0, 0, True)})

    def test_overlap(self, state):
        placements = {"Mothership": Placement(0, 0, True), "Radarship": Placement(1, 0, True)}
        with pytest.raises(IllegalMoveError, match="Cannot place Radarship there."):
            submit_placement(state, "p1", placements)

    def test_off_grid(self, state):
        placements = {"Mothership": Placement(0, 0, True), "Radarship": Placement(10, 5, True)}
        with pytest.raises(IllegalMoveError, match="Cannot place Radarship there."):
            submit_placement(state, "p1", placements)

    def test_wrong_player(self, state):
        with pytest.raises(IllegalMoveError, match="not your turn"):
            submit_placement(state, "p2", SMALL_PLACEMENT)

    def test_wrong_phase(self):
        state = create_game(GameMode.TACTICAL, rng=GameRNG(1))
        with pytest.raises(IllegalMoveError, match="Expected phase SETUP"):
            submit_placement(state, "p1", SMALL_PLACEMENT)
