"""Tests for the AI-vs-AI command-line match runner."""

import pytest

from fleet_tactics.engine.setup import create_game
from fleet_tactics.models.cell import Coord
from fleet_tactics.models.game import GameMode, GamePhase, LogEntry, LogResult, OpponentType
from fleet_tactics.utils.rng import GameRNG
from game import GameOrchestrator, describe


def ai_match(mode: GameMode, seed: int) -> GameOrchestrator:
    rng = GameRNG(seed)
    state = create_game(
        mode=mode,
        opponent_type=OpponentType.AI,
        player_name="Blue",
        opponent_name="Red",
        rng=rng,
        player_is_ai=True,
    )
    return GameOrchestrator(state, rng, max_turns=400)


def test_classic_match_has_a_winner():
    final = ai_match(GameMode.CLASSIC, seed=1).run()

    assert final.phase == GamePhase.GAME_OVER
    assert final.winner in {"p1", "p2"}
    loser = final.opponent_of(final.winner)
    assert all(s.is_sunk for s in loser.ships)


def test_tactical_match_finishes_or_hits_the_limit():
    orchestrator = ai_match(GameMode.TACTICAL, seed=2)
    orchestrator.max_turns = 60

    final = orchestrator.run()

    assert final.phase in {GamePhase.GAME_OVER, GamePhase.PLAYING}
    assert final.turn <= 61
    assert all(p.ships and all(s.positions for s in p.ships) for p in final.players)
    assert final.log


def test_human_seat_is_refused():
    state = create_game(GameMode.CLASSIC, opponent_type=OpponentType.AI, rng=GameRNG(1))
    with pytest.raises(ValueError, match="two AI players"):
        GameOrchestrator(state, GameRNG(1)).run()


def test_describe():
    entry = LogEntry(
        turn=4,
        player_id="p1",
        player_name="Blue (AI)",
        result=LogResult.SUNK_SHIP,
        coords=Coord(2, 9),
        sunk_ship_name="Cruiser",
    )
    assert describe(entry) == "Blue (AI): SUNK_SHIP at C10 (Cruiser sunk)"
