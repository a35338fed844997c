"""Tests for the async AI turn driver."""

import asyncio

from fleet_tactics.agent.turn_driver import execute_ai_turn, stream_ai_turn
from fleet_tactics.models.game import GamePhase
from fleet_tactics.utils.rng import GameRNG


def ai_turn(state):
    state.current_player_id = "p2"
    return state


def test_classic_turn_is_one_shot(classic_battle):
    state = ai_turn(classic_battle)
    seen = []

    final = asyncio.run(execute_ai_turn(state, seen.append, delay=0, rng=GameRNG(3)))

    assert len(seen) == 1
    assert final is seen[-1]
    assert final.player("p2").action_points == 0
    assert final.log[0].player_id == "p2"


def test_turn_is_not_advanced(battle):
    state = ai_turn(battle)

    final = asyncio.run(execute_ai_turn(state, delay=0, rng=GameRNG(5)))

    assert final.current_player_id == "p2"
    assert final.turn == state.turn
    assert final.player("p2").action_points < 2
    assert state.player("p2").action_points == 2


def test_async_callbacks_are_awaited(battle):
    state = ai_turn(battle)
    seen = []

    async def on_action(snapshot):
        await asyncio.sleep(0)
        seen.append(snapshot.player("p2").action_points)

    asyncio.run(execute_ai_turn(state, on_action, delay=0, rng=GameRNG(5)))

    assert seen
    assert seen == sorted(seen, reverse=True)


def test_stream_yields_each_action(classic_battle):
    state = ai_turn(classic_battle)
    state.player("p2").action_points = 3

    async def collect():
        return [s async for s in stream_ai_turn(state, delay=0, rng=GameRNG(1))]

    snapshots = asyncio.run(collect())

    assert [s.player("p2").action_points for s in snapshots] == [2, 1, 0]


def test_human_turn_yields_nothing(battle):
    final = asyncio.run(execute_ai_turn(battle, delay=0))
    assert final is battle


def test_stops_when_the_game_ends(classic_battle):
    state = ai_turn(classic_battle)
    state.phase = GamePhase.GAME_OVER
    assert asyncio.run(execute_ai_turn(state, delay=0)) is state
