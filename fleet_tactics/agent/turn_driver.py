"""AI turn driver.

Drains the AI's whole turn one discrete action at a time, applying each
through the public engine entry points. Callers see the turn as a finite
stream of snapshots (one per accepted action) so they can render between
actions; the stream ends when AP runs out, the game ends, or the engine
rejects a move.
"""

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from ..engine.core import apply_skill, process_shot
from ..engine.errors import SkillError
from ..models.action import ActionKind
from ..models.game import GameMode, GamePhase, GameState
from ..utils.constants import ABILITY_COST, AI_ACTION_DELAY, ATTACK_COST
from ..utils.rng import GameRNG
from .classic_ai import get_classic_ai_move
from .tactical_ai import AIDecision, get_ai_strategic_decision

logger = logging.getLogger(__name__)

ActionCallback = Callable[[GameState], Awaitable[None] | None]


def _decide(state: GameState, rng: GameRNG) -> AIDecision:
    ai = state.current_player
    opponent = state.opponent_of(ai.id)
    if state.game_mode == GameMode.CLASSIC:
        coord = get_classic_ai_move(ai.shots[opponent.id], state.dimensions, rng)
        return AIDecision.attack(coord, "hunt/target")
    return get_ai_strategic_decision(ai, opponent, state, rng)


async def stream_ai_turn(
    state: GameState, delay: float = AI_ACTION_DELAY, rng: GameRNG | None = None
) -> AsyncIterator[GameState]:
    """Yield a snapshot after every action the AI takes this turn.

    Args:
        state: Game state with an AI player to move
        delay: Seconds to wait between actions
        rng: Random source for the policy

    Yields:
        New GameState after each accepted action
    """
    rng = rng or GameRNG()
    current = state
    actions = 0

    while current.phase == GamePhase.PLAYING:
        ai = current.current_player
        if ai is None or not ai.is_ai or ai.action_points <= 0:
            break
        opponent = current.opponent_of(ai.id)

        decision = _decide(current, rng)
        cost = ATTACK_COST if decision.action == ActionKind.ATTACK else ABILITY_COST
        if ai.action_points < cost:
            break
        logger.debug(f"{ai.name} decided: {decision.action.value} ({decision.reason})")

        if decision.action == ActionKind.ATTACK:
            result = process_shot(current, opponent.id, decision.coords.x, decision.coords.y)
            if result is current:
                logger.warning(f"{ai.name} fired at a resolved cell {decision.coords}; ending turn")
                break
        else:
            result = apply_skill(current, ai.id, decision.ship_type, decision.options)
            if isinstance(result, SkillError):
                logger.warning(
                    f"{ai.name} tried an invalid {decision.ship_type.value} move: {result.error}"
                )
                break

        current = result
        actions += 1
        yield current

        if current.phase == GamePhase.GAME_OVER:
            break
        if delay > 0:
            await asyncio.sleep(delay)

    logger.info(f"AI turn {state.turn} finished after {actions} action(s)")


async def execute_ai_turn(
    state: GameState,
    on_action_taken: ActionCallback | None = None,
    delay: float = AI_ACTION_DELAY,
    rng: GameRNG | None = None,
) -> GameState:
    """Run the AI's whole turn and return the final state.

    The turn is not advanced; the caller decides when to call advance_turn.

    Args:
        state: Game state with an AI player to move
        on_action_taken: Called (or awaited) with each intermediate snapshot
        delay: Seconds to wait between actions
        rng: Random source for the policy

    Returns:
        State after the AI's last accepted action
    """
    final = state
    async for snapshot in stream_ai_turn(state, delay=delay, rng=rng):
        final = snapshot
        if on_action_taken is not None:
            outcome = on_action_taken(snapshot)
            if inspect.isawaitable(outcome):
                await outcome
    return final
