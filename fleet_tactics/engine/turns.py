"""Turn and resource state machine.

advance_turn runs once per completed turn:
1. Decay the mover's cooldowns, jam and target-lock timers (Tactical)
2. Rotate to the next non-eliminated player
3. Reset that player's action points (base allotment plus banked bonus)
4. Bump the turn counter and clear per-turn broadcast fields
5. Enter TURN_TRANSITION when control passes between two humans
"""

import logging
from dataclasses import replace

from ..models.game import GamePhase, GameState
from ..models.player import Player

logger = logging.getLogger(__name__)


def _decay_status_effects(state: GameState, mover: Player) -> None:
    """Tick down the mover's timers. Mutates the given (copied) state."""
    for ship_type, remaining in mover.skill_cooldowns.items():
        if remaining > 0:
            mover.skill_cooldowns[ship_type] = remaining - 1

    # Jamming lasts one full turn of the jammed player; it expires as they finish it
    if mover.jam_turns_remaining > 0:
        mover.jam_turns_remaining -= 1
        if mover.jam_turns_remaining == 0:
            mover.jammed_positions = []
            if state.jammed_area is not None and state.jammed_area.player_id == mover.id:
                state.jammed_area = None

    for opponent_id, lock in list(mover.target_locks.items()):
        remaining = lock.turns_remaining - 1
        if remaining <= 0:
            del mover.target_locks[opponent_id]
        else:
            mover.target_locks[opponent_id] = replace(lock, turns_remaining=remaining)


def _next_player_index(state: GameState, current_index: int) -> int:
    count = len(state.players)
    next_index = (current_index + 1) % count
    while state.players[next_index].is_eliminated and next_index != current_index:
        next_index = (next_index + 1) % count
    return next_index


def rotate_turn(state: GameState, base_action_points: int, decay_effects: bool) -> GameState:
    """Shared turn-advance contract for both rule sets.

    Args:
        state: Current game state (not modified)
        base_action_points: Per-turn allotment for the mode
        decay_effects: Whether to tick cooldowns, jams and locks (Tactical only)

    Returns:
        New game state with the next player to move, or the input state if
        the game is not in PLAYING
    """
    if state.phase != GamePhase.PLAYING:
        logger.debug(f"Ignoring turn advance in phase {state.phase.value}")
        return state

    new_state = state.copy()
    current_index = next(
        (i for i, p in enumerate(new_state.players) if p.id == new_state.current_player_id), 0
    )
    mover = new_state.players[current_index]

    if decay_effects:
        _decay_status_effects(new_state, mover)

    next_index = _next_player_index(new_state, current_index)
    next_player = new_state.players[next_index]
    next_player.action_points = base_action_points + next_player.bonus_ap
    next_player.bonus_ap = 0

    humans = [p for p in new_state.players if not p.is_ai]
    if not next_player.is_ai and len(humans) > 1 and next_player.id != mover.id:
        new_state.phase = GamePhase.TURN_TRANSITION

    new_state.turn += 1
    new_state.current_player_id = next_player.id
    new_state.active_action = None
    new_state.radar_scan_result = None

    logger.info(
        f"Turn {new_state.turn}: {next_player.name} to move with {next_player.action_points} AP"
    )
    return new_state


def continue_turn(state: GameState) -> GameState:
    """Leave TURN_TRANSITION and resume whichever phase is in progress.

    During setup the transition hands the board to the next human for fleet
    selection or deployment; once every player is deployed it resumes play.
    """
    if state.phase != GamePhase.TURN_TRANSITION:
        return state

    if all(p.is_ready for p in state.players):
        phase = GamePhase.PLAYING
    elif any(not p.ships for p in state.players):
        phase = GamePhase.FLEET_SELECTION
    else:
        phase = GamePhase.SETUP
    return state.with_changes(phase=phase)
