"""Public engine entry points.

Thin dispatch onto the rule set a game was created with. These are the
functions presentation and networking layers call for every move.
"""

from ..models.cell import Grid
from ..models.game import GameMode, GameState
from ..models.player import Player
from ..models.ship import ShipType
from .abilities import SkillOptions
from .errors import SkillError
from .rules import GameRules, rules_for


def rules_of(state: GameState) -> GameRules:
    """Return the rule set attached to a game.

    Raises:
        ValueError: If the state was built without going through create_game
            or game_from_dict
    """
    if state.rules is None:
        raise ValueError(f"Game {state.game_id} has no rule set attached")
    return state.rules


def initialize_player(player_id: str, name: str, is_ai: bool, grid: Grid, mode: GameMode) -> Player:
    return rules_for(mode).initialize_player(player_id, name, is_ai, grid)


def process_shot(state: GameState, target_player_id: str, x: int, y: int) -> GameState:
    """Fire one shot for the current player.

    Rejected shots (wrong phase, out of bounds, no AP, already resolved
    cell) return the input state unchanged.
    """
    return rules_of(state).process_shot(state, target_player_id, x, y)


def apply_skill(
    state: GameState, player_id: str, ship_type: ShipType, options: SkillOptions | None = None
) -> GameState | SkillError:
    return rules_of(state).apply_skill(state, player_id, ship_type, options or SkillOptions())


def advance_turn(state: GameState) -> GameState:
    return rules_of(state).advance_turn(state)
