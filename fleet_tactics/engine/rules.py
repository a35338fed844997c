"""Rule sets.

A game picks ClassicRules or TacticalRules once at creation and keeps it
for its lifetime. Both share the board, attack and turn machinery; they
differ in starting resources, the per-turn AP allotment and whether
abilities exist at all.
"""

import logging
from abc import ABC, abstractmethod

from ..models.cell import Grid
from ..models.game import GameMode, GameState
from ..models.player import Player
from ..models.ship import ShipType
from ..utils.constants import CLASSIC_BASE_AP, TACTICAL_BASE_AP
from .abilities import SkillOptions, apply_skill, initial_cooldowns, initial_uses
from .attack import resolve_shot
from .errors import SkillError
from .turns import rotate_turn

logger = logging.getLogger(__name__)


class GameRules(ABC):
    """Mode-specific behavior shared by every game of that mode."""

    mode: GameMode
    base_action_points: int

    def initialize_player(self, player_id: str, name: str, is_ai: bool, grid: Grid) -> Player:
        """Create a player with the mode's starting resources.

        AI players get an " (AI)" suffix on their display name.
        """
        return Player(
            id=player_id,
            name=f"{name} (AI)" if is_ai else name,
            is_ai=is_ai,
            grid=grid,
            action_points=self.base_action_points,
        )

    def process_shot(self, state: GameState, target_player_id: str, x: int, y: int) -> GameState:
        return resolve_shot(state, target_player_id, x, y)

    @abstractmethod
    def apply_skill(
        self, state: GameState, player_id: str, ship_type: ShipType, options: SkillOptions
    ) -> GameState | SkillError:
        pass

    @abstractmethod
    def advance_turn(self, state: GameState) -> GameState:
        pass


class ClassicRules(GameRules):
    """One shot per turn, no abilities."""

    mode = GameMode.CLASSIC
    base_action_points = CLASSIC_BASE_AP

    def apply_skill(self, state, player_id, ship_type, options):
        return SkillError("Skills are not available in Classic mode.")

    def advance_turn(self, state: GameState) -> GameState:
        return rotate_turn(state, self.base_action_points, decay_effects=False)


class TacticalRules(GameRules):
    """Action-point economy with ship abilities and status effects."""

    mode = GameMode.TACTICAL
    base_action_points = TACTICAL_BASE_AP

    def initialize_player(self, player_id: str, name: str, is_ai: bool, grid: Grid) -> Player:
        player = super().initialize_player(player_id, name, is_ai, grid)
        player.skill_cooldowns = initial_cooldowns()
        player.skill_uses = initial_uses()
        return player

    def apply_skill(self, state, player_id, ship_type, options):
        return apply_skill(state, player_id, ship_type, options)

    def advance_turn(self, state: GameState) -> GameState:
        return rotate_turn(state, self.base_action_points, decay_effects=True)


_RULES: dict[GameMode, GameRules] = {
    GameMode.CLASSIC: ClassicRules(),
    GameMode.TACTICAL: TacticalRules(),
}


def rules_for(mode: GameMode) -> GameRules:
    """Return the shared rule-set instance for a game mode."""
    return _RULES[GameMode(mode)]
