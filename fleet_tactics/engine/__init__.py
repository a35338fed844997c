"""Game engine components."""

from .abilities import SkillOptions
from .actions import begin_action, cancel_action, rotate_placement, select_ship, select_target
from .board import Placement, can_place_ship, place_ship, scatter_asteroids
from .core import advance_turn, apply_skill, initialize_player, process_shot, rules_of
from .errors import IllegalMoveError, SkillError
from .rules import ClassicRules, GameRules, TacticalRules, rules_for
from .setup import (
    AIOpponent,
    HumanOpponent,
    OpponentLogic,
    acknowledge_ai_fleet,
    auto_place_fleet,
    create_game,
    join_game,
    submit_fleet,
    submit_placement,
    validate_fleet,
)
from .turns import continue_turn

__all__ = [
    "AIOpponent",
    "ClassicRules",
    "GameRules",
    "HumanOpponent",
    "IllegalMoveError",
    "OpponentLogic",
    "Placement",
    "SkillError",
    "SkillOptions",
    "TacticalRules",
    "acknowledge_ai_fleet",
    "advance_turn",
    "apply_skill",
    "auto_place_fleet",
    "begin_action",
    "can_place_ship",
    "cancel_action",
    "continue_turn",
    "create_game",
    "initialize_player",
    "join_game",
    "place_ship",
    "process_shot",
    "rotate_placement",
    "rules_for",
    "rules_of",
    "scatter_asteroids",
    "select_ship",
    "select_target",
    "submit_fleet",
    "submit_placement",
    "validate_fleet",
]
