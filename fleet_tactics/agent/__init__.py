"""AI opponent module.

Heuristic opponents for both rule sets: a probability-heatmap targeting
policy for Tactical mode, a hunt/target policy for Classic mode, fleet
drafting under the budget, and an async driver that plays out a full AI
turn through the public engine entry points.
"""

from .classic_ai import get_classic_ai_move
from .fleet_selection import FleetPersonality, select_ai_fleet
from .heatmap import build_probability_map, find_best_targets
from .tactical_ai import AIDecision, get_ai_strategic_decision
from .turn_driver import execute_ai_turn, stream_ai_turn

__all__ = [
    "AIDecision",
    "FleetPersonality",
    "build_probability_map",
    "execute_ai_turn",
    "find_best_targets",
    "get_ai_strategic_decision",
    "get_classic_ai_move",
    "select_ai_fleet",
    "stream_ai_turn",
]
