"""Utility functions and constants for Fleet Tactics."""

from .constants import (
    ABILITY_COST,
    ATTACK_COST,
    CLASSIC_BASE_AP,
    GRID_COLS,
    GRID_ROWS,
    RNG_SEED_DEFAULT,
    TACTICAL_BASE_AP,
    TACTICAL_FLEET_BUDGET,
)
from .rng import GameRNG

__all__ = [
    "ABILITY_COST",
    "ATTACK_COST",
    "CLASSIC_BASE_AP",
    "GRID_COLS",
    "GRID_ROWS",
    "RNG_SEED_DEFAULT",
    "TACTICAL_BASE_AP",
    "TACTICAL_FLEET_BUDGET",
    "GameRNG",
]
