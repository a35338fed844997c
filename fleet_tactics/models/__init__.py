"""Data models for Fleet Tactics."""

from .action import ActionKind, ActionStage, ActiveAction
from .cell import CellState, Coord, Grid, GridDimensions, copy_grid, create_empty_grid
from .game import (
    GameMode,
    GamePhase,
    GameState,
    JammedArea,
    LastShot,
    LogEntry,
    LogResult,
    MapType,
    OpponentType,
    RadarReading,
    RadarScanResult,
)
from .player import CamoArea, Player, TargetLock
from .ship import Ship, ShipSpec, ShipType

__all__ = [
    "ActionKind",
    "ActionStage",
    "ActiveAction",
    "CamoArea",
    "CellState",
    "Coord",
    "GameMode",
    "GamePhase",
    "GameState",
    "Grid",
    "GridDimensions",
    "JammedArea",
    "LastShot",
    "LogEntry",
    "LogResult",
    "MapType",
    "OpponentType",
    "Player",
    "RadarReading",
    "RadarScanResult",
    "Ship",
    "ShipSpec",
    "ShipType",
    "TargetLock",
    "copy_grid",
    "create_empty_grid",
]
