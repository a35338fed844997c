"""Game state serialization to/from JSON.

This module provides functions to save and load game state to JSON files,
and to build the document each player is allowed to see over the network.
Every field of GameState round-trips; the rule set and opponent logic are
re-attached from the game mode and opponent type on load.
"""

import json
from pathlib import Path
from typing import Any

from ..models.action import ActionKind, ActionStage, ActiveAction
from ..models.cell import CellState, Coord, Grid, GridDimensions
from ..models.game import (
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
from ..models.player import CamoArea, Player, TargetLock
from ..models.ship import Ship, ShipSpec, ShipType


def save_game(state: GameState, filepath: str) -> Path:
    """Save game state to JSON file.

    Args:
        state: Game state to save
        filepath: Path to save file (will be created in /state directory if relative)

    Returns:
        Path the game was written to

    Example:
        save_game(state, "my_game.json")  # Saves to state/my_game.json
        save_game(state, "/absolute/path/game.json")  # Saves to absolute path
    """
    path = Path(filepath)
    if not path.is_absolute():
        state_dir = Path(__file__).parent.parent.parent / "state"
        state_dir.mkdir(exist_ok=True)
        path = state_dir / filepath

    with open(path, "w") as f:
        json.dump(game_to_dict(state), f, indent=2)
    return path


def load_game(filepath: str) -> GameState:
    """Load game state from JSON file.

    Args:
        filepath: Path to saved game file

    Returns:
        Loaded GameState with its rule set attached

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If JSON is invalid or malformed
    """
    path = Path(filepath)
    if not path.is_absolute():
        state_dir = Path(__file__).parent.parent.parent / "state"
        path = state_dir / filepath

    with open(path) as f:
        data = json.load(f)
    return game_from_dict(data)


# ============================================
# GAME
# ============================================


def game_to_dict(state: GameState) -> dict[str, Any]:
    """Convert GameState to a JSON-compatible dictionary."""
    return {
        "game_id": state.game_id,
        "phase": state.phase.value,
        "players": [_serialize_player(p) for p in state.players],
        "current_player_id": state.current_player_id,
        "game_mode": state.game_mode.value,
        "map_type": state.map_type.value,
        "opponent_type": state.opponent_type.value,
        "dimensions": {"rows": state.dimensions.rows, "cols": state.dimensions.cols},
        "ships_config": [_serialize_spec(s) for s in state.ships_config],
        "fleet_budget": state.fleet_budget,
        "turn": state.turn,
        "winner": state.winner,
        "max_players": state.max_players,
        "log": [_serialize_log_entry(e) for e in state.log],
        "active_action": _serialize_active_action(state.active_action),
        "radar_scan_result": _serialize_radar(state.radar_scan_result),
        "jammed_area": _serialize_jammed_area(state.jammed_area),
        "last_shot": _serialize_last_shot(state.last_shot),
    }


def game_from_dict(data: dict[str, Any]) -> GameState:
    """Reconstruct GameState from a dictionary and attach its rule set.

    Raises:
        ValueError: If the document is malformed
    """
    from ..engine.rules import rules_for
    from ..engine.setup import opponent_for

    try:
        mode = GameMode(data["game_mode"])
        opponent_type = OpponentType(data["opponent_type"])
        return GameState(
            game_id=data["game_id"],
            phase=GamePhase(data["phase"]),
            players=[_deserialize_player(p) for p in data["players"]],
            current_player_id=data.get("current_player_id"),
            game_mode=mode,
            map_type=MapType(data["map_type"]),
            opponent_type=opponent_type,
            dimensions=GridDimensions(**data["dimensions"]),
            ships_config=tuple(_deserialize_spec(s) for s in data["ships_config"]),
            fleet_budget=data["fleet_budget"],
            turn=data.get("turn", 1),
            winner=data.get("winner"),
            max_players=data.get("max_players", 2),
            log=[_deserialize_log_entry(e) for e in data.get("log", [])],
            active_action=_deserialize_active_action(data.get("active_action")),
            radar_scan_result=_deserialize_radar(data.get("radar_scan_result")),
            jammed_area=_deserialize_jammed_area(data.get("jammed_area")),
            last_shot=_deserialize_last_shot(data.get("last_shot")),
            rules=rules_for(mode),
            opponent_logic=opponent_for(opponent_type),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed game document: {e}") from e


def player_view(state: GameState, player_id: str) -> dict[str, Any]:
    """Serialize the game from one player's seat.

    The viewer's own data is complete. For every other player the true
    board, decoys, shields, camouflage field, jammed cells, target locks and
    escape state are withheld, and per-ship damage flags are cleared. A sunk
    ship reveals its positions only once the viewer's shots against that
    player show it as SUNK, so a sink hidden by camouflage stays hidden.
    Another player's radar sweep is withheld as well.

    Args:
        state: Game state
        player_id: Viewing player

    Returns:
        Redacted game document
    """
    doc = game_to_dict(state)
    viewer = next((p for p in doc["players"] if p["id"] == player_id), None)
    for p in doc["players"]:
        if p["id"] == player_id:
            continue
        p["grid"] = None
        p["decoy_positions"] = []
        p["shielded_positions"] = []
        p["jammed_positions"] = []
        p["camo_area"] = None
        p["target_locks"] = {}
        p["escape_skill_unlocked"] = False
        p["bonus_ap"] = 0
        shots = viewer["shots"].get(p["id"]) if viewer is not None else None
        for ship in p["ships"]:
            if ship["is_sunk"] and _sunk_on(shots, ship["positions"]):
                continue
            ship["positions"] = []
            ship["is_sunk"] = False
            ship["is_damaged"] = False
            ship["has_been_repaired"] = False
            ship["has_been_relocated"] = False
    radar = doc["radar_scan_result"]
    if radar is not None and radar["player_id"] != player_id:
        doc["radar_scan_result"] = None
    active = doc["active_action"]
    if active is not None and active["player_id"] != player_id:
        doc["active_action"] = None
    return doc


def _sunk_on(shots: list[list[str]] | None, positions: list[dict[str, int]]) -> bool:
    if shots is None or not positions:
        return False
    return all(shots[pos["y"]][pos["x"]] == CellState.SUNK.value for pos in positions)


# ============================================
# LEAVES
# ============================================


def _serialize_coord(coord: Coord | None) -> dict[str, int] | None:
    if coord is None:
        return None
    return {"x": coord.x, "y": coord.y}


def _deserialize_coord(data: dict[str, int] | None) -> Coord | None:
    if data is None:
        return None
    return Coord(data["x"], data["y"])


def _serialize_grid(grid: Grid) -> list[list[str]]:
    return [[cell.value for cell in row] for row in grid]


def _deserialize_grid(data: list[list[str]]) -> Grid:
    return [[CellState(cell) for cell in row] for row in data]


def _serialize_spec(spec: ShipSpec) -> dict[str, Any]:
    return {
        "name": spec.name,
        "type": spec.ship_type.value,
        "length": spec.length,
        "point_cost": spec.point_cost,
    }


def _deserialize_spec(data: dict[str, Any]) -> ShipSpec:
    return ShipSpec(data["name"], ShipType(data["type"]), data["length"], data.get("point_cost", 0))


def _serialize_ship(ship: Ship) -> dict[str, Any]:
    """Convert Ship to dictionary."""
    return {
        "name": ship.name,
        "type": ship.ship_type.value,
        "length": ship.length,
        "positions": [_serialize_coord(p) for p in ship.positions],
        "is_sunk": ship.is_sunk,
        "is_damaged": ship.is_damaged,
        "has_been_repaired": ship.has_been_repaired,
        "has_been_relocated": ship.has_been_relocated,
        "point_cost": ship.point_cost,
    }


def _deserialize_ship(data: dict[str, Any]) -> Ship:
    """Reconstruct Ship from dictionary."""
    return Ship(
        name=data["name"],
        ship_type=ShipType(data["type"]),
        length=data["length"],
        positions=[_deserialize_coord(p) for p in data.get("positions", [])],
        is_sunk=data.get("is_sunk", False),
        is_damaged=data.get("is_damaged", False),
        has_been_repaired=data.get("has_been_repaired", False),
        has_been_relocated=data.get("has_been_relocated", False),
        point_cost=data.get("point_cost", 0),
    )


def _serialize_player(player: Player) -> dict[str, Any]:
    """Convert Player to dictionary."""
    camo = player.camo_area
    return {
        "id": player.id,
        "name": player.name,
        "is_ai": player.is_ai,
        "grid": _serialize_grid(player.grid),
        "ships": [_serialize_ship(s) for s in player.ships],
        "shots": {oid: _serialize_grid(g) for oid, g in player.shots.items()},
        "is_ready": player.is_ready,
        "is_eliminated": player.is_eliminated,
        "skill_cooldowns": {t.value: n for t, n in player.skill_cooldowns.items()},
        "skill_uses": {t.value: n for t, n in player.skill_uses.items()},
        "action_points": player.action_points,
        "bonus_ap": player.bonus_ap,
        "decoy_positions": [_serialize_coord(c) for c in player.decoy_positions],
        "shielded_positions": [_serialize_coord(c) for c in player.shielded_positions],
        "jammed_positions": [_serialize_coord(c) for c in player.jammed_positions],
        "jam_turns_remaining": player.jam_turns_remaining,
        "escape_skill_unlocked": player.escape_skill_unlocked,
        "camo_area": None if camo is None else {"x": camo.x, "y": camo.y, "width": camo.width, "height": camo.height},
        "target_locks": {
            oid: {"cells": [_serialize_coord(c) for c in lock.cells], "turns_remaining": lock.turns_remaining}
            for oid, lock in player.target_locks.items()
        },
    }


def _deserialize_player(data: dict[str, Any]) -> Player:
    """Reconstruct Player from dictionary."""
    camo = data.get("camo_area")
    return Player(
        id=data["id"],
        name=data["name"],
        is_ai=data.get("is_ai", False),
        grid=_deserialize_grid(data["grid"]),
        ships=[_deserialize_ship(s) for s in data.get("ships", [])],
        shots={oid: _deserialize_grid(g) for oid, g in data.get("shots", {}).items()},
        is_ready=data.get("is_ready", False),
        is_eliminated=data.get("is_eliminated", False),
        skill_cooldowns={ShipType(t): n for t, n in data.get("skill_cooldowns", {}).items()},
        skill_uses={ShipType(t): n for t, n in data.get("skill_uses", {}).items()},
        action_points=data.get("action_points", 0),
        bonus_ap=data.get("bonus_ap", 0),
        decoy_positions=[_deserialize_coord(c) for c in data.get("decoy_positions", [])],
        shielded_positions=[_deserialize_coord(c) for c in data.get("shielded_positions", [])],
        jammed_positions=[_deserialize_coord(c) for c in data.get("jammed_positions", [])],
        jam_turns_remaining=data.get("jam_turns_remaining", 0),
        escape_skill_unlocked=data.get("escape_skill_unlocked", False),
        camo_area=None if camo is None else CamoArea(**camo),
        target_locks={
            oid: TargetLock(
                cells=tuple(_deserialize_coord(c) for c in lock["cells"]),
                turns_remaining=lock["turns_remaining"],
            )
            for oid, lock in data.get("target_locks", {}).items()
        },
    )


def _serialize_log_entry(entry: LogEntry) -> dict[str, Any]:
    return {
        "turn": entry.turn,
        "player_id": entry.player_id,
        "player_name": entry.player_name,
        "result": entry.result.value,
        "target_id": entry.target_id,
        "target_name": entry.target_name,
        "coords": _serialize_coord(entry.coords),
        "sunk_ship_name": entry.sunk_ship_name,
        "hit_ship_name": entry.hit_ship_name,
        "message": entry.message,
    }


def _deserialize_log_entry(data: dict[str, Any]) -> LogEntry:
    return LogEntry(
        turn=data["turn"],
        player_id=data["player_id"],
        player_name=data["player_name"],
        result=LogResult(data["result"]),
        target_id=data.get("target_id"),
        target_name=data.get("target_name"),
        coords=_deserialize_coord(data.get("coords")),
        sunk_ship_name=data.get("sunk_ship_name"),
        hit_ship_name=data.get("hit_ship_name"),
        message=data.get("message"),
    )


def _serialize_active_action(action: ActiveAction | None) -> dict[str, Any] | None:
    if action is None:
        return None
    return {
        "player_id": action.player_id,
        "kind": action.kind.value,
        "stage": action.stage.value,
        "ship_type": action.ship_type.value if action.ship_type else None,
        "targets": [_serialize_coord(c) for c in action.targets],
        "ship_to_move": action.ship_to_move,
        "is_horizontal": action.is_horizontal,
    }


def _deserialize_active_action(data: dict[str, Any] | None) -> ActiveAction | None:
    if data is None:
        return None
    ship_type = data.get("ship_type")
    return ActiveAction(
        player_id=data["player_id"],
        kind=ActionKind(data["kind"]),
        stage=ActionStage(data["stage"]),
        ship_type=ShipType(ship_type) if ship_type else None,
        targets=tuple(_deserialize_coord(c) for c in data.get("targets", [])),
        ship_to_move=data.get("ship_to_move"),
        is_horizontal=data.get("is_horizontal", True),
    )


def _serialize_radar(result: RadarScanResult | None) -> dict[str, Any] | None:
    if result is None:
        return None
    return {
        "player_id": result.player_id,
        "results": [
            {"coords": _serialize_coord(r.coords), "state": r.state.value} for r in result.results
        ],
    }


def _deserialize_radar(data: dict[str, Any] | None) -> RadarScanResult | None:
    if data is None:
        return None
    return RadarScanResult(
        player_id=data["player_id"],
        results=tuple(
            RadarReading(coords=_deserialize_coord(r["coords"]), state=CellState(r["state"]))
            for r in data["results"]
        ),
    )


def _serialize_jammed_area(area: JammedArea | None) -> dict[str, Any] | None:
    if area is None:
        return None
    return {"player_id": area.player_id, "coords": [_serialize_coord(c) for c in area.coords]}


def _deserialize_jammed_area(data: dict[str, Any] | None) -> JammedArea | None:
    if data is None:
        return None
    return JammedArea(
        player_id=data["player_id"], coords=tuple(_deserialize_coord(c) for c in data["coords"])
    )


def _serialize_last_shot(shot: LastShot | None) -> dict[str, Any] | None:
    if shot is None:
        return None
    return {
        "coords": _serialize_coord(shot.coords),
        "attacker_id": shot.attacker_id,
        "target_id": shot.target_id,
    }


def _deserialize_last_shot(data: dict[str, Any] | None) -> LastShot | None:
    if data is None:
        return None
    return LastShot(
        coords=_deserialize_coord(data["coords"]),
        attacker_id=data["attacker_id"],
        target_id=data["target_id"],
    )
