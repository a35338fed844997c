"""Tactical-mode opponent policy.

get_ai_strategic_decision walks a fixed priority list and returns the
first move that applies:

1. Emergency escape for a damaged Mothership
2. Repair the Mothership
3. Finish the enemy Mothership when one cell remains
4. One-time camouflage over the densest part of the fleet
5. Shield a threatened asset or bluff on empty water
6. Attack a high-confidence cell
7. Jam the cluster the enemy Repairship would fix
8. Relocate a threatened high-value ship
9. Repair other damage
10. Target-lock or radar sweep
11. Decoy in quiet water
12. Attack the best cell available, or a random open cell

The policy only proposes moves; the turn driver applies them through the
same engine entry points a human uses.
"""

import logging
from dataclasses import dataclass

from ..engine.abilities import SkillOptions, check_relocatable, check_skill_available
from ..engine.attack import is_reshootable
from ..engine.board import Placement, can_place_ship, relocation_grid
from ..engine.errors import IllegalMoveError
from ..models.action import ActionKind
from ..models.cell import CellState, Coord, Grid, GridDimensions, create_empty_grid
from ..models.game import GameMode, GameState
from ..models.player import Player
from ..models.ship import Ship, ShipType
from ..utils.constants import (
    AI_ATTACK_THRESHOLD,
    BLUFF_CANDIDATES,
    BLUFF_ROLL,
    COMMAND_ROLL,
    INTEL_ROLL,
    MULTI_TARGET_COUNT,
    SHIELD_ROLL,
)
from ..utils.rng import GameRNG
from .heatmap import (
    HeatMap,
    build_probability_map,
    find_best_camo_spot,
    find_best_decoy_spot,
    find_best_radar_targets,
    find_best_target_lock_targets,
    find_best_targets,
    find_jam_targets,
)

logger = logging.getLogger(__name__)

# Ships worth moving out of harm's way, most valuable first
RELOCATION_PRIORITY = (
    ShipType.MOTHERSHIP,
    ShipType.REPAIRSHIP,
    ShipType.JAMSHIP,
    ShipType.RADARSHIP,
    ShipType.DECOYSHIP,
    ShipType.COMMANDSHIP,
)


@dataclass(frozen=True)
class AIDecision:
    """One move proposed by the policy.

    Attributes:
        action: ATTACK or SKILL
        coords: Target cell for attacks
        ship_type: Originating ship for skills
        options: Targeting parameters for skills
        reason: Short label for logs
    """

    action: ActionKind
    coords: Coord | None = None
    ship_type: ShipType | None = None
    options: SkillOptions | None = None
    reason: str = ""

    @classmethod
    def attack(cls, coord: Coord, reason: str) -> "AIDecision":
        return cls(action=ActionKind.ATTACK, coords=coord, reason=reason)

    @classmethod
    def skill(cls, ship_type: ShipType, options: SkillOptions, reason: str) -> "AIDecision":
        return cls(action=ActionKind.SKILL, ship_type=ship_type, options=options, reason=reason)


def _shots_of(shooter: Player, target: Player, dims: GridDimensions) -> Grid:
    return shooter.shots.get(target.id) or create_empty_grid(dims.rows, dims.cols)


def _can_use(state: GameState, ai: Player, ship_type: ShipType) -> bool:
    try:
        check_skill_available(state, ai, ship_type)
    except IllegalMoveError:
        return False
    return True


def threat_map(ai: Player, opponent: Player, dims: GridDimensions) -> HeatMap:
    """The opponent's heatmap over the AI's own board."""
    return build_probability_map(ai, _shots_of(opponent, ai, dims), dims)


def find_best_relocation_spot(
    grid: Grid, ship: Ship, threat: HeatMap, dims: GridDimensions
) -> Placement | None:
    """Least-threatened legal run for a ship on a grid where only EMPTY is free."""
    best: Placement | None = None
    best_threat = float("inf")
    for y in range(dims.rows):
        for x in range(dims.cols):
            for horizontal in (True, False):
                if not can_place_ship(grid, ship.length, x, y, horizontal, dims):
                    continue
                if horizontal:
                    total = sum(threat[y][x + i] for i in range(ship.length))
                else:
                    total = sum(threat[y + i][x] for i in range(ship.length))
                if total < best_threat:
                    best_threat = total
                    best = Placement(x, y, horizontal)
    return best


def find_ship_to_relocate(ai: Player, threat: HeatMap) -> Ship | None:
    """First valuable healthy ship averaging more than 2 threat per cell."""
    for ship_type in RELOCATION_PRIORITY:
        ship = ai.ship_of_type(ship_type)
        if ship is None or ai.is_ship_jammed(ship):
            continue
        try:
            check_relocatable(ship)
        except IllegalMoveError:
            continue
        if sum(threat[p.y][p.x] for p in ship.positions) > ship.length * 2:
            return ship
    return None


def find_best_shield_target(
    ai: Player, threat: HeatMap, dims: GridDimensions, rng: GameRNG
) -> Coord | None:
    """Score healthy ship cells (defend) and hot empty water (bluff).

    Defend scores scale with threat and asset value, tripled inside the
    camouflage field. Bluff candidates are the five most threatened empty
    cells. Most of the time the top score wins; otherwise the best bluff is
    chosen when it ranks in the top three.
    """
    candidates: list[tuple[float, bool, Coord]] = []  # (score, is_bluff, cell)

    for ship in ai.ships:
        if ship.is_sunk or any(ai.is_shielded(p) for p in ship.positions):
            continue
        for pos in ship.positions:
            if ai.grid[pos.y][pos.x] != CellState.SHIP:
                continue
            score = (threat[pos.y][pos.x] or 1) * 5
            if ship.ship_type == ShipType.MOTHERSHIP:
                score *= 4
            elif ship.ship_type in (ShipType.REPAIRSHIP, ShipType.JAMSHIP, ShipType.SHIELDSHIP):
                score *= 2
            if ai.camo_area is not None and ai.camo_area.contains(pos):
                score *= 3
            candidates.append((score, False, pos))

    water = [
        Coord(x, y)
        for y in range(dims.rows)
        for x in range(dims.cols)
        if ai.grid[y][x] == CellState.EMPTY and not ai.is_shielded(Coord(x, y))
    ]
    water.sort(key=lambda c: threat[c.y][c.x], reverse=True)
    for cell in water[:BLUFF_CANDIDATES]:
        candidates.append((threat[cell.y][cell.x] * 1.5, True, cell))

    if not candidates:
        return None
    candidates.sort(key=lambda c: c[0], reverse=True)

    if rng.random() > BLUFF_ROLL:
        for score, is_bluff, cell in candidates[:3]:
            if is_bluff:
                return cell
    return candidates[0][2]


def _lethal_shot(opponent: Player, shots: Grid, mode: GameMode) -> Coord | None:
    mothership = opponent.ship_of_type(ShipType.MOTHERSHIP)
    if mothership is None or mothership.is_sunk or not mothership.is_damaged:
        return None
    hits = [p for p in mothership.positions if shots[p.y][p.x] == CellState.HIT]
    if len(hits) != mothership.length - 1:
        return None
    return next((p for p in mothership.positions if is_reshootable(shots[p.y][p.x], mode)), None)


def _first_hit(ai: Player, ship: Ship) -> Coord | None:
    return next((p for p in ship.positions if ai.grid[p.y][p.x] == CellState.HIT), None)


def get_ai_strategic_decision(
    ai: Player, opponent: Player, state: GameState, rng: GameRNG | None = None
) -> AIDecision:
    """Choose the AI's next discrete action.

    Args:
        ai: The AI player (must be the current player in state)
        opponent: The player being hunted
        state: Current game state
        rng: Random source for rolls and tie-breaks

    Returns:
        AIDecision to apply through the engine
    """
    rng = rng or GameRNG()
    dims = state.dimensions
    shots = _shots_of(ai, opponent, dims)
    heat = build_probability_map(opponent, shots, dims)
    threat = threat_map(ai, opponent, dims)

    # 1-2. Survive
    mothership = ai.ship_of_type(ShipType.MOTHERSHIP)
    if mothership is not None and mothership.is_damaged and not mothership.is_sunk:
        if (
            ai.escape_skill_unlocked
            and not mothership.has_been_relocated
            and _can_use(state, ai, ShipType.MOTHERSHIP)
        ):
            spot = find_best_relocation_spot(relocation_grid(state, ai, mothership), mothership, threat, dims)
            if spot is not None:
                options = SkillOptions.at(spot.x, spot.y, horizontal=spot.horizontal, ship_name=mothership.name)
                return AIDecision.skill(ShipType.MOTHERSHIP, options, "emergency escape")
        if not mothership.has_been_repaired and _can_use(state, ai, ShipType.REPAIRSHIP):
            damage = _first_hit(ai, mothership)
            if damage is not None:
                return AIDecision.skill(ShipType.REPAIRSHIP, SkillOptions(coord=damage), "repair mothership")

    # 3. Win
    lethal = _lethal_shot(opponent, shots, state.game_mode)
    if lethal is not None:
        return AIDecision.attack(lethal, "finish mothership")

    # 4-5. One-time setup and defense
    if ai.camo_area is None and _can_use(state, ai, ShipType.CAMOSHIP):
        spot = find_best_camo_spot(ai, dims)
        if spot is not None:
            return AIDecision.skill(ShipType.CAMOSHIP, SkillOptions(coord=spot), "camouflage")

    if _can_use(state, ai, ShipType.SHIELDSHIP) and rng.random() > SHIELD_ROLL:
        cell = find_best_shield_target(ai, threat, dims, rng)
        if cell is not None:
            return AIDecision.skill(ShipType.SHIELDSHIP, SkillOptions(coord=cell), "shield")

    # 6. Confident attack
    best_targets = find_best_targets(heat, shots)
    best = rng.choice(best_targets) if best_targets else None
    if best is not None and heat[best.y][best.x] > AI_ATTACK_THRESHOLD:
        return AIDecision.attack(best, "high-probability target")

    # 7. Deny the enemy's repair
    enemy_repair = opponent.ship_of_type(ShipType.REPAIRSHIP)
    if (
        enemy_repair is not None
        and not enemy_repair.is_sunk
        and opponent.skill_cooldowns.get(ShipType.REPAIRSHIP, 0) == 0
        and any(s.is_damaged for s in opponent.ships)
        and _can_use(state, ai, ShipType.JAMSHIP)
        and rng.random() > INTEL_ROLL
    ):
        targets = find_jam_targets(shots, dims)
        if len(targets) == MULTI_TARGET_COUNT:
            return AIDecision.skill(ShipType.JAMSHIP, SkillOptions(targets=tuple(targets)), "jam repairs")

    # 8. Move a threatened ship
    if _can_use(state, ai, ShipType.COMMANDSHIP) and rng.random() > COMMAND_ROLL:
        ship = find_ship_to_relocate(ai, threat)
        if ship is not None:
            spot = find_best_relocation_spot(relocation_grid(state, ai, ship), ship, threat, dims)
            if spot is not None:
                options = SkillOptions.at(spot.x, spot.y, horizontal=spot.horizontal, ship_name=ship.name)
                return AIDecision.skill(ShipType.COMMANDSHIP, options, f"relocate {ship.name}")

    # 9. Patch other damage, longest ship first
    if _can_use(state, ai, ShipType.REPAIRSHIP):
        damaged = [
            s
            for s in ai.ships
            if s.is_damaged and not s.is_sunk and not s.has_been_repaired
            and s.ship_type != ShipType.MOTHERSHIP
        ]
        if damaged:
            ship = max(damaged, key=lambda s: s.length)
            damage = _first_hit(ai, ship)
            if damage is not None:
                return AIDecision.skill(ShipType.REPAIRSHIP, SkillOptions(coord=damage), f"repair {ship.name}")

    # 10. Gather intelligence
    if _can_use(state, ai, ShipType.SCOUTSHIP) and rng.random() > INTEL_ROLL:
        targets = find_best_target_lock_targets(heat, shots, dims)
        if len(targets) == MULTI_TARGET_COUNT:
            return AIDecision.skill(ShipType.SCOUTSHIP, SkillOptions(targets=tuple(targets)), "target lock")

    if _can_use(state, ai, ShipType.RADARSHIP) and rng.random() > INTEL_ROLL:
        targets = find_best_radar_targets(heat, shots, dims)
        if len(targets) == MULTI_TARGET_COUNT:
            return AIDecision.skill(ShipType.RADARSHIP, SkillOptions(targets=tuple(targets)), "radar sweep")

    # 11. Sow confusion
    if _can_use(state, ai, ShipType.DECOYSHIP) and rng.random() > INTEL_ROLL:
        spot = find_best_decoy_spot(threat, ai, dims, rng)
        if spot is not None:
            return AIDecision.skill(ShipType.DECOYSHIP, SkillOptions(coord=spot), "decoy")

    # 12. Fallback
    if best is not None:
        return AIDecision.attack(best, "best available target")
    open_cells = [
        Coord(x, y)
        for y in range(dims.rows)
        for x in range(dims.cols)
        if shots[y][x] == CellState.EMPTY
    ]
    return AIDecision.attack(rng.choice(open_cells) if open_cells else Coord(0, 0), "random")
