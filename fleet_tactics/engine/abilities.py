"""Tactical ability engine.

Every ability shares one contract: it costs ABILITY_COST action points,
needs its originating ship afloat and not jammed, and is blocked while on
cooldown or out of uses. A successful invocation spends the AP, sets the
cooldown or spends a use, and appends exactly one log entry.

Handlers raise IllegalMoveError against a scratch copy; apply_skill turns
that into a SkillError so the caller's state is never touched.
"""

import logging
from dataclasses import dataclass

from ..models.cell import CellState, Coord, create_empty_grid
from ..models.game import GamePhase, GameState, JammedArea, LogEntry, LogResult, RadarReading, RadarScanResult
from ..models.player import CamoArea, Player, TargetLock
from ..models.ship import Ship, ShipType
from ..utils.constants import (
    ABILITY_COST,
    CAMO_SIZE,
    CAMO_USES,
    COMMAND_COOLDOWN,
    DECOY_USES,
    ESCAPE_USES,
    JAM_COOLDOWN,
    JAM_DURATION,
    MULTI_TARGET_COUNT,
    RADAR_COOLDOWN,
    REPAIR_COOLDOWN,
    SCOUT_COOLDOWN,
    SHIELD_COOLDOWN,
    TARGET_LOCK_DURATION,
)
from ..utils.coords import cell_label, in_bounds
from .board import place_ship, relocation_grid
from .errors import IllegalMoveError, SkillError

logger = logging.getLogger(__name__)

COOLDOWNS: dict[ShipType, int] = {
    ShipType.REPAIRSHIP: REPAIR_COOLDOWN,
    ShipType.RADARSHIP: RADAR_COOLDOWN,
    ShipType.JAMSHIP: JAM_COOLDOWN,
    ShipType.SCOUTSHIP: SCOUT_COOLDOWN,
    ShipType.SHIELDSHIP: SHIELD_COOLDOWN,
    ShipType.COMMANDSHIP: COMMAND_COOLDOWN,
}

USES: dict[ShipType, int] = {
    ShipType.DECOYSHIP: DECOY_USES,
    ShipType.CAMOSHIP: CAMO_USES,
    ShipType.MOTHERSHIP: ESCAPE_USES,
}

# Originating ships that must be intact to use their ability
REQUIRES_UNDAMAGED = frozenset({ShipType.CAMOSHIP, ShipType.SHIELDSHIP, ShipType.COMMANDSHIP})


@dataclass(frozen=True)
class SkillOptions:
    """Targeting parameters for an ability.

    Attributes:
        coord: Single target cell (repair, decoy, camo, shield, relocation)
        targets: Multi-cell target set (radar, jam, target-lock)
        horizontal: Orientation for relocation
        ship_name: Ship being relocated by the Commandship
    """

    coord: Coord | None = None
    targets: tuple[Coord, ...] = ()
    horizontal: bool = True
    ship_name: str | None = None

    @classmethod
    def at(cls, x: int, y: int, **kwargs) -> "SkillOptions":
        return cls(coord=Coord(x, y), **kwargs)


def initial_cooldowns() -> dict[ShipType, int]:
    return {ship_type: 0 for ship_type in COOLDOWNS}


def initial_uses() -> dict[ShipType, int]:
    return dict(USES)


def check_skill_available(state: GameState, player: Player, ship_type: ShipType) -> None:
    """Shared eligibility contract, checked before any mutation.

    Raises:
        IllegalMoveError: With a player-facing reason when the ability is unavailable
    """
    if state.phase != GamePhase.PLAYING:
        raise IllegalMoveError("Abilities can only be used during play.")
    if state.current_player_id != player.id:
        raise IllegalMoveError("It's not your turn.")
    if ship_type == ShipType.SUPPORTSHIP:
        raise IllegalMoveError("Supportship has no active ability.")
    if ship_type not in COOLDOWNS and ship_type not in USES:
        raise IllegalMoveError("Unknown skill type.")
    if player.action_points < ABILITY_COST:
        raise IllegalMoveError("Not enough Action Points to use a skill.")

    ship = player.ship_of_type(ship_type)
    if ship is None:
        raise IllegalMoveError(f"You have no {ship_type.value} in your fleet.")
    if ship.is_sunk:
        raise IllegalMoveError(f"{ship.name} is sunk.")
    if ship_type in REQUIRES_UNDAMAGED and ship.is_damaged:
        raise IllegalMoveError(f"{ship.name} is damaged and cannot use its skill.")
    if player.is_ship_jammed(ship):
        raise IllegalMoveError(f"{ship.name} is jammed and cannot use its skill.")

    cooldown = player.skill_cooldowns.get(ship_type, 0)
    if cooldown > 0:
        raise IllegalMoveError(f"{ship.name} skill is on cooldown for {cooldown} turn(s).")
    if ship_type in USES and player.skill_uses.get(ship_type, 0) <= 0:
        raise IllegalMoveError(f"{ship.name} skill has no uses left.")


def apply_skill(
    state: GameState, player_id: str, ship_type: ShipType, options: SkillOptions
) -> GameState | SkillError:
    """Use a ship's ability.

    Args:
        state: Current game state (not modified)
        player_id: Caster
        ship_type: Originating ship type
        options: Targeting parameters

    Returns:
        New game state on success, SkillError describing the rejection otherwise
    """
    new_state = state.copy()
    player = new_state.player(player_id)
    if player is None:
        return SkillError(f"Unknown player: {player_id}")

    handler = _HANDLERS.get(ship_type)
    try:
        check_skill_available(new_state, player, ship_type)
        if handler is None:
            raise IllegalMoveError("Unknown skill type.")
        message, coords = handler(new_state, player, options)
    except IllegalMoveError as e:
        logger.debug(f"{player.name} {ship_type.value} rejected: {e}")
        return SkillError(str(e))

    player.action_points -= ABILITY_COST
    if ship_type in COOLDOWNS:
        player.skill_cooldowns[ship_type] = COOLDOWNS[ship_type]
    if ship_type in USES:
        player.skill_uses[ship_type] = player.skill_uses.get(ship_type, 0) - 1

    new_state.add_log(
        LogEntry(
            turn=new_state.turn,
            player_id=player.id,
            player_name=player.name,
            result=LogResult.SKILL_USED,
            coords=coords,
            message=message,
        )
    )
    new_state.active_action = None
    logger.debug(f"{player.name} used {ship_type.value}: {message}")
    return new_state


# ============================================
# HANDLERS
# ============================================
# Each handler mutates the scratch copy and returns (log message, log coords).


def _require_coord(state: GameState, options: SkillOptions) -> Coord:
    coord = options.coord
    if coord is None or not in_bounds(coord.x, coord.y, state.dimensions):
        raise IllegalMoveError("Select a cell on the grid.")
    return coord


def _require_targets(state: GameState, options: SkillOptions, what: str) -> tuple[Coord, ...]:
    targets = options.targets
    if len(targets) != MULTI_TARGET_COUNT or len(set(targets)) != MULTI_TARGET_COUNT:
        raise IllegalMoveError(f"Invalid number of {what} targets.")
    for t in targets:
        if not in_bounds(t.x, t.y, state.dimensions):
            raise IllegalMoveError(f"{what.capitalize()} target {t.x},{t.y} is off the grid.")
    return targets


def _opponent(state: GameState, player: Player) -> Player:
    opponent = state.opponent_of(player.id)
    if opponent is None:
        raise IllegalMoveError("No opponent to target.")
    return opponent


def _shots_against(state: GameState, player: Player, opponent: Player):
    if opponent.id not in player.shots:
        player.shots[opponent.id] = create_empty_grid(state.dimensions.rows, state.dimensions.cols)
    return player.shots[opponent.id]


def _forget_cells(state: GameState, owner: Player, cells: list[Coord]) -> None:
    """Reset opponents' knowledge of the given cells on owner's board to EMPTY."""
    for other in state.players:
        if other.id == owner.id:
            continue
        shots = other.shots.get(owner.id)
        if shots is None:
            continue
        for pos in cells:
            shots[pos.y][pos.x] = CellState.EMPTY


def _repair(state: GameState, player: Player, options: SkillOptions):
    coord = _require_coord(state, options)
    if player.grid[coord.y][coord.x] != CellState.HIT:
        raise IllegalMoveError("You can only repair damaged ship parts.")
    ship = player.ship_at(coord)
    if ship is None:
        raise IllegalMoveError("No ship found at the selected location.")
    if ship.has_been_repaired:
        raise IllegalMoveError(f"{ship.name} has already been repaired once.")

    player.grid[coord.y][coord.x] = CellState.SHIP
    _forget_cells(state, player, [coord])
    ship.has_been_repaired = True

    if not any(player.grid[p.y][p.x] == CellState.HIT for p in ship.positions):
        # Fully healed: the ship goes dark for every opponent
        ship.is_damaged = False
        _forget_cells(state, player, ship.positions)

    return f"{player.name} repaired their {ship.name}.", None


def _radar(state: GameState, player: Player, options: SkillOptions):
    targets = _require_targets(state, options, "radar")
    opponent = _opponent(state, player)
    shots = _shots_against(state, player, opponent)

    readings = []
    for t in targets:
        cell = opponent.grid[t.y][t.x]
        if cell in (CellState.SHIP, CellState.HIT):
            reading = CellState.RADAR_CONTACT
        elif cell == CellState.ASTEROID:
            reading = CellState.ASTEROID
        else:
            reading = CellState.EMPTY
        readings.append(RadarReading(coords=t, state=reading))
        if reading == CellState.RADAR_CONTACT and shots[t.y][t.x] == CellState.EMPTY:
            shots[t.y][t.x] = CellState.RADAR_CONTACT

    state.radar_scan_result = RadarScanResult(player_id=player.id, results=tuple(readings))
    return f"{player.name} scanned the enemy grid.", None


def _jam(state: GameState, player: Player, options: SkillOptions):
    targets = _require_targets(state, options, "jam")
    opponent = _opponent(state, player)
    opponent.jammed_positions = list(targets)
    opponent.jam_turns_remaining = JAM_DURATION
    state.jammed_area = JammedArea(player_id=opponent.id, coords=tuple(targets))
    return f"{player.name} jammed a section of the enemy grid.", None


def _decoy(state: GameState, player: Player, options: SkillOptions):
    coord = _require_coord(state, options)
    if player.grid[coord.y][coord.x] != CellState.EMPTY or coord in player.decoy_positions:
        raise IllegalMoveError("Decoys can only be placed in empty water.")
    player.decoy_positions.append(coord)
    return f"{player.name} placed a decoy at {cell_label(coord.x, coord.y)}.", None


def _camo(state: GameState, player: Player, options: SkillOptions):
    coord = _require_coord(state, options)
    if player.camo_area is not None:
        raise IllegalMoveError("A camouflage field is already deployed.")
    dims = state.dimensions
    if coord.x + CAMO_SIZE > dims.cols or coord.y + CAMO_SIZE > dims.rows:
        raise IllegalMoveError("The camouflage field must fit on the grid.")
    player.camo_area = CamoArea(x=coord.x, y=coord.y)
    return f"{player.name} deployed a camouflage field.", None


def _scout(state: GameState, player: Player, options: SkillOptions):
    targets = _require_targets(state, options, "lock-on")
    opponent = _opponent(state, player)
    player.target_locks[opponent.id] = TargetLock(
        cells=tuple(targets), turns_remaining=TARGET_LOCK_DURATION
    )
    return f"{player.name} locked onto enemy coordinates.", None


def _shield(state: GameState, player: Player, options: SkillOptions):
    coord = _require_coord(state, options)
    cell = player.grid[coord.y][coord.x]
    if cell == CellState.ASTEROID:
        raise IllegalMoveError("Cannot place a shield on an asteroid.")
    if player.is_shielded(coord):
        raise IllegalMoveError("This location is already shielded.")
    if cell not in (CellState.SHIP, CellState.EMPTY):
        raise IllegalMoveError("Shields can only be placed on healthy ship parts or empty water.")
    if cell == CellState.SHIP:
        ship = player.ship_at(coord)
        if ship is not None and any(player.is_shielded(p) for p in ship.positions):
            raise IllegalMoveError("This ship already has a shield.")

    player.shielded_positions.append(coord)
    return f"{player.name} deployed a shield at {cell_label(coord.x, coord.y)}.", coord


def _relocate(state: GameState, player: Player, ship: Ship, options: SkillOptions) -> Ship:
    """Move a ship to options.coord, carrying shields to the same hull index."""
    coord = _require_coord(state, options)
    if player.is_ship_jammed(ship):
        raise IllegalMoveError(f"{ship.name} is jammed and cannot be relocated.")

    grid = relocation_grid(state, player, ship)
    old_positions = list(ship.positions)
    try:
        grid, moved = place_ship(grid, ship, coord.x, coord.y, options.horizontal)
    except IllegalMoveError:
        raise IllegalMoveError("Cannot place ship there.") from None

    shielded_indices = [i for i, pos in enumerate(old_positions) if player.is_shielded(pos)]
    player.shielded_positions = [p for p in player.shielded_positions if p not in old_positions]
    player.shielded_positions.extend(moved.positions[i] for i in shielded_indices)

    for pos in old_positions:
        player.grid[pos.y][pos.x] = CellState.EMPTY
    for pos in moved.positions:
        player.grid[pos.y][pos.x] = CellState.SHIP
    _forget_cells(state, player, old_positions)

    moved.has_been_relocated = True
    index = player.ships.index(ship)
    player.ships[index] = moved
    return moved


def _commandship(state: GameState, player: Player, options: SkillOptions):
    if not options.ship_name:
        raise IllegalMoveError("No ship selected for relocation.")
    ship = player.ship_named(options.ship_name)
    if ship is None:
        raise IllegalMoveError("No ship selected for relocation.")
    check_relocatable(ship)
    moved = _relocate(state, player, ship, options)
    return f"{player.name} relocated their {moved.name}.", None


def check_relocatable(ship: Ship) -> None:
    """Commandship eligibility for the ship being moved."""
    if ship.is_sunk:
        raise IllegalMoveError(f"{ship.name} is sunk.")
    if ship.is_damaged:
        raise IllegalMoveError("Cannot relocate a damaged ship.")
    if ship.has_been_relocated:
        raise IllegalMoveError(f"{ship.name} has already been relocated once.")


def _escape(state: GameState, player: Player, options: SkillOptions):
    mothership = player.ship_of_type(ShipType.MOTHERSHIP)
    if not mothership.is_damaged:
        raise IllegalMoveError("The Mothership can only escape once it has been hit.")
    if not player.escape_skill_unlocked:
        raise IllegalMoveError("Emergency escape has not been unlocked.")
    if mothership.has_been_relocated:
        raise IllegalMoveError(f"{mothership.name} has already been relocated once.")

    moved = _relocate(state, player, mothership, options)
    moved.is_damaged = False
    return f"{player.name} executed an emergency escape maneuver!", None


_HANDLERS = {
    ShipType.REPAIRSHIP: _repair,
    ShipType.RADARSHIP: _radar,
    ShipType.JAMSHIP: _jam,
    ShipType.DECOYSHIP: _decoy,
    ShipType.CAMOSHIP: _camo,
    ShipType.SCOUTSHIP: _scout,
    ShipType.SHIELDSHIP: _shield,
    ShipType.COMMANDSHIP: _commandship,
    ShipType.MOTHERSHIP: _escape,
}
