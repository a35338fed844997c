"""Attack resolution.

A single authoritative path turns a shot into a new state plus log entries.

Tactical precedence:
1. Shield (consumed, nothing behind it is touched)
2. Asteroid (destroyed, no damage)
3. Camouflage without a covering target-lock (attacker sees CAMO_HIT, the
   real effect is applied silently)
4. Decoy (reads as HIT, removed)
5. Ship hit / miss, with Supportship and Mothership side effects and sinking

Classic mode only does hit / miss / sink.

Out-of-turn, out-of-bounds, unaffordable and already-resolved shots are
guarded no-ops: the input state is returned unchanged.
"""

import logging

from ..models.cell import CLASSIC_RESHOOTABLE, TACTICAL_RESHOOTABLE, CellState, Coord, create_empty_grid
from ..models.game import GameMode, GamePhase, GameState, LastShot, LogEntry, LogResult
from ..models.player import Player
from ..models.ship import Ship, ShipType
from ..utils.constants import ATTACK_COST
from ..utils.coords import cell_label, in_bounds

logger = logging.getLogger(__name__)


def is_reshootable(cell: CellState, mode: GameMode) -> bool:
    """Whether an attacker may fire at a cell showing this state on their shot grid."""
    allowed = TACTICAL_RESHOOTABLE if mode == GameMode.TACTICAL else CLASSIC_RESHOOTABLE
    return cell in allowed


def resolve_shot(
    state: GameState,
    target_player_id: str,
    x: int,
    y: int,
    attacker_id: str | None = None,
) -> GameState:
    """Resolve one shot by the current player.

    Args:
        state: Current game state (not modified)
        target_player_id: Player being fired at
        x: Target column
        y: Target row
        attacker_id: Expected attacker; must be the current player if given

    Returns:
        New game state, or the input state if the shot was rejected
    """
    attacker_id = attacker_id or state.current_player_id
    if state.phase != GamePhase.PLAYING or attacker_id != state.current_player_id:
        logger.debug(f"Shot rejected: not {attacker_id}'s turn to fire")
        return state
    if target_player_id == attacker_id or state.player(target_player_id) is None:
        logger.debug(f"Shot rejected: invalid target {target_player_id}")
        return state
    if not in_bounds(x, y, state.dimensions):
        logger.debug(f"Shot rejected: ({x}, {y}) is off the board")
        return state
    if state.current_player.action_points < ATTACK_COST:
        logger.debug(f"Shot rejected: {attacker_id} has no action points")
        return state

    new_state = state.copy()
    attacker = new_state.player(attacker_id)
    target = new_state.player(target_player_id)
    shots = attacker.shots.get(target.id)
    if shots is None:
        shots = create_empty_grid(new_state.dimensions.rows, new_state.dimensions.cols)
        attacker.shots[target.id] = shots

    attacker.action_points -= ATTACK_COST
    if not is_reshootable(shots[y][x], new_state.game_mode):
        # Double-fire on a resolved cell: refund and keep the original snapshot
        attacker.action_points += ATTACK_COST
        logger.debug(f"Shot rejected: {cell_label(x, y)} already resolved ({shots[y][x].value})")
        return state

    coord = Coord(x, y)
    if new_state.game_mode == GameMode.TACTICAL:
        _resolve_tactical(new_state, attacker, target, coord)
    else:
        _resolve_classic(new_state, attacker, target, coord)
    new_state.last_shot = LastShot(coords=coord, attacker_id=attacker.id, target_id=target.id)
    return new_state


def _base_entry(state: GameState, attacker: Player, target: Player, coord: Coord, **kwargs) -> LogEntry:
    return LogEntry(
        turn=state.turn,
        player_id=attacker.id,
        player_name=attacker.name,
        target_id=target.id,
        target_name=target.name,
        coords=coord,
        **kwargs,
    )


def _end_game(state: GameState, winner: Player, loser: Player) -> None:
    loser.is_eliminated = True
    state.phase = GamePhase.GAME_OVER
    state.winner = winner.id
    state.active_action = None
    logger.info(f"Game over: {winner.name} wins on turn {state.turn}")


def _resolve_classic(state: GameState, attacker: Player, target: Player, coord: Coord) -> None:
    shots = attacker.shots[target.id]
    x, y = coord.x, coord.y
    target_cell = target.grid[y][x]

    if target_cell == CellState.SHIP:
        shots[y][x] = CellState.HIT
        target.grid[y][x] = CellState.HIT
        ship = target.ship_at(coord)
        ship.is_damaged = True
        if _is_sunk(target, ship):
            _sink(attacker, target, ship)
            state.add_log(
                _base_entry(state, attacker, target, coord, result=LogResult.SUNK_SHIP, sunk_ship_name=ship.name)
            )
        else:
            state.add_log(
                _base_entry(state, attacker, target, coord, result=LogResult.HIT, hit_ship_name=ship.name)
            )
    else:
        shots[y][x] = CellState.MISS
        if target_cell != CellState.ASTEROID:
            target.grid[y][x] = CellState.MISS
        state.add_log(_base_entry(state, attacker, target, coord, result=LogResult.MISS))

    if target.ships and all(s.is_sunk for s in target.ships):
        target.is_eliminated = True
    active = [p for p in state.players if not p.is_eliminated]
    if len(active) <= 1:
        state.phase = GamePhase.GAME_OVER
        state.winner = active[0].id if active else None
        state.active_action = None
        logger.info(f"Game over: winner {state.winner} on turn {state.turn}")


def _is_sunk(target: Player, ship: Ship) -> bool:
    return all(target.grid[p.y][p.x] == CellState.HIT for p in ship.positions)


def _sink(attacker: Player, target: Player, ship: Ship, reveal: bool = True) -> None:
    ship.is_sunk = True
    for pos in ship.positions:
        target.grid[pos.y][pos.x] = CellState.SUNK
        if reveal:
            attacker.shots[target.id][pos.y][pos.x] = CellState.SUNK


def _in_concealment(attacker: Player, target: Player, coord: Coord) -> bool:
    return (
        target.camo_area is not None
        and target.camo_area.contains(coord)
        and not attacker.has_lock_on(target.id, coord)
    )


def _resolve_tactical(state: GameState, attacker: Player, target: Player, coord: Coord) -> None:
    shots = attacker.shots[target.id]
    x, y = coord.x, coord.y
    label = cell_label(x, y)

    if target.is_shielded(coord):
        target.shielded_positions = [p for p in target.shielded_positions if p != coord]
        was_bluff = target.grid[y][x] in (CellState.EMPTY, CellState.MISS)
        if _in_concealment(attacker, target, coord):
            shots[y][x] = CellState.CAMO_HIT
            state.add_log(_base_entry(state, attacker, target, coord, result=LogResult.CAMO_HIT))
        else:
            shots[y][x] = CellState.SHIELD_HIT
            if was_bluff:
                message = f"{attacker.name}'s shot at {label} broke a bluff shield!"
            else:
                message = f"{attacker.name}'s shot at {label} was absorbed by an energy shield!"
            state.add_log(
                _base_entry(state, attacker, target, coord, result=LogResult.SHIELD_BROKEN, message=message)
            )
        return

    target_cell = target.grid[y][x]
    if target_cell == CellState.ASTEROID:
        target.grid[y][x] = CellState.EMPTY
        shots[y][x] = CellState.ASTEROID_DESTROYED
        state.add_log(_base_entry(state, attacker, target, coord, result=LogResult.ASTEROID_DESTROYED))
        return

    if _in_concealment(attacker, target, coord):
        shots[y][x] = CellState.CAMO_HIT
        state.add_log(_base_entry(state, attacker, target, coord, result=LogResult.CAMO_HIT))
        if coord in target.decoy_positions:
            target.decoy_positions.remove(coord)
        elif target_cell == CellState.SHIP:
            _apply_ship_hit(state, attacker, target, coord, concealed=True)
        return

    if coord in target.decoy_positions:
        target.decoy_positions.remove(coord)
        shots[y][x] = CellState.HIT
        state.add_log(
            _base_entry(state, attacker, target, coord, result=LogResult.HIT, hit_ship_name="decoy")
        )
    elif target_cell == CellState.SHIP:
        shots[y][x] = CellState.HIT
        _apply_ship_hit(state, attacker, target, coord, concealed=False)
    else:
        shots[y][x] = CellState.MISS
        target.grid[y][x] = CellState.MISS
        state.add_log(_base_entry(state, attacker, target, coord, result=LogResult.MISS))


def _apply_ship_hit(
    state: GameState, attacker: Player, target: Player, coord: Coord, concealed: bool
) -> None:
    """Damage the struck ship and apply passive effects.

    The true board always advances. When concealed, nothing beyond the
    CAMO_HIT already written is revealed to the attacker.
    """
    target.grid[coord.y][coord.x] = CellState.HIT
    ship = target.ship_at(coord)
    ship.is_damaged = True

    if ship.ship_type == ShipType.SUPPORTSHIP:
        target.bonus_ap += 1
        if not concealed:
            state.add_log(
                LogEntry(
                    turn=state.turn,
                    player_id=target.id,
                    player_name=target.name,
                    result=LogResult.SKILL_USED,
                    message=f"{target.name} will gain +1 AP next turn from a passive ability!",
                )
            )

    if ship.ship_type == ShipType.MOTHERSHIP:
        target.escape_skill_unlocked = True
        # A Mothership hit ends the attacker's turn; unspent AP carries over
        attacker.bonus_ap += attacker.action_points
        attacker.action_points = 0

    if _is_sunk(target, ship):
        _sink(attacker, target, ship, reveal=not concealed)
        attacker.bonus_ap += 1
        if not concealed:
            state.add_log(
                _base_entry(
                    state,
                    attacker,
                    target,
                    coord,
                    result=LogResult.SUNK_SHIP,
                    sunk_ship_name=ship.name,
                    message=f"{attacker.name} will receive +1 AP next turn.",
                )
            )
        logger.info(f"{attacker.name} sank {target.name}'s {ship.name}")
        if ship.ship_type == ShipType.MOTHERSHIP:
            _end_game(state, attacker, target)
    elif not concealed:
        state.add_log(
            _base_entry(state, attacker, target, coord, result=LogResult.HIT, hit_ship_name=ship.name)
        )
