"""Active-action state machine.

Players compose an action over several inputs before it commits: radar,
jam and target-lock collect four cells, the Commandship picks a ship and
then a destination. The in-flight selection lives on GameState as an
ActiveAction with a typed stage:

    begin_action -> AIM                  -> select_target fires (repeatable)
    begin_action -> SELECT_*_TARGETS     -> select_target x4 commits
    begin_action -> single-cell stage    -> select_target commits
    begin_action -> SELECT_SHIP          -> select_ship -> PLACE_SHIP -> select_target commits

Every commit goes through the same engine entry points as any other move.
"""

import logging
from dataclasses import replace

from ..models.action import MULTI_TARGET_STAGES, ActionKind, ActionStage, ActiveAction
from ..models.cell import Coord
from ..models.game import GameMode, GamePhase, GameState
from ..models.ship import ShipType
from ..utils.constants import ATTACK_COST, MULTI_TARGET_COUNT
from ..utils.coords import in_bounds
from .abilities import SkillOptions, check_relocatable, check_skill_available
from .core import apply_skill, process_shot
from .errors import IllegalMoveError, SkillError

logger = logging.getLogger(__name__)

FIRST_STAGE: dict[ShipType, ActionStage] = {
    ShipType.REPAIRSHIP: ActionStage.SELECT_REPAIR_TARGET,
    ShipType.RADARSHIP: ActionStage.SELECT_R_TARGETS,
    ShipType.JAMSHIP: ActionStage.SELECT_J_TARGETS,
    ShipType.SCOUTSHIP: ActionStage.SELECT_TARGET_LOCK,
    ShipType.DECOYSHIP: ActionStage.PLACE_DECOY,
    ShipType.CAMOSHIP: ActionStage.PLACE_CAMO,
    ShipType.SHIELDSHIP: ActionStage.SELECT_SHIELD_TARGET,
    ShipType.COMMANDSHIP: ActionStage.SELECT_SHIP,
    ShipType.MOTHERSHIP: ActionStage.PLACE_SHIP,
}


def begin_action(
    state: GameState, player_id: str, ship_type: ShipType | None = None
) -> GameState | SkillError:
    """Start composing an attack (ship_type None) or an ability.

    Selecting the action that is already in progress cancels it.

    Returns:
        New state with the first stage set, or SkillError if the action is
        not available right now
    """
    active = state.active_action
    kind = ActionKind.ATTACK if ship_type is None else ActionKind.SKILL
    if active is not None and active.player_id == player_id and active.kind == kind:
        if active.ship_type == ship_type:
            return cancel_action(state)

    player = state.player(player_id)
    if player is None:
        return SkillError(f"Unknown player: {player_id}")
    if state.phase != GamePhase.PLAYING or state.current_player_id != player_id:
        return SkillError("It's not your turn.")

    if kind == ActionKind.ATTACK:
        if player.action_points < ATTACK_COST:
            return SkillError("Not enough Action Points to attack.")
        action = ActiveAction(player_id=player_id, kind=kind, stage=ActionStage.AIM)
        return state.with_changes(active_action=action)

    if state.game_mode != GameMode.TACTICAL:
        return SkillError("Skills are not available in Classic mode.")
    try:
        check_skill_available(state, player, ship_type)
        ship_to_move = None
        if ship_type == ShipType.MOTHERSHIP:
            mothership = player.ship_of_type(ShipType.MOTHERSHIP)
            if not mothership.is_damaged or not player.escape_skill_unlocked:
                raise IllegalMoveError("Emergency escape is only available after the Mothership is hit.")
            ship_to_move = mothership.name
    except IllegalMoveError as e:
        return SkillError(str(e))

    action = ActiveAction(
        player_id=player_id,
        kind=kind,
        stage=FIRST_STAGE[ship_type],
        ship_type=ship_type,
        ship_to_move=ship_to_move,
    )
    logger.debug(f"{player.name} started {ship_type.value} ({action.stage.value})")
    return state.with_changes(active_action=action)


def select_target(
    state: GameState, coord: Coord, player_id: str | None = None
) -> GameState | SkillError:
    """Feed one cell into the active action.

    Multi-target stages toggle the cell and commit once four distinct cells
    are collected. Single-cell stages commit immediately. AIM fires a shot
    and stays armed while the player can afford another.
    """
    active = state.active_action
    if active is None:
        return SkillError("No action selected.")
    if player_id is not None and active.player_id != player_id:
        return SkillError("It's not your turn.")
    if not in_bounds(coord.x, coord.y, state.dimensions):
        return SkillError("Select a cell on the grid.")

    if active.stage == ActionStage.AIM:
        return _fire(state, active, coord)
    if active.stage == ActionStage.SELECT_SHIP:
        return SkillError("Select a ship to relocate first.")

    if active.stage in MULTI_TARGET_STAGES:
        updated = active.toggle_target(coord)
        if len(updated.targets) < MULTI_TARGET_COUNT:
            return state.with_changes(active_action=updated)
        options = SkillOptions(targets=updated.targets)
    elif active.stage == ActionStage.PLACE_SHIP:
        options = SkillOptions(
            coord=coord, horizontal=active.is_horizontal, ship_name=active.ship_to_move
        )
    else:
        options = SkillOptions(coord=coord)

    result = apply_skill(state, active.player_id, active.ship_type, options)
    if isinstance(result, SkillError):
        logger.debug(f"{active.ship_type.value} commit rejected: {result.error}")
    return result


def _fire(state: GameState, active: ActiveAction, coord: Coord) -> GameState:
    opponent = state.opponent_of(active.player_id)
    if opponent is None:
        return state
    new_state = process_shot(state, opponent.id, coord.x, coord.y)
    if new_state is state:
        return state

    attacker = new_state.player(active.player_id)
    still_armed = (
        new_state.phase == GamePhase.PLAYING
        and new_state.current_player_id == active.player_id
        and attacker.action_points >= ATTACK_COST
    )
    if not still_armed and new_state.active_action is not None:
        new_state.active_action = None
    return new_state


def select_ship(state: GameState, ship_name: str, player_id: str | None = None) -> GameState | SkillError:
    """Pick the ship the Commandship will relocate."""
    active = state.active_action
    if active is None or active.stage != ActionStage.SELECT_SHIP:
        return SkillError("No relocation in progress.")
    if player_id is not None and active.player_id != player_id:
        return SkillError("It's not your turn.")

    player = state.player(active.player_id)
    ship = player.ship_named(ship_name)
    if ship is None:
        return SkillError("No ship selected for relocation.")
    try:
        check_relocatable(ship)
        if player.is_ship_jammed(ship):
            raise IllegalMoveError(f"{ship.name} is jammed and cannot be relocated.")
    except IllegalMoveError as e:
        return SkillError(str(e))

    updated = replace(active, stage=ActionStage.PLACE_SHIP, ship_to_move=ship.name)
    return state.with_changes(active_action=updated)


def rotate_placement(state: GameState) -> GameState:
    """Flip the orientation of a pending relocation."""
    active = state.active_action
    if active is None or active.stage != ActionStage.PLACE_SHIP:
        return state
    return state.with_changes(active_action=replace(active, is_horizontal=not active.is_horizontal))


def cancel_action(state: GameState) -> GameState:
    if state.active_action is None:
        return state
    return state.with_changes(active_action=None)
