"""In-flight "active action": a multi-step ability commit protocol."""

from dataclasses import dataclass, replace
from enum import Enum

from .cell import Coord
from .ship import ShipType


class ActionKind(str, Enum):
    ATTACK = "ATTACK"
    SKILL = "SKILL"


class ActionStage(str, Enum):
    """Typed intermediate stage of an action the current player is composing."""

    AIM = "AIM"  # Attack selected, waiting for a cell on the opponent grid
    SELECT_REPAIR_TARGET = "SELECT_REPAIR_TARGET"
    SELECT_R_TARGETS = "SELECT_R_TARGETS"  # Radar: collect 4 cells
    SELECT_J_TARGETS = "SELECT_J_TARGETS"  # Jam: collect 4 cells
    SELECT_TARGET_LOCK = "SELECT_TARGET_LOCK"  # Scout: collect 4 cells
    PLACE_DECOY = "PLACE_DECOY"
    PLACE_CAMO = "PLACE_CAMO"
    SELECT_SHIELD_TARGET = "SELECT_SHIELD_TARGET"
    SELECT_SHIP = "SELECT_SHIP"  # Commandship: choose the ship to move
    PLACE_SHIP = "PLACE_SHIP"  # Commandship / Mothership escape: choose new cells


# Stages that accumulate several distinct cells before committing
MULTI_TARGET_STAGES = frozenset(
    {ActionStage.SELECT_R_TARGETS, ActionStage.SELECT_J_TARGETS, ActionStage.SELECT_TARGET_LOCK}
)


@dataclass(frozen=True)
class ActiveAction:
    """What the current player has tentatively selected but not yet committed.

    Attributes:
        player_id: Player composing the action
        kind: ATTACK or SKILL
        stage: Current stage of the commit protocol
        ship_type: Originating ship type for skills
        targets: Cells collected so far in multi-target stages
        ship_to_move: Name of the ship being relocated
        is_horizontal: Orientation for PLACE_SHIP
    """

    player_id: str
    kind: ActionKind
    stage: ActionStage
    ship_type: ShipType | None = None
    targets: tuple[Coord, ...] = ()
    ship_to_move: str | None = None
    is_horizontal: bool = True

    def toggle_target(self, coord: Coord) -> "ActiveAction":
        """Add a cell to the collected targets, or remove it if already selected."""
        if coord in self.targets:
            return replace(self, targets=tuple(t for t in self.targets if t != coord))
        return replace(self, targets=self.targets + (coord,))
