"""Player data model: own board, roster, knowledge of opponents and status effects."""

from dataclasses import dataclass, field, replace

from ..utils.constants import CAMO_SIZE
from .cell import Coord, Grid, copy_grid
from .ship import Ship, ShipType


@dataclass(frozen=True)
class TargetLock:
    """Scoutship lock that sees through an opponent's camouflage on specific cells.

    Attributes:
        cells: Locked coordinates on the opponent's board
        turns_remaining: Caster turn-advances left before the lock expires
    """

    cells: tuple[Coord, ...]
    turns_remaining: int

    def covers(self, coord: Coord) -> bool:
        return coord in self.cells


@dataclass(frozen=True)
class CamoArea:
    """Camouflage rectangle on a player's own board, fixed once deployed."""

    x: int
    y: int
    width: int = CAMO_SIZE
    height: int = CAMO_SIZE

    def contains(self, coord: Coord) -> bool:
        return self.x <= coord.x < self.x + self.width and self.y <= coord.y < self.y + self.height


@dataclass
class Player:
    """Player state: ground-truth board plus what the player has learned.

    shots maps an opponent id to the grid of results this player has
    observed when firing at that opponent. Cooldowns decrement only on this
    player's own turn-advance.
    """

    id: str
    name: str
    is_ai: bool
    grid: Grid  # Own board (ground truth)
    ships: list[Ship] = field(default_factory=list)
    shots: dict[str, Grid] = field(default_factory=dict)  # Opponent ID -> shot grid
    is_ready: bool = False
    is_eliminated: bool = False
    skill_cooldowns: dict[ShipType, int] = field(default_factory=dict)  # Turns remaining
    skill_uses: dict[ShipType, int] = field(default_factory=dict)  # Uses remaining
    action_points: int = 0
    bonus_ap: int = 0  # Banked into next turn's allotment
    decoy_positions: list[Coord] = field(default_factory=list)
    shielded_positions: list[Coord] = field(default_factory=list)
    jammed_positions: list[Coord] = field(default_factory=list)  # Set by the opponent's Jamship
    jam_turns_remaining: int = 0
    escape_skill_unlocked: bool = False
    camo_area: CamoArea | None = None
    target_locks: dict[str, TargetLock] = field(default_factory=dict)  # Opponent ID -> lock

    def __post_init__(self):
        """Validate player data after initialization."""
        if not self.id:
            raise ValueError("Player id cannot be empty")
        if self.action_points < 0:
            raise ValueError(f"Invalid action_points: {self.action_points} (must be >= 0)")
        if self.bonus_ap < 0:
            raise ValueError(f"Invalid bonus_ap: {self.bonus_ap} (must be >= 0)")
        if self.jam_turns_remaining < 0:
            raise ValueError(
                f"Invalid jam_turns_remaining: {self.jam_turns_remaining} (must be >= 0)"
            )

    def ship_at(self, coord: Coord) -> Ship | None:
        """Return the ship occupying a coordinate, if any."""
        for ship in self.ships:
            if ship.occupies(coord):
                return ship
        return None

    def ship_of_type(self, ship_type: ShipType) -> Ship | None:
        for ship in self.ships:
            if ship.ship_type == ship_type:
                return ship
        return None

    def ship_named(self, name: str) -> Ship | None:
        for ship in self.ships:
            if ship.name == name:
                return ship
        return None

    def is_ship_jammed(self, ship: Ship) -> bool:
        """A ship is jammed while any of its cells lies in this player's jammed set."""
        if self.jam_turns_remaining <= 0:
            return False
        return any(pos in self.jammed_positions for pos in ship.positions)

    def is_shielded(self, coord: Coord) -> bool:
        return coord in self.shielded_positions

    def has_lock_on(self, opponent_id: str, coord: Coord) -> bool:
        lock = self.target_locks.get(opponent_id)
        return lock is not None and lock.covers(coord)

    def copy(self) -> "Player":
        """Structural copy: mutable containers are duplicated, frozen leaves shared."""
        return replace(
            self,
            grid=copy_grid(self.grid),
            ships=[ship.copy() for ship in self.ships],
            shots={opponent_id: copy_grid(g) for opponent_id, g in self.shots.items()},
            skill_cooldowns=dict(self.skill_cooldowns),
            skill_uses=dict(self.skill_uses),
            decoy_positions=list(self.decoy_positions),
            shielded_positions=list(self.shielded_positions),
            jammed_positions=list(self.jammed_positions),
            target_locks=dict(self.target_locks),
        )
