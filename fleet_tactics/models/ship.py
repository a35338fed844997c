"""Ship data model and ship-type catalog tags."""

from dataclasses import dataclass, field, replace
from enum import Enum

from .cell import Coord


class ShipType(str, Enum):
    """Type tag for a ship.

    The first ten members are the Tactical catalog. The Classic roster
    uses its ship names as type tags and carries no abilities.
    """

    MOTHERSHIP = "Mothership"
    CAMOSHIP = "Camoship"
    COMMANDSHIP = "Commandship"
    SCOUTSHIP = "Scoutship"
    RADARSHIP = "Radarship"
    SHIELDSHIP = "Shieldship"
    REPAIRSHIP = "Repairship"
    JAMSHIP = "Jamship"
    DECOYSHIP = "Decoyship"
    SUPPORTSHIP = "Supportship"

    CARRIER = "Carrier"
    BATTLESHIP = "Battleship"
    CRUISER = "Cruiser"
    SUBMARINE = "Submarine"
    DESTROYER = "Destroyer"


@dataclass(frozen=True)
class ShipSpec:
    """Catalog entry for a ship that can be drafted into a fleet.

    Attributes:
        name: Display name (unique within a roster)
        ship_type: Type tag
        length: Number of cells occupied
        point_cost: Fleet-budget cost (0 in Classic)
    """

    name: str
    ship_type: ShipType
    length: int
    point_cost: int = 0

    def build(self) -> "Ship":
        """Create an unplaced Ship instance from this catalog entry."""
        return Ship(
            name=self.name,
            ship_type=self.ship_type,
            length=self.length,
            point_cost=self.point_cost,
        )


@dataclass
class Ship:
    """A ship instance in a player's roster.

    Positions are empty until the ship is placed during setup. Repair and
    relocation flags are sticky for the lifetime of the ship.
    """

    name: str
    ship_type: ShipType
    length: int
    positions: list[Coord] = field(default_factory=list)  # Empty until placed
    is_sunk: bool = False
    is_damaged: bool = False
    has_been_repaired: bool = False  # At most one repair, ever
    has_been_relocated: bool = False  # At most one relocation, ever
    point_cost: int = 0

    def __post_init__(self):
        """Validate ship data after initialization."""
        if self.length <= 0:
            raise ValueError(f"Invalid length for {self.name}: {self.length} (must be > 0)")
        if self.positions:
            if len(self.positions) != self.length:
                raise ValueError(
                    f"{self.name} occupies {len(self.positions)} cells (expected {self.length})"
                )
            if not _is_straight_run(self.positions):
                raise ValueError(f"{self.name} positions are not a contiguous straight line")

    @property
    def is_placed(self) -> bool:
        return bool(self.positions)

    def occupies(self, coord: Coord) -> bool:
        """Check whether this ship covers the given coordinate."""
        return coord in self.positions

    def copy(self) -> "Ship":
        return replace(self, positions=list(self.positions))


def _is_straight_run(positions: list[Coord]) -> bool:
    xs = {p.x for p in positions}
    ys = {p.y for p in positions}
    if len(ys) == 1:
        ordered = sorted(p.x for p in positions)
    elif len(xs) == 1:
        ordered = sorted(p.y for p in positions)
    else:
        return False
    return ordered == list(range(ordered[0], ordered[0] + len(ordered)))
