"""AI fleet drafting under the fleet budget."""

import logging
from enum import Enum

from ..models.ship import Ship, ShipSpec, ShipType
from ..utils.rng import GameRNG

logger = logging.getLogger(__name__)


class FleetPersonality(str, Enum):
    STEALTH_AGGRO = "STEALTH_AGGRO"
    COUNTER_INTEL = "COUNTER_INTEL"
    BALANCED_UTILITY = "BALANCED_UTILITY"
    DEFENSIVE_WALL = "DEFENSIVE_WALL"
    MAX_PRESSURE_SWARM = "MAX_PRESSURE_SWARM"


# Ships each personality drafts before filling the rest of the budget
PRIORITY_SHIPS: dict[FleetPersonality, tuple[ShipType, ...]] = {
    FleetPersonality.STEALTH_AGGRO: (ShipType.CAMOSHIP, ShipType.JAMSHIP),
    FleetPersonality.COUNTER_INTEL: (ShipType.SCOUTSHIP, ShipType.RADARSHIP),
    FleetPersonality.BALANCED_UTILITY: (ShipType.COMMANDSHIP, ShipType.REPAIRSHIP),
    FleetPersonality.DEFENSIVE_WALL: (
        ShipType.SHIELDSHIP,
        ShipType.REPAIRSHIP,
        ShipType.SUPPORTSHIP,
        ShipType.DECOYSHIP,
    ),
    FleetPersonality.MAX_PRESSURE_SWARM: (ShipType.SUPPORTSHIP, ShipType.DECOYSHIP),
}


def select_ai_fleet(
    ship_pool: tuple[ShipSpec, ...],
    budget: int,
    rng: GameRNG | None = None,
    personality: FleetPersonality | None = None,
) -> list[Ship]:
    """Draft a fleet for the AI.

    The Mothership is always taken. The personality's priority ships come
    next, then the remaining budget is filled cheapest-first for the swarm
    personality and most-expensive-first for the others.

    Args:
        ship_pool: Tactical catalog
        budget: Point budget for the whole fleet
        rng: Random source used to pick a personality
        personality: Force a personality instead of picking one

    Returns:
        Unplaced ships in draft order
    """
    rng = rng or GameRNG()
    if personality is None:
        personality = rng.choice(list(FleetPersonality))

    mothership = next((s for s in ship_pool if s.ship_type == ShipType.MOTHERSHIP), None)
    if mothership is None:
        logger.error("Mothership not found in ship pool")
        return []

    fleet = [mothership]
    cost = mothership.point_cost
    available = [s for s in ship_pool if s.ship_type != ShipType.MOTHERSHIP]

    for ship_type in PRIORITY_SHIPS[personality]:
        spec = next((s for s in available if s.ship_type == ship_type), None)
        if spec is not None and cost + spec.point_cost <= budget:
            fleet.append(spec)
            cost += spec.point_cost
            available.remove(spec)

    cheapest_first = personality == FleetPersonality.MAX_PRESSURE_SWARM
    available.sort(key=lambda s: s.point_cost, reverse=not cheapest_first)
    for spec in available:
        if cost + spec.point_cost <= budget:
            fleet.append(spec)
            cost += spec.point_cost

    logger.info(
        f"AI drafted a {personality.value} fleet ({cost}/{budget} points): "
        f"{', '.join(s.name for s in fleet)}"
    )
    return [spec.build() for spec in fleet]
