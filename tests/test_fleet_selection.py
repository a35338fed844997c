"""Tests for AI fleet drafting."""

import pytest

from fleet_tactics.agent.fleet_selection import FleetPersonality, select_ai_fleet
from fleet_tactics.models.catalog import TACTICAL_SHIP_POOL
from fleet_tactics.models.ship import ShipType
from fleet_tactics.utils.rng import GameRNG


@pytest.mark.parametrize("personality", list(FleetPersonality))
def test_every_personality_stays_legal(personality):
    fleet = select_ai_fleet(TACTICAL_SHIP_POOL, 30, personality=personality)

    types = [s.ship_type for s in fleet]
    assert types[0] == ShipType.MOTHERSHIP
    assert len(set(types)) == len(types)
    assert sum(s.point_cost for s in fleet) <= 30
    assert all(not s.positions for s in fleet)


def test_stealth_aggro_drafts_expensive_ships():
    fleet = select_ai_fleet(TACTICAL_SHIP_POOL, 30, personality=FleetPersonality.STEALTH_AGGRO)

    assert [s.name for s in fleet] == [
        "Mothership",
        "Camoship",
        "Jamship",
        "Commandship",
        "Scoutship",
        "Shieldship",
    ]


def test_swarm_drafts_cheap_ships():
    fleet = select_ai_fleet(TACTICAL_SHIP_POOL, 30, personality=FleetPersonality.MAX_PRESSURE_SWARM)

    assert len(fleet) == 8
    assert {s.ship_type for s in fleet}.isdisjoint({ShipType.CAMOSHIP, ShipType.COMMANDSHIP})


def test_tight_budget_keeps_only_the_mothership():
    fleet = select_ai_fleet(TACTICAL_SHIP_POOL, 2, personality=FleetPersonality.BALANCED_UTILITY)
    assert [s.name for s in fleet] == ["Mothership"]


def test_personality_comes_from_the_seed():
    first = select_ai_fleet(TACTICAL_SHIP_POOL, 30, GameRNG(8))
    second = select_ai_fleet(TACTICAL_SHIP_POOL, 30, GameRNG(8))
    assert [s.name for s in first] == [s.name for s in second]


def test_pool_without_mothership():
    pool = tuple(s for s in TACTICAL_SHIP_POOL if s.ship_type != ShipType.MOTHERSHIP)
    assert select_ai_fleet(pool, 30) == []
