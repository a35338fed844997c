"""Pydantic request schemas for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

MoveType = Literal[
    "fleetReady",
    "acknowledgeAiFleet",
    "setupReady",
    "fireShot",
    "useSkill",
    "beginAction",
    "selectTarget",
    "selectShip",
    "rotatePlacement",
    "cancelAction",
    "endTurn",
    "transitionContinue",
]


class CreateGameRequest(BaseModel):
    """Request to create a new game."""

    mode: str = Field(default="TACTICAL", description="'CLASSIC' or 'TACTICAL'")
    mapType: str = Field(  # noqa: N815
        default="STANDARD", description="'STANDARD' or 'ASTEROID_FIELD'"
    )
    opponentType: str = Field(  # noqa: N815
        default="AI", description="'AI', 'Human' (hot-seat) or 'ONLINE'"
    )
    playerName: str = Field(default="Player 1", min_length=1)  # noqa: N815
    opponentName: str | None = Field(default=None)  # noqa: N815
    seed: int | None = Field(default=None, description="Optional RNG seed for determinism")


class JoinGameRequest(BaseModel):
    """Request to join an online game waiting in the lobby."""

    playerName: str = Field(default="Player 2", min_length=1)  # noqa: N815


class CoordModel(BaseModel):
    """Single grid cell."""

    x: int
    y: int


class PlacementModel(BaseModel):
    """Deployment of one ship, anchored at its top-left cell."""

    shipName: str  # noqa: N815
    x: int
    y: int
    horizontal: bool = True


class MoveRequest(BaseModel):
    """One typed move from an authorized seat.

    Which optional fields are read depends on the move type: fireShot and
    selectTarget use x/y, useSkill uses shipType plus whichever of x/y,
    targets, horizontal and shipName the ability needs.
    """

    type: MoveType
    playerId: str  # noqa: N815
    token: str
    x: int | None = None
    y: int | None = None
    shipType: str | None = None  # noqa: N815
    shipName: str | None = None  # noqa: N815
    horizontal: bool = True
    targets: list[CoordModel] | None = None
    shipTypes: list[str] | None = None  # noqa: N815
    placements: list[PlacementModel] | None = None
