"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel, Field


class GameStateResponse(BaseModel):
    """Response containing one seat's view of the game."""

    gameId: str  # noqa: N815
    turn: int
    phase: str
    winner: str | None
    currentPlayerId: str | None  # noqa: N815
    version: int
    state: dict


class CreateGameResponse(BaseModel):
    """Response after creating a new game."""

    gameId: str  # noqa: N815
    playerId: str  # noqa: N815
    token: str
    version: int
    state: dict


class JoinGameResponse(BaseModel):
    """Response after joining an online game."""

    gameId: str  # noqa: N815
    playerId: str  # noqa: N815
    token: str
    version: int
    state: dict


class MoveResponse(BaseModel):
    """Response after submitting a move."""

    accepted: bool
    turn: int
    phase: str
    version: int
    errors: list[str] = Field(default_factory=list)
    winner: str | None = None
    state: dict


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    details: dict | None = None
