"""Game state container and the small records it carries."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from .action import ActiveAction
from .cell import CellState, Coord, GridDimensions
from .player import Player
from .ship import ShipSpec

if TYPE_CHECKING:
    from ..engine.rules import GameRules
    from ..engine.setup import OpponentLogic


class GamePhase(str, Enum):
    LOBBY = "LOBBY"
    FLEET_SELECTION = "FLEET_SELECTION"
    AI_FLEET_SELECTION = "AI_FLEET_SELECTION"
    SETUP = "SETUP"
    PLAYING = "PLAYING"
    TURN_TRANSITION = "TURN_TRANSITION"
    GAME_OVER = "GAME_OVER"


class GameMode(str, Enum):
    CLASSIC = "CLASSIC"
    TACTICAL = "TACTICAL"


class MapType(str, Enum):
    STANDARD = "STANDARD"
    ASTEROID_FIELD = "ASTEROID_FIELD"


class OpponentType(str, Enum):
    AI = "AI"
    HUMAN = "Human"  # Hot-seat
    ONLINE = "ONLINE"


class LogResult(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    SUNK_SHIP = "SUNK_SHIP"
    SKILL_USED = "SKILL_USED"
    CAMO_HIT = "CAMO_HIT"
    ASTEROID_DESTROYED = "ASTEROID_DESTROYED"
    SHIELD_BROKEN = "SHIELD_BROKEN"


@dataclass(frozen=True)
class LogEntry:
    """One narrated event in the game log."""

    turn: int
    player_id: str
    player_name: str
    result: LogResult
    target_id: str | None = None
    target_name: str | None = None
    coords: Coord | None = None
    sunk_ship_name: str | None = None
    hit_ship_name: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class LastShot:
    """Most recent accepted shot, kept for the incoming-shot animation."""

    coords: Coord
    attacker_id: str
    target_id: str


@dataclass(frozen=True)
class RadarReading:
    coords: Coord
    state: CellState  # RADAR_CONTACT, ASTEROID or EMPTY


@dataclass(frozen=True)
class RadarScanResult:
    """One-turn broadcast of a radar sweep."""

    player_id: str
    results: tuple[RadarReading, ...]


@dataclass(frozen=True)
class JammedArea:
    """Cells jammed on a player's board, broadcast until the jam expires."""

    player_id: str
    coords: tuple[Coord, ...]


@dataclass
class GameState:
    """Complete game snapshot.

    Engine operations never mutate a GameState in place: they take a copy,
    apply the change and return the copy. The rule set and opponent logic
    are selected once when the game is created and travel with the state;
    they are not serialized.
    """

    game_id: str
    phase: GamePhase
    players: list[Player]  # Order fixed at creation
    current_player_id: str | None
    game_mode: GameMode
    map_type: MapType
    opponent_type: OpponentType
    dimensions: GridDimensions
    ships_config: tuple[ShipSpec, ...]
    fleet_budget: int
    turn: int = 1
    winner: str | None = None
    max_players: int = 2
    log: list[LogEntry] = field(default_factory=list)  # Newest first
    active_action: ActiveAction | None = None
    radar_scan_result: RadarScanResult | None = None
    jammed_area: JammedArea | None = None
    last_shot: LastShot | None = None
    rules: "GameRules | None" = field(default=None, repr=False, compare=False)
    opponent_logic: "OpponentLogic | None" = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        """Validate game state after initialization."""
        if self.turn < 1:
            raise ValueError(f"Invalid turn: {self.turn} (must be >= 1)")
        if len(self.players) > self.max_players:
            raise ValueError(f"Too many players: {len(self.players)} (max {self.max_players})")
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate player ids: {ids}")
        if self.current_player_id is not None and self.current_player_id not in ids:
            raise ValueError(f"Unknown current player: {self.current_player_id}")
        if self.winner is not None and self.winner not in ids:
            raise ValueError(f"Unknown winner: {self.winner}")

    def player(self, player_id: str | None) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def opponent_of(self, player_id: str) -> Player | None:
        """Return the other player in a two-player game."""
        for p in self.players:
            if p.id != player_id:
                return p
        return None

    @property
    def current_player(self) -> Player | None:
        return self.player(self.current_player_id)

    def add_log(self, entry: LogEntry) -> None:
        """Prepend a log entry (the log is newest-first). Only call on a copy."""
        self.log.insert(0, entry)

    def with_changes(self, **changes: Any) -> "GameState":
        """Shallow update for fields holding immutable values (phase, active action)."""
        return replace(self, **changes)

    def copy(self) -> "GameState":
        """Structural copy: players and their boards are duplicated, frozen records shared."""
        return replace(
            self,
            players=[p.copy() for p in self.players],
            log=list(self.log),
        )
