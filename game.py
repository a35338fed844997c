#!/usr/bin/env python3
"""Fleet Tactics - Command-line entry point.

Plays a full AI-vs-AI match through the public engine entry points and
narrates the game log as it grows. Useful for watching the AI and for
smoke-testing the rules without a server or a frontend.
"""

import argparse
import asyncio
import logging
import sys

from fleet_tactics.agent.fleet_selection import select_ai_fleet
from fleet_tactics.agent.turn_driver import execute_ai_turn
from fleet_tactics.engine import (
    acknowledge_ai_fleet,
    advance_turn,
    auto_place_fleet,
    create_game,
    submit_fleet,
    submit_placement,
)
from fleet_tactics.models.game import (
    GameMode,
    GamePhase,
    GameState,
    LogEntry,
    MapType,
    OpponentType,
)
from fleet_tactics.utils.coords import cell_label
from fleet_tactics.utils.rng import GameRNG
from fleet_tactics.utils.serialization import load_game, save_game

logger = logging.getLogger("fleet_tactics.game")


def describe(entry: LogEntry) -> str:
    """One-line narration of a log entry."""
    text = f"{entry.player_name}: {entry.result.value}"
    if entry.coords is not None:
        text += f" at {cell_label(entry.coords.x, entry.coords.y)}"
    if entry.sunk_ship_name:
        text += f" ({entry.sunk_ship_name} sunk)"
    elif entry.hit_ship_name:
        text += f" ({entry.hit_ship_name})"
    if entry.message:
        text += f" - {entry.message}"
    return text


class GameOrchestrator:
    """Manages setup and the turn loop for a match between two AI players."""

    def __init__(self, state: GameState, rng: GameRNG, max_turns: int = 400):
        """Initialize game orchestrator.

        Args:
            state: Initial game state, both seats held by the AI
            rng: Random source shared by drafting, deployment and the AI policy
            max_turns: Stop after this many turns even without a winner
        """
        self.state = state
        self.rng = rng
        self.max_turns = max_turns
        self._logged = len(state.log)

    def run(self) -> GameState:
        """Play the match to the end (or the turn limit)."""
        if not all(p.is_ai for p in self.state.players):
            raise ValueError("Only games between two AI players can be run unattended.")
        self._setup()

        while self.state.phase == GamePhase.PLAYING and self.state.turn <= self.max_turns:
            self.state = asyncio.run(execute_ai_turn(self.state, delay=0, rng=self.rng))
            self._narrate()
            if self.state.phase == GamePhase.GAME_OVER:
                break
            self.state = advance_turn(self.state)

        if self.state.winner:
            winner = self.state.player(self.state.winner)
            logger.info(f"{winner.name} wins on turn {self.state.turn}")
        else:
            logger.info(f"No winner after {self.state.turn - 1} turns")
        return self.state

    def _setup(self):
        """Draft and deploy the first seat; the AI opponent logic answers for the second."""
        state = self.state
        first = state.players[0].id

        if state.phase == GamePhase.FLEET_SELECTION:
            fleet = select_ai_fleet(state.ships_config, state.fleet_budget, self.rng)
            state = submit_fleet(state, first, [s.ship_type for s in fleet], self.rng)
        state = acknowledge_ai_fleet(state)

        if state.phase == GamePhase.SETUP:
            placements = auto_place_fleet(state, first, self.rng)
            state = submit_placement(state, first, placements, self.rng)

        for player in state.players:
            logger.info(f"{player.name}: {', '.join(s.name for s in player.ships)}")
        self.state = state

    def _narrate(self):
        """Log entries added since the last call, oldest first."""
        new_count = len(self.state.log) - self._logged
        for entry in reversed(self.state.log[:new_count]):
            logger.info(f"[Turn {entry.turn}] {describe(entry)}")
        self._logged = len(self.state.log)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Fleet Tactics - AI vs AI naval combat",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                 # Tactical match on the standard map
  %(prog)s --mode CLASSIC                  # Classic rules
  %(prog)s --map ASTEROID_FIELD --seed 7   # Asteroid field, specific seed
  %(prog)s --load midgame.json             # Resume a saved match
  %(prog)s --save final.json               # Save the final state
        """,
    )

    parser.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=GameMode.TACTICAL.value,
        help="Rule set (default: TACTICAL)",
    )
    parser.add_argument(
        "--map",
        choices=[m.value for m in MapType],
        default=MapType.STANDARD.value,
        help="Map type (default: STANDARD)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the map and the AI (default: 42)",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=400,
        help="Stop after this many turns (default: 400)",
    )
    parser.add_argument("--load", type=str, metavar="FILE", help="Load game from JSON file")
    parser.add_argument(
        "--save",
        type=str,
        metavar="FILE",
        help="Save game to JSON file after completion",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s",  # Show log level with message
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    rng = GameRNG(args.seed)

    # Initialize game
    if args.load:
        print(f"Loading game from {args.load}...")
        try:
            state = load_game(args.load)
            print(f"Game loaded successfully (Turn {state.turn}, {state.phase.value})")
        except FileNotFoundError:
            print(f"Error: File {args.load} not found.")
            sys.exit(1)
        except ValueError as e:
            print(f"Error loading game: {e}")
            sys.exit(1)
    else:
        state = create_game(
            mode=GameMode(args.mode),
            map_type=MapType(args.map),
            opponent_type=OpponentType.AI,
            player_name="Blue",
            opponent_name="Red",
            rng=rng,
            player_is_ai=True,
        )

    orchestrator = GameOrchestrator(state, rng, max_turns=args.max_turns)
    try:
        final_state = orchestrator.run()
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user. Exiting...")
        sys.exit(0)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    # Save if requested
    if args.save:
        print(f"\nSaving game to {args.save}...")
        try:
            path = save_game(final_state, args.save)
            print(f"Game saved to {path}")
        except OSError as e:
            print(f"Error saving game: {e}")


if __name__ == "__main__":
    main()
