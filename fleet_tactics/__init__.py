"""Fleet Tactics: turn-based naval combat engine with a targeting AI."""

__version__ = "1.0.0"
