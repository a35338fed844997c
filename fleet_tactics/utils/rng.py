"""Seedable RNG wrapper for deterministic gameplay."""

import random


class GameRNG:
    """Wrapper around Python's random.Random for deterministic game behavior.

    All randomness in the game (asteroid scattering, AI placement, fleet
    personalities, AI tie-breaks) should go through this class so that a
    match can be replayed from its seed.
    """

    def __init__(self, seed: int | None = None):
        """Initialize RNG with given seed.

        Args:
            seed: Integer seed for deterministic randomness, or None for an
                unseeded generator
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def randrange(self, stop: int) -> int:
        """Return random integer in range [0, stop)."""
        return self.rng.randrange(stop)

    def choice(self, seq):
        """Choose random element from non-empty sequence."""
        return self.rng.choice(seq)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self.rng.random()
