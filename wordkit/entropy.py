#!/usr/bin/env python3
"""
Entropy Module for Word Generation
==================================
Random sources used by the word generator.

Generation only needs one thing from a random source: `random()`, a float
in [0.0, 1.0). Any object with that method works, so tests and the CLI can
pass a seeded `random.Random` for reproducible output while the default is
an OS-entropy backed generator.
"""

import random
import secrets
from typing import Optional


class TrueRandom:
    """Cryptographically secure random source (secrets.SystemRandom)."""

    def __init__(self):
        self._rng = secrets.SystemRandom()

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()


# Global instance
_true_random = TrueRandom()


def get_rng(seed: Optional[int] = None):
    """
    Get a random source.

    Args:
        seed: If given, a deterministic `random.Random` seeded with it;
              otherwise the global TrueRandom instance.
    """
    if seed is not None:
        return random.Random(seed)
    return _true_random


__all__ = ['TrueRandom', 'get_rng']
