#!/usr/bin/env python3
"""
Normalized Probability Table
============================
Immutable runtime form of the character-level Markov model and the word
generator walking it.

Each NormalizedTable node lists the characters observed in its context
with probabilities summing to 1, the probability that a word ends there
(one value per backtrack depth), and one child table per listed character.
Nodes are frozen, so a single table can serve any number of concurrent
generation calls.

Generation:
-----------
1. Sample the first character from the root distribution.
2. Look up the table for the current trail (last `levels` characters).
   Unknown or empty contexts back off by dropping the oldest character,
   down to the root if necessary.
3. Once the word is long enough, ask the end factor whether to stop,
   given the end probability of that context and a random draw.
4. Otherwise sample the next character with the same draw and repeat.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .entropy import get_rng
from .errors import EmptyDistributionError
from .settings import get_setting

logger = logging.getLogger(__name__)

EndFactor = Callable[[float, float, int, int, int], bool]


def weighted_end_factor(weight: float = 1.0) -> EndFactor:
    """
    End factor based on a cosine curve with maximum value 2 * weight.

    The returned function stops a word only if its end probability is
    positive and the random value exceeds the curve, which falls from
    2 * weight at min_length to 0 at max_length.

    Args:
        weight: Multiplier for the curve (higher = longer words)
    """
    def end_factor(prob: float, value: float, length: int,
                   min_length: int, max_length: int) -> bool:
        span = max_length - min_length
        if span > 0:
            curve = 1 + math.cos(math.pi / span * (length - min_length))
        else:
            curve = 0.0
        return prob > 0 and value > curve * weight
    return end_factor


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class GenerationOptions:
    """Options for a single generated word."""
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    end_factor: Optional[EndFactor] = None
    levels: Optional[int] = None              # Cap on the trained order
    end_backtrack: Optional[int] = None       # Extra backtrack depth for stopping
    end_prob_index: Optional[int] = None      # Overrides end_backtrack when set
    end_weight: Optional[float] = None        # Weight of the default end factor

    def __post_init__(self):
        cfg = get_setting("generation", {}) or {}
        if self.min_length is None:
            self.min_length = cfg.get("min_length")
        if self.max_length is None:
            self.max_length = cfg.get("max_length")
        if self.end_factor is None and self.end_weight is None:
            self.end_weight = cfg.get("end_weight")

        missing = [
            name for name, value in (
                ("min_length", self.min_length),
                ("max_length", self.max_length),
            )
            if value is None
        ]
        if self.end_factor is None and self.end_weight is None:
            missing.append("end_weight")
        if missing:
            raise ValueError(f"generation settings missing in app.yaml: {', '.join(missing)}")

        if self.end_factor is None:
            self.end_factor = weighted_end_factor(self.end_weight)

        if self.min_length < 1:
            raise ValueError(f"min_length must be positive, got {self.min_length}")
        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )
        if self.levels is not None and self.levels < 1:
            raise ValueError(f"levels must be at least 1, got {self.levels}")
        if self.end_backtrack is not None and self.end_backtrack < 0:
            raise ValueError(f"end_backtrack must not be negative, got {self.end_backtrack}")


# =============================================================================
# Normalized Table
# =============================================================================

@dataclass(frozen=True)
class ProbabilityEntry:
    """A character and its probability within one table."""
    char: str
    value: float


@dataclass(frozen=True)
class NormalizedTable:
    """
    Probability table normalized to 1, read-only.

    `next[i]` is the child table for `probabilities[i].char`.
    """
    language: str
    levels: int
    probabilities: Tuple[ProbabilityEntry, ...] = ()
    end_probability: Tuple[float, ...] = ()
    next: Tuple['NormalizedTable', ...] = ()

    def get_child_by_char(self, char: str) -> Optional['NormalizedTable']:
        """Child table for `char`; the table itself for an empty string."""
        if char == "":
            return self
        for i, entry in enumerate(self.probabilities):
            if entry.char == char:
                return self.next[i]
        return None

    def get_child_by_char_trail(self, char_trail: str) -> Optional['NormalizedTable']:
        """Descendant table for a whole trail, or None if any step is missing."""
        if len(char_trail) <= 1:
            return self.get_child_by_char(char_trail)
        child = self.get_child_by_char(char_trail[0])
        if child is None:
            return None
        return child.get_child_by_char_trail(char_trail[1:])

    def get_char_from_prob(self, prob: float) -> str:
        """
        Pick the character whose cumulative probability first reaches `prob`.

        Args:
            prob: Number between 0 and 1

        Raises:
            EmptyDistributionError: If the table has no entries
        """
        if not self.probabilities:
            raise EmptyDistributionError(
                f"Cannot sample from an empty table (language '{self.language}')"
            )
        total = 0.0
        for entry in self.probabilities:
            total += entry.value
            if prob <= total:
                return entry.char
        return self.probabilities[-1].char

    def _resolve(self, char_trail: str) -> Tuple['NormalizedTable', str]:
        """Find the deepest usable table for the trail, backing off as needed."""
        table = self.get_child_by_char_trail(char_trail)
        while table is None or not table.probabilities:
            if not char_trail:
                raise EmptyDistributionError(
                    f"Root table has no entries (language '{self.language}')"
                )
            logger.debug(f"No data for trail {char_trail!r}, backing off")
            char_trail = char_trail[1:]
            table = self.get_child_by_char_trail(char_trail)
        return table, char_trail

    def generate_word(self, options: GenerationOptions = None, rng=None) -> str:
        """
        Generate a single word.

        Args:
            options: Generation options (defaults from app.yaml)
            rng: Random source with a `random()` method (default: entropy.get_rng())

        Returns:
            Generated word with its first character uppercased
        """
        if options is None:
            options = GenerationOptions()
        if rng is None:
            rng = get_rng()

        min_length = options.min_length
        max_length = options.max_length
        end_factor = options.end_factor

        levels = self.levels
        if options.levels is not None and options.levels < self.levels:
            levels = options.levels

        end_backtrack = levels - 1
        if options.end_backtrack is not None:
            if 0 < options.end_backtrack < self.levels - levels:
                end_backtrack += options.end_backtrack
        if options.end_prob_index is not None:
            if not 0 <= options.end_prob_index < self.levels:
                raise ValueError(
                    f"end_prob_index must be in [0, {self.levels}), got {options.end_prob_index}"
                )
            end_backtrack = options.end_prob_index

        rnd = rng.random()
        char = self.get_char_from_prob(rnd)
        word = ""
        char_trail = ""
        for _ in range(max_length):
            word += char
            char_trail += char
            if len(char_trail) > levels:
                char_trail = char_trail[1:]

            # One draw serves both the stop decision and the next character
            rnd = rng.random()
            table, char_trail = self._resolve(char_trail)
            if len(word) >= min_length and end_factor(
                    table.end_probability[end_backtrack], rnd,
                    len(word), min_length, max_length):
                break
            char = table.get_char_from_prob(rnd)

        first = word[0].upper()
        if len(first) != 1:
            first = word[0]
        return first + word[1:]

    def generate_batch(self, count: int, options: GenerationOptions = None,
                       rng=None) -> List[str]:
        """
        Generate up to `count` distinct words.

        Gives up after `count * generation.batch_attempts` tries, so small
        models may return fewer words than requested.
        """
        if options is None:
            options = GenerationOptions()
        results = []
        seen = set()
        attempts = 0
        max_attempts = count * (get_setting("generation.batch_attempts", 20) or 20)

        while len(results) < count and attempts < max_attempts:
            attempts += 1
            word = self.generate_word(options, rng)
            if word.lower() not in seen:
                seen.add(word.lower())
                results.append(word)

        return results


__all__ = [
    'GenerationOptions',
    'NormalizedTable',
    'ProbabilityEntry',
    'weighted_end_factor',
]
