#!/usr/bin/env python3
"""
Trainable Probability Table
===========================
Character-level Markov model in its training form.

A ProbTable is one node of a trie keyed by char trails (alphabet indices).
Each node counts how often every alphabet character was seen in its
context and how often a word ended there. Children are created lazily the
first time a character is observed, so the trie stays sparse.

Theory:
-------
While reading a word, the rolling trail (the last `levels` characters) is
fed into the trie on every character. Walking the trail from the root
increments one count per depth, so a single pass trains every order from
1 up to `levels` at once.

End-of-word counts are recorded for the full trail and again for each
shorter suffix of it, at decreasing backtrack depths. Generation can then
fall back to a shorter context and still know how likely a word is to end.

Once training is done, `get_normalized_table()` turns the counts into an
immutable NormalizedTable; the ProbTable itself is never persisted.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .languages import Alphabet, get_alphabet
from .normalized_table import NormalizedTable, ProbabilityEntry

logger = logging.getLogger(__name__)


@dataclass
class ProbTable:
    """Trie node holding raw character and end-of-word counts."""
    language: str
    levels: int = 3
    probabilities: List[int] = field(default_factory=list)
    end_probability: List[int] = field(default_factory=list)
    next: Dict[int, 'ProbTable'] = field(default_factory=dict)

    def __post_init__(self):
        if self.levels < 1:
            raise ValueError(f"levels must be at least 1, got {self.levels}")
        size = len(get_alphabet(self.language))
        if not self.probabilities:
            self.probabilities = [0] * size
        if not self.end_probability:
            self.end_probability = [0] * self.levels

    @property
    def total(self) -> int:
        """Sum of all character counts at this node."""
        return sum(self.probabilities)

    def _check_trail(self, char_trail: Sequence[int]):
        if len(char_trail) > self.levels:
            raise ValueError(
                f"Char trail of length {len(char_trail)} exceeds levels={self.levels}"
            )
        size = len(self.probabilities)
        for char_id in char_trail:
            if not 0 <= char_id < size:
                raise ValueError(
                    f"Char index {char_id} outside alphabet '{self.language}'"
                )

    # =========================================================================
    # Counting
    # =========================================================================

    def increment_char_trail(self, char_trail: Sequence[int]):
        """
        Count a char trail, creating missing children along the way.

        Args:
            char_trail: Alphabet indices, see languages.create_char_trail
        """
        self._check_trail(char_trail)
        table = self
        for char_id in char_trail:
            table.probabilities[char_id] += 1
            child = table.next.get(char_id)
            if child is None:
                child = ProbTable(table.language, table.levels)
                table.next[char_id] = child
            table = child

    def increment_end_word(self, char_trail: Sequence[int], back_track: int = 0):
        """
        Count a word ending after `char_trail`.

        Descends only through existing children; a missing child stops the
        descent and the end is recorded at the deepest node reached. The
        same is then done for the trail without its first character, so
        shorter contexts learn about word endings as well.

        Args:
            char_trail: Alphabet indices of the end of the word
            back_track: Amount already backtracked (set by the recursion)
        """
        self._check_trail(char_trail)
        table = self
        for char_id in char_trail:
            child = table.next.get(char_id)
            if child is None:
                break
            table = child
        for i in range(self.levels - back_track):
            table.end_probability[i] += 1
        if len(char_trail) > 1:
            self.increment_end_word(char_trail[1:], len(char_trail) - 2)

    def parse_text_lines(self, lines: Iterable[str], capitals_only: bool = False) -> int:
        """
        Learn from text lines.

        Words are maximal runs of alphabet characters; anything else
        (including the end of a line) ends the current word.

        Args:
            lines: Text lines
            capitals_only: Only learn words whose first character is unchanged
                by upper-casing (capitals and uncased marks like an apostrophe)

        Returns:
            Number of words learned
        """
        alphabet = get_alphabet(self.language)
        words = 0
        for line in lines:
            char_trail: List[int] = []
            skipping = False
            for char in line:
                if alphabet.is_valid(char):
                    if skipping:
                        continue
                    if capitals_only and not char_trail and char.upper() != char:
                        skipping = True
                        continue
                    char_trail.append(alphabet.index_of(char))
                    if len(char_trail) > self.levels:
                        del char_trail[0]
                    self.increment_char_trail(char_trail)
                else:
                    skipping = False
                    if char_trail:
                        self.increment_end_word(char_trail)
                        char_trail = []
                        words += 1
            if char_trail:
                self.increment_end_word(char_trail)
                words += 1
        logger.info(f"Learned {words} words.")
        return words

    # =========================================================================
    # Normalization
    # =========================================================================

    def get_normalized_table(self) -> NormalizedTable:
        """Create the immutable, normalized table used for generation."""
        return self._normalize(get_alphabet(self.language))

    def _normalize(self, alphabet: Alphabet) -> NormalizedTable:
        total = self.total
        end_probability = tuple(
            count / (total + count) if total + count else 0.0
            for count in self.end_probability
        )
        entries = []
        children = []
        for char_id, count in enumerate(self.probabilities):
            if count > 0:
                entries.append(ProbabilityEntry(
                    char=alphabet.char_at(char_id),
                    value=count / total,
                ))
                child = self.next.get(char_id)
                if child is not None:
                    children.append(child._normalize(alphabet))
                else:
                    children.append(NormalizedTable(self.language, self.levels,
                                                    end_probability=(0.0,) * self.levels))
        return NormalizedTable(
            language=self.language,
            levels=self.levels,
            probabilities=tuple(entries),
            end_probability=end_probability,
            next=tuple(children),
        )


__all__ = ['ProbTable']
