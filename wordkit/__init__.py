#!/usr/bin/env python3
"""
wordkit - Markov Pseudo-Word Generator
======================================

Builds a variable-order character-level Markov model from a text corpus
and generates plausible, made-up words in a given language.

Quick Start
-----------
    import wordkit

    table = wordkit.create('deDE', levels=3)
    wordkit.train(table, open('corpus.txt', encoding='utf-8'))
    model = wordkit.normalize(table)

    word = wordkit.generate(model, min_length=4, max_length=9)
    wordkit.save(model, 'deDE.json')

Modules
-------
    wordkit.languages         - Alphabets and char trail codec
    wordkit.prob_table        - Trainable probability trie
    wordkit.normalized_table  - Runtime probability tree and word generator
    wordkit.serialization     - Compact JSON persistence
    wordkit.settings          - app.yaml settings

CLI Usage
---------
    python -m wordkit train corpus.txt -o deDE.json --language deDE
    python -m wordkit generate deDE.json -n 10
    python -m wordkit languages
"""

__version__ = "0.1.0"

from typing import Iterable

from .errors import (
    WordkitError,
    UnknownLanguageError,
    InvalidCharacterError,
    EmptyDistributionError,
    MalformedModelError,
)
from .languages import (
    Alphabet,
    get_alphabet,
    list_languages,
    default_language,
    is_valid,
    create_char_trail,
)
from .normalized_table import (
    GenerationOptions,
    NormalizedTable,
    ProbabilityEntry,
    weighted_end_factor,
)
from .prob_table import ProbTable
from .serialization import save, load, save_async, load_async
from .settings import get_setting


def create(language: str = None, levels: int = None) -> ProbTable:
    """Create an empty trainable table (defaults from app.yaml `model`)."""
    if language is None:
        language = default_language()
    if levels is None:
        levels = get_setting('model.levels')
        if levels is None:
            raise ValueError("model.levels must be set in app.yaml")
    return ProbTable(language, levels)


def train(table: ProbTable, lines: Iterable[str], capitals_only: bool = False) -> int:
    """Learn from text lines; returns the number of words learned."""
    return table.parse_text_lines(lines, capitals_only)


def normalize(table: ProbTable) -> NormalizedTable:
    """Turn a trained table into the immutable table used for generation."""
    return table.get_normalized_table()


def generate(table: NormalizedTable, options: GenerationOptions = None, rng=None,
             **kwargs) -> str:
    """
    Generate one word.

    Either pass `options` or GenerationOptions fields as keyword arguments
    (min_length, max_length, end_factor, levels, end_backtrack,
    end_prob_index, end_weight).
    """
    if options is None:
        options = GenerationOptions(**kwargs)
    elif kwargs:
        raise TypeError("pass either options or keyword arguments, not both")
    return table.generate_word(options, rng)


__all__ = [
    '__version__',
    # Facade
    'create',
    'train',
    'normalize',
    'generate',
    'save',
    'load',
    'save_async',
    'load_async',
    # Model
    'ProbTable',
    'NormalizedTable',
    'ProbabilityEntry',
    'GenerationOptions',
    'weighted_end_factor',
    # Languages
    'Alphabet',
    'get_alphabet',
    'list_languages',
    'default_language',
    'is_valid',
    'create_char_trail',
    # Errors
    'WordkitError',
    'UnknownLanguageError',
    'InvalidCharacterError',
    'EmptyDistributionError',
    'MalformedModelError',
]
