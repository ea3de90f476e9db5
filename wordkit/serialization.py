#!/usr/bin/env python3
"""
Model Persistence
=================
Compact JSON form of a NormalizedTable.

Field names are shortened to one character to keep model files small:

    language        -> g
    levels          -> l
    probabilities   -> p
    end_probability -> e
    next            -> n
    value           -> v   (inside probability entries)
    char            -> c   (inside probability entries)

Loading validates the whole tree before returning it; a file with missing
keys or an unknown language is rejected, never partially accepted.

Usage:
    from wordkit.serialization import save, load

    save(table, 'models/deDE.json')
    table = load('models/deDE.json')
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .errors import MalformedModelError, UnknownLanguageError
from .languages import Alphabet, get_alphabet
from .normalized_table import NormalizedTable, ProbabilityEntry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

KEYS = {
    'language': 'g',
    'levels': 'l',
    'probabilities': 'p',
    'end_probability': 'e',
    'next': 'n',
    'value': 'v',
    'char': 'c',
}


# =============================================================================
# Minify / Expand
# =============================================================================

def minify(table: NormalizedTable) -> Dict[str, Any]:
    """Convert a table (recursively) into its short-key dictionary form."""
    return {
        KEYS['language']: table.language,
        KEYS['levels']: table.levels,
        KEYS['probabilities']: [
            {KEYS['value']: entry.value, KEYS['char']: entry.char}
            for entry in table.probabilities
        ],
        KEYS['end_probability']: list(table.end_probability),
        KEYS['next']: [minify(child) for child in table.next],
    }


def _require(data: Any, key: str, kind, where: str):
    if not isinstance(data, dict):
        raise MalformedModelError(f"{where}: expected an object, got {type(data).__name__}")
    short = KEYS[key]
    if short not in data:
        raise MalformedModelError(f"{where}: missing key '{short}' ({key})")
    value = data[short]
    if not isinstance(value, kind) or isinstance(value, bool):
        raise MalformedModelError(f"{where}: '{short}' ({key}) has wrong type {type(value).__name__}")
    return value


def _expand_node(data: Any, alphabet: Alphabet, levels: int, depth: int,
                 where: str) -> NormalizedTable:
    language = _require(data, 'language', str, where)
    if language != alphabet.language:
        raise MalformedModelError(f"{where}: language '{language}' differs from root '{alphabet.language}'")
    if _require(data, 'levels', int, where) != levels:
        raise MalformedModelError(f"{where}: levels differ from root levels {levels}")

    entries = []
    for i, raw in enumerate(_require(data, 'probabilities', list, where)):
        entry_where = f"{where}.p[{i}]"
        value = _require(raw, 'value', (int, float), entry_where)
        char = _require(raw, 'char', str, entry_where)
        if len(char) != 1 or char not in alphabet.chars:
            raise MalformedModelError(f"{entry_where}: {char!r} is not a character of '{language}'")
        entries.append(ProbabilityEntry(char=char, value=float(value)))

    end_probability = _require(data, 'end_probability', list, where)
    if len(end_probability) != levels:
        raise MalformedModelError(
            f"{where}: expected {levels} end probabilities, got {len(end_probability)}"
        )
    for value in end_probability:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise MalformedModelError(f"{where}: end probability {value!r} is not a number")

    children = _require(data, 'next', list, where)
    if len(children) != len(entries):
        raise MalformedModelError(
            f"{where}: {len(children)} children for {len(entries)} probability entries"
        )
    # Nodes at depth == levels are leaves; deeper nesting is never written
    if depth >= levels and entries:
        raise MalformedModelError(
            f"{where}: node at depth {depth} of a levels={levels} model has successors"
        )

    return NormalizedTable(
        language=language,
        levels=levels,
        probabilities=tuple(entries),
        end_probability=tuple(float(v) for v in end_probability),
        next=tuple(
            _expand_node(child, alphabet, levels, depth + 1, f"{where}.n[{i}]")
            for i, child in enumerate(children)
        ),
    )


def expand(data: Dict[str, Any]) -> NormalizedTable:
    """
    Rebuild a NormalizedTable from its short-key dictionary form.

    Raises:
        MalformedModelError: On missing keys, wrong types, inconsistent
            tree shape (including nodes nested deeper than `levels`) or an
            unknown language
    """
    language = _require(data, 'language', str, 'root')
    levels = _require(data, 'levels', int, 'root')
    if levels < 1:
        raise MalformedModelError(f"root: levels must be at least 1, got {levels}")
    try:
        alphabet = get_alphabet(language)
    except UnknownLanguageError as e:
        raise MalformedModelError(f"root: {e}") from e
    try:
        return _expand_node(data, alphabet, levels, 0, 'root')
    except RecursionError as e:
        raise MalformedModelError(f"root: tree nested too deep for levels={levels}") from e


def dumps(table: NormalizedTable) -> str:
    return json.dumps(minify(table), ensure_ascii=False, separators=(',', ':'))


def loads(text: str) -> NormalizedTable:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedModelError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise MalformedModelError("Invalid JSON: nesting too deep") from e
    return expand(data)


# =============================================================================
# Files
# =============================================================================

def save(table: NormalizedTable, path: PathLike):
    """Save a NormalizedTable to a JSON file."""
    Path(path).write_text(dumps(table), encoding='utf-8')
    logger.info(f"Successfully saved to file {path}.")


def load(path: PathLike) -> NormalizedTable:
    """Load a NormalizedTable from a JSON file."""
    table = loads(Path(path).read_text(encoding='utf-8'))
    logger.info(f"Loaded '{table.language}' model (levels={table.levels}) from {path}.")
    return table


async def save_async(table: NormalizedTable, path: PathLike):
    """Save without blocking the event loop."""
    await asyncio.to_thread(save, table, path)


async def load_async(path: PathLike) -> NormalizedTable:
    """Load without blocking the event loop."""
    return await asyncio.to_thread(load, path)


__all__ = [
    'KEYS',
    'minify',
    'expand',
    'dumps',
    'loads',
    'save',
    'load',
    'save_async',
    'load_async',
]
