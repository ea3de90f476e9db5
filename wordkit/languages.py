#!/usr/bin/env python3
"""
Language Alphabets
==================
Registry of the character sets words are built from, plus the codec that
turns text into char trails (lists of alphabet indices).

Alphabets are plain configuration data kept in configs/languages.yaml, or in
the file named by the WORDKIT_LANGUAGES environment variable.
Matching is case-insensitive: characters are lowercased before lookup.

Usage:
    from wordkit.languages import get_alphabet, create_char_trail

    alphabet = get_alphabet('deDE')
    alphabet.is_valid('Ä')                 # True
    create_char_trail('Haus', 'deDE')      # [7, 0, 20, 18]
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List

from .errors import InvalidCharacterError, UnknownLanguageError
from .settings import get_setting, languages_path, load_yaml


# =============================================================================
# Alphabet
# =============================================================================

@dataclass(frozen=True)
class Alphabet:
    """Ordered character set of one language."""
    language: str
    chars: str
    _index: Dict[str, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        index = {}
        for i, char in enumerate(self.chars):
            if char in index:
                raise ValueError(
                    f"Alphabet '{self.language}' lists {char!r} more than once"
                )
            index[char] = i
        object.__setattr__(self, '_index', index)

    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, char: str) -> bool:
        return self.is_valid(char)

    def is_valid(self, char: str) -> bool:
        """True if the lowercased character belongs to the alphabet."""
        return char.lower() in self._index

    def index_of(self, char: str) -> int:
        try:
            return self._index[char.lower()]
        except KeyError:
            raise InvalidCharacterError(char, self.language) from None

    def char_at(self, index: int) -> str:
        return self.chars[index]


# =============================================================================
# Registry
# =============================================================================

@lru_cache(maxsize=1)
def _load_registry() -> Dict:
    data = load_yaml(languages_path(), "language config")
    languages = data.get('languages') or {}
    if not languages:
        raise ValueError(f"languages must be set in {languages_path()}")
    return {
        'default': data.get('default'),
        'alphabets': {
            name: Alphabet(language=name, chars=str(chars))
            for name, chars in languages.items()
        },
    }


def list_languages() -> List[str]:
    """Registered language ids, in config order."""
    return list(_load_registry()['alphabets'])


def default_language() -> str:
    """Language used when none is given: app.yaml first, then languages.yaml."""
    return get_setting('model.language') or _load_registry()['default']


def get_alphabet(language: str = None) -> Alphabet:
    """
    Resolve a language id to its alphabet.

    Raises:
        UnknownLanguageError: If the language is not registered
    """
    if language is None:
        language = default_language()
    alphabets = _load_registry()['alphabets']
    alphabet = alphabets.get(language)
    if alphabet is None:
        raise UnknownLanguageError(language, list(alphabets))
    return alphabet


# =============================================================================
# Char Trail Codec
# =============================================================================

def is_valid(char: str, language: str = None) -> bool:
    """True if `char` (any case) is part of the language's alphabet."""
    return get_alphabet(language).is_valid(char)


def create_char_trail(text: str, language: str = None) -> List[int]:
    """
    Convert text into a list of alphabet indices.

    Characters outside the alphabet are rejected instead of being mapped
    to an out-of-range index.

    Raises:
        InvalidCharacterError: If any character is not in the alphabet
    """
    alphabet = get_alphabet(language)
    return [alphabet.index_of(char) for char in text]


__all__ = [
    'Alphabet',
    'list_languages',
    'default_language',
    'get_alphabet',
    'is_valid',
    'create_char_trail',
]
