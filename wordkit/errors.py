#!/usr/bin/env python3
"""
Errors
======
Exceptions raised by the training, generation and persistence layers.
"""


class WordkitError(Exception):
    """Base class for all wordkit errors."""


class UnknownLanguageError(WordkitError, KeyError):
    """A language id that is not registered in languages.yaml."""

    def __init__(self, language: str, available: list = None):
        self.language = language
        self.available = available or []
        super().__init__(language)

    def __str__(self) -> str:
        msg = f"Unknown language '{self.language}'"
        if self.available:
            msg += f". Available languages: {', '.join(self.available)}"
        return msg


class InvalidCharacterError(WordkitError, ValueError):
    """A character outside the alphabet where only valid characters are allowed."""

    def __init__(self, char: str, language: str):
        self.char = char
        self.language = language
        super().__init__(f"Character {char!r} is not part of alphabet '{language}'")


class EmptyDistributionError(WordkitError):
    """Sampling was requested from a table without any probability entries."""


class MalformedModelError(WordkitError, ValueError):
    """Serialized model data that cannot be turned into a NormalizedTable."""


__all__ = [
    'WordkitError',
    'UnknownLanguageError',
    'InvalidCharacterError',
    'EmptyDistributionError',
    'MalformedModelError',
]
