"""Shared fixtures for wordkit tests."""

import sys
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wordkit import languages
from wordkit.languages import Alphabet
from wordkit.prob_table import ProbTable


CORPUS = [
    "The quick brown fox jumps over the lazy dog.",
    "Pack my box with five dozen liquor jugs!",
    "Sphinx of black quartz, judge my vow.",
    "How vexingly quick daft zebras jump;",
    "Bright vixens jump; dozy fowl quack.",
    "Waltz, bad nymph, for quick jigs vex.",
]


@pytest.fixture
def abc_language(monkeypatch):
    """Register a tiny 'abc' alphabet for the duration of a test."""
    registry = languages._load_registry()
    patched = {
        'default': registry['default'],
        'alphabets': dict(registry['alphabets'], abc=Alphabet('abc', 'abc')),
    }
    monkeypatch.setattr(languages, '_load_registry', lambda: patched)
    return 'abc'


@pytest.fixture
def abc_table(abc_language):
    """Levels-2 table trained on the single line 'ab ac'."""
    table = ProbTable(abc_language, 2)
    table.parse_text_lines(["ab ac"])
    return table


@pytest.fixture
def corpus_lines():
    return list(CORPUS)


@pytest.fixture
def english_table(corpus_lines):
    """Levels-3 English table trained on a few pangrams."""
    table = ProbTable('enEN', 3)
    table.parse_text_lines(corpus_lines)
    return table


@pytest.fixture
def english_model(english_table):
    return english_table.get_normalized_table()
