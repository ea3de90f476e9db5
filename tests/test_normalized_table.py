"""
Tests for the Normalized Table and Word Generation
==================================================
Lookup, weighted sampling, backoff, stopping rule and generation options.
"""

import random

import pytest

from wordkit.errors import EmptyDistributionError
from wordkit.normalized_table import (
    GenerationOptions,
    NormalizedTable,
    ProbabilityEntry,
    weighted_end_factor,
)


def make_table(entries, end=(0.0, 0.0), children=None, levels=2):
    """Build a NormalizedTable by hand."""
    probabilities = tuple(ProbabilityEntry(c, v) for c, v in entries)
    if children is None:
        children = tuple(
            NormalizedTable('enEN', levels, end_probability=(0.0,) * levels)
            for _ in probabilities
        )
    return NormalizedTable('enEN', levels, probabilities, tuple(end), tuple(children))


def always(result):
    return lambda prob, value, length, min_length, max_length: result


class TestLookup:
    """Tests for child lookup."""

    @pytest.fixture
    def table(self):
        leaf = make_table([])
        child_a = make_table([('b', 1.0)], children=(leaf,))
        return make_table([('a', 0.5), ('b', 0.5)], children=(child_a, make_table([])))

    def test_empty_char_is_identity(self, table):
        assert table.get_child_by_char('') is table

    def test_get_child_by_char(self, table):
        assert table.get_child_by_char('a') is table.next[0]
        assert table.get_child_by_char('z') is None

    def test_get_child_by_char_trail(self, table):
        assert table.get_child_by_char_trail('') is table
        assert table.get_child_by_char_trail('ab') is table.next[0].next[0]
        assert table.get_child_by_char_trail('ba') is None
        assert table.get_child_by_char_trail('zb') is None

    def test_is_immutable(self, table):
        with pytest.raises(AttributeError):
            table.levels = 5


class TestGetCharFromProb:
    """Tests for weighted sampling."""

    @pytest.fixture
    def table(self):
        return make_table([('a', 0.25), ('b', 0.75)])

    def test_cumulative_boundaries(self, table):
        assert table.get_char_from_prob(0.0) == 'a'
        assert table.get_char_from_prob(0.25) == 'a'
        assert table.get_char_from_prob(0.26) == 'b'
        assert table.get_char_from_prob(0.999) == 'b'

    def test_rounding_overflow_returns_last(self, table):
        assert table.get_char_from_prob(1.5) == 'b'

    def test_empty_table_raises(self):
        with pytest.raises(EmptyDistributionError):
            make_table([]).get_char_from_prob(0.5)


class TestWeightedEndFactor:
    """Tests for the cosine end factor."""

    def test_requires_positive_probability(self):
        factor = weighted_end_factor(1)
        assert not factor(0.0, 0.99, 10, 1, 10)

    def test_curve_at_min_length(self):
        factor = weighted_end_factor(1)
        # Curve is 2 at min_length, no value in [0, 1) exceeds it
        assert not factor(1.0, 0.99, 3, 3, 9)

    def test_curve_at_max_length(self):
        factor = weighted_end_factor(1)
        assert factor(1.0, 0.01, 9, 3, 9)

    def test_weight_scales_curve(self):
        # Midpoint: curve is 1 * weight
        assert not weighted_end_factor(1)(1.0, 0.6, 6, 3, 9)
        assert weighted_end_factor(0.5)(1.0, 0.6, 6, 3, 9)

    def test_equal_bounds(self):
        factor = weighted_end_factor(1)
        assert factor(0.5, 0.1, 4, 4, 4)


class TestGenerationOptions:
    """Tests for option defaults and validation."""

    def test_defaults_from_settings(self):
        options = GenerationOptions()
        assert options.min_length == 4
        assert options.max_length == 10
        assert callable(options.end_factor)

    def test_min_length_positive(self):
        with pytest.raises(ValueError):
            GenerationOptions(min_length=0, max_length=5)

    def test_max_not_below_min(self):
        with pytest.raises(ValueError):
            GenerationOptions(min_length=5, max_length=4)

    def test_levels_positive(self):
        with pytest.raises(ValueError):
            GenerationOptions(min_length=1, max_length=5, levels=0)

    def test_end_backtrack_not_negative(self):
        with pytest.raises(ValueError):
            GenerationOptions(min_length=1, max_length=5, end_backtrack=-1)


class TestGenerateWord:
    """Tests for generate_word."""

    def test_scenario_outputs(self, abc_table):
        model = abc_table.get_normalized_table()
        options = GenerationOptions(min_length=1, max_length=2)
        rng = random.Random(7)
        words = {model.generate_word(options, rng) for _ in range(300)}
        assert words <= {'A', 'Ab', 'Ac'}
        assert words

    def test_length_bounds(self, english_model):
        options = GenerationOptions(min_length=3, max_length=8)
        rng = random.Random(1)
        for _ in range(300):
            word = english_model.generate_word(options, rng)
            assert 3 <= len(word) <= 8

    def test_capitalization(self, english_model):
        options = GenerationOptions(min_length=2, max_length=8)
        rng = random.Random(2)
        for _ in range(100):
            word = english_model.generate_word(options, rng)
            assert word[0].isupper()
            assert word[1:] == word[1:].lower()
            assert word.isalpha()

    def test_same_seed_same_words(self, english_model):
        options = GenerationOptions(min_length=3, max_length=8)
        first = [english_model.generate_word(options, random.Random(99)) for _ in range(5)]
        second = [english_model.generate_word(options, random.Random(99)) for _ in range(5)]
        assert first == second

    def test_default_rng(self, english_model):
        word = english_model.generate_word(GenerationOptions(min_length=2, max_length=6))
        assert 2 <= len(word) <= 6

    def test_stop_at_min_length(self, english_model):
        options = GenerationOptions(min_length=3, max_length=9, end_factor=always(True))
        assert len(english_model.generate_word(options, random.Random(3))) == 3

    def test_run_to_max_length(self, english_model):
        options = GenerationOptions(min_length=3, max_length=9, end_factor=always(False))
        assert len(english_model.generate_word(options, random.Random(3))) == 9

    def test_backoff_terminates_on_unseen_context(self):
        # 'a' leads to an empty node, 'b' is known at the root only
        model = make_table([('a', 0.5), ('b', 0.5)],
                           children=(make_table([('b', 1.0)]), make_table([])))
        options = GenerationOptions(min_length=1, max_length=12)
        for seed in range(20):
            word = model.generate_word(options, random.Random(seed))
            # End probabilities are all zero, so words run to max_length
            assert len(word) == 12
            assert set(word.lower()) <= {'a', 'b'}

    def test_empty_model_raises(self):
        model = make_table([])
        with pytest.raises(EmptyDistributionError):
            model.generate_word(GenerationOptions(min_length=1, max_length=4), random.Random(0))

    def test_end_factor_receives_arguments(self, abc_table):
        model = abc_table.get_normalized_table()
        calls = []

        def recorder(prob, value, length, min_length, max_length):
            calls.append((prob, value, length, min_length, max_length))
            return False

        options = GenerationOptions(min_length=1, max_length=2, end_factor=recorder)
        model.generate_word(options, random.Random(5))
        # After 'a': node 'a' ends nothing; after 'ab'/'ac': backoff to the root
        assert calls[0][0] == 0.0
        assert calls[0][2:] == (1, 1, 2)
        assert calls[1][0] == pytest.approx(1 / 3)
        assert all(0.0 <= c[1] < 1.0 for c in calls)


class TestEndProbabilitySelection:
    """Tests for levels, end_backtrack and end_prob_index."""

    @pytest.fixture
    def model(self):
        # Root ends words only at backtrack index 1; the child is empty so
        # generation always backs off to the root
        return make_table([('a', 1.0)], end=(0.0, 1.0, 0.0), levels=3,
                          children=(NormalizedTable('enEN', 3, end_probability=(0.0,) * 3),))

    @staticmethod
    def stops(model, **kwargs):
        options = GenerationOptions(min_length=2, max_length=6,
                                    end_factor=lambda prob, *rest: prob > 0.5, **kwargs)
        return len(model.generate_word(options, random.Random(0))) == 2

    def test_default_index_is_levels_minus_one(self, model):
        # levels=3 -> index 2
        assert not self.stops(model)

    def test_reduced_levels(self, model):
        assert self.stops(model, levels=2)
        assert not self.stops(model, levels=1)

    def test_levels_above_trained_ignored(self, model):
        assert not self.stops(model, levels=5)

    def test_end_backtrack(self, model):
        # levels=1 -> index 0, backtrack 1 -> index 1
        assert self.stops(model, levels=1, end_backtrack=1)
        # Must stay below trained levels - levels, otherwise ignored
        assert not self.stops(model, levels=1, end_backtrack=2)

    def test_end_prob_index_overrides(self, model):
        assert self.stops(model, end_prob_index=1)
        assert not self.stops(model, levels=2, end_prob_index=0)

    def test_end_prob_index_out_of_range(self, model):
        with pytest.raises(ValueError):
            self.stops(model, end_prob_index=3)


class TestGenerateBatch:
    """Tests for generate_batch."""

    def test_unique_words(self, english_model):
        options = GenerationOptions(min_length=3, max_length=8)
        words = english_model.generate_batch(15, options, random.Random(4))
        assert len(words) <= 15
        assert len({w.lower() for w in words}) == len(words)

    def test_small_model_returns_fewer(self, abc_table):
        model = abc_table.get_normalized_table()
        options = GenerationOptions(min_length=1, max_length=2)
        words = model.generate_batch(10, options, random.Random(4))
        assert set(words) <= {'A', 'Ab', 'Ac'}
        assert len(words) <= 3
